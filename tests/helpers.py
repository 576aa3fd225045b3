"""
Shared helpers for Nano Studio tests.

In-memory images and fake generate_content responses shaped like the
google-genai SDK's (candidates -> content -> parts -> inline_data).
"""

from io import BytesIO
from types import SimpleNamespace

from PIL import Image

from NS_Libs.GenerationLib.image_payload import ImagePayload


def encode_image(image, image_format="PNG"):
    """Encode a PIL Image to bytes."""
    buffer = BytesIO()
    image.save(buffer, format=image_format)
    return buffer.getvalue()


def make_payload(width, height, color="red", image_format="PNG"):
    """Build an ImagePayload from a solid-colour image."""
    return ImagePayload.from_bytes(encode_image(Image.new("RGB", (width, height), color), image_format))


def image_part(data, mime_type="image/png"):
    """Fake response part carrying inline image bytes."""
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)


def text_part(text):
    """Fake response part carrying text only."""
    return SimpleNamespace(inline_data=None, text=text)


def make_response(*parts_per_candidate):
    """
    Fake generate_content response.

    Each argument is the list of parts for one candidate; no arguments
    means no candidates at all.
    """
    candidates = [
        SimpleNamespace(content=SimpleNamespace(parts=list(parts)))
        for parts in parts_per_candidate
    ]
    return SimpleNamespace(candidates=candidates)
