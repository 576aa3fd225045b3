"""
Encoded image payloads for Nano Studio.

Source, mask and reference images travel through the system as encoded
bytes plus a declared media type. The native pixel dimensions are read once
at ingestion so the mask editor can size its surface to match.

Classes:
    ImagePayload: Immutable encoded image with media type and native size

Functions:
    is_supported_format: Check a file path against the supported formats
"""

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any, Tuple
import base64

from PIL import Image

from NS_Libs.constants import (
    DEFAULT_MIME_TYPE,
    DEFAULT_OUTPUT_FORMAT,
    FORMAT_MIME_TYPES,
    SUPPORTED_STANDARD_IMAGES,
)


def is_supported_format(file_path: Path) -> bool:
    """
    Check if a file path has a supported image extension.

    Args:
        file_path: Path to the file

    Returns:
        True if the extension is supported
    """
    return Path(file_path).suffix.lower() in SUPPORTED_STANDARD_IMAGES


@dataclass(frozen=True)
class ImagePayload:
    """An encoded image ready to be sent to the generation service.

    Attributes:
        data: Encoded image bytes (PNG, JPEG, ...)
        mime_type: Declared media type of ``data``
        width: Native width in pixels
        height: Native height in pixels
    """
    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE
    width: int = 0
    height: int = 0

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_bytes(cls, data: bytes) -> "ImagePayload":
        """
        Wrap encoded bytes, reading media type and native size from them.

        The pixel data is fully decoded once so truncated files are
        rejected here rather than when the image is first displayed.

        Raises:
            ValueError: If the bytes are not a decodable image
        """
        try:
            with Image.open(BytesIO(data)) as image:
                image_format = image.format
                width, height = image.size
                image.load()
        except (OSError, SyntaxError, Image.DecompressionBombError) as e:
            raise ValueError(f"Could not decode image data: {e}")

        mime_type = FORMAT_MIME_TYPES.get(image_format or "", DEFAULT_MIME_TYPE)
        return cls(data=bytes(data), mime_type=mime_type, width=width, height=height)

    @classmethod
    def from_file(cls, file_path: Path) -> "ImagePayload":
        """
        Load an image file from disk.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the extension is unsupported or the file is not an image
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {path}")

        if not is_supported_format(path):
            supported = ", ".join(sorted(SUPPORTED_STANDARD_IMAGES))
            raise ValueError(f"Unsupported image format: {path.suffix}. Supported: {supported}")

        return cls.from_bytes(path.read_bytes())

    @classmethod
    def from_image(cls, image: Any, image_format: str = DEFAULT_OUTPUT_FORMAT) -> "ImagePayload":
        """
        Encode a PIL Image.

        Raises:
            TypeError: If ``image`` is not a PIL Image
        """
        if not hasattr(image, "mode"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")

        buffer = BytesIO()
        image.save(buffer, format=image_format)
        return cls(
            data=buffer.getvalue(),
            mime_type=FORMAT_MIME_TYPES.get(image_format.upper(), DEFAULT_MIME_TYPE),
            width=image.width,
            height=image.height,
        )

    def to_image(self) -> Image.Image:
        """Decode into a fully loaded PIL Image."""
        image = Image.open(BytesIO(self.data))
        image.load()
        return image

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")
