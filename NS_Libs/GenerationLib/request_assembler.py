"""
Request Assembler.

Orders the optional source, mask and reference images and the instruction
text into one immutable generation request.

Part order is fixed, and the editing-context text refers to images by
position, so the two must change together:

    1. source image (if present)
    2. mask image (if present alongside a source)
    3. reference image (if present)
    4. exactly one text part, always last

No validation happens here. Sending an empty request (no images and no
prompt) is a caller-side precondition.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union
import logging

from NS_Libs.GenerationLib.generation_settings import AspectRatio, GenerationSettings, ImageSize
from NS_Libs.GenerationLib.image_payload import ImagePayload
from NS_Libs.GenerationLib.scene_encoder import EditingContext, build_instruction_text

logger = logging.getLogger(__name__)


class ImageRole(Enum):
    SOURCE = "source"
    MASK = "mask"
    REFERENCE = "reference"


@dataclass(frozen=True)
class ImagePart:
    role: ImageRole
    payload: ImagePayload

    @property
    def mime_type(self) -> str:
        return self.payload.mime_type

    @property
    def data(self) -> bytes:
        return self.payload.data


@dataclass(frozen=True)
class TextPart:
    text: str


RequestPart = Union[ImagePart, TextPart]


@dataclass(frozen=True)
class ImageConfig:
    """Size/ratio block sent alongside the parts."""
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    image_size: ImageSize = ImageSize.SIZE_1K

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aspect_ratio": self.aspect_ratio.value,
            "image_size": self.image_size.value,
        }


@dataclass(frozen=True)
class GenerationRequest:
    """One generation request: image parts, one trailing text part, config.

    Attributes:
        parts: Image parts in positional order followed by the text part
        config: Aspect ratio and size tier
    """
    parts: Tuple[RequestPart, ...]
    config: ImageConfig

    @property
    def image_parts(self) -> Tuple[ImagePart, ...]:
        return tuple(p for p in self.parts if isinstance(p, ImagePart))

    @property
    def roles(self) -> Tuple[ImageRole, ...]:
        return tuple(p.role for p in self.image_parts)

    @property
    def text(self) -> str:
        last = self.parts[-1]
        return last.text if isinstance(last, TextPart) else ""


def assemble_request(
    settings: GenerationSettings,
    source: Optional[ImagePayload] = None,
    mask: Optional[ImagePayload] = None,
    reference: Optional[ImagePayload] = None,
) -> GenerationRequest:
    """
    Build a generation request from the session's images and settings.

    Args:
        settings: Prompt and scene parameters
        source: Image to edit
        mask: Edit-region mask for ``source`` (ignored without a source)
        reference: Style/content reference image

    Returns:
        Immutable GenerationRequest
    """
    parts = []

    if source is not None:
        parts.append(ImagePart(ImageRole.SOURCE, source))
        if mask is not None:
            parts.append(ImagePart(ImageRole.MASK, mask))
    elif mask is not None:
        logger.debug("Mask supplied without a source image; leaving it out of the request")

    if reference is not None:
        parts.append(ImagePart(ImageRole.REFERENCE, reference))

    context = EditingContext(
        has_source=source is not None,
        has_mask=source is not None and mask is not None,
        has_reference=reference is not None,
    )
    parts.append(TextPart(build_instruction_text(settings, context)))

    request = GenerationRequest(
        parts=tuple(parts),
        config=ImageConfig(aspect_ratio=settings.aspect_ratio, image_size=settings.image_size),
    )
    logger.debug(
        f"Assembled request: images={[r.value for r in request.roles]}, "
        f"config={request.config.to_dict()}"
    )
    return request
