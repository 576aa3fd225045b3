"""
Response Interpreter.

Turns a generation service response, or the error raised while calling the
service, into a GenerationResult: either the generated image or a
classified failure with a message the user can act on.

Classification rules, in order:

    1. No candidates at all        -> SAFETY_BLOCKED
    2. First inline image part     -> success
    3. Candidate without an image  -> NO_IMAGE_RETURNED

Transport errors are classified from their text:

    "403" / "PERMISSION_DENIED"    -> PERMISSION_DENIED
    "429" / "RESOURCE_EXHAUSTED"   -> QUOTA_EXCEEDED
    anything else                  -> UNKNOWN (message passed through)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
import base64
import logging

from NS_Libs.constants import (
    DEFAULT_MIME_TYPE,
    MESSAGE_NO_IMAGE_RETURNED,
    MESSAGE_PERMISSION_DENIED,
    MESSAGE_QUOTA_EXCEEDED,
    MESSAGE_SAFETY_BLOCKED,
    MESSAGE_UNKNOWN,
    PERMISSION_MARKERS,
    QUOTA_MARKERS,
)

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    SAFETY_BLOCKED = "safety_blocked"
    NO_IMAGE_RETURNED = "no_image_returned"
    PERMISSION_DENIED = "permission_denied"
    QUOTA_EXCEEDED = "quota_exceeded"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class GenerationFailure:
    """A classified failure.

    Attributes:
        kind: Failure category
        message: Human-readable remediation message
        detail: Raw error text, when the failure came from an exception
    """
    kind: FailureKind
    message: str
    detail: str = ""


@dataclass(frozen=True)
class GeneratedImage:
    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE

    @property
    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class GenerationError(RuntimeError):
    """Raised by GenerationResult.raise_for_failure()."""

    def __init__(self, failure: GenerationFailure):
        super().__init__(failure.message)
        self.failure = failure

    @property
    def kind(self) -> FailureKind:
        return self.failure.kind


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation: an image or a failure, never both."""
    image: Optional[GeneratedImage] = None
    failure: Optional[GenerationFailure] = None

    @classmethod
    def success(cls, image: GeneratedImage) -> "GenerationResult":
        return cls(image=image)

    @classmethod
    def failed(cls, kind: FailureKind, message: str, detail: str = "") -> "GenerationResult":
        return cls(failure=GenerationFailure(kind=kind, message=message, detail=detail))

    @property
    def ok(self) -> bool:
        return self.image is not None

    @property
    def data_uri(self) -> Optional[str]:
        return self.image.data_uri if self.image is not None else None

    def raise_for_failure(self) -> GeneratedImage:
        """
        Return the image, or raise GenerationError for a failed result.

        Raises:
            GenerationError: If the result carries a failure
        """
        if self.failure is not None:
            raise GenerationError(self.failure)
        return self.image


def _inline_image(part: Any) -> Optional[GeneratedImage]:
    inline = getattr(part, "inline_data", None)
    if inline is None:
        return None

    data = getattr(inline, "data", None)
    if not data:
        return None

    if isinstance(data, str):
        data = base64.b64decode(data)

    mime_type = getattr(inline, "mime_type", None) or DEFAULT_MIME_TYPE
    return GeneratedImage(data=bytes(data), mime_type=mime_type)


def interpret_response(response: Any) -> GenerationResult:
    """
    Extract the generated image from a service response.

    Args:
        response: Object shaped like a generate_content response
                  (``candidates[0].content.parts[i].inline_data``)

    Returns:
        GenerationResult with the first inline image, or a failure
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        logger.warning("Response carried no candidates (safety filter)")
        return GenerationResult.failed(FailureKind.SAFETY_BLOCKED, MESSAGE_SAFETY_BLOCKED)

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []

    for index, part in enumerate(parts):
        image = _inline_image(part)
        if image is not None:
            logger.info(f"Received {image.mime_type} image ({len(image.data)} bytes) from part {index}")
            return GenerationResult.success(image)

    logger.warning(f"Response had {len(parts)} parts but no inline image")
    return GenerationResult.failed(FailureKind.NO_IMAGE_RETURNED, MESSAGE_NO_IMAGE_RETURNED)


def classify_error(error: BaseException) -> GenerationResult:
    """
    Classify an error raised while calling the generation service.

    Args:
        error: The exception raised by the transport or client

    Returns:
        A failed GenerationResult
    """
    text = str(error) or error.__class__.__name__

    if any(marker in text for marker in PERMISSION_MARKERS):
        kind, message = FailureKind.PERMISSION_DENIED, MESSAGE_PERMISSION_DENIED
    elif any(marker in text for marker in QUOTA_MARKERS):
        kind, message = FailureKind.QUOTA_EXCEEDED, MESSAGE_QUOTA_EXCEEDED
    else:
        kind, message = FailureKind.UNKNOWN, str(error) or MESSAGE_UNKNOWN

    logger.warning(f"Generation failed ({kind.value}): {text}")
    return GenerationResult.failed(kind, message, detail=text)
