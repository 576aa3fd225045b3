"""
Generation service client.

Sends an assembled GenerationRequest to the Gemini image model through the
google-genai SDK and hands the response to the Response Interpreter. Also
provides the "Magic Prompt" helper that asks a text model to expand a short
prompt.

Only one generation may be in flight per client; a second call made while
the first is pending is rejected with GenerationBusyError. There are no
automatic retries and no cancellation.
"""

from typing import Any, List, Optional
import logging

from google import genai
from google.genai import types

from NS_Libs.constants import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_TEXT_MODEL,
    ENHANCE_PROMPT_TEMPLATE,
    MESSAGE_MISSING_API_KEY,
)
from NS_Libs.GenerationLib.request_assembler import GenerationRequest, ImagePart, TextPart
from NS_Libs.GenerationLib.response_interpreter import (
    FailureKind,
    GenerationResult,
    classify_error,
    interpret_response,
)

logger = logging.getLogger(__name__)


class GenerationBusyError(RuntimeError):
    """A generation was requested while another one is still in flight."""


def mask_api_key(api_key: Optional[str]) -> str:
    if not api_key:
        return "<none>"
    return f"{api_key[:4]}..."


def to_genai_contents(request: GenerationRequest) -> List[types.Content]:
    """Convert a request's ordered parts into a single user turn."""
    parts = []
    for part in request.parts:
        if isinstance(part, ImagePart):
            parts.append(types.Part.from_bytes(data=part.data, mime_type=part.mime_type))
        elif isinstance(part, TextPart):
            parts.append(types.Part.from_text(text=part.text))
        else:
            raise TypeError(f"Unsupported request part: {type(part)}")
    return [types.Content(role="user", parts=parts)]


def to_genai_config(request: GenerationRequest) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        image_config=types.ImageConfig(
            aspect_ratio=request.config.aspect_ratio.value,
            image_size=request.config.image_size.value,
        ),
    )


class GenerationClient:
    """
    Client for the remote generation service.

    Args:
        api_key: Opaque API credential (not validated)
        image_model: Model used for image generation
        text_model: Model used for prompt enhancement
        client: Pre-built SDK client; built lazily from ``api_key`` if None
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        image_model: str = DEFAULT_IMAGE_MODEL,
        text_model: str = DEFAULT_TEXT_MODEL,
        client: Optional[Any] = None,
    ):
        self.api_key = api_key
        self.image_model = image_model
        self.text_model = text_model
        self._client = client
        self._in_flight = False

    @classmethod
    def from_config(cls, config: Any) -> "GenerationClient":
        return cls(
            api_key=config.api_key,
            image_model=config.image_model,
            text_model=config.text_model,
        )

    @property
    def is_busy(self) -> bool:
        return self._in_flight

    @property
    def has_credentials(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            logger.info(f"Creating generation client with key {mask_api_key(self.api_key)}")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Submit a request and interpret the response.

        Args:
            request: Assembled GenerationRequest

        Returns:
            GenerationResult; every failure is classified, none is raised

        Raises:
            GenerationBusyError: If a generation is already in flight
        """
        if self._in_flight:
            raise GenerationBusyError("A generation is already in progress")

        if not self.has_credentials:
            logger.warning("Generation requested without an API key")
            return GenerationResult.failed(FailureKind.PERMISSION_DENIED, MESSAGE_MISSING_API_KEY)

        self._in_flight = True
        try:
            logger.info(
                f"Sending generation request to {self.image_model}: "
                f"{len(request.image_parts)} image part(s), config={request.config.to_dict()}"
            )
            response = self._get_client().models.generate_content(
                model=self.image_model,
                contents=to_genai_contents(request),
                config=to_genai_config(request),
            )
        except Exception as e:
            return classify_error(e)
        finally:
            self._in_flight = False

        return interpret_response(response)

    def enhance_prompt(self, prompt: str) -> str:
        """
        Expand a short prompt into a detailed image generation prompt.

        Falls back to the original prompt when the call fails or the model
        returns nothing.
        """
        if not prompt or not prompt.strip():
            return prompt

        if not self.has_credentials:
            logger.warning("Prompt enhancement skipped: no API key")
            return prompt

        try:
            response = self._get_client().models.generate_content(
                model=self.text_model,
                contents=ENHANCE_PROMPT_TEMPLATE.format(prompt=prompt),
            )
        except Exception as e:
            logger.warning(f"Prompt enhancement failed, keeping original prompt: {e}")
            return prompt

        enhanced = (getattr(response, "text", None) or "").strip()
        return enhanced or prompt
