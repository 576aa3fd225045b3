"""
Editing session state for Nano Studio.

A StudioSession holds the images and settings for the current piece of
work and owns at most one open mask editor (a MaskCompositor sized to the
source image). Replacing or removing the source invalidates its mask.
"""

from typing import Optional
import logging

from NS_Libs.GenerationLib.generation_client import GenerationClient
from NS_Libs.GenerationLib.generation_settings import GenerationSettings
from NS_Libs.GenerationLib.image_payload import ImagePayload
from NS_Libs.GenerationLib.request_assembler import GenerationRequest, assemble_request
from NS_Libs.GenerationLib.response_interpreter import GenerationResult
from NS_Libs.MaskingLib.mask_compositor import MaskCompositor
from NS_Libs.constants import DEFAULT_BRUSH_RADIUS, MIME_PNG

logger = logging.getLogger(__name__)


class StudioSession:
    """Images, settings and mask editor for one studio session."""

    def __init__(
        self,
        settings: Optional[GenerationSettings] = None,
        default_brush_radius: float = DEFAULT_BRUSH_RADIUS,
    ):
        self.settings = settings or GenerationSettings()
        self.default_brush_radius = default_brush_radius
        self.last_result: Optional[GenerationResult] = None
        self._source: Optional[ImagePayload] = None
        self._mask: Optional[ImagePayload] = None
        self._reference: Optional[ImagePayload] = None
        self._editor: Optional[MaskCompositor] = None

    @property
    def source(self) -> Optional[ImagePayload]:
        return self._source

    @property
    def mask(self) -> Optional[ImagePayload]:
        return self._mask

    @property
    def reference(self) -> Optional[ImagePayload]:
        return self._reference

    @property
    def mask_editor(self) -> Optional[MaskCompositor]:
        return self._editor

    def set_source(self, payload: Optional[ImagePayload]) -> None:
        """Replace the source image. Any mask or open editor is discarded."""
        self._source = payload
        self._mask = None
        self._editor = None
        if payload is None:
            logger.info("Source image removed")
        else:
            logger.info(f"Source image set ({payload.width}x{payload.height}, {payload.mime_type})")

    def remove_source(self) -> None:
        self.set_source(None)

    def set_reference(self, payload: Optional[ImagePayload]) -> None:
        self._reference = payload

    def remove_reference(self) -> None:
        self._reference = None

    def remove_mask(self) -> None:
        self._mask = None

    def open_mask_editor(self) -> MaskCompositor:
        """
        Start a mask editing session on the current source image.

        Returns:
            A fresh MaskCompositor at the source's native size

        Raises:
            ValueError: If no source image is loaded
        """
        if self._source is None:
            raise ValueError("Load a source image before editing a mask")

        native_size = self._source.size if self._source.width and self._source.height else None
        self._editor = MaskCompositor(native_size, brush_radius=self.default_brush_radius)
        logger.info(f"Mask editor opened at {native_size}")
        return self._editor

    def cancel_mask_editor(self) -> None:
        """Discard the open editor's surface without touching the saved mask."""
        if self._editor is not None:
            logger.info("Mask editor cancelled")
        self._editor = None

    def save_mask(self) -> Optional[ImagePayload]:
        """
        Export the open editor's surface as the session's mask and close it.

        Returns:
            The mask payload, or None when no editor is open or its surface
            is not ready yet (the editor then stays open)
        """
        if self._editor is None:
            return None

        png_bytes = self._editor.export_mask()
        if png_bytes is None:
            return None

        width, height = self._editor.native_size
        self._mask = ImagePayload(data=png_bytes, mime_type=MIME_PNG, width=width, height=height)
        self._editor = None
        logger.info(f"Mask saved ({width}x{height})")
        return self._mask

    @property
    def can_generate(self) -> bool:
        return bool(self.settings.prompt.strip()) or self._source is not None or self._reference is not None

    def build_request(self) -> GenerationRequest:
        return assemble_request(
            self.settings,
            source=self._source,
            mask=self._mask,
            reference=self._reference,
        )

    def generate(self, client: GenerationClient) -> GenerationResult:
        """
        Assemble a request from the session and submit it.

        Raises:
            ValueError: If there is no prompt, source or reference
            GenerationBusyError: If the client already has a request in flight
        """
        if not self.can_generate:
            raise ValueError("Enter a prompt or add an image before generating")

        self.last_result = None
        result = client.generate(self.build_request())
        self.last_result = result
        return result
