"""
GenerationLib - Generation requests and responses

This module holds the generation settings model, turns settings and
images into an ordered request, and interprets the service's response.
"""

from NS_Libs.GenerationLib.generation_settings import (
    ArtStyle,
    AspectRatio,
    GenerationSettings,
    ImageSize,
    RotationMode,
    Season,
    TimeOfDay,
    Viewpoint,
)
from NS_Libs.GenerationLib.image_payload import ImagePayload, is_supported_format
from NS_Libs.GenerationLib.scene_encoder import (
    EditingContext,
    build_instruction_text,
    encode_editing_context,
    encode_scene,
)
from NS_Libs.GenerationLib.request_assembler import (
    GenerationRequest,
    ImageConfig,
    ImagePart,
    ImageRole,
    TextPart,
    assemble_request,
)
from NS_Libs.GenerationLib.response_interpreter import (
    FailureKind,
    GeneratedImage,
    GenerationError,
    GenerationFailure,
    GenerationResult,
    classify_error,
    interpret_response,
)
from NS_Libs.GenerationLib.generation_client import GenerationBusyError, GenerationClient

__all__ = [
    "ArtStyle",
    "AspectRatio",
    "GenerationSettings",
    "ImageSize",
    "RotationMode",
    "Season",
    "TimeOfDay",
    "Viewpoint",
    "ImagePayload",
    "is_supported_format",
    "EditingContext",
    "build_instruction_text",
    "encode_editing_context",
    "encode_scene",
    "GenerationRequest",
    "ImageConfig",
    "ImagePart",
    "ImageRole",
    "TextPart",
    "assemble_request",
    "FailureKind",
    "GeneratedImage",
    "GenerationError",
    "GenerationFailure",
    "GenerationResult",
    "classify_error",
    "interpret_response",
    "GenerationBusyError",
    "GenerationClient",
]
