"""
Saving generated images for Nano Studio.

Functions:
    build_output_filename: Timestamped filename for a generated image
    save_result: Write a successful GenerationResult to disk
    decode_data_uri: Split a data: URI back into media type and bytes
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple
import base64

from NS_Libs.constants import DEFAULT_MIME_TYPE, MIME_EXTENSIONS, OUTPUT_FILE_PREFIX
from NS_Libs.GenerationLib.response_interpreter import GenerationResult


def build_output_filename(mime_type: str, timestamp: Optional[datetime] = None) -> str:
    """
    Build a filename such as ``nano-studio-1718000000000.png``.

    The extension follows the image's declared media type.
    """
    moment = timestamp or datetime.now()
    extension = MIME_EXTENSIONS.get(mime_type, MIME_EXTENSIONS[DEFAULT_MIME_TYPE])
    return f"{OUTPUT_FILE_PREFIX}{int(moment.timestamp() * 1000)}{extension}"


def save_result(
    result: GenerationResult,
    output_dir: Path,
    timestamp: Optional[datetime] = None,
) -> Path:
    """
    Save the generated image held by a result.

    Args:
        result: A successful GenerationResult
        output_dir: Existing directory to write into
        timestamp: Time used in the filename (default: now)

    Returns:
        Path of the written file

    Raises:
        GenerationError: If the result is a failure
        OSError: If the directory is missing or not a directory
    """
    image = result.raise_for_failure()

    if not output_dir.exists():
        raise OSError(f"Output directory does not exist: {output_dir}")

    if not output_dir.is_dir():
        raise OSError(f"Output path is not a directory: {output_dir}")

    save_path = output_dir / build_output_filename(image.mime_type, timestamp)
    save_path.write_bytes(image.data)
    return save_path


def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    """
    Decode ``data:<mime>;base64,<payload>``.

    Raises:
        ValueError: If the string is not a base64 data URI
    """
    if not uri.startswith("data:") or "," not in uri:
        raise ValueError("Not a data URI")

    header, payload = uri[len("data:"):].split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError(f"Unsupported data URI encoding: {header}")

    mime_type = header[: -len(";base64")] or DEFAULT_MIME_TYPE
    return mime_type, base64.b64decode(payload)
