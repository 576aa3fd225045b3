"""
Studio configuration for Nano Studio.

Settings live in a small JSON file in the user's home directory. The API
credential can also come from the environment, which takes precedence over
the file.

Functions:
    get_settings_path: Default location of the settings file
    load_config: Load settings from file and environment
    save_config: Write settings to file
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import json
import logging
import os

from NS_Libs.constants import (
    API_KEY_ENV_VARS,
    DEFAULT_BRUSH_RADIUS,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_TEXT_MODEL,
    SCHEMA_VERSION,
    SETTINGS_DIR_NAME,
    SETTINGS_FILE_NAME,
)

logger = logging.getLogger(__name__)

FIELD_SCHEMA_VERSION = "schema_version"


@dataclass
class StudioConfig:
    """Application settings.

    Attributes:
        api_key: Credential for the generation service (None = not set)
        image_model: Model used for image generation
        text_model: Model used for prompt enhancement
        default_brush_radius: Brush radius the mask editor opens with
        output_directory: Default folder for saved results
    """
    api_key: Optional[str] = None
    image_model: str = DEFAULT_IMAGE_MODEL
    text_model: str = DEFAULT_TEXT_MODEL
    default_brush_radius: float = DEFAULT_BRUSH_RADIUS
    output_directory: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudioConfig":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


def get_settings_path() -> Path:
    return Path.home() / SETTINGS_DIR_NAME / SETTINGS_FILE_NAME


def _api_key_from_env(environ: Mapping[str, str]) -> Optional[str]:
    for name in API_KEY_ENV_VARS:
        value = environ.get(name, "").strip()
        if value:
            return value
    return None


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> StudioConfig:
    """
    Load settings from the JSON file, then apply environment overrides.

    Args:
        path: Settings file (default: ~/.nano_studio/settings.json)
        environ: Environment mapping (default: os.environ)

    Returns:
        StudioConfig; defaults when the file does not exist

    Raises:
        ValueError: If the settings file is not valid JSON
    """
    settings_path = path or get_settings_path()
    env = os.environ if environ is None else environ

    if settings_path.exists():
        try:
            data = json.loads(settings_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Settings file is not valid JSON: {settings_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a JSON object: {settings_path}")

        config = StudioConfig.from_dict(data)
        logger.debug(f"Loaded settings from {settings_path}")
    else:
        config = StudioConfig()

    env_key = _api_key_from_env(env)
    if env_key:
        config.api_key = env_key

    return config


def save_config(config: StudioConfig, path: Optional[Path] = None) -> Path:
    """
    Write settings to the JSON file, creating its directory if needed.

    Returns:
        Path the settings were written to
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    data = {FIELD_SCHEMA_VERSION: SCHEMA_VERSION}
    data.update(config.to_dict())
    settings_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    logger.info(f"Saved settings to {settings_path}")
    return settings_path
