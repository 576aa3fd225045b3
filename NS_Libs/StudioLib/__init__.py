"""
StudioLib - Studio configuration and session management

This module loads and saves studio settings, tracks the images of the
current session and writes generated results to disk.
"""

from NS_Libs.StudioLib.studio_config import (
    StudioConfig,
    get_settings_path,
    load_config,
    save_config,
)
from NS_Libs.StudioLib.studio_session import StudioSession
from NS_Libs.StudioLib.output_writer import build_output_filename, decode_data_uri, save_result

__all__ = [
    "StudioConfig",
    "get_settings_path",
    "load_config",
    "save_config",
    "StudioSession",
    "build_output_filename",
    "decode_data_uri",
    "save_result",
]
