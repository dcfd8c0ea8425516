"""
Platform-layer utilities shared across voice_tools.
"""

from .logging import create_logger, configure_logging, dynamic_print, ColorFormatter
from .config import (
    get_config_path,
    read_api_key,
    read_api_key_from_file,
    read_all_api_keys_from_file,
    read_setting,
)
from .pcm import frame_wav, pcm_duration, pcm_level, save_audio

__all__ = [
    "create_logger",
    "configure_logging",
    "dynamic_print",
    "ColorFormatter",
    "get_config_path",
    "read_api_key",
    "read_api_key_from_file",
    "read_all_api_keys_from_file",
    "read_setting",
    "frame_wav",
    "pcm_duration",
    "pcm_level",
    "save_audio",
]
