from __future__ import annotations

import os
import platform
from typing import Dict, Optional

ELEVENLABS_API_KEY = "ELEVENLABS_API_KEY"


def get_config_path() -> str:
    """
    Determine the path to the voice_tools configuration file.

    Returns:
        Absolute path to the config file under the user's home directory.
    """
    system = platform.system()
    if system in {"Darwin", "Linux"}:
        return os.path.expanduser("~/.voice_tools_env_vars")
    if system == "Windows":
        home = os.environ.get("USERPROFILE")
        if not home:
            raise RuntimeError("Unable to determine USERPROFILE on Windows")
        return os.path.join(home, ".voice_tools_env_vars")
    raise ValueError(f"Unsupported operating system: {system}")


def read_all_api_keys_from_file(config_path: Optional[str] = None) -> Dict[str, str]:
    """
    Load all key/value pairs from the config file.

    Lines without ``=`` and blank lines are ignored.

    Returns:
        Dictionary of key/value pairs. Returns empty dict if file does not exist.
    """
    config_path = config_path or get_config_path()
    if not os.path.exists(config_path):
        return {}

    with open(config_path, "r", encoding="utf-8") as file:
        result: Dict[str, str] = {}
        for line in file:
            line = line.strip()
            if not line or "=" not in line:
                continue
            key, value = line.split("=", 1)
            result[key.strip()] = value.strip()
        return result


def read_api_key_from_file(key_name: str, config_path: Optional[str] = None) -> str | None:
    """
    Retrieve a specific key from the config file.

    Args:
        key_name: Key to lookup.
        config_path: Override for the config file location.

    Returns:
        Value if present, else None.
    """
    keys = read_all_api_keys_from_file(config_path)
    return keys.get(key_name) or None


def read_api_key(key_name: str, config_path: Optional[str] = None) -> str | None:
    """
    Retrieve an API key, preferring the environment over the config file.
    """
    value = os.getenv(key_name)
    if value:
        return value
    return read_api_key_from_file(key_name, config_path)


def read_setting(key_name: str, default: Optional[str] = None, config_path: Optional[str] = None) -> str | None:
    """Non-secret settings use the same lookup order as API keys."""
    value = read_api_key(key_name, config_path)
    return value if value else default


__all__ = [
    "ELEVENLABS_API_KEY",
    "get_config_path",
    "read_all_api_keys_from_file",
    "read_api_key_from_file",
    "read_api_key",
    "read_setting",
]
