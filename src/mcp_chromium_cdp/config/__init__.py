"""Configuration management for the Chromium connection."""

from .environment import (
    get_env_config,
    find_chromium_path,
)

__all__ = [
    "get_env_config",
    "find_chromium_path",
]
