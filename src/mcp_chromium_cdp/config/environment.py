"""Environment configuration and validation."""

import os
import platform
from pathlib import Path
from typing import Optional

import logging
logger = logging.getLogger(__name__)

from ..constants import CDP_REMOTE_DEBUGGING_PORT


def _standard_chromium_paths() -> list:
    """Standard Chromium install locations for the current platform."""
    system = platform.system()
    if system == "Darwin":  # macOS
        return [
            "/Applications/Chromium.app/Contents/MacOS/Chromium",
            str(Path.home() / "Applications" / "Chromium.app" / "Contents" / "MacOS" / "Chromium"),
        ]
    if system == "Windows":
        return [
            os.path.join(os.getenv("LOCALAPPDATA", ""), "Chromium", "Application", "chrome.exe"),
            os.path.join(os.getenv("PROGRAMFILES", ""), "Chromium", "Application", "chrome.exe"),
            os.path.join(os.getenv("PROGRAMFILES(X86)", ""), "Chromium", "Application", "chrome.exe"),
        ]
    if system == "Linux":
        return [
            "/usr/bin/chromium",
            "/usr/bin/chromium-browser",
            "/snap/bin/chromium",
        ]
    return []


def find_chromium_path() -> Optional[str]:
    """
    Locate a Chromium binary.

    CHROMIUM_PATH wins if it points at an existing file, then the standard
    install paths are tried. Returns None to let Selenium fall back to its own
    Chrome detection.
    """
    env_path = (os.getenv("CHROMIUM_PATH") or "").strip()
    if env_path:
        if Path(env_path).exists():
            return env_path
        logger.warning(f"CHROMIUM_PATH does not exist, ignoring: {env_path}")

    for candidate in _standard_chromium_paths():
        if candidate and Path(candidate).exists():
            return candidate

    return None


def get_env_config() -> dict:
    """
    Read environment variables for the Chromium connection.

    Optional:   CHROMIUM_PATH               binary to launch when nothing is listening
                CHROMIUM_USER_DATA_DIR      profile directory for launched browsers
                CDP_DEBUGGER_HOST           default 127.0.0.1
                CDP_REMOTE_DEBUGGING_PORT   default 9222
                CDP_HEADLESS                "1" launches headless

    Nothing is required: with an empty environment we attach to
    127.0.0.1:9222 or launch whatever browser Selenium can find.
    """
    port_env = (os.getenv("CDP_REMOTE_DEBUGGING_PORT") or "").strip()
    if port_env and not port_env.isdigit():
        raise EnvironmentError(f"CDP_REMOTE_DEBUGGING_PORT must be an integer, got {port_env!r}.")
    port = int(port_env) if port_env else CDP_REMOTE_DEBUGGING_PORT

    host = (os.getenv("CDP_DEBUGGER_HOST") or "").strip() or "127.0.0.1"
    user_data_dir = (os.getenv("CHROMIUM_USER_DATA_DIR") or "").strip() or None
    if user_data_dir:
        user_data_dir = str(Path(user_data_dir).expanduser())

    return {
        "chromium_path": find_chromium_path(),
        "user_data_dir": user_data_dir,
        "debugger_host": host,
        "debugger_port": port,
        "headless": os.getenv("CDP_HEADLESS", "0") == "1",
    }
