"""DevTools HTTP endpoint probes."""

import json
import urllib.request
from typing import Optional

import logging
logger = logging.getLogger(__name__)


def is_debugger_listening(host: str, port: int, timeout: float = 3.0) -> bool:
    """Check if a Chromium DevTools debugger is listening on a port."""
    try:
        with urllib.request.urlopen(f"http://{host}:{port}/json/version", timeout=timeout) as resp:
            return resp.status == 200
    except Exception:
        return False


def devtools_version(host: str, port: int, timeout: float = 1.5) -> Optional[dict]:
    """Return the /json/version payload (Browser, Protocol-Version, ...) or None."""
    try:
        with urllib.request.urlopen(f"http://{host}:{port}/json/version", timeout=timeout) as resp:
            return json.load(resp)
    except Exception as e:
        logger.debug(f"DevTools version probe failed on {host}:{port}: {e}")
        return None


__all__ = ["is_debugger_listening", "devtools_version"]
