# mcp_chromium_cdp/browser/__init__.py
"""Control-channel drivers and connection lifecycle."""

from .driver import BrowserDriver, js_literal
from .connection import ConnectionManager
from .selenium_driver import SeleniumCdpDriver

__all__ = [
    "BrowserDriver",
    "js_literal",
    "ConnectionManager",
    "SeleniumCdpDriver",
]
