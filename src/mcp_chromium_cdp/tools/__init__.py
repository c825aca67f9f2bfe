# mcp_chromium_cdp/tools/__init__.py
"""
MCP tool implementations - async wrappers that return JSON responses.

This package contains high-level tool implementations that:
- Call the core services through the process BrowserContext
- Return JSON-serialized responses
"""

from .connection import (
    connect_browser,
    disconnect_browser,
    get_debug_diagnostics_info,
)

from .interaction import (
    click_element,
    type_text,
)

from .navigation import (
    navigate_to_url,
    get_current_url,
    get_title,
    execute_script,
    reload_page,
    go_back,
    go_forward,
)

from .waiting import (
    wait_for_ready,
    wait_for_conditions,
)

__all__ = [
    "connect_browser",
    "disconnect_browser",
    "get_debug_diagnostics_info",
    "click_element",
    "type_text",
    "navigate_to_url",
    "get_current_url",
    "get_title",
    "execute_script",
    "reload_page",
    "go_back",
    "go_forward",
    "wait_for_ready",
    "wait_for_conditions",
]
