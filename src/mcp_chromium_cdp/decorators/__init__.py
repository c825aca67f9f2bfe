# mcp_chromium_cdp/decorators/__init__.py
#
# Re-exports decorators from their respective modules.

from .ensure import ensure_connected
from .envelope import tool_envelope

__all__ = [
    "ensure_connected",
    "tool_envelope",
]
