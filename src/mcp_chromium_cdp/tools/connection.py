"""Connection lifecycle tool implementations."""

import json

from ..context import get_context
from ..utils.diagnostics import collect_diagnostics


async def connect_browser() -> str:
    """
    Attach to (or launch) Chromium.

    Returns:
        JSON string with the connection state and debugger address
    """
    ctx = get_context()
    await ctx.connection.ensure_connected()
    return json.dumps({
        "ok": True,
        "state": ctx.connection.state.value,
        "debugger": ctx.get_debugger_address(),
    })


async def disconnect_browser() -> str:
    ctx = get_context()
    was_connected = ctx.connection.is_connected()
    await ctx.connection.close()
    return json.dumps({
        "ok": True,
        "closed": was_connected,
        "state": ctx.connection.state.value,
    })


async def get_debug_diagnostics_info() -> str:
    ctx = get_context()
    return json.dumps({"ok": True, "diagnostics": collect_diagnostics(ctx)})
