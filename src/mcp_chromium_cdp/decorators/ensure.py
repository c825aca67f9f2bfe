# mcp_chromium_cdp/decorators/ensure.py
import json
import inspect
import functools

from ..context import get_context
from ..errors import ReconnectExhaustedError


def ensure_connected(_func=None, *, include_diagnostics=False):
    """
    Gate an async tool on a live Chromium connection.

    Runs the connection manager's bounded reconnect first; if that is
    exhausted the tool body is skipped and a RECONNECT_FAILED payload is
    returned instead.
    """
    def decorator(fn):
        if not inspect.iscoroutinefunction(fn):
            raise TypeError(f"ensure_connected requires an async function, got {fn.__name__}")

        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            ctx = get_context()
            try:
                await ctx.connection.ensure_connected()
            except ReconnectExhaustedError as e:
                payload = {
                    "ok": False,
                    "error": e.to_dict(),
                    "message": "Chromium is not reachable. Start it with --remote-debugging-port or check the CDP_* settings.",
                }
                if include_diagnostics:
                    try:
                        from ..utils.diagnostics import collect_diagnostics
                        payload["diagnostics"] = collect_diagnostics(ctx, e)
                    except Exception:
                        pass
                return json.dumps(payload)

            return await fn(*args, **kwargs)
        return wrapper
    return decorator if _func is None else decorator(_func)
