# mcp_chromium_cdp/decorators/envelope.py

import os
import json
import asyncio
import inspect
import datetime
import functools
import traceback
from typing import Any, Callable

from ..errors import AutomationError


__all__ = [
    "tool_envelope",
]


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def tool_envelope(func: Callable):
    """
    Decorator for MCP tool functions:
      - Works with both async and sync callables.
      - On success: ensures the return value is a string (json.dumps for non-strings).
      - AutomationError: returns {"ok": false, "error": err.to_dict()} so callers
        get the code, target, context and suggestions.
      - Anything else: returns a uniform JSON string with a summary and optional traceback.
    Environment:
      - Set CDP_TOOL_ERRORS_TRACEBACK=0 to suppress traceback in error payloads.
    """
    include_tb = os.getenv("CDP_TOOL_ERRORS_TRACEBACK", "1") not in ("0", "false", "False")

    def _normalize(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if hasattr(value, "to_dict"):
            value = value.to_dict()
        try:
            return json.dumps(value, ensure_ascii=False, default=lambda o: getattr(o, "__dict__", repr(o)))
        except Exception:
            return str(value)

    def _error_payload(err: Exception) -> str:
        if isinstance(err, AutomationError):
            payload = {
                "ok": False,
                "summary": f"{err.code}: {err.message}",
                "error": err.to_dict(),
                "timestamp": _now_iso(),
            }
            return json.dumps(payload, ensure_ascii=False)

        tb = traceback.format_exc() if include_tb else None
        payload = {
            "ok": False,
            "summary": f"{err.__class__.__name__}: {err}",
            "error": {
                "type": err.__class__.__name__,
                "message": str(err),
            },
            "timestamp": _now_iso(),
        }
        if tb:
            payload["error"]["traceback"] = tb
        return json.dumps(payload, ensure_ascii=False)

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except asyncio.CancelledError:
                # Preserve cooperative cancellation semantics
                raise
            except Exception as e:
                return _error_payload(e)
            return _normalize(result)
        return wrapper
    else:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                return _error_payload(e)
            return _normalize(result)
        return wrapper
