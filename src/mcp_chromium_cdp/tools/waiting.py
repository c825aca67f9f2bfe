"""Wait tool implementations."""

import json
from typing import Optional

from ..context import get_context


async def wait_for_ready(selector: str, timeout_ms: Optional[int] = None) -> str:
    """
    Wait for an element to become interactable.

    A timeout is not an error: the payload carries ready=false together with
    the last observed state and the reasons it was blocked.
    """
    ctx = get_context()
    result = await ctx.waiter.wait_for_ready(selector, timeout_ms=timeout_ms)
    payload = {"ok": True, "selector": selector, **result.to_dict()}
    if not result.ready:
        payload["reasons"] = ctx.checker.blocking_reasons(result.state)
    return json.dumps(payload)


async def wait_for_conditions(
    element: Optional[str] = None,
    text: Optional[str] = None,
    url: Optional[str] = None,
    network_idle_ms: Optional[int] = None,
    timeout_ms: Optional[int] = None,
) -> str:
    ctx = get_context()
    outcome = await ctx.waits.wait_for(
        element=element,
        text=text,
        url=url,
        network_idle_ms=network_idle_ms,
        timeout_ms=timeout_ms,
    )
    return json.dumps({"ok": True, **outcome.to_dict()})
