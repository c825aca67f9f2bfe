"""Element interaction tool implementations."""

import json
from typing import Optional

from ..context import get_context


async def click_element(
    selector: str,
    timeout_ms: Optional[int] = None,
    ensure_interactive: bool = False,
) -> str:
    """Click an element once it is visible, enabled and stable."""
    ctx = get_context()
    result = await ctx.sequencer.click(
        selector,
        timeout_ms=timeout_ms,
        ensure_interactive=ensure_interactive,
    )
    return json.dumps({"ok": True, **result.to_dict()})


async def type_text(
    selector: str,
    text: str,
    timeout_ms: Optional[int] = None,
    ensure_interactive: bool = False,
) -> str:
    """Type text into an element once it is ready, one key event pair per character."""
    ctx = get_context()
    result = await ctx.sequencer.type(
        selector,
        text,
        timeout_ms=timeout_ms,
        ensure_interactive=ensure_interactive,
    )
    return json.dumps({"ok": True, **result.to_dict()})
