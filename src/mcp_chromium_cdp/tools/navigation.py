"""Navigation and page tool implementations."""

import json

from ..context import get_context


async def navigate_to_url(url: str) -> str:
    """
    Navigate to a URL and wait for the load event.

    Returns:
        JSON string with the url and title of the loaded page
    """
    ctx = get_context()
    meta = await ctx.navigation.navigate(url)
    return json.dumps({"ok": True, "action": "navigate", **meta})


async def get_current_url() -> str:
    ctx = get_context()
    return json.dumps({"ok": True, "url": await ctx.navigation.get_current_url()})


async def get_title() -> str:
    ctx = get_context()
    return json.dumps({"ok": True, "title": await ctx.navigation.get_title()})


async def execute_script(script: str) -> str:
    """Run JavaScript in the page; the script's value is returned under `result`."""
    ctx = get_context()
    result = await ctx.navigation.execute_script(script)
    return json.dumps({"ok": True, "result": result})


async def reload_page() -> str:
    ctx = get_context()
    await ctx.navigation.reload()
    return json.dumps({"ok": True, "action": "reload"})


async def go_back() -> str:
    ctx = get_context()
    moved = await ctx.navigation.go_back()
    payload = {"ok": True, "action": "go_back", "moved": moved}
    if not moved:
        payload["message"] = "Already at the first page"
    return json.dumps(payload)


async def go_forward() -> str:
    ctx = get_context()
    moved = await ctx.navigation.go_forward()
    payload = {"ok": True, "action": "go_forward", "moved": moved}
    if not moved:
        payload["message"] = "Already at the last page"
    return json.dumps(payload)


__all__ = [
    "navigate_to_url",
    "get_current_url",
    "get_title",
    "execute_script",
    "reload_page",
    "go_back",
    "go_forward",
]
