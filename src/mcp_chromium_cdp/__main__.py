#region Overview
"""
## Why readiness gating

Clicking the moment a selector matches is the usual source of flaky
automation: the node exists but is still hidden, disabled, or sliding into
place. Every click and type here first waits until the element is visible,
enabled, and has kept the same position across a short stability window.

## Waiting for UI state

`chrome_wait_for` waits on any combination of an element appearing, text
appearing (case-insensitive), the URL matching a regular expression, and the
network staying quiet for a number of milliseconds. Running out of time is a
normal result (`success: false` plus what was actually observed), not an
error.

## Connection handling

The server attaches to a Chromium already listening on
CDP_DEBUGGER_HOST:CDP_REMOTE_DEBUGGING_PORT, or launches one. If the browser
goes away, the next tool call reconnects (5 attempts, 2 s apart). Concurrent
calls share one reconnect sequence.
"""
#endregion

#region Required Tools
"""
```
chrome_navigate
```
> Load a URL and wait for the load event.

```
chrome_get_current_url / chrome_get_title / chrome_execute_script
```
> Read the page and evaluate JavaScript in it.

```
chrome_reload / chrome_go_back / chrome_go_forward
```
> Reload and step through the tab's history.

```
chrome_wait_for_ready
```
> Wait until an element is visible, enabled and stable.
>
>     Args:
>         selector: CSS selector
>         timeout_ms: Maximum wait in milliseconds (default 5000)

```
chrome_wait_for
```
> Wait for UI state conditions.
>
>     Args:
>         element: CSS selector that must match
>         text: Text that must appear on the page (case-insensitive)
>         url: Regular expression the current URL must match
>         network_idle_ms: Required network quiet period in milliseconds
>         timeout_ms: Maximum wait in milliseconds (default 5000, max 30000)

```
chrome_click
```
> Click an element after it becomes ready.

```
chrome_type
```
> Type text into an element after it becomes ready.

```
chrome_connect / chrome_disconnect / chrome_get_debug_info
```
> Connection lifecycle and diagnostics.
"""
#endregion

#region Imports
import logging
from typing import Optional
from dotenv import load_dotenv, find_dotenv
from mcp.server.fastmcp import FastMCP
#endregion

#region Environment
# before the package imports: constants.py reads CDP_* once at import time
load_dotenv(find_dotenv(filename=".env", usecwd=True), override=True)
#endregion

#region Import from your package __init__.py
import mcp_chromium_cdp as MCC
from mcp_chromium_cdp.decorators import (
    tool_envelope,
    ensure_connected,
)
from mcp_chromium_cdp.tools import connection, interaction, navigation, waiting
#endregion

#region Logger
logger = logging.getLogger(__name__)
#endregion

#region Logging
logger.info(f"mcp_chromium_cdp from: {getattr(MCC, '__file__', '<namespace>')}")
#endregion

#region FastMCP Initialization
mcp = FastMCP("mcp_chromium_cdp")
#endregion

#region Tools -- Navigation
@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_navigate(url: str) -> str:
    """
    Navigate the current tab to a URL and wait for the page's load event.

    Args:
        url: Absolute URL including the scheme (https://...)

    Returns:
        url and title of the loaded page. NAVIGATION_FAILED when the browser
        could not load it.
    """
    return await navigation.navigate_to_url(url)


@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_get_current_url() -> str:
    """Return the URL of the current page."""
    return await navigation.get_current_url()


@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_get_title() -> str:
    """Return the title of the current page."""
    return await navigation.get_title()


@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_execute_script(script: str) -> str:
    """
    Evaluate JavaScript in the page and return its value.

    Promises are awaited. The value must be JSON-serializable; DOM nodes come
    back empty. A script that throws returns a DRIVER_FAULT error.

    Args:
        script: JavaScript expression or statements
    """
    return await navigation.execute_script(script)


@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_reload() -> str:
    """Reload the current page."""
    return await navigation.reload_page()


@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_go_back() -> str:
    """Go back one entry in the tab's history. `moved` is false at the first entry."""
    return await navigation.go_back()


@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_go_forward() -> str:
    """Go forward one entry in the tab's history. `moved` is false at the last entry."""
    return await navigation.go_forward()
#endregion

#region Tools -- Waiting
@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_wait_for_ready(
    selector: str,
    timeout_ms: Optional[int] = None,
) -> str:
    """
    Wait until an element is ready for interaction: visible, enabled, and
    holding the same position for the stability window.

    Does not fail on timeout; check `ready` in the result. When not ready,
    `reasons` lists what blocked it ("not visible", "disabled",
    "position unstable").

    Args:
        selector: CSS selector
        timeout_ms: Maximum wait in milliseconds (default 5000)
    """
    return await waiting.wait_for_ready(selector, timeout_ms=timeout_ms)


@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_wait_for(
    element: Optional[str] = None,
    text: Optional[str] = None,
    url: Optional[str] = None,
    network_idle_ms: Optional[int] = None,
    timeout_ms: Optional[int] = None,
) -> str:
    """
    Wait for UI state changes after an action.

    Only the conditions you pass are checked; all of them must hold.
    Calling with no conditions succeeds immediately.

    Args:
        element: CSS selector that must match an element
        text: Text that must appear in the page (case-insensitive substring)
        url: Regular expression searched in the current URL
        network_idle_ms: Milliseconds without any network request starting or finishing
        timeout_ms: Maximum wait in milliseconds (default 5000, capped at 30000)

    Returns:
        success, per-condition results, the actual page state and elapsed time.
        A timeout returns success=false, not an error.
    """
    return await waiting.wait_for_conditions(
        element=element,
        text=text,
        url=url,
        network_idle_ms=network_idle_ms,
        timeout_ms=timeout_ms,
    )
#endregion

#region Tools -- Interaction
@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_click(
    selector: str,
    timeout_ms: Optional[int] = None,
    ensure_interactive: bool = False,
) -> str:
    """
    Click an element once it is ready.

    Args:
        selector: CSS selector
        timeout_ms: Maximum readiness wait in milliseconds (default 5000)
        ensure_interactive: Hover and focus the element first, for controls
            that only appear or activate on mouse-over

    Errors:
        ELEMENT_NOT_FOUND when nothing matches, ELEMENT_NOT_READY (with the
        element state and blocking reasons) when it never became ready.
    """
    return await interaction.click_element(
        selector,
        timeout_ms=timeout_ms,
        ensure_interactive=ensure_interactive,
    )


@mcp.tool()
@tool_envelope
@ensure_connected
async def chrome_type(
    selector: str,
    text: str,
    timeout_ms: Optional[int] = None,
    ensure_interactive: bool = False,
) -> str:
    """
    Type text into an element once it is ready.

    The element is focused and each character is sent as its own key event.

    Args:
        selector: CSS selector of the input
        text: Text to type
        timeout_ms: Maximum readiness wait in milliseconds (default 5000)
        ensure_interactive: Hover and focus the element first
    """
    return await interaction.type_text(
        selector,
        text,
        timeout_ms=timeout_ms,
        ensure_interactive=ensure_interactive,
    )
#endregion

#region Tools -- Connection
@mcp.tool()
@tool_envelope
async def chrome_connect() -> str:
    """Attach to Chromium on the configured debugging port, launching it if nothing is listening."""
    return await connection.connect_browser()


@mcp.tool()
@tool_envelope
async def chrome_disconnect() -> str:
    """
    Close the connection to Chromium.
    The next tool call reconnects automatically.
    """
    return await connection.disconnect_browser()


@mcp.tool()
@tool_envelope
async def chrome_get_debug_info() -> str:
    """Return OS, Python and Selenium versions, Chromium settings and the connection state."""
    return await connection.get_debug_diagnostics_info()
#endregion


def main():
    mcp.run()


if __name__ == "__main__":
    main()
