"""
Reliable element interaction and UI-state waiting for Chromium over CDP.

Every action is gated on element readiness (visible, enabled, not moving),
waits are expressed as conditions on the page (element, text, url, network
quiet period), and the connection to the browser is re-established
transparently with bounded retries.

The core services in `actions/` only depend on the BrowserDriver interface
and a ConnectionManager, so they can be built against any driver; the MCP
server in `__main__` wires them to SeleniumCdpDriver.
"""

from .models import (
    ElementState,
    ReadinessResult,
    ConditionSet,
    ActualState,
    WaitOutcome,
    InteractionResult,
    Rect,
)
from .errors import (
    AutomationError,
    ElementNotFoundError,
    ElementNotReadyError,
    ReconnectExhaustedError,
)

__all__ = [
    "ElementState",
    "ReadinessResult",
    "ConditionSet",
    "ActualState",
    "WaitOutcome",
    "InteractionResult",
    "Rect",
    "AutomationError",
    "ElementNotFoundError",
    "ElementNotReadyError",
    "ReconnectExhaustedError",
]
