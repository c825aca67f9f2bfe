"""
Structured error types.

Each error carries a machine-readable code, the target it concerns, contextual
state and suggested next actions, and serializes itself with to_dict() for the
tool envelope. Condition-wait timeouts are deliberately absent: they are a
normal WaitOutcome, not an error.
"""

from typing import Any, Dict, List, Optional

from .models import ElementState


class AutomationError(Exception):
    code = "AUTOMATION_ERROR"
    default_suggestions: List[str] = []

    def __init__(
        self,
        message: str,
        *,
        target: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.target = target
        self.context = dict(context or {})
        self.suggestions = list(suggestions if suggestions is not None else self.default_suggestions)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.target is not None:
            payload["target"] = self.target
        if self.context:
            payload["context"] = self.context
        if self.suggestions:
            payload["suggestions"] = self.suggestions
        return payload


class ElementNotFoundError(AutomationError):
    code = "ELEMENT_NOT_FOUND"
    default_suggestions = [
        "Verify the selector against the current page",
        "Use chrome_wait_for with element=<selector> if the element appears later",
    ]

    def __init__(self, selector: str, **kwargs):
        super().__init__(f"Element not found: {selector}", target=selector, **kwargs)
        self.selector = selector


class ElementNotReadyError(AutomationError):
    code = "ELEMENT_NOT_READY"
    default_suggestions = [
        "Wait for the page to finish loading",
        "Use chrome_wait_for to wait for the expected page state",
        "Check whether the element is covered or still animating",
        "Retry with ensure_interactive=true for hover-activated controls",
    ]

    def __init__(
        self,
        selector: str,
        state: ElementState,
        reasons: List[str],
        elapsed_ms: int,
        **kwargs,
    ):
        context = {"state": state.to_dict(), "reasons": list(reasons), "elapsed_ms": elapsed_ms}
        super().__init__(
            f"Element not ready for interaction: {', '.join(reasons) or 'unknown'}",
            target=selector,
            context=context,
            **kwargs,
        )
        self.selector = selector
        self.state = state
        self.reasons = list(reasons)
        self.elapsed_ms = elapsed_ms


class ConnectionLostError(AutomationError):
    code = "CONNECTION_LOST"
    default_suggestions = ["Retry the operation; the connection is re-established automatically"]


class ReconnectExhaustedError(ConnectionLostError):
    code = "RECONNECT_FAILED"
    default_suggestions = [
        "Check that Chromium is running with --remote-debugging-port",
        "Verify CDP_DEBUGGER_HOST / CDP_REMOTE_DEBUGGING_PORT",
        "Call the operation again to start a fresh reconnect sequence",
    ]

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None, **kwargs):
        context = {"attempts": attempts}
        if last_error is not None:
            context["last_error"] = f"{last_error.__class__.__name__}: {last_error}"
        super().__init__(
            f"Failed to reconnect to Chromium after {attempts} attempts",
            context=context,
            **kwargs,
        )
        self.attempts = attempts
        self.last_error = last_error


class InvalidConditionError(AutomationError):
    code = "INVALID_CONDITION"
    default_suggestions = ["Check the url pattern; it must be a valid regular expression"]


class NavigationError(AutomationError):
    code = "NAVIGATION_FAILED"
    default_suggestions = [
        "Check that the URL is absolute and reachable (include the scheme)",
        "Call chrome_get_current_url to see where the page ended up",
    ]


class DriverFault(AutomationError):
    code = "DRIVER_FAULT"


__all__ = [
    "AutomationError",
    "ElementNotFoundError",
    "ElementNotReadyError",
    "ConnectionLostError",
    "ReconnectExhaustedError",
    "DriverFault",
    "InvalidConditionError",
    "NavigationError",
]
