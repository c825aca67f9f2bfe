"""
Browser-driver interface.

The core only talks to the page through this surface. Implementations wrap a
concrete control-channel client (see selenium_driver.py); tests use an
in-memory fake.
"""

import abc
import json
from typing import Any, Callable, List, Optional, Tuple

from ..models import Rect

ElementHandle = Any
"""Opaque reference to a resolved element. Only meaningful to the driver that produced it."""

ConnectionHandle = Any
"""Opaque reference to a live control channel."""

Unsubscribe = Callable[[], None]


def js_literal(value: Any) -> str:
    """
    Serialize a caller-supplied value as a JavaScript literal.

    Every caller string that ends up inside an evaluated expression must pass
    through here; never concatenate raw text into a script.
    """
    return json.dumps(value)


class BrowserDriver(abc.ABC):

    # -- connection --------------------------------------------------------

    @abc.abstractmethod
    async def connect(self) -> ConnectionHandle:
        """Open the control channel. Raises on failure."""

    @abc.abstractmethod
    async def close(self, handle: ConnectionHandle) -> None:
        ...

    @abc.abstractmethod
    def on_disconnect(self, callback: Callable[[], None]) -> None:
        """Register a callback fired once each time the live channel is lost."""

    # -- DOM ---------------------------------------------------------------

    @abc.abstractmethod
    async def query_element(self, selector: str) -> Optional[ElementHandle]:
        """Resolve a CSS selector. Returns None when nothing matches."""

    @abc.abstractmethod
    async def get_bounding_box(self, handle: ElementHandle) -> Rect:
        """Viewport-relative box of a resolved element."""

    @abc.abstractmethod
    async def focus(self, handle: ElementHandle) -> None:
        ...

    # -- input -------------------------------------------------------------

    @abc.abstractmethod
    async def dispatch_pointer_event(self, kind: str, x: float, y: float, button: str = "left") -> None:
        ...

    @abc.abstractmethod
    async def dispatch_key_event(self, kind: str, char: str) -> None:
        ...

    # -- runtime -----------------------------------------------------------

    @abc.abstractmethod
    async def evaluate_expression(self, expression: str, return_value: bool = True) -> Any:
        """Evaluate a script in the page. Raises DriverFault if the script throws."""

    @abc.abstractmethod
    async def get_current_url(self) -> str:
        ...

    # -- navigation --------------------------------------------------------

    @abc.abstractmethod
    async def navigate(self, url: str) -> None:
        """Load `url` in the current tab. Returns once the load event fired."""

    @abc.abstractmethod
    async def reload(self) -> None:
        ...

    @abc.abstractmethod
    async def get_navigation_history(self) -> Tuple[int, List[dict]]:
        """(current index, entries). Each entry has at least `id` and `url`."""

    @abc.abstractmethod
    async def navigate_to_history_entry(self, entry_id: int) -> None:
        ...

    # -- network -----------------------------------------------------------

    @abc.abstractmethod
    def on_network_request_start(self, callback: Callable[[], None]) -> Unsubscribe:
        ...

    @abc.abstractmethod
    def on_network_request_finish(self, callback: Callable[[], None]) -> Unsubscribe:
        ...

    @abc.abstractmethod
    async def enable_network_monitoring(self) -> None:
        ...

    @abc.abstractmethod
    async def disable_network_monitoring(self) -> None:
        ...


__all__ = [
    "BrowserDriver",
    "ElementHandle",
    "ConnectionHandle",
    "Unsubscribe",
    "js_literal",
]
