"""Click and type, gated on element readiness."""

import asyncio
import time
from typing import Optional, Tuple

import logging
logger = logging.getLogger(__name__)

from ..browser.connection import ConnectionManager
from ..browser.driver import BrowserDriver, ElementHandle
from ..constants import INTERACTIVE_SETTLE_MS
from ..errors import ElementNotFoundError, ElementNotReadyError
from ..models import InteractionResult, ReadinessResult
from .readiness import ReadinessChecker, ReadinessWaiter


class InteractionSequencer:
    """
    Runs the fixed click/type sequence:

        resolve -> [hover, focus, settle] -> wait for readiness -> act

    The optional hover step makes hover-activated controls (menus, toolbars
    that only appear on mouse-over) visible before readiness is judged.
    """

    def __init__(
        self,
        driver: BrowserDriver,
        connection: ConnectionManager,
        waiter: ReadinessWaiter,
        settle_ms: int = INTERACTIVE_SETTLE_MS,
    ):
        self.driver = driver
        self.connection = connection
        self.waiter = waiter
        self.settle_ms = settle_ms

    async def _prepare(
        self,
        selector: str,
        timeout_ms: Optional[int],
        ensure_interactive: bool,
    ) -> Tuple[ElementHandle, Tuple[float, float], ReadinessResult]:
        await self.connection.ensure_connected()

        handle = await self.driver.query_element(selector)
        if handle is None:
            raise ElementNotFoundError(selector)
        box = await self.driver.get_bounding_box(handle)
        center = box.center()

        if ensure_interactive:
            await self.driver.dispatch_pointer_event("move", center[0], center[1])
            await self.driver.focus(handle)
            await asyncio.sleep(self.settle_ms / 1000.0)

        readiness = await self.waiter.wait_for_ready(selector, timeout_ms)
        if not readiness.ready:
            reasons = ReadinessChecker.blocking_reasons(readiness.state)
            logger.info(f"Element {selector!r} not ready after {readiness.elapsed_ms} ms: {', '.join(reasons)}")
            raise ElementNotReadyError(selector, readiness.state, reasons, readiness.elapsed_ms)

        if readiness.state.bounding_box is not None:
            center = readiness.state.bounding_box.center()
        return handle, center, readiness

    async def click(
        self,
        selector: str,
        timeout_ms: Optional[int] = None,
        ensure_interactive: bool = False,
    ) -> InteractionResult:
        """
        Left-click the centre of the element matching `selector`.

        Raises:
            ElementNotFoundError: nothing matches the selector.
            ElementNotReadyError: the element never became visible, enabled and stable.
        """
        started = time.monotonic()
        _, (x, y), readiness = await self._prepare(selector, timeout_ms, ensure_interactive)

        await self.driver.dispatch_pointer_event("press", x, y, button="left")
        await self.driver.dispatch_pointer_event("release", x, y, button="left")

        return InteractionResult(
            action="click",
            selector=selector,
            x=x,
            y=y,
            elapsed_ms=int(round((time.monotonic() - started) * 1000)),
            readiness=readiness,
        )

    async def type(
        self,
        selector: str,
        text: str,
        timeout_ms: Optional[int] = None,
        ensure_interactive: bool = False,
    ) -> InteractionResult:
        """Focus the element and send one key down/up pair per character of `text`."""
        started = time.monotonic()
        _, (x, y), readiness = await self._prepare(selector, timeout_ms, ensure_interactive)

        # the node may have been re-rendered while we waited
        fresh = await self.driver.query_element(selector)
        if fresh is None:
            raise ElementNotFoundError(selector)
        await self.driver.focus(fresh)

        for char in text:
            await self.driver.dispatch_key_event("down", char)
            await self.driver.dispatch_key_event("up", char)

        return InteractionResult(
            action="type",
            selector=selector,
            x=x,
            y=y,
            elapsed_ms=int(round((time.monotonic() - started) * 1000)),
            characters=len(text),
            readiness=readiness,
        )


__all__ = ["InteractionSequencer"]
