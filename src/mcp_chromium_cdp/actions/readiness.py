"""Element readiness: visible, enabled and not moving."""

import asyncio
import time
from typing import List, Optional

import logging
logger = logging.getLogger(__name__)

from ..browser.connection import ConnectionManager
from ..browser.driver import BrowserDriver, js_literal
from ..constants import (
    READINESS_POLL_INTERVAL_MS,
    READINESS_TIMEOUT_MS,
    STABILITY_TOLERANCE_PX,
    STABILITY_WINDOW_MS,
)
from ..models import ElementState, ReadinessResult


_PROBE_SCRIPT = """
(() => {
  const el = document.querySelector(%s);
  if (!el) return null;
  const rect = el.getBoundingClientRect();
  const style = window.getComputedStyle(el);
  const visible = rect.width > 0 && rect.height > 0
    && style.visibility !== 'hidden'
    && style.display !== 'none'
    && parseFloat(style.opacity) > 0;
  const enabled = !el.disabled
    && !el.readOnly
    && el.getAttribute('aria-disabled') !== 'true'
    && style.pointerEvents !== 'none';
  return {visible: visible, enabled: enabled};
})()
"""


def _elapsed_ms(started: float) -> int:
    return int(round((time.monotonic() - started) * 1000))


class ReadinessChecker:
    """
    Samples one element's readiness.

    check_state() never raises: a missing element and any driver failure both
    come back as the not-found state.
    """

    def __init__(
        self,
        driver: BrowserDriver,
        stability_window_ms: int = STABILITY_WINDOW_MS,
        tolerance: float = STABILITY_TOLERANCE_PX,
    ):
        self.driver = driver
        self.stability_window_ms = stability_window_ms
        self.tolerance = tolerance

    async def check_state(self, selector: str) -> ElementState:
        try:
            return await self._sample(selector)
        except Exception as e:
            logger.debug(f"Readiness probe for {selector!r} failed: {e}")
            return ElementState.not_found()

    async def _sample(self, selector: str) -> ElementState:
        handle = await self.driver.query_element(selector)
        if handle is None:
            return ElementState.not_found()

        probe = await self.driver.evaluate_expression(_PROBE_SCRIPT % js_literal(selector))
        if not probe:
            return ElementState.not_found()

        first = await self.driver.get_bounding_box(handle)

        await asyncio.sleep(self.stability_window_ms / 1000.0)

        second_handle = await self.driver.query_element(selector)
        if second_handle is None:
            stable = False
            box = first
        else:
            box = await self.driver.get_bounding_box(second_handle)
            stable = first.is_close_to(box, self.tolerance)

        return ElementState(
            visible=bool(probe.get("visible")),
            enabled=bool(probe.get("enabled")),
            stable=stable,
            bounding_box=box,
        )

    async def is_immediately_ready(self, selector: str) -> bool:
        """One check, no waiting beyond the stability window."""
        state = await self.check_state(selector)
        return state.ready

    @staticmethod
    def blocking_reasons(state: ElementState) -> List[str]:
        reasons = []
        if not state.visible:
            reasons.append("not visible")
        if not state.enabled:
            reasons.append("disabled")
        if not state.stable:
            reasons.append("position unstable")
        return reasons


class ReadinessWaiter:

    def __init__(
        self,
        checker: ReadinessChecker,
        connection: ConnectionManager,
        poll_interval_ms: int = READINESS_POLL_INTERVAL_MS,
        default_timeout_ms: int = READINESS_TIMEOUT_MS,
    ):
        self.checker = checker
        self.connection = connection
        self.poll_interval_ms = poll_interval_ms
        self.default_timeout_ms = default_timeout_ms

    async def wait_for_ready(self, selector: str, timeout_ms: Optional[int] = None) -> ReadinessResult:
        """
        Wait until `selector` is visible, enabled and stable.

        Returns a ReadinessResult either way; on timeout `ready` is False and
        `state` is the last state observed before the deadline.

        Raises:
            ReconnectExhaustedError: if no connection could be established.
        """
        timeout_ms = timeout_ms or self.default_timeout_ms
        await self.connection.ensure_connected()

        started = time.monotonic()
        state = await self.checker.check_state(selector)
        if state.ready:
            return ReadinessResult(ready=True, state=state, elapsed_ms=_elapsed_ms(started))

        last = {"state": state}

        async def poll() -> ElementState:
            while True:
                await asyncio.sleep(self.poll_interval_ms / 1000.0)
                current = await self.checker.check_state(selector)
                last["state"] = current
                if current.ready:
                    return current

        remaining = timeout_ms / 1000.0 - (time.monotonic() - started)
        try:
            if remaining <= 0:
                raise asyncio.TimeoutError()
            state = await asyncio.wait_for(poll(), timeout=remaining)
        except asyncio.TimeoutError:
            elapsed = _elapsed_ms(started)
            logger.debug(f"Element {selector!r} not ready after {elapsed} ms")
            return ReadinessResult(ready=False, state=last["state"], elapsed_ms=elapsed)

        return ReadinessResult(ready=True, state=state, elapsed_ms=_elapsed_ms(started))


__all__ = ["ReadinessChecker", "ReadinessWaiter"]
