"""
Multi-condition waits.

wait_for() polls until every requested condition holds or the deadline
passes. A timeout is a normal outcome (success=False), never an exception.

Network subscription lifecycle:
    Listeners and network monitoring exist only for the duration of one call
    that asked for network_idle_ms. They are torn down in `finally`, so
    success, timeout, error and cancellation all release them exactly once.
"""

import asyncio
import re
import time
from typing import Callable, List, Optional, Pattern

import logging
logger = logging.getLogger(__name__)

from ..browser.connection import ConnectionManager
from ..browser.driver import BrowserDriver, js_literal
from ..constants import WAIT_MAX_TIMEOUT_MS, WAIT_POLL_INTERVAL_MS, WAIT_TIMEOUT_MS
from ..errors import InvalidConditionError
from ..models import ActualState, ConditionKind, ConditionSet, WaitOutcome


_TEXT_SCRIPT = """
(function(needle) {
  const body = document.body;
  if (!body) return false;
  return body.innerText.toLowerCase().includes(needle.toLowerCase());
})(%s)
"""


class ConditionWaitOrchestrator:

    def __init__(
        self,
        driver: BrowserDriver,
        connection: ConnectionManager,
        poll_interval_ms: int = WAIT_POLL_INTERVAL_MS,
        default_timeout_ms: int = WAIT_TIMEOUT_MS,
        max_timeout_ms: int = WAIT_MAX_TIMEOUT_MS,
    ):
        self.driver = driver
        self.connection = connection
        self.poll_interval_ms = poll_interval_ms
        self.default_timeout_ms = default_timeout_ms
        self.max_timeout_ms = max_timeout_ms

    def _effective_timeout_ms(self, timeout_ms: Optional[int]) -> int:
        if not timeout_ms or timeout_ms <= 0:
            timeout_ms = self.default_timeout_ms
        return min(timeout_ms, self.max_timeout_ms)

    async def wait_for(
        self,
        element: Optional[str] = None,
        text: Optional[str] = None,
        url: Optional[str] = None,
        network_idle_ms: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ) -> WaitOutcome:
        """
        Wait for any combination of: an element matching a CSS selector, page
        text (case-insensitive substring), a URL regex (re.search) and a
        network quiet period.

        Empty strings count as "not requested". With nothing requested the
        call succeeds on the first iteration.

        Raises:
            InvalidConditionError: `url` is not a valid regular expression.
            ReconnectExhaustedError: no connection could be established.
            DriverFault: the final state read failed.
        """
        timeout_ms = self._effective_timeout_ms(timeout_ms)

        url_pattern: Optional[Pattern] = None
        if url:
            try:
                url_pattern = re.compile(url)
            except re.error as e:
                raise InvalidConditionError(f"Invalid url pattern {url!r}: {e}", target=url) from e

        await self.connection.ensure_connected()

        conditions = ConditionSet(
            element=False if element else None,
            text=False if text else None,
            url=False if url_pattern is not None else None,
            network_idle=False if network_idle_ms is not None else None,
        )

        started = time.monotonic()
        activity = {"last": started}
        unsubscribers: List[Callable[[], None]] = []
        monitoring = False

        try:
            if network_idle_ms is not None:
                def touch() -> None:
                    activity["last"] = time.monotonic()

                await self.driver.enable_network_monitoring()
                monitoring = True
                unsubscribers.append(self.driver.on_network_request_start(touch))
                unsubscribers.append(self.driver.on_network_request_finish(touch))
                activity["last"] = time.monotonic()

            async def poll() -> None:
                while True:
                    await self._probe_pending(conditions, element, text, url_pattern, network_idle_ms, activity)
                    if conditions.all_satisfied():
                        return
                    await asyncio.sleep(self.poll_interval_ms / 1000.0)

            remaining = timeout_ms / 1000.0 - (time.monotonic() - started)
            try:
                await asyncio.wait_for(poll(), timeout=max(remaining, 0.001))
                success = True
            except asyncio.TimeoutError:
                success = False
                logger.debug(f"wait_for timed out after {timeout_ms} ms; pending: {conditions.pending()}")

            actual = await self._read_actual_state(element, text)
            elapsed = int(round((time.monotonic() - started) * 1000))
            return WaitOutcome(success=success, conditions=conditions, actual_state=actual, elapsed_ms=elapsed)
        finally:
            for unsubscribe in unsubscribers:
                try:
                    unsubscribe()
                except Exception as e:
                    logger.warning(f"Failed to remove network listener: {e}")
            if monitoring:
                try:
                    await self.driver.disable_network_monitoring()
                except Exception as e:
                    logger.warning(f"Network monitoring cleanup failed: {e}")

    async def _probe_pending(
        self,
        conditions: ConditionSet,
        element: Optional[str],
        text: Optional[str],
        url_pattern: Optional[Pattern],
        network_idle_ms: Optional[int],
        activity: dict,
    ) -> None:
        """Run one iteration of every still-pending probe, concurrently."""
        probes = []
        if conditions.element is False:
            probes.append((ConditionKind.ELEMENT, self._element_present(element)))
        if conditions.text is False:
            probes.append((ConditionKind.TEXT, self._text_present(text)))
        if conditions.url is False:
            probes.append((ConditionKind.URL, self._url_matches(url_pattern)))

        if probes:
            results = await asyncio.gather(*(probe for _, probe in probes), return_exceptions=True)
            for (kind, _), result in zip(probes, results):
                if isinstance(result, BaseException):
                    logger.debug(f"{kind} probe failed: {result}")
                    continue
                if result:
                    setattr(conditions, kind, True)

        if conditions.network_idle is False:
            idle_ms = (time.monotonic() - activity["last"]) * 1000
            if idle_ms >= network_idle_ms:
                conditions.network_idle = True

    async def _element_present(self, selector: str) -> bool:
        return (await self.driver.query_element(selector)) is not None

    async def _text_present(self, needle: str) -> bool:
        return bool(await self.driver.evaluate_expression(_TEXT_SCRIPT % js_literal(needle)))

    async def _url_matches(self, pattern: Pattern) -> bool:
        return pattern.search(await self.driver.get_current_url()) is not None

    async def _read_actual_state(self, element: Optional[str], text: Optional[str]) -> ActualState:
        async def found_element() -> bool:
            return await self._element_present(element) if element else False

        async def found_text() -> bool:
            return await self._text_present(text) if text else False

        current_url, element_found, text_found = await asyncio.gather(
            self.driver.get_current_url(),
            found_element(),
            found_text(),
        )
        return ActualState(current_url=current_url, element_found=element_found, text_found=text_found)


__all__ = ["ConditionWaitOrchestrator"]
