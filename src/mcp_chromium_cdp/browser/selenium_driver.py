"""Selenium-backed BrowserDriver speaking CDP through chromedriver."""

import asyncio
import json
from typing import Any, Callable, List, Optional, Tuple

from selenium import webdriver
from selenium.common.exceptions import (
    InvalidSessionIdException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By

import logging
logger = logging.getLogger(__name__)

from ..constants import NETWORK_LOG_POLL_MS
from ..errors import ConnectionLostError, DriverFault
from ..models import Rect
from .devtools import is_debugger_listening
from .driver import BrowserDriver, ConnectionHandle, ElementHandle, Unsubscribe


_POINTER_EVENT_TYPES = {
    "move": "mouseMoved",
    "press": "mousePressed",
    "release": "mouseReleased",
}

_KEY_EVENT_TYPES = {
    "down": "keyDown",
    "up": "keyUp",
}

_BOUNDING_BOX_SCRIPT = (
    "const r = arguments[0].getBoundingClientRect();"
    "return {x: r.x, y: r.y, width: r.width, height: r.height};"
)

_SESSION_LOST_MARKERS = (
    "disconnected",
    "not reachable",
    "no such session",
    "session deleted",
    "invalid session id",
    "connection refused",
    "max retries exceeded",
)


def _is_session_lost(exc: BaseException) -> bool:
    """True if the exception means the browser or chromedriver went away."""
    if isinstance(exc, (InvalidSessionIdException, ConnectionError)):
        return True
    text = str(exc).lower()
    return any(marker in text for marker in _SESSION_LOST_MARKERS)


def _fault_message(exc: BaseException) -> str:
    msg = getattr(exc, "msg", None) or str(exc)
    return msg.strip().splitlines()[0] if msg.strip() else exc.__class__.__name__


class SeleniumCdpDriver(BrowserDriver):
    """
    BrowserDriver on top of selenium's Chrome driver.

    Blocking WebDriver calls run in worker threads via asyncio.to_thread.
    Selenium has no CDP event stream, so network activity is read by draining
    chromedriver's performance log every NETWORK_LOG_POLL_MS while monitoring
    is enabled, and session loss is detected from the errors of regular calls.
    """

    def __init__(self, config: dict):
        self.config = config
        self._driver: Optional[webdriver.Chrome] = None
        self._disconnect_callbacks: List[Callable[[], None]] = []
        self._start_listeners: List[Callable[[], None]] = []
        self._finish_listeners: List[Callable[[], None]] = []
        self._monitor_refs = 0
        self._monitor_task: Optional[asyncio.Task] = None

    # -- connection --------------------------------------------------------

    def _build_options(self, attach: bool) -> Options:
        host = self.config.get("debugger_host") or "127.0.0.1"
        port = self.config.get("debugger_port")

        options = Options()
        options.set_capability("goog:loggingPrefs", {"performance": "ALL"})
        options.add_experimental_option("perfLoggingPrefs", {"enableNetwork": True, "enablePage": False})

        if attach:
            options.add_experimental_option("debuggerAddress", f"{host}:{port}")
            return options

        chromium_path = self.config.get("chromium_path")
        if chromium_path:
            options.binary_location = chromium_path
        if port:
            options.add_argument(f"--remote-debugging-port={port}")
        user_data_dir = self.config.get("user_data_dir")
        if user_data_dir:
            options.add_argument(f"--user-data-dir={user_data_dir}")
        if self.config.get("headless"):
            options.add_argument("--headless=new")
        options.add_argument("--no-first-run")
        options.add_argument("--no-default-browser-check")
        return options

    async def connect(self) -> ConnectionHandle:
        host = self.config.get("debugger_host") or "127.0.0.1"
        port = self.config.get("debugger_port")

        attach = bool(port) and await asyncio.to_thread(is_debugger_listening, host, port)
        if attach:
            logger.info(f"Attaching to Chromium at {host}:{port}")
        else:
            logger.info(f"No debugger on {host}:{port}; launching Chromium")

        driver = await asyncio.to_thread(webdriver.Chrome, options=self._build_options(attach))

        for domain in ("Page", "Runtime", "DOM"):
            try:
                await asyncio.to_thread(driver.execute_cdp_cmd, f"{domain}.enable", {})
            except WebDriverException as e:
                logger.debug(f"{domain}.enable failed (non-critical): {e}")

        self._driver = driver
        if self._monitor_refs > 0:
            # monitoring survived a reconnect; resume it on the new session
            await self._start_monitoring()
        return driver

    async def close(self, handle: ConnectionHandle) -> None:
        await self._stop_monitor_task()
        if handle is self._driver:
            self._driver = None
        await asyncio.to_thread(handle.quit)

    def on_disconnect(self, callback: Callable[[], None]) -> None:
        self._disconnect_callbacks.append(callback)

    def _mark_disconnected(self) -> Optional[webdriver.Chrome]:
        """Drop the live driver and fire the disconnect callbacks. Returns the dropped driver."""
        dead = self._driver
        if dead is None:
            return None
        self._driver = None
        for callback in list(self._disconnect_callbacks):
            try:
                callback()
            except Exception as e:
                logger.warning(f"Disconnect callback raised: {e}")
        return dead

    async def _quit_quietly(self, driver: webdriver.Chrome) -> None:
        # stops the chromedriver service left behind by a lost session
        try:
            await asyncio.to_thread(driver.quit)
        except Exception as e:
            logger.debug(f"quit() on lost session failed: {e}")

    async def _call(self, fn: Callable[..., Any], *args) -> Any:
        if self._driver is None:
            raise ConnectionLostError("Not connected to Chromium")
        try:
            return await asyncio.to_thread(fn, *args)
        except Exception as e:
            if _is_session_lost(e):
                dead = self._mark_disconnected()
                if dead is not None:
                    await self._quit_quietly(dead)
                raise ConnectionLostError(f"Lost connection to Chromium: {_fault_message(e)}") from e
            if isinstance(e, WebDriverException):
                raise DriverFault(_fault_message(e)) from e
            raise

    async def _cdp(self, method: str, params: Optional[dict] = None) -> dict:
        driver = self._driver
        if driver is None:
            raise ConnectionLostError("Not connected to Chromium")
        return await self._call(driver.execute_cdp_cmd, method, params or {}) or {}

    # -- DOM ---------------------------------------------------------------

    async def query_element(self, selector: str) -> Optional[ElementHandle]:
        driver = self._driver
        if driver is None:
            raise ConnectionLostError("Not connected to Chromium")
        elements = await self._call(driver.find_elements, By.CSS_SELECTOR, selector)
        return elements[0] if elements else None

    async def get_bounding_box(self, handle: ElementHandle) -> Rect:
        driver = self._driver
        if driver is None:
            raise ConnectionLostError("Not connected to Chromium")
        box = await self._call(driver.execute_script, _BOUNDING_BOX_SCRIPT, handle)
        if not isinstance(box, dict):
            raise DriverFault(f"getBoundingClientRect returned {box!r}")
        return Rect.from_dict(box)

    async def focus(self, handle: ElementHandle) -> None:
        driver = self._driver
        if driver is None:
            raise ConnectionLostError("Not connected to Chromium")
        await self._call(driver.execute_script, "arguments[0].focus();", handle)

    # -- input -------------------------------------------------------------

    async def dispatch_pointer_event(self, kind: str, x: float, y: float, button: str = "left") -> None:
        if kind not in _POINTER_EVENT_TYPES:
            raise ValueError(f"Unknown pointer event kind: {kind}")
        params = {"type": _POINTER_EVENT_TYPES[kind], "x": x, "y": y}
        if kind != "move":
            params["button"] = button
            params["clickCount"] = 1
        await self._cdp("Input.dispatchMouseEvent", params)

    async def dispatch_key_event(self, kind: str, char: str) -> None:
        if kind not in _KEY_EVENT_TYPES:
            raise ValueError(f"Unknown key event kind: {kind}")
        await self._cdp("Input.dispatchKeyEvent", {"type": _KEY_EVENT_TYPES[kind], "text": char})

    # -- runtime -----------------------------------------------------------

    async def evaluate_expression(self, expression: str, return_value: bool = True) -> Any:
        result = await self._cdp(
            "Runtime.evaluate",
            {"expression": expression, "returnByValue": return_value, "awaitPromise": True},
        )
        details = result.get("exceptionDetails")
        if details:
            exception = details.get("exception") or {}
            text = exception.get("description") or details.get("text") or "script threw"
            raise DriverFault(f"Script evaluation failed: {text}")
        return (result.get("result") or {}).get("value")

    async def get_current_url(self) -> str:
        driver = self._driver
        if driver is None:
            raise ConnectionLostError("Not connected to Chromium")
        return await self._call(lambda: driver.current_url)

    # -- navigation --------------------------------------------------------

    async def navigate(self, url: str) -> None:
        driver = self._driver
        if driver is None:
            raise ConnectionLostError("Not connected to Chromium")
        # WebDriver get() returns after the load event (pageLoadStrategy "normal")
        await self._call(driver.get, url)

    async def reload(self) -> None:
        await self._cdp("Page.reload")

    async def get_navigation_history(self) -> Tuple[int, List[dict]]:
        history = await self._cdp("Page.getNavigationHistory")
        return int(history.get("currentIndex", 0)), list(history.get("entries") or [])

    async def navigate_to_history_entry(self, entry_id: int) -> None:
        await self._cdp("Page.navigateToHistoryEntry", {"entryId": entry_id})

    # -- network -----------------------------------------------------------

    @staticmethod
    def _subscribe(listeners: List[Callable[[], None]], callback: Callable[[], None]) -> Unsubscribe:
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def on_network_request_start(self, callback: Callable[[], None]) -> Unsubscribe:
        return self._subscribe(self._start_listeners, callback)

    def on_network_request_finish(self, callback: Callable[[], None]) -> Unsubscribe:
        return self._subscribe(self._finish_listeners, callback)

    async def enable_network_monitoring(self) -> None:
        """Reference-counted: only the first enable touches the browser."""
        self._monitor_refs += 1
        if self._monitor_refs > 1:
            return
        try:
            await self._start_monitoring()
        except Exception:
            self._monitor_refs -= 1
            raise

    async def disable_network_monitoring(self) -> None:
        if self._monitor_refs == 0:
            return
        self._monitor_refs -= 1
        if self._monitor_refs > 0:
            return
        await self._stop_monitor_task()
        if self._driver is not None:
            await self._cdp("Network.disable")

    async def _start_monitoring(self) -> None:
        driver = self._driver
        await self._cdp("Network.enable")
        # entries buffered before this point describe old traffic
        await self._call(driver.get_log, "performance")
        if self._monitor_task is None or self._monitor_task.done():
            self._monitor_task = asyncio.ensure_future(self._drain_performance_log())

    async def _stop_monitor_task(self) -> None:
        task, self._monitor_task = self._monitor_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _drain_performance_log(self) -> None:
        while True:
            await asyncio.sleep(NETWORK_LOG_POLL_MS / 1000.0)
            driver = self._driver
            if driver is None:
                return
            try:
                entries = await self._call(driver.get_log, "performance")
            except ConnectionLostError:
                return
            except DriverFault as e:
                logger.debug(f"Performance log read failed: {e}")
                continue
            for entry in entries or []:
                self._dispatch_log_entry(entry)

    def _dispatch_log_entry(self, entry: dict) -> None:
        try:
            method = json.loads(entry["message"]).get("message", {}).get("method", "")
        except (json.JSONDecodeError, KeyError, TypeError):
            return

        if method == "Network.requestWillBeSent":
            listeners = self._start_listeners
        elif method in ("Network.loadingFinished", "Network.loadingFailed"):
            listeners = self._finish_listeners
        else:
            return

        for callback in list(listeners):
            try:
                callback()
            except Exception as e:
                logger.warning(f"Network listener raised: {e}")


__all__ = ["SeleniumCdpDriver"]
