"""
Connection lifecycle management.

The ConnectionManager exclusively owns the live control-channel handle. Every
top-level operation awaits ensure_connected() before touching the driver; only
the manager ever sets or clears the handle.

Concurrency:
    At most one connect sequence runs at a time. Callers that arrive while one
    is in flight join that same sequence (and share its outcome) instead of
    starting another, so one disconnect costs at most `max_attempts` connect()
    calls no matter how many callers are waiting.
"""

import asyncio
from typing import Optional

import logging
logger = logging.getLogger(__name__)

from ..constants import RECONNECT_MAX_ATTEMPTS, RECONNECT_DELAY_MS
from ..errors import ConnectionLostError, ReconnectExhaustedError
from ..models import ConnectionState
from .driver import BrowserDriver, ConnectionHandle


class ConnectionManager:

    def __init__(
        self,
        driver: BrowserDriver,
        max_attempts: int = RECONNECT_MAX_ATTEMPTS,
        retry_delay_ms: int = RECONNECT_DELAY_MS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.driver = driver
        self.max_attempts = max_attempts
        self.retry_delay_ms = retry_delay_ms

        self._handle: Optional[ConnectionHandle] = None
        self._state = ConnectionState.DISCONNECTED
        self._ever_connected = False
        self._reconnect_task: Optional[asyncio.Task] = None

        driver.on_disconnect(self._on_disconnect)

    # ------------------------------------------------------------------ state

    @property
    def handle(self) -> Optional[ConnectionHandle]:
        return self._handle

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def reconnecting(self) -> bool:
        """True while a connect sequence is in flight."""
        return self._reconnect_task is not None and not self._reconnect_task.done()

    def is_connected(self) -> bool:
        return self._handle is not None

    def _on_disconnect(self) -> None:
        if self._handle is None:
            return
        logger.warning("[Connection] Chromium disconnected")
        self._handle = None
        self._state = ConnectionState.DISCONNECTED

    # -------------------------------------------------------------- lifecycle

    async def ensure_connected(self) -> None:
        """
        Return once a live handle exists.

        Raises:
            ReconnectExhaustedError: if the connect sequence this call started
                or joined ran out of attempts.
            ConnectionLostError: close() stopped the sequence before it finished.
        """
        if self._handle is not None:
            return

        if not self.reconnecting:
            self._state = ConnectionState.RECONNECTING if self._ever_connected else ConnectionState.CONNECTING
            self._reconnect_task = asyncio.ensure_future(self._connect_with_retries())

        task = self._reconnect_task
        try:
            # cancelling one caller leaves the shared sequence running
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                # the sequence itself was stopped by close()
                raise ConnectionLostError("Connection was closed while connecting") from None
            raise

    async def _connect_with_retries(self) -> None:
        logger.info(f"[Reconnect] Attempting to connect to Chromium ({self._state.value})...")

        last_error: Optional[BaseException] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                handle = await self.driver.connect()
            except asyncio.CancelledError:
                self._state = ConnectionState.DISCONNECTED
                raise
            except Exception as e:
                last_error = e
                logger.warning(f"[Reconnect] Attempt {attempt}/{self.max_attempts} failed: {e}")
                if attempt < self.max_attempts:
                    await self._sleep(self.retry_delay_ms / 1000.0)
                continue

            self._handle = handle
            self._ever_connected = True
            self._state = ConnectionState.CONNECTED
            logger.info(f"[Reconnect] Connected to Chromium on attempt {attempt}")
            return

        self._state = ConnectionState.FAILED
        logger.error(f"[Reconnect] Giving up after {self.max_attempts} attempts")
        raise ReconnectExhaustedError(self.max_attempts, last_error)

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def close(self) -> None:
        """Close the live channel, if any. An in-flight connect sequence is cancelled first."""
        task, self._reconnect_task = self._reconnect_task, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})

        handle, self._handle = self._handle, None
        self._state = ConnectionState.DISCONNECTED
        if handle is None:
            return
        try:
            await self.driver.close(handle)
        except Exception as e:
            logger.warning(f"[Connection] Error while closing Chromium connection: {e}")


__all__ = ["ConnectionManager"]
