# tests/test_connection.py
import asyncio
import pytest

from mcp_chromium_cdp.browser.connection import ConnectionManager
from mcp_chromium_cdp.errors import ConnectionLostError, ReconnectExhaustedError
from mcp_chromium_cdp.models import ConnectionState

from _utils import FakeDriver

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def manager(driver, sleeps):
    m = ConnectionManager(driver)

    async def record_sleep(seconds):
        sleeps.append(seconds)
        await asyncio.sleep(0)

    m._sleep = record_sleep
    return m


class TestEnsureConnected:

    def test_first_call_connects(self, driver, manager, event_loop):
        assert manager.state == ConnectionState.DISCONNECTED

        event_loop.run_until_complete(manager.ensure_connected())

        assert manager.is_connected()
        assert manager.handle == "conn-1"
        assert manager.state == ConnectionState.CONNECTED
        assert driver.connect_calls == 1

    def test_live_handle_returns_without_connecting(self, driver, manager, event_loop):
        event_loop.run_until_complete(manager.ensure_connected())
        event_loop.run_until_complete(manager.ensure_connected())
        assert driver.connect_calls == 1

    def test_four_failures_then_success(self, driver, manager, sleeps, event_loop):
        driver.connect_failures = 4

        event_loop.run_until_complete(manager.ensure_connected())

        assert driver.connect_calls == 5
        assert sleeps == [2.0, 2.0, 2.0, 2.0]
        assert manager.state == ConnectionState.CONNECTED

    def test_exhaustion_raises_and_resets(self, driver, manager, sleeps, event_loop):
        driver.connect_failures = 100

        with pytest.raises(ReconnectExhaustedError) as excinfo:
            event_loop.run_until_complete(manager.ensure_connected())

        err = excinfo.value
        assert err.attempts == 5
        assert str(err) == "Failed to reconnect to Chromium after 5 attempts"
        assert err.to_dict()["code"] == "RECONNECT_FAILED"
        assert isinstance(err.last_error, ConnectionRefusedError)
        assert driver.connect_calls == 5
        # no sleep after the final attempt
        assert sleeps == [2.0] * 4
        assert manager.state == ConnectionState.FAILED
        assert manager.reconnecting is False

        # the next call starts a fresh sequence
        driver.connect_failures = 0
        event_loop.run_until_complete(manager.ensure_connected())
        assert driver.connect_calls == 6
        assert manager.state == ConnectionState.CONNECTED

    def test_concurrent_callers_share_one_sequence(self, driver, manager, event_loop):
        driver.connect_failures = 2
        driver.connect_delay = 0.01

        async def test_logic():
            await asyncio.gather(*(manager.ensure_connected() for _ in range(10)))

        event_loop.run_until_complete(test_logic())

        assert driver.connect_calls == 3
        assert manager.is_connected()

    def test_concurrent_callers_share_exhaustion(self, driver, manager, event_loop):
        driver.connect_failures = 100

        async def test_logic():
            return await asyncio.gather(
                *(manager.ensure_connected() for _ in range(8)),
                return_exceptions=True,
            )

        results = event_loop.run_until_complete(test_logic())

        assert all(isinstance(r, ReconnectExhaustedError) for r in results)
        assert driver.connect_calls == 5

    def test_reconnecting_flag_during_sequence(self, driver, manager, event_loop):
        driver.connect_failures = 1
        seen = []

        async def test_logic():
            task = asyncio.ensure_future(manager.ensure_connected())
            await asyncio.sleep(0)
            seen.append(manager.reconnecting)
            await task
            seen.append(manager.reconnecting)

        event_loop.run_until_complete(test_logic())

        assert seen == [True, False]

    def test_cancelled_caller_does_not_abort_shared_sequence(self, driver, manager, event_loop):
        driver.connect_delay = 0.05

        async def test_logic():
            impatient = asyncio.ensure_future(manager.ensure_connected())
            patient = asyncio.ensure_future(manager.ensure_connected())
            await asyncio.sleep(0.01)
            impatient.cancel()
            await patient
            with pytest.raises(asyncio.CancelledError):
                await impatient

        event_loop.run_until_complete(test_logic())

        assert manager.is_connected()
        assert driver.connect_calls == 1


class TestDisconnect:

    def test_disconnect_signal_nulls_handle_immediately(self, driver, manager, event_loop):
        event_loop.run_until_complete(manager.ensure_connected())

        driver.trigger_disconnect()

        assert manager.handle is None
        assert manager.state == ConnectionState.DISCONNECTED

    def test_reconnect_after_disconnect(self, driver, manager, event_loop):
        event_loop.run_until_complete(manager.ensure_connected())
        driver.trigger_disconnect()
        driver.connect_failures = 1
        states = []

        async def test_logic():
            task = asyncio.ensure_future(manager.ensure_connected())
            await asyncio.sleep(0)
            states.append(manager.state)
            await task

        event_loop.run_until_complete(test_logic())

        assert states == [ConnectionState.RECONNECTING]
        assert manager.handle == "conn-3"
        assert manager.state == ConnectionState.CONNECTED

    def test_close_releases_handle(self, driver, manager, event_loop):
        event_loop.run_until_complete(manager.ensure_connected())

        event_loop.run_until_complete(manager.close())

        assert driver.closed == ["conn-1"]
        assert manager.handle is None
        assert manager.state == ConnectionState.DISCONNECTED

    def test_close_during_connect_stays_closed(self, driver, manager, event_loop):
        driver.connect_delay = 0.05

        async def test_logic():
            waiter = asyncio.ensure_future(manager.ensure_connected())
            await asyncio.sleep(0.01)
            await manager.close()
            with pytest.raises(ConnectionLostError):
                await waiter
            # the cancelled sequence must not come back and install a handle
            await asyncio.sleep(0.1)

        event_loop.run_until_complete(test_logic())

        assert manager.handle is None
        assert manager.state == ConnectionState.DISCONNECTED
        assert manager.reconnecting is False
        assert driver.connect_calls == 1

        # a later call starts a fresh sequence
        driver.connect_delay = 0.0
        event_loop.run_until_complete(manager.ensure_connected())
        assert manager.is_connected()

    def test_close_without_connection_is_noop(self, driver, manager, event_loop):
        event_loop.run_until_complete(manager.close())
        assert driver.closed == []


def test_max_attempts_must_be_positive():
    with pytest.raises(ValueError):
        ConnectionManager(FakeDriver(), max_attempts=0)
