# tests/test_navigation.py
import asyncio
import pytest

from mcp_chromium_cdp.actions.navigation import NavigationService
from mcp_chromium_cdp.browser.connection import ConnectionManager
from mcp_chromium_cdp.errors import DriverFault, NavigationError

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
def nav(driver):
    return NavigationService(driver, ConnectionManager(driver))


class TestNavigate:

    def test_navigate_returns_url_and_title(self, driver, nav, event_loop):
        driver.page_title = "Example Domain"

        meta = event_loop.run_until_complete(nav.navigate("https://example.com/"))

        assert meta == {"url": "https://example.com/", "title": "Example Domain"}
        assert driver.connect_calls == 1
        assert driver.names()[0] == "navigate"

    def test_empty_url_is_rejected_before_connecting(self, driver, nav, event_loop):
        with pytest.raises(ValueError):
            event_loop.run_until_complete(nav.navigate(""))
        assert driver.connect_calls == 0

    def test_driver_failure_becomes_navigation_error(self, driver, nav, event_loop):
        driver.fail("navigate", DriverFault("net::ERR_NAME_NOT_RESOLVED"))

        with pytest.raises(NavigationError) as excinfo:
            event_loop.run_until_complete(nav.navigate("https://nowhere.invalid/"))

        payload = excinfo.value.to_dict()
        assert payload["code"] == "NAVIGATION_FAILED"
        assert payload["target"] == "https://nowhere.invalid/"
        assert "ERR_NAME_NOT_RESOLVED" in payload["message"]


class TestPageQueries:

    def test_current_url_and_title(self, driver, nav, event_loop):
        driver.current_url = "https://example.com/a"
        driver.page_title = "A"

        assert event_loop.run_until_complete(nav.get_current_url()) == "https://example.com/a"
        assert event_loop.run_until_complete(nav.get_title()) == "A"

    def test_execute_script_returns_value(self, driver, nav, event_loop):
        driver.script_results["document.links.length"] = 7
        assert event_loop.run_until_complete(nav.execute_script("document.links.length")) == 7

    def test_execute_script_fault_propagates(self, driver, nav, event_loop):
        driver.fail("evaluate_expression", DriverFault("Script evaluation failed: ReferenceError"))
        with pytest.raises(DriverFault):
            event_loop.run_until_complete(nav.execute_script("missing()"))

    def test_empty_script_is_rejected(self, nav, event_loop):
        with pytest.raises(ValueError):
            event_loop.run_until_complete(nav.execute_script(""))

    def test_reload(self, driver, nav, event_loop):
        event_loop.run_until_complete(nav.reload())
        assert driver.count("reload") == 1


class TestHistory:

    def test_back_and_forward(self, driver, nav, event_loop):
        async def test_logic():
            await nav.navigate("https://example.com/1")
            await nav.navigate("https://example.com/2")

            assert await nav.go_back() is True
            assert driver.current_url == "https://example.com/1"

            assert await nav.go_forward() is True
            assert driver.current_url == "https://example.com/2"

        event_loop.run_until_complete(test_logic())

    def test_back_at_first_entry_does_not_move(self, driver, nav, event_loop):
        event_loop.run_until_complete(nav.navigate("https://example.com/only"))

        assert event_loop.run_until_complete(nav.go_back()) is False
        assert driver.count("history_entry") == 0

    def test_forward_at_last_entry_does_not_move(self, driver, nav, event_loop):
        event_loop.run_until_complete(nav.navigate("https://example.com/only"))

        assert event_loop.run_until_complete(nav.go_forward()) is False
        assert driver.count("history_entry") == 0
