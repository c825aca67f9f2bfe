# tests/tests_decorators/test_envelope.py
import json
import asyncio
import pytest

from mcp_chromium_cdp.decorators import tool_envelope
from mcp_chromium_cdp.errors import ElementNotFoundError, ElementNotReadyError
from mcp_chromium_cdp.models import ElementState, WaitOutcome, ConditionSet, ActualState

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


# ------------------------------
# tool_envelope tests
# ------------------------------

def test_tool_envelope_normalizes_sync_success_and_values():
    @tool_envelope
    def f_none():
        return None

    @tool_envelope
    def f_dict():
        return {"a": 1}

    @tool_envelope
    def f_model():
        return WaitOutcome(True, ConditionSet(text=True), ActualState("about:blank", False, True), 12)

    assert f_none() == ""
    assert json.loads(f_dict()) == {"a": 1}
    assert json.loads(f_model()) == {
        "success": True,
        "conditions": {"text": True},
        "actual_state": {"current_url": "about:blank", "element_found": False, "text_found": True},
        "elapsed_ms": 12,
    }


def test_tool_envelope_generic_error_includes_traceback_by_default():
    @tool_envelope
    def f_fail():
        raise ValueError("boom")

    payload = json.loads(f_fail())
    assert payload["ok"] is False
    assert payload["summary"] == "ValueError: boom"
    assert payload["error"]["type"] == "ValueError"
    assert "traceback" in payload["error"]
    assert "timestamp" in payload


def test_tool_envelope_without_traceback_when_disabled(monkeypatch):
    monkeypatch.setenv("CDP_TOOL_ERRORS_TRACEBACK", "0")

    @tool_envelope
    def f_fail():
        raise RuntimeError("err")

    payload = json.loads(f_fail())
    assert payload["error"]["type"] == "RuntimeError"
    assert "traceback" not in payload["error"]


def test_tool_envelope_structured_automation_error(event_loop):
    @tool_envelope
    async def f_click():
        raise ElementNotReadyError(
            "#submit",
            ElementState(visible=True, enabled=False, stable=True),
            ["disabled"],
            5003,
        )

    payload = json.loads(event_loop.run_until_complete(f_click()))

    assert payload["ok"] is False
    assert payload["summary"].startswith("ELEMENT_NOT_READY")
    err = payload["error"]
    assert err["code"] == "ELEMENT_NOT_READY"
    assert err["target"] == "#submit"
    assert err["context"]["state"] == {"visible": True, "enabled": False, "stable": True}
    assert err["context"]["elapsed_ms"] == 5003
    assert len(err["suggestions"]) >= 1
    assert "traceback" not in err


def test_tool_envelope_not_found_payload(event_loop):
    @tool_envelope
    async def f_click():
        raise ElementNotFoundError("#ghost")

    payload = json.loads(event_loop.run_until_complete(f_click()))
    assert payload["error"]["code"] == "ELEMENT_NOT_FOUND"
    assert payload["error"]["message"] == "Element not found: #ghost"


def test_tool_envelope_async_cancelled_error_propagates(event_loop):
    @tool_envelope
    async def f_cancel():
        raise asyncio.CancelledError()

    async def test_logic():
        with pytest.raises(asyncio.CancelledError):
            await f_cancel()

    event_loop.run_until_complete(test_logic())


def test_tool_envelope_passes_strings_through(event_loop):
    @tool_envelope
    async def f():
        return json.dumps({"ok": True})

    assert json.loads(event_loop.run_until_complete(f())) == {"ok": True}
