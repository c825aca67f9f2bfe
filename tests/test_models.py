# tests/test_models.py
import pytest

from mcp_chromium_cdp.errors import (
    AutomationError,
    ConnectionLostError,
    DriverFault,
    ElementNotReadyError,
    ReconnectExhaustedError,
)
from mcp_chromium_cdp.models import (
    ConditionSet,
    ElementState,
    InteractionResult,
    ReadinessResult,
    Rect,
)


class TestRect:

    def test_center(self):
        assert Rect(100, 200, 50, 30).center() == (125, 215)

    @pytest.mark.parametrize("other, expected", [
        (Rect(100.4, 200.2, 50, 30), True),
        (Rect(100.99, 200, 50, 30), True),
        (Rect(101, 200, 50, 30), False),
        (Rect(106, 200, 50, 30), False),
        (Rect(100, 200, 50.5, 31.2), False),
    ])
    def test_is_close_to_default_tolerance(self, other, expected):
        assert Rect(100, 200, 50, 30).is_close_to(other) is expected

    def test_custom_tolerance(self):
        assert Rect(0, 0, 10, 10).is_close_to(Rect(2, 0, 10, 10), tolerance=3)

    def test_from_dict(self):
        assert Rect.from_dict({"x": 1, "y": "2", "width": 3, "height": 4.5}) == Rect(1.0, 2.0, 3.0, 4.5)


class TestElementState:

    def test_ready_requires_all_three(self):
        assert ElementState(True, True, True).ready
        assert not ElementState(True, True, False).ready
        assert not ElementState(False, True, True).ready
        assert not ElementState(True, False, True).ready

    def test_not_found(self):
        state = ElementState.not_found()
        assert state.to_dict() == {"visible": False, "enabled": False, "stable": False}

    def test_to_dict_includes_box(self):
        state = ElementState(True, True, True, Rect(1, 2, 3, 4))
        assert state.to_dict()["bounding_box"] == {"x": 1, "y": 2, "width": 3, "height": 4}


class TestConditionSet:

    def test_absent_kinds_are_ignored(self):
        conditions = ConditionSet(text=False)
        assert conditions.requested() == ("text",)
        assert conditions.pending() == ("text",)
        assert not conditions.all_satisfied()

        conditions.text = True
        assert conditions.all_satisfied()
        assert conditions.to_dict() == {"text": True}

    def test_empty_set_is_satisfied(self):
        assert ConditionSet().all_satisfied()
        assert ConditionSet().to_dict() == {}


def test_interaction_result_to_dict():
    readiness = ReadinessResult(True, ElementState(True, True, True), 110)
    data = InteractionResult("type", "#q", 5.0, 6.0, 130, characters=3, readiness=readiness).to_dict()
    assert data["characters"] == 3
    assert data["readiness"]["ready"] is True
    assert "characters" not in InteractionResult("click", "#b", 1, 2, 3).to_dict()


class TestErrors:

    def test_codes(self):
        assert ReconnectExhaustedError(5).code == "RECONNECT_FAILED"
        assert isinstance(ReconnectExhaustedError(5), ConnectionLostError)
        assert DriverFault("x").to_dict() == {"code": "DRIVER_FAULT", "message": "x"}

    def test_custom_suggestions_override_defaults(self):
        err = ElementNotReadyError("#a", ElementState.not_found(), ["not visible"], 10, suggestions=["scroll"])
        assert err.suggestions == ["scroll"]

    def test_default_suggestions_are_not_shared(self):
        a = AutomationError("a", suggestions=None)
        a.suggestions.append("mutated")
        assert AutomationError("b").suggestions == []

    def test_reconnect_error_records_last_error(self):
        err = ReconnectExhaustedError(3, ConnectionRefusedError("refused"))
        assert err.to_dict()["context"] == {"attempts": 3, "last_error": "ConnectionRefusedError: refused"}
