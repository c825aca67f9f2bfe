# mcp_chromium_cdp/models.py

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional, Any, Tuple


class ConditionKind:
    ELEMENT = "element"
    TEXT = "text"
    URL = "url"
    NETWORK_IDLE = "network_idle"

    ALL = (ELEMENT, TEXT, URL, NETWORK_IDLE)


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    FAILED = "failed"


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def is_close_to(self, other: "Rect", tolerance: float = 1.0) -> bool:
        """True if every field differs by less than `tolerance`."""
        return (
            abs(self.x - other.x) < tolerance
            and abs(self.y - other.y) < tolerance
            and abs(self.width - other.width) < tolerance
            and abs(self.height - other.height) < tolerance
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rect":
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass
class ElementState:
    visible: bool = False
    enabled: bool = False
    stable: bool = False
    bounding_box: Optional[Rect] = None

    @property
    def ready(self) -> bool:
        return self.visible and self.enabled and self.stable

    @classmethod
    def not_found(cls) -> "ElementState":
        return cls(visible=False, enabled=False, stable=False)

    def to_dict(self) -> Dict[str, Any]:
        data = {"visible": self.visible, "enabled": self.enabled, "stable": self.stable}
        if self.bounding_box is not None:
            data["bounding_box"] = asdict(self.bounding_box)
        return data


@dataclass
class ReadinessResult:
    ready: bool
    state: ElementState
    elapsed_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {"ready": self.ready, "state": self.state.to_dict(), "elapsed_ms": self.elapsed_ms}


@dataclass
class ConditionSet:
    """
    Satisfaction flags for one wait_for call.

    None means the kind was not requested; False means requested and not yet
    satisfied. Absent kinds are ignored by all_satisfied().
    """
    element: Optional[bool] = None
    text: Optional[bool] = None
    url: Optional[bool] = None
    network_idle: Optional[bool] = None

    def requested(self) -> Tuple[str, ...]:
        return tuple(k for k in ConditionKind.ALL if getattr(self, k) is not None)

    def pending(self) -> Tuple[str, ...]:
        return tuple(k for k in ConditionKind.ALL if getattr(self, k) is False)

    def all_satisfied(self) -> bool:
        return all(getattr(self, k) is not False for k in ConditionKind.ALL)

    def to_dict(self) -> Dict[str, bool]:
        return {k: getattr(self, k) for k in self.requested()}


@dataclass
class ActualState:
    current_url: Optional[str] = None
    element_found: bool = False
    text_found: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class WaitOutcome:
    success: bool
    conditions: ConditionSet
    actual_state: ActualState
    elapsed_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "conditions": self.conditions.to_dict(),
            "actual_state": self.actual_state.to_dict(),
            "elapsed_ms": self.elapsed_ms,
        }


@dataclass
class InteractionResult:
    action: str
    selector: str
    x: float
    y: float
    elapsed_ms: int
    characters: Optional[int] = None
    readiness: Optional[ReadinessResult] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "action": self.action,
            "selector": self.selector,
            "x": self.x,
            "y": self.y,
            "elapsed_ms": self.elapsed_ms,
        }
        if self.characters is not None:
            data["characters"] = self.characters
        if self.readiness is not None:
            data["readiness"] = self.readiness.to_dict()
        return data


__all__ = [
    "ConditionKind",
    "ConnectionState",
    "Rect",
    "ElementState",
    "ReadinessResult",
    "ConditionSet",
    "ActualState",
    "WaitOutcome",
    "InteractionResult",
]
