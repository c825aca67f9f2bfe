# mcp_chromium_cdp/actions/__init__.py
"""Core automation services: readiness, condition waits and input sequencing."""

from .readiness import ReadinessChecker, ReadinessWaiter
from .waiting import ConditionWaitOrchestrator
from .interaction import InteractionSequencer
from .navigation import NavigationService

__all__ = [
    "ReadinessChecker",
    "ReadinessWaiter",
    "ConditionWaitOrchestrator",
    "InteractionSequencer",
    "NavigationService",
]
