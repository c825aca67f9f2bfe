"""
Global constants and tuning defaults.
No dependencies - safe to import from anywhere.

Every timing value is a default, not an invariant: components accept
overrides in their constructors and each value can be set from the environment.
"""

import os

# ============================================================================
# Readiness Configuration
# ============================================================================

READINESS_TIMEOUT_MS = int(os.getenv("CDP_READINESS_TIMEOUT_MS", "5000"))
"""Default time to wait for an element to become ready, in milliseconds."""

READINESS_POLL_INTERVAL_MS = int(os.getenv("CDP_READINESS_POLL_MS", "50"))
"""Sleep between readiness checks on the slow path."""

STABILITY_WINDOW_MS = int(os.getenv("CDP_STABILITY_WINDOW_MS", "100"))
"""Delay between the two bounding-box samples of a stability check."""

STABILITY_TOLERANCE_PX = float(os.getenv("CDP_STABILITY_TOLERANCE_PX", "1.0"))
"""Two boxes are equal when every field differs by less than this."""


# ============================================================================
# Condition Wait Configuration
# ============================================================================

WAIT_TIMEOUT_MS = int(os.getenv("CDP_WAIT_TIMEOUT_MS", "5000"))
"""Default deadline for wait_for."""

WAIT_MAX_TIMEOUT_MS = int(os.getenv("CDP_WAIT_MAX_TIMEOUT_MS", "30000"))
"""Hard ceiling applied to any caller-supplied wait_for timeout."""

WAIT_POLL_INTERVAL_MS = int(os.getenv("CDP_WAIT_POLL_MS", "100"))
"""Sleep between condition polling iterations."""


# ============================================================================
# Interaction Configuration
# ============================================================================

INTERACTIVE_SETTLE_MS = int(os.getenv("CDP_INTERACTIVE_SETTLE_MS", "50"))
"""Pause after hover+focus so page frameworks can attach their handlers."""


# ============================================================================
# Connection Configuration
# ============================================================================

RECONNECT_MAX_ATTEMPTS = int(os.getenv("CDP_RECONNECT_MAX_ATTEMPTS", "5"))
"""connect() attempts per reconnection sequence."""

RECONNECT_DELAY_MS = int(os.getenv("CDP_RECONNECT_DELAY_MS", "2000"))
"""Fixed backoff between reconnect attempts."""

CDP_REMOTE_DEBUGGING_PORT = 9222
"""Default DevTools port when CDP_REMOTE_DEBUGGING_PORT is not set."""

NETWORK_LOG_POLL_MS = int(os.getenv("CDP_NETWORK_LOG_POLL_MS", "50"))
"""How often the Selenium driver drains the performance log while monitoring."""


__all__ = [
    "READINESS_TIMEOUT_MS",
    "READINESS_POLL_INTERVAL_MS",
    "STABILITY_WINDOW_MS",
    "STABILITY_TOLERANCE_PX",
    "WAIT_TIMEOUT_MS",
    "WAIT_MAX_TIMEOUT_MS",
    "WAIT_POLL_INTERVAL_MS",
    "INTERACTIVE_SETTLE_MS",
    "RECONNECT_MAX_ATTEMPTS",
    "RECONNECT_DELAY_MS",
    "CDP_REMOTE_DEBUGGING_PORT",
    "NETWORK_LOG_POLL_MS",
]
