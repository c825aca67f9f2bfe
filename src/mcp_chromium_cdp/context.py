"""
Process-wide service wiring for the MCP tool layer.

The core services are plain injectable objects; this module only builds one
set of them for the tools to share. Tests construct their own instances
directly and never need the global.

Usage:
    from mcp_chromium_cdp.context import get_context

    ctx = get_context()
    outcome = await ctx.waits.wait_for(text="Saved")
"""

from dataclasses import dataclass, field
from typing import Optional

from .actions.interaction import InteractionSequencer
from .actions.navigation import NavigationService
from .actions.readiness import ReadinessChecker, ReadinessWaiter
from .actions.waiting import ConditionWaitOrchestrator
from .browser.connection import ConnectionManager
from .browser.driver import BrowserDriver


@dataclass
class BrowserContext:
    """
    Holds the driver, its connection manager and the services built on them.

    Attributes:
        driver: BrowserDriver implementation (SeleniumCdpDriver in production)
        connection: the one ConnectionManager owning the live handle
        checker / waiter / waits / sequencer / navigation: core services sharing `connection`
        config: environment configuration dictionary
    """

    driver: BrowserDriver
    connection: ConnectionManager
    checker: ReadinessChecker
    waiter: ReadinessWaiter
    waits: ConditionWaitOrchestrator
    sequencer: InteractionSequencer
    navigation: NavigationService
    config: dict = field(default_factory=dict)

    @classmethod
    def build(cls, driver: BrowserDriver, config: Optional[dict] = None) -> "BrowserContext":
        connection = ConnectionManager(driver)
        checker = ReadinessChecker(driver)
        waiter = ReadinessWaiter(checker, connection)
        return cls(
            driver=driver,
            connection=connection,
            checker=checker,
            waiter=waiter,
            waits=ConditionWaitOrchestrator(driver, connection),
            sequencer=InteractionSequencer(driver, connection, waiter),
            navigation=NavigationService(driver, connection),
            config=dict(config or {}),
        )

    def get_debugger_address(self) -> Optional[str]:
        """Get debugger address as host:port string."""
        host = self.config.get("debugger_host")
        port = self.config.get("debugger_port")
        if host and port:
            return f"{host}:{port}"
        return None


# ============================================================================
# Global Context Management
# ============================================================================

_global_context: Optional[BrowserContext] = None


def get_context() -> BrowserContext:
    """
    Get or create the global context.

    All calls return the same instance until reset_context() is called.
    """
    global _global_context

    if _global_context is None:
        # Lazy initialization: the environment is read on first use
        from .browser.selenium_driver import SeleniumCdpDriver
        from .config.environment import get_env_config

        config = get_env_config()
        _global_context = BrowserContext.build(SeleniumCdpDriver(config), config)

    return _global_context


def set_context(ctx: Optional[BrowserContext]) -> None:
    """Install a prebuilt context (tests use this with a fake driver)."""
    global _global_context
    _global_context = ctx


def reset_context() -> None:
    """Drop the global context. Does not close the browser; use chrome_disconnect for that."""
    global _global_context
    _global_context = None


__all__ = [
    "BrowserContext",
    "get_context",
    "set_context",
    "reset_context",
]
