"""Diagnostics and debugging information utility functions."""

import sys
import platform
from typing import Optional

import selenium

from ..browser.devtools import devtools_version
from ..context import BrowserContext, get_context


def _devtools_browser(config: dict) -> str:
    host = config.get("debugger_host") or "127.0.0.1"
    port = config.get("debugger_port")
    if not port:
        return "<no port configured>"
    info = devtools_version(host, port)
    if info is None:
        return "<not listening>"
    return f"{info.get('Browser', '?')} (protocol {info.get('Protocol-Version', '?')})"


def collect_diagnostics(
    ctx: Optional[BrowserContext] = None,
    exc: Optional[Exception] = None,
) -> str:
    """
    Collect diagnostic information about the environment and the connection.

    Args:
        ctx: context to describe (if None, the global context is used)
        exc: Exception that occurred (can be None)

    Returns:
        str: Formatted diagnostic information
    """
    if ctx is None:
        ctx = get_context()
    config = ctx.config

    parts = [
        f"OS                : {platform.system()} {platform.release()}",
        f"Python            : {sys.version.split()[0]}",
        f"Selenium          : {getattr(selenium, '__version__', '?')}",
        f"Chromium binary   : {config.get('chromium_path') or '<selenium default>'}",
        f"User-data dir     : {config.get('user_data_dir')}",
        f"Headless          : {bool(config.get('headless'))}",
        f"Debugger address  : {ctx.get_debugger_address() or '<none>'}",
        f"DevTools browser  : {_devtools_browser(config)}",
        f"Connection state  : {ctx.connection.state.value}",
        f"Reconnecting      : {ctx.connection.reconnecting}",
    ]

    if exc:
        parts += [
            "---- ERROR ----",
            f"Error type        : {type(exc).__name__}",
            f"Error message     : {exc}",
        ]

    return "\n".join(parts)


__all__ = ['collect_diagnostics']
