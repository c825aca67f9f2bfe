"""Page navigation, history and page metadata."""

from typing import Any, Dict

import logging
logger = logging.getLogger(__name__)

from ..browser.connection import ConnectionManager
from ..browser.driver import BrowserDriver
from ..errors import DriverFault, NavigationError


class NavigationService:

    def __init__(self, driver: BrowserDriver, connection: ConnectionManager):
        self.driver = driver
        self.connection = connection

    async def navigate(self, url: str) -> Dict[str, str]:
        """
        Load `url` and wait for its load event.

        Returns:
            The page's url and title after loading.

        Raises:
            ValueError: `url` is empty.
            NavigationError: the browser rejected or failed the navigation.
        """
        if not url:
            raise ValueError("URL is required")
        await self.connection.ensure_connected()

        try:
            await self.driver.navigate(url)
        except DriverFault as e:
            raise NavigationError(f"Failed to navigate to {url}: {e.message}", target=url) from e

        logger.info(f"Navigated to {url}")
        return await self.page_meta()

    async def page_meta(self) -> Dict[str, str]:
        await self.connection.ensure_connected()
        return {
            "url": await self.driver.get_current_url(),
            "title": await self.get_title(),
        }

    async def get_current_url(self) -> str:
        await self.connection.ensure_connected()
        return await self.driver.get_current_url()

    async def get_title(self) -> str:
        await self.connection.ensure_connected()
        return await self.driver.evaluate_expression("document.title") or ""

    async def execute_script(self, script: str) -> Any:
        """
        Evaluate `script` in the page and return its JSON-compatible value.
        Promises are awaited. A script that throws raises DriverFault.
        """
        if not script:
            raise ValueError("Script is required")
        await self.connection.ensure_connected()
        return await self.driver.evaluate_expression(script)

    async def reload(self) -> None:
        await self.connection.ensure_connected()
        await self.driver.reload()

    async def go_back(self) -> bool:
        """Step one entry back in history. False when already at the first entry."""
        return await self._step_history(-1)

    async def go_forward(self) -> bool:
        """Step one entry forward in history. False when already at the last entry."""
        return await self._step_history(1)

    async def _step_history(self, offset: int) -> bool:
        await self.connection.ensure_connected()
        index, entries = await self.driver.get_navigation_history()
        target = index + offset
        if target < 0 or target >= len(entries):
            return False
        await self.driver.navigate_to_history_entry(entries[target]["id"])
        return True


__all__ = ["NavigationService"]
