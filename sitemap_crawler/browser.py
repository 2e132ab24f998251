"""Headless-browser rendering for client-side rendered pages."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence

from playwright.async_api import Browser, Error as PlaywrightError, Playwright, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeout

from .config import BrowserConfig
from .errors import BrowserLaunchError, RenderError

logger = logging.getLogger(__name__)

# Runs in the page: same-origin anchors, resolved against the page location,
# fragments stripped.
_COLLECT_LINKS_JS = """
(origin) => {
  const urls = [];
  for (const element of document.querySelectorAll("a[href]")) {
    try {
      const href = element.getAttribute("href");
      if (!href) continue;
      const url = new URL(href, window.location.href);
      if (url.origin !== origin) continue;
      url.hash = "";
      urls.push(url.href);
    } catch (e) {}
  }
  return [...new Set(urls)];
}
"""


class Renderer(Protocol):
    """Capability used by the fetcher to render a page and list its links."""

    async def collect_links(self, url: str, origin: str) -> List[str]:
        ...

    async def close(self) -> None:
        ...


class PlaywrightRenderer:
    """Render pages in a shared headless Chromium.

    The browser is launched on first use and reused by every task; each call
    works in its own tab, which is closed whatever the outcome.
    """

    def __init__(
        self,
        config: BrowserConfig = BrowserConfig(),
        root_selectors: Sequence[str] = (),
        user_agent: Optional[str] = None,
    ) -> None:
        self._config = config
        self._wait_selector = ",".join(["a", *root_selectors])
        self._user_agent = user_agent
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    async def _get_browser(self) -> Browser:
        async with self._lock:
            if self._browser is None:
                logger.info("Launching headless browser...")
                try:
                    self._playwright = await async_playwright().start()
                    self._browser = await self._playwright.chromium.launch(headless=self._config.headless)
                except (PlaywrightError, OSError) as exc:
                    await self.close()
                    raise BrowserLaunchError(f"Could not launch browser: {exc}") from exc
            return self._browser

    async def collect_links(self, url: str, origin: str) -> List[str]:
        browser = await self._get_browser()
        try:
            page = await browser.new_page(user_agent=self._user_agent)
        except PlaywrightError as exc:
            raise RenderError(f"Could not open tab for {url}: {exc}") from exc

        try:
            await page.goto(
                url,
                wait_until=self._config.wait_until,
                timeout=self._config.navigation_timeout * 1000,
            )
            try:
                await page.wait_for_selector(
                    self._wait_selector,
                    state="attached",
                    timeout=self._config.selector_timeout * 1000,
                )
            except PlaywrightTimeout:
                logger.debug("Timeout waiting for selectors (%s) on %s", self._wait_selector, url)
            return await page.evaluate(_COLLECT_LINKS_JS, origin)
        except PlaywrightError as exc:
            raise RenderError(f"Rendering failed for {url}: {exc}") from exc
        finally:
            try:
                await page.close()
            except PlaywrightError as exc:
                logger.debug("Error closing tab for %s: %s", url, exc)

    async def close(self) -> None:
        """Close the browser and stop the Playwright driver, if running."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        try:
            if browser is not None:
                logger.debug("Closing headless browser")
                await browser.close()
        finally:
            if playwright is not None:
                await playwright.stop()
