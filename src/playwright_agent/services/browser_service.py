"""Playwright browser session and the page interface the tools rely on."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from playwright.sync_api import Browser, Page, Playwright, sync_playwright

from playwright_agent.config import settings

logger = logging.getLogger(__name__)


class PageProvider(Protocol):
    """The subset of ``playwright.sync_api.Page`` used by the tool executor."""

    @property
    def url(self) -> str: ...

    @property
    def keyboard(self) -> Any: ...

    def goto(self, url: str, **kwargs: Any) -> Any: ...
    def title(self) -> str: ...
    def locator(self, selector: str, **kwargs: Any) -> Any: ...
    def get_by_text(self, text: str, **kwargs: Any) -> Any: ...
    def screenshot(self, **kwargs: Any) -> bytes: ...


class BrowserSession:
    """Owns one Chromium browser with a single page.

    Use as a context manager; everything is closed on exit.
    """

    def __init__(
        self,
        headless: bool | None = None,
        viewport: tuple[int, int] | None = None,
    ) -> None:
        self.headless = settings.browser_headless if headless is None else headless
        self.viewport = viewport or (
            settings.browser_viewport_width,
            settings.browser_viewport_height,
        )
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser session is not started")
        return self._page

    def start(self) -> Page:
        width, height = self.viewport
        logger.info("Launching Chromium (headless=%s, viewport=%dx%d)", self.headless, width, height)
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=self.headless)
            self._page = self._browser.new_page(viewport={"width": width, "height": height})
        except Exception:
            self.close()
            raise
        return self._page

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
        self._page = None
        logger.info("Browser session closed")

    def __enter__(self) -> Page:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.close()
