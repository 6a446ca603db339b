import logging
from typing import Optional

from playwright.async_api import async_playwright, Browser, Page, Playwright

log = logging.getLogger(__name__)


class BrowserSession:
    """One page of the shared browser, used for a single lookup."""

    def __init__(self, page: Page, nav_timeout_ms: int):
        self._page = page
        self.nav_timeout_ms = nav_timeout_ms

    @property
    def url(self) -> str:
        return self._page.url

    async def goto(self, url: str) -> None:
        await self._page.goto(url, wait_until="load", timeout=self.nav_timeout_ms)

    async def content(self) -> str:
        return await self._page.content()

    async def close(self) -> None:
        await self._page.close()


class BrowserEngine:
    """
    Headless Chromium shared by every lookup of a run.

    Use as an async context manager so the browser is torn down on every exit
    path; launch and shutdown errors propagate to the caller.
    """

    def __init__(self, headless: bool = True, nav_timeout_ms: int = 30_000,
                 user_agent: Optional[str] = None):
        self.headless = headless
        self.nav_timeout_ms = nav_timeout_ms
        self.user_agent = user_agent
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def start(self) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.headless)
        log.info("BrowserEngine started (headless=%s)", self.headless)

    async def stop(self) -> None:
        # safe to call after a partial start()
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
        log.info("BrowserEngine stopped")

    async def new_session(self) -> BrowserSession:
        if self._browser is None:
            raise RuntimeError("BrowserEngine is not started")
        if self.user_agent:
            page = await self._browser.new_page(user_agent=self.user_agent)
        else:
            page = await self._browser.new_page()
        return BrowserSession(page, self.nav_timeout_ms)

    async def __aenter__(self) -> "BrowserEngine":
        try:
            await self.start()
        except BaseException:
            try:
                await self.stop()
            except Exception as e:
                log.warning("Error cleaning up after failed launch: %s", e)
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
