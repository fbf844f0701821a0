"""Page rendering sessions used by the scraping sources.

A source only needs to turn a URL into HTML and to give the browser back
afterwards. ``PageRenderer.session`` hands out one isolated session per call and
closes it on every exit path, cancellation included.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ...configs import settings
from .models import RenderFailure
from .utils import DEFAULT_HEADERS

logger = logging.getLogger("price_search.rendering")

BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class RenderSession(ABC):
    """A disposable browser tab."""

    @abstractmethod
    async def render(self, url: str) -> str:
        """Navigate to ``url`` and return the DOM once its content is loaded.

        Raises:
            RenderFailure: navigation failed or timed out.
        """
        raise NotImplementedError


class PageRenderer(ABC):
    """Factory of isolated rendering sessions."""

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[RenderSession]:
        """Open a session that is closed when the ``async with`` block exits."""
        raise NotImplementedError


class _PlaywrightSession(RenderSession):
    def __init__(self, page, navigation_timeout_ms: int) -> None:
        self._page = page
        self._navigation_timeout_ms = navigation_timeout_ms

    async def render(self, url: str) -> str:
        try:
            await self._page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self._navigation_timeout_ms,
            )
            return await self._page.content()
        except PlaywrightError as exc:
            raise RenderFailure(f"could not render {url}: {exc.message}") from exc


class PlaywrightRenderer(PageRenderer):
    """Launch a dedicated headless Chromium for every session.

    At most ``max_sessions`` browsers are alive at once; extra callers wait for
    a slot.
    """

    def __init__(
        self,
        max_sessions: int | None = None,
        headless: bool | None = None,
        navigation_timeout_ms: int | None = None,
    ) -> None:
        self.max_sessions = max_sessions or settings.BROWSER_MAX_SESSIONS
        self.headless = settings.BROWSER_HEADLESS if headless is None else headless
        self.navigation_timeout_ms = (
            navigation_timeout_ms or settings.NAVIGATION_TIMEOUT_MS
        )
        self._slots = asyncio.Semaphore(self.max_sessions)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[RenderSession]:
        async with self._slots:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(
                    headless=self.headless, args=BROWSER_ARGS
                )
                try:
                    context = await browser.new_context(
                        user_agent=DEFAULT_HEADERS["User-Agent"],
                        extra_http_headers={
                            "Accept-Language": DEFAULT_HEADERS["Accept-Language"]
                        },
                    )
                    page = await context.new_page()
                    logger.debug("Browser session opened.")
                    yield _PlaywrightSession(page, self.navigation_timeout_ms)
                finally:
                    await browser.close()
                    logger.debug("Browser session closed.")
