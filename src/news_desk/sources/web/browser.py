"""Headless Chromium sessions for the blog extraction engine.

A *browser factory* is a zero-argument callable returning an async context
manager that yields an object with ``async new_page()``.  The default
factory, :func:`chromium_session`, launches Playwright Chromium; tests pass
a fake factory that counts open sessions and pages.

Every page handed out must be closed by the caller, and the session is
released when the context manager exits, whichever path it exits by.

Install the browser binary once per host::

    playwright install chromium
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Protocol

from playwright.async_api import async_playwright

from news_desk.sources.web.config import CHROMIUM_ARGS, DESKTOP_USER_AGENT, VIEWPORT

logger = logging.getLogger(__name__)


class PageLike(Protocol):
    """The subset of ``playwright.async_api.Page`` the collector uses."""

    async def goto(self, url: str, *, timeout: float, wait_until: str) -> Any: ...

    async def content(self) -> str: ...

    async def close(self) -> None: ...


class BrowserSession(Protocol):
    """The subset of ``playwright.async_api.BrowserContext`` the collector uses."""

    async def new_page(self) -> PageLike: ...


BrowserFactory = Callable[[], AbstractAsyncContextManager[BrowserSession]]


@asynccontextmanager
async def chromium_session() -> AsyncIterator[BrowserSession]:
    """Launch headless Chromium and yield a fresh isolated browser context.

    The context carries a desktop user agent and a 1920x1080 viewport.  The
    context, the browser and the Playwright driver are closed on exit.
    """
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True, args=CHROMIUM_ARGS)
        try:
            context = await browser.new_context(
                user_agent=DESKTOP_USER_AGENT,
                viewport=VIEWPORT,
            )
            try:
                yield context
            finally:
                await context.close()
        finally:
            await browser.close()
            logger.debug("web: chromium session closed")
