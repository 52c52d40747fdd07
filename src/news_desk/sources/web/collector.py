"""Blog extraction engine built on a headless browser session.

One run opens a fresh browser session, renders the listing page, parses it
with BeautifulSoup and walks at most ``web_max_articles`` cards in order.
For each card it recovers title and URL from the card, checks the store,
then renders the detail page for body, publish time and category.

Failure policy:

- Browser launch or listing navigation failure raises
  :class:`~news_desk.core.exceptions.SourceUnavailableError`.  No
  placeholder records are ever produced.
- Any failure while handling one card is logged and the card is skipped.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from news_desk.config.settings import Settings
from news_desk.core.exceptions import ExtractionError, SourceError, SourceUnavailableError
from news_desk.core.schemas.content import ContentRecord, SourceKind
from news_desk.core.store import ContentStore
from news_desk.sources.base import SleepFunc, SourceAdapter
from news_desk.sources.registry import register
from news_desk.sources.web.browser import BrowserFactory, BrowserSession, chromium_session
from news_desk.sources.web.config import (
    CARD_SELECTOR,
    DETAIL_SETTLE_SECONDS,
    HTML_EXCERPT_LENGTH,
    LISTING_SETTLE_SECONDS,
    OPENAI_BLOG,
    SiteConfig,
)
from news_desk.sources.web.selectors import (
    extract_body,
    extract_category,
    extract_published_at,
    extract_title,
    extract_url,
    make_description,
)

logger = logging.getLogger(__name__)


@register
class WebBlogCollector(SourceAdapter):
    """Crawls the OpenAI blog listing and its article pages.

    Args:
        store: Dedup contract.
        settings: Application settings (item cap, delays, timeouts).
        sleep: Delay function for settle pauses and per-card spacing.
        browser_factory: Returns an async context manager yielding a
            browser session.  Defaults to headless Chromium.
        site: Listing URL, origin and source identity of the blog.
    """

    adapter_name = "openai_blog"
    source_kind = SourceKind.OFFICIAL

    def __init__(
        self,
        store: ContentStore,
        settings: Settings | None = None,
        sleep: SleepFunc = asyncio.sleep,
        browser_factory: BrowserFactory = chromium_session,
        site: SiteConfig = OPENAI_BLOG,
    ) -> None:
        super().__init__(store, settings=settings, sleep=sleep)
        self._browser_factory = browser_factory
        self.site = site
        self.max_items = self.settings.web_max_articles
        self.item_delay = self.settings.web_item_delay_seconds
        self.timeout_ms = self.settings.page_load_timeout_seconds * 1000

    async def fetch(self) -> list[ContentRecord]:
        """Crawl the listing and return records for unseen articles.

        Raises:
            SourceUnavailableError: The browser could not be launched or the
                listing page could not be loaded.
        """
        logger.info("web: crawl started for %s", self.site.listing_url)
        try:
            async with self._browser_factory() as session:
                listing_html = await self._load_listing(session)
                records = await self._process_listing(session, listing_html)
        except SourceError:
            raise
        except Exception as exc:
            raise SourceUnavailableError(
                f"browser session failed for {self.site.listing_url}: {exc}",
                adapter=self.adapter_name,
                kind=self.source_kind.value,
            ) from exc

        logger.info("web: crawl finished, %d new articles", len(records))
        return records

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def _load_listing(self, session: BrowserSession) -> str:
        page = await session.new_page()
        try:
            await page.goto(
                self.site.listing_url, timeout=self.timeout_ms, wait_until="networkidle"
            )
            await self._sleep(LISTING_SETTLE_SECONDS)
            return await page.content()
        except Exception as exc:
            raise SourceUnavailableError(
                f"listing navigation failed for {self.site.listing_url}: {exc}",
                adapter=self.adapter_name,
                kind=self.source_kind.value,
            ) from exc
        finally:
            await page.close()

    async def _process_listing(
        self, session: BrowserSession, listing_html: str
    ) -> list[ContentRecord]:
        soup = BeautifulSoup(listing_html, "html.parser")
        cards = soup.select(CARD_SELECTOR)
        logger.info("web: %d cards found on listing", len(cards))
        if not cards:
            logger.warning(
                "web: no article cards found; listing excerpt: %s",
                listing_html[:HTML_EXCERPT_LENGTH],
            )
            return []

        records: list[ContentRecord] = []
        seen_urls: set[str] = set()
        for index, card in enumerate(cards[: self.max_items]):
            try:
                record = await self._process_card(session, card, seen_urls)
            except Exception as exc:  # noqa: BLE001
                logger.error("web: card %d failed: %s", index, exc, exc_info=True)
                continue
            if record is None:
                continue
            records.append(record)
            logger.info(
                "web: article added (%d/%d): %s", len(records), self.max_items, record.title
            )
            await self._sleep(self.item_delay)
        return records

    async def _process_card(
        self, session: BrowserSession, card: Tag, seen_urls: set[str]
    ) -> ContentRecord | None:
        title = extract_title(card)
        if title is None:
            logger.debug("web: card without title skipped")
            return None

        url = extract_url(card, self.site.origin)
        if url is None:
            logger.debug("web: card without link skipped: %s", title)
            return None

        if url in seen_urls or await self.store.exists_by_url(url):
            logger.debug("web: already stored, skipped: %s", url)
            return None
        seen_urls.add(url)

        return await self._extract_detail(session, url, title)

    # ------------------------------------------------------------------
    # Detail page
    # ------------------------------------------------------------------

    async def _extract_detail(
        self, session: BrowserSession, url: str, title: str
    ) -> ContentRecord | None:
        page = await session.new_page()
        try:
            await page.goto(url, timeout=self.timeout_ms, wait_until="networkidle")
            await self._sleep(DETAIL_SETTLE_SECONDS)
            html = await page.content()
        finally:
            await page.close()

        soup = BeautifulSoup(html, "html.parser")
        body = extract_body(soup)
        if body is None:
            logger.warning("web: no body text, skipped: %s", url)
            return None

        now = datetime.now(timezone.utc)
        try:
            return ContentRecord(
                title=title,
                description=make_description(body),
                body=body,
                url=url,
                source_name=self.site.source_name,
                source_kind=self.source_kind,
                category=extract_category(soup) or self.site.default_category,
                published_at=extract_published_at(soup) or now,
                discovered_at=now,
            )
        except ValidationError as exc:
            raise ExtractionError(f"invalid record: {exc}", url=url) from exc
