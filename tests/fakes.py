"""In-memory test doubles for the stores, the delay function and the browser."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from news_desk.core.schemas.content import ContentRecord
from news_desk.core.schemas.digest import DigestRecord, DigestStatus


class InMemoryContentStore:
    """ContentStore backed by a dict keyed on URL."""

    def __init__(self, records: Sequence[ContentRecord] = ()) -> None:
        self.rows: dict[str, ContentRecord] = {}
        self._next_id = 1
        self.exists_calls: list[str] = []
        for record in records:
            self._store(record)

    def _store(self, record: ContentRecord) -> int:
        record_id = self._next_id
        self._next_id += 1
        self.rows[record.url] = record.model_copy(update={"id": record_id})
        return record_id

    async def exists_by_url(self, url: str) -> bool:
        self.exists_calls.append(url)
        return url in self.rows

    async def insert_one(self, record: ContentRecord) -> Optional[int]:
        ids = await self.insert_all([record])
        return ids[0] if ids else None

    async def insert_all(self, records: Sequence[ContentRecord]) -> list[int]:
        inserted: list[int] = []
        for record in records:
            if record.url in self.rows:
                continue
            inserted.append(self._store(record))
        return inserted

    async def list_discovered_between(
        self, start: datetime, end: datetime, limit: int = 50
    ) -> list[ContentRecord]:
        matching = [r for r in self.rows.values() if start <= r.discovered_at < end]
        matching.sort(key=lambda r: r.discovered_at, reverse=True)
        return matching[:limit]


class InMemoryDigestStore:
    """DigestStore backed by a dict keyed on id."""

    def __init__(self) -> None:
        self.rows: dict[int, DigestRecord] = {}
        self._next_id = 1
        self.status_updates: list[tuple[int, DigestStatus]] = []

    async def insert_one(self, digest: DigestRecord) -> int:
        digest_id = self._next_id
        self._next_id += 1
        self.rows[digest_id] = digest.model_copy(update={"id": digest_id})
        return digest_id

    async def get(self, digest_id: int) -> Optional[DigestRecord]:
        return self.rows.get(digest_id)

    async def update_status(self, digest_id: int, status: DigestStatus) -> None:
        self.status_updates.append((digest_id, status))
        self.rows[digest_id] = self.rows[digest_id].model_copy(update={"status": status})


class SleepRecorder:
    """Async stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakePage:
    """Page double serving canned HTML by URL."""

    def __init__(self, browser: FakeBrowser) -> None:
        self._browser = browser
        self._url: Optional[str] = None

    async def goto(self, url: str, *, timeout: float, wait_until: str) -> None:
        self._browser.visited.append(url)
        if url in self._browser.failing_urls:
            raise TimeoutError(f"Timeout {timeout}ms exceeded navigating to {url}")
        self._url = url

    async def content(self) -> str:
        return self._browser.pages.get(self._url or "", "<html><body></body></html>")

    async def close(self) -> None:
        self._browser.open_pages -= 1


class FakeBrowser:
    """Browser factory double that counts open sessions and pages.

    Usage::

        browser = FakeBrowser(pages={"https://openai.com/blog": listing_html})
        collector = WebBlogCollector(store, browser_factory=browser.session)
        ...
        assert browser.open_sessions == 0
    """

    def __init__(
        self,
        pages: Optional[dict[str, str]] = None,
        failing_urls: Sequence[str] = (),
        fail_launch: bool = False,
    ) -> None:
        self.pages = dict(pages or {})
        self.failing_urls = set(failing_urls)
        self.fail_launch = fail_launch
        self.open_sessions = 0
        self.open_pages = 0
        self.sessions_started = 0
        self.visited: list[str] = []

    async def new_page(self) -> FakePage:
        self.open_pages += 1
        return FakePage(self)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[FakeBrowser]:
        if self.fail_launch:
            raise RuntimeError("Executable doesn't exist at /ms-playwright/chromium")
        self.sessions_started += 1
        self.open_sessions += 1
        try:
            yield self
        finally:
            self.open_sessions -= 1
