"""Async bodies of the scheduled tasks.

Kept separate from ``tasks.py`` so the Celery wrappers stay thin and the
async logic can be tested without a broker.  Each ``*_job`` coroutine
builds its collaborators from settings, runs, and disposes the engine
pool before the caller's ``asyncio.run()`` loop closes.
"""

from __future__ import annotations

import logging
from typing import Any

from news_desk.config.settings import get_settings
from news_desk.core.store import ContentStore
from news_desk.sources.base import SourceAdapter
from news_desk.summarization.service import DigestService

logger = logging.getLogger(__name__)


async def run_ingestion(adapter: SourceAdapter, store: ContentStore) -> dict[str, Any]:
    """Fetch from one adapter and persist everything new in one batch.

    Returns:
        ``{"adapter", "fetched", "inserted", "duplicates"}``.  Duplicates
        are records whose URL was stored by someone else between the
        adapter's existence check and the insert.

    Raises:
        SourceError: Propagated from ``adapter.fetch()``.
    """
    records = await adapter.fetch()
    inserted_ids = await store.insert_all(records) if records else []
    result = {
        "adapter": adapter.get_adapter_name(),
        "fetched": len(records),
        "inserted": len(inserted_ids),
        "duplicates": len(records) - len(inserted_ids),
    }
    logger.info(
        "ingestion: adapter=%s fetched=%d inserted=%d duplicates=%d",
        result["adapter"],
        result["fetched"],
        result["inserted"],
        result["duplicates"],
    )
    return result


async def ingest_job(adapter_name: str) -> dict[str, Any]:
    """Resolve *adapter_name*, run it against the SQL store and persist."""
    from news_desk.core.database import AsyncSessionLocal, dispose_engine  # noqa: PLC0415
    from news_desk.core.store import SqlContentStore  # noqa: PLC0415
    from news_desk.sources.registry import autodiscover, get_adapter  # noqa: PLC0415

    autodiscover()
    adapter_cls = get_adapter(adapter_name)
    try:
        store = SqlContentStore(AsyncSessionLocal)
        adapter = adapter_cls(store, settings=get_settings())
        return await run_ingestion(adapter, store)
    finally:
        await dispose_engine()


def build_digest_service() -> DigestService:
    """Wire a :class:`DigestService` to the SQL stores and Gemini."""
    from news_desk.core.database import AsyncSessionLocal  # noqa: PLC0415
    from news_desk.core.store import SqlContentStore, SqlDigestStore  # noqa: PLC0415
    from news_desk.summarization._gemini import GeminiClient  # noqa: PLC0415

    settings = get_settings()
    return DigestService(
        content_store=SqlContentStore(AsyncSessionLocal),
        digest_store=SqlDigestStore(AsyncSessionLocal),
        client=GeminiClient.from_settings(settings),
        timezone=settings.timezone,
    )


async def daily_digest_job(service: DigestService | None = None) -> dict[str, Any]:
    """Generate and store today's published digest.

    Returns:
        ``{"digest_id", "title", "digest_status"}``.

    Raises:
        GenerationError: The generative call failed; nothing was stored.
    """
    from news_desk.core.database import dispose_engine  # noqa: PLC0415

    try:
        digest = await (service or build_digest_service()).generate_daily_digest()
    finally:
        await dispose_engine()
    return {
        "digest_id": digest.id,
        "title": digest.title,
        "digest_status": digest.status.value,
    }
