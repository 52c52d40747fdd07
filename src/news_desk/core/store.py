"""Persistence contracts consumed by the pipeline and their SQL implementations.

The pipeline never builds queries itself.  It talks to two narrow
interfaces:

- :class:`ContentStore`: "insert if not already present by URL", plus a
  window query used to build source-backed digests.
- :class:`DigestStore`: "persist digest, return assigned id", plus the
  lookups needed to publish it.

``SqlContentStore`` / ``SqlDigestStore`` implement them on top of the
async session factory from :mod:`news_desk.core.database`.  Tests use
in-memory fakes that satisfy the same protocols.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from news_desk.core.models.content import ContentRow
from news_desk.core.models.digest import DigestRow
from news_desk.core.schemas.content import ContentRecord, SourceKind
from news_desk.core.schemas.digest import DigestRecord, DigestStatus

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


@runtime_checkable
class ContentStore(Protocol):
    """Deduplicating store for content records, keyed by URL."""

    async def exists_by_url(self, url: str) -> bool:
        """Return True if a record with this URL is already stored."""
        ...

    async def insert_one(self, record: ContentRecord) -> Optional[int]:
        """Insert *record* unless its URL exists.  Returns the new id or None."""
        ...

    async def insert_all(self, records: Sequence[ContentRecord]) -> list[int]:
        """Insert every record whose URL is not yet stored.

        Returns:
            Ids of the rows actually inserted.  Conflicting URLs are skipped
            silently and never overwritten.
        """
        ...

    async def list_discovered_between(
        self, start: datetime, end: datetime, limit: int = 50
    ) -> list[ContentRecord]:
        """Return records discovered in ``[start, end)``, newest first."""
        ...


@runtime_checkable
class DigestStore(Protocol):
    """Store for generated digests."""

    async def insert_one(self, digest: DigestRecord) -> int:
        """Persist *digest* and return its assigned id."""
        ...

    async def get(self, digest_id: int) -> Optional[DigestRecord]:
        """Return the digest with this id, or None."""
        ...

    async def update_status(self, digest_id: int, status: DigestStatus) -> None:
        """Overwrite the stored status.  Transition rules live in the service."""
        ...


# ---------------------------------------------------------------------------
# Row <-> value object mapping
# ---------------------------------------------------------------------------


def _content_values(record: ContentRecord) -> dict:
    return {
        "title": record.title,
        "description": record.description,
        "body": record.body,
        "url": record.url,
        "source_name": record.source_name,
        "source_kind": record.source_kind.value,
        "category": record.category,
        "thumbnail_url": record.thumbnail_url,
        "published_at": record.published_at,
        "discovered_at": record.discovered_at,
    }


def _content_from_row(row: ContentRow) -> ContentRecord:
    return ContentRecord(
        id=row.id,
        title=row.title,
        description=row.description,
        body=row.body,
        url=row.url,
        source_name=row.source_name,
        source_kind=SourceKind(row.source_kind),
        category=row.category,
        thumbnail_url=row.thumbnail_url,
        published_at=row.published_at,
        discovered_at=row.discovered_at,
    )


def _digest_from_row(row: DigestRow) -> DigestRecord:
    return DigestRecord(
        id=row.id,
        period_start=row.period_start,
        period_end=row.period_end,
        title=row.title,
        highlights=row.highlights,
        body=row.body,
        related_count=row.related_count,
        status=DigestStatus(row.status),
        generated_at=row.generated_at,
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# SQLAlchemy implementations
# ---------------------------------------------------------------------------


class SqlContentStore:
    """PostgreSQL-backed :class:`ContentStore`.

    Args:
        session_factory: Async session factory, normally
            ``news_desk.core.database.AsyncSessionLocal``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def exists_by_url(self, url: str) -> bool:
        stmt = sa.select(sa.exists().where(ContentRow.url == url))
        async with self._session_factory() as session:
            return bool(await session.scalar(stmt))

    async def insert_one(self, record: ContentRecord) -> Optional[int]:
        ids = await self.insert_all([record])
        return ids[0] if ids else None

    async def insert_all(self, records: Sequence[ContentRecord]) -> list[int]:
        # Collapse same-URL records within the batch; first occurrence wins.
        unique: dict[str, ContentRecord] = {}
        for record in records:
            unique.setdefault(record.url, record)
        if not unique:
            return []

        stmt = (
            pg_insert(ContentRow)
            .values([_content_values(r) for r in unique.values()])
            .on_conflict_do_nothing(index_elements=["url"])
            .returning(ContentRow.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            inserted = list(result.scalars().all())
            await session.commit()

        logger.debug(
            "content_store: %d offered, %d inserted", len(records), len(inserted)
        )
        return inserted

    async def list_discovered_between(
        self, start: datetime, end: datetime, limit: int = 50
    ) -> list[ContentRecord]:
        stmt = (
            sa.select(ContentRow)
            .where(ContentRow.discovered_at >= start, ContentRow.discovered_at < end)
            .order_by(ContentRow.discovered_at.desc())
            .limit(limit)
        )
        async with self._session_factory() as session:
            rows = (await session.scalars(stmt)).all()
        return [_content_from_row(row) for row in rows]


class SqlDigestStore:
    """PostgreSQL-backed :class:`DigestStore`."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert_one(self, digest: DigestRecord) -> int:
        row = DigestRow(
            period_start=digest.period_start,
            period_end=digest.period_end,
            title=digest.title,
            highlights=digest.highlights,
            body=digest.body,
            related_count=digest.related_count,
            status=digest.status.value,
            generated_at=digest.generated_at,
            created_at=digest.created_at,
        )
        async with self._session_factory() as session:
            session.add(row)
            await session.commit()
            return row.id

    async def get(self, digest_id: int) -> Optional[DigestRecord]:
        async with self._session_factory() as session:
            row = await session.get(DigestRow, digest_id)
        return _digest_from_row(row) if row is not None else None

    async def update_status(self, digest_id: int, status: DigestStatus) -> None:
        stmt = (
            sa.update(DigestRow)
            .where(DigestRow.id == digest_id)
            .values(status=status.value)
        )
        async with self._session_factory() as session:
            await session.execute(stmt)
            await session.commit()
