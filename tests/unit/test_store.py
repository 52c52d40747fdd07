"""Unit tests for the SQLAlchemy stores.

No database is used: the session factory yields a mock session that
captures the executed statements, which are compiled against the
PostgreSQL dialect to check the generated SQL.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from news_desk.core.schemas.digest import DigestStatus
from news_desk.core.store import ContentStore, DigestStore, SqlContentStore, SqlDigestStore

from tests.factories import ContentRecordFactory, DigestRecordFactory
from tests.fakes import InMemoryContentStore, InMemoryDigestStore


def _session_factory(session: MagicMock):
    @asynccontextmanager
    async def factory():
        yield session

    return factory


def _compile(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.scalar = AsyncMock(return_value=True)
    return session


class TestProtocols:
    def test_fakes_satisfy_contracts(self) -> None:
        assert isinstance(InMemoryContentStore(), ContentStore)
        assert isinstance(InMemoryDigestStore(), DigestStore)

    def test_sql_stores_satisfy_contracts(self, session) -> None:
        factory = _session_factory(session)
        assert isinstance(SqlContentStore(factory), ContentStore)
        assert isinstance(SqlDigestStore(factory), DigestStore)


class TestSqlContentStore:
    @pytest.mark.asyncio
    async def test_insert_all_skips_conflicting_urls(self, session) -> None:
        result = MagicMock()
        result.scalars.return_value.all.return_value = [11, 12]
        session.execute.return_value = result
        store = SqlContentStore(_session_factory(session))

        ids = await store.insert_all(ContentRecordFactory.build_batch(2))

        assert ids == [11, 12]
        sql = _compile(session.execute.await_args.args[0])
        assert "INSERT INTO content_records" in sql
        assert "ON CONFLICT (url) DO NOTHING" in sql
        assert "RETURNING content_records.id" in sql
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_same_url_in_batch_collapsed(self, session) -> None:
        result = MagicMock()
        result.scalars.return_value.all.return_value = [1]
        session.execute.return_value = result
        first = ContentRecordFactory.build()
        twin = ContentRecordFactory.build(url=first.url)
        store = SqlContentStore(_session_factory(session))

        await store.insert_all([first, twin])

        params = session.execute.await_args.args[0].compile(dialect=postgresql.dialect()).params
        assert sum(1 for key in params if key.startswith("url")) == 1

    @pytest.mark.asyncio
    async def test_empty_batch_skips_database(self, session) -> None:
        store = SqlContentStore(_session_factory(session))

        assert await store.insert_all([]) == []
        session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insert_one_returns_none_on_conflict(self, session) -> None:
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        session.execute.return_value = result
        store = SqlContentStore(_session_factory(session))

        assert await store.insert_one(ContentRecordFactory.build()) is None

    @pytest.mark.asyncio
    async def test_exists_by_url(self, session) -> None:
        store = SqlContentStore(_session_factory(session))

        assert await store.exists_by_url("https://openai.com/index/x/") is True
        sql = _compile(session.scalar.await_args.args[0])
        assert "EXISTS" in sql
        assert "content_records.url" in sql


class TestSqlDigestStore:
    @pytest.mark.asyncio
    async def test_update_status_statement(self, session) -> None:
        store = SqlDigestStore(_session_factory(session))

        await store.update_status(3, DigestStatus.PUBLISHED)

        stmt = session.execute.await_args.args[0]
        sql = _compile(stmt)
        assert sql.startswith("UPDATE digests SET status=")
        assert "PUBLISHED" in stmt.compile(dialect=postgresql.dialect()).params.values()
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, session) -> None:
        session.get = AsyncMock(return_value=None)
        store = SqlDigestStore(_session_factory(session))

        assert await store.get(1) is None

    @pytest.mark.asyncio
    async def test_insert_one_returns_row_id(self, session) -> None:
        added = []

        def _add(row) -> None:
            row.id = 21
            added.append(row)

        session.add = _add
        store = SqlDigestStore(_session_factory(session))
        end = datetime.now(timezone.utc)

        digest_id = await store.insert_one(
            DigestRecordFactory.build(period_start=end - timedelta(hours=1), period_end=end)
        )

        assert digest_id == 21
        assert added[0].status == "DRAFT"
