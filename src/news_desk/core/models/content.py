"""Content record table.

``url`` carries the unique index that backs deduplication: inserts use
``ON CONFLICT (url) DO NOTHING`` so two concurrent ingestion runs can
never both store the same URL.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from news_desk.core.models.base import Base, CreatedAtMixin


class ContentRow(CreatedAtMixin, Base):
    """One stored article or video.

    Columns mirror :class:`news_desk.core.schemas.content.ContentRecord`.
    """

    __tablename__ = "content_records"

    id: Mapped[int] = mapped_column(sa.BigInteger, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(sa.String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    body: Mapped[Optional[str]] = mapped_column(sa.Text)
    url: Mapped[str] = mapped_column(sa.Text, nullable=False)
    source_name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    source_kind: Mapped[str] = mapped_column(sa.String(20), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(sa.String(100))
    thumbnail_url: Mapped[Optional[str]] = mapped_column(sa.Text)
    published_at: Mapped[datetime] = mapped_column(nullable=False)
    discovered_at: Mapped[datetime] = mapped_column(nullable=False, index=True)

    __table_args__ = (
        sa.UniqueConstraint("url", name="uq_content_records_url"),
    )
