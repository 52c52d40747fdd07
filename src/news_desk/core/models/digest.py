"""Digest table."""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from news_desk.core.models.base import Base, CreatedAtMixin


class DigestRow(CreatedAtMixin, Base):
    """One generated AI news digest."""

    __tablename__ = "digests"

    id: Mapped[int] = mapped_column(sa.BigInteger, primary_key=True, autoincrement=True)
    period_start: Mapped[datetime] = mapped_column(nullable=False)
    period_end: Mapped[datetime] = mapped_column(nullable=False)
    title: Mapped[str] = mapped_column(sa.String(500), nullable=False)
    highlights: Mapped[str] = mapped_column(sa.Text, nullable=False, server_default="")
    body: Mapped[str] = mapped_column(sa.Text, nullable=False)
    related_count: Mapped[int] = mapped_column(nullable=False, server_default="0")
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, server_default="DRAFT", index=True
    )
    generated_at: Mapped[datetime] = mapped_column(nullable=False)
