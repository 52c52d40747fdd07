"""SQLAlchemy declarative base shared by the News Desk models."""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Shared declarative base for all News Desk models."""

    type_annotation_map = {
        datetime: TIMESTAMP(timezone=True),
    }


class CreatedAtMixin:
    """Adds a ``created_at`` column filled by the database on INSERT.

    Rows in this schema are written once; there is no ``updated_at``.
    """

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=sa.text("NOW()"),
    )
