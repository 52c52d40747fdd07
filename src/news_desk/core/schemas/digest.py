"""Digest value object and its status lifecycle."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DigestStatus(str, enum.Enum):
    """Publication state of a digest.  Only DRAFT -> PUBLISHED is allowed."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DigestRecord(BaseModel):
    """A generated AI news summary for one wall-clock window.

    Attributes:
        id: Assigned at persistence.
        period_start: Start of the window the digest claims to cover.
        period_end: End of that window.
        title: Parsed headline.
        highlights: Bullet lines joined by newlines.
        body: Parsed main content.
        related_count: Number of stored records the prompt was built from;
            0 for the source-free daily digest.
        status: DRAFT unless the producing job publishes directly.
        generated_at: When the generative API replied.
        created_at: When the record was built.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    period_start: datetime
    period_end: datetime
    title: str
    highlights: str = ""
    body: str
    related_count: int = Field(default=0, ge=0)
    status: DigestStatus = DigestStatus.DRAFT
    generated_at: datetime = Field(default_factory=_utcnow)
    created_at: datetime = Field(default_factory=_utcnow)
