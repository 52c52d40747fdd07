"""Canonical content record emitted by every source adapter.

A record is either complete and valid or it is never constructed: the
validators below reject an empty or over-long title, so adapters wrap
construction in ``try/except ValidationError`` and drop the item.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TITLE_MAX_LENGTH = 500


class SourceKind(str, enum.Enum):
    """Provenance trust tier of a source.  Immutable once a record exists."""

    OFFICIAL = "OFFICIAL"
    PROFESSIONAL = "PROFESSIONAL"
    GENERAL = "GENERAL"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentRecord(BaseModel):
    """One article or video discovered by the pipeline.

    Attributes:
        id: Server-assigned identifier; ``None`` until persisted.
        title: Non-empty headline, at most 500 characters.
        description: Short synopsis.
        body: Full text (article body or video description plus stats).
        url: Canonical source URL.  Globally unique; the only dedup key.
        source_name: Human-readable origin, e.g. ``"OpenAI YouTube"``.
        source_kind: Provenance trust tier.
        category: Free-text classification.
        thumbnail_url: Preview image URL.
        published_at: Origin-reported timestamp; defaults to discovery time.
        discovered_at: When the pipeline found the record.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    title: str
    description: Optional[str] = None
    body: Optional[str] = None
    url: str = Field(min_length=1)
    source_name: str
    source_kind: SourceKind
    category: Optional[str] = None
    thumbnail_url: Optional[str] = None
    discovered_at: datetime = Field(default_factory=_utcnow)
    published_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        if len(value) > TITLE_MAX_LENGTH:
            raise ValueError(f"title exceeds {TITLE_MAX_LENGTH} characters")
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_published_at(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("published_at") is None:
            data = dict(data)
            if data.get("discovered_at") is None:
                data["discovered_at"] = _utcnow()
            data["published_at"] = data["discovered_at"]
        return data
