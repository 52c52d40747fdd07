"""Prompt builders for the two digest flavours."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from news_desk.core.schemas.content import ContentRecord
from news_desk.summarization.config import DAILY_PROMPT_TEMPLATE, WINDOW_PROMPT_TEMPLATE


def build_daily_prompt(today: date) -> str:
    """Date-stamped prompt that asks for today's AI news without source records."""
    return DAILY_PROMPT_TEMPLATE.format(today=today.isoformat())


def build_window_prompt(records: Sequence[ContentRecord]) -> str:
    """Prompt listing each record as ``n. title`` followed by its description.

    Raises:
        ValueError: If *records* is empty.
    """
    if not records:
        raise ValueError("cannot build a digest prompt from an empty record list")
    items = "".join(
        f"{n}. {record.title}\n{record.description or ''}\n\n"
        for n, record in enumerate(records, start=1)
    )
    return WINDOW_PROMPT_TEMPLATE.format(articles=items.rstrip())
