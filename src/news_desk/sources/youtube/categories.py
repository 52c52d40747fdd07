"""Keyword-based category assignment for video records."""

from __future__ import annotations

from news_desk.sources.youtube.config import CATEGORY_RULES, DEFAULT_CATEGORY


def categorize(title: str | None, description: str | None) -> str:
    """Return the first category whose keywords occur in title or description.

    Matching is a case-insensitive substring test over the concatenated
    text, applied in the order of :data:`CATEGORY_RULES`.
    """
    combined = f"{title or ''} {description or ''}".lower()
    for category, keywords in CATEGORY_RULES:
        if any(keyword in combined for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
