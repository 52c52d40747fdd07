"""Ordered extraction strategies over parsed HTML.

Each strategy is a pure function ``Tag -> str | None``; :func:`first_match`
applies a chain of them and returns the first non-``None`` result.  The
chains are assembled once at import time from the selector tuples in
:mod:`news_desk.sources.web.config`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urljoin

from bs4 import Tag

from news_desk.sources.web.config import (
    BODY_SELECTORS,
    CATEGORY_SELECTORS,
    DESCRIPTION_LENGTH,
    LINK_SELECTORS,
    MIN_BODY_LENGTH,
    PUBLISHED_META_PROPERTY,
    SECTION_META_PROPERTY,
    TITLE_SELECTORS,
)

Strategy = Callable[[Tag], Optional[str]]


def first_match(root: Tag, strategies: Iterable[Strategy]) -> str | None:
    """Return the first non-``None`` strategy result for *root*."""
    for strategy in strategies:
        value = strategy(root)
        if value is not None:
            return value
    return None


# ---------------------------------------------------------------------------
# Strategy builders
# ---------------------------------------------------------------------------


def text_of(selector: str, min_length: int = 0) -> Strategy:
    """Stripped text of the first element matching *selector*.

    Returns ``None`` when nothing matches or the text is not longer than
    *min_length* (empty text never qualifies).
    """

    def strategy(root: Tag) -> str | None:
        element = root.select_one(selector)
        if element is None:
            return None
        text = element.get_text(" ", strip=True)
        if not text or len(text) <= min_length:
            return None
        return text

    strategy.__name__ = f"text_of({selector!r})"
    return strategy


def attr_of(selector: str, attribute: str, reject: frozenset[str] = frozenset()) -> Strategy:
    """Stripped *attribute* of the first element matching *selector*."""

    def strategy(root: Tag) -> str | None:
        element = root.select_one(selector)
        if element is None:
            return None
        value = element.get(attribute)
        if isinstance(value, list):
            value = " ".join(value)
        if value is None:
            return None
        value = value.strip()
        if not value or value in reject:
            return None
        return value

    strategy.__name__ = f"attr_of({selector!r}, {attribute!r})"
    return strategy


def meta_property(prop: str) -> Strategy:
    """``content`` of ``<meta property=prop>``."""
    return attr_of(f"meta[property='{prop}']", "content")


# ---------------------------------------------------------------------------
# Chains
# ---------------------------------------------------------------------------

TITLE_STRATEGIES: tuple[Strategy, ...] = tuple(text_of(s) for s in TITLE_SELECTORS)

LINK_STRATEGIES: tuple[Strategy, ...] = tuple(
    attr_of(s, "href", reject=frozenset({"#"})) for s in LINK_SELECTORS
)

BODY_STRATEGIES: tuple[Strategy, ...] = tuple(
    text_of(s, min_length=MIN_BODY_LENGTH) for s in BODY_SELECTORS
)

PUBLISHED_STRATEGIES: tuple[Strategy, ...] = (
    attr_of("time[datetime]", "datetime"),
    meta_property(PUBLISHED_META_PROPERTY),
)

CATEGORY_STRATEGIES: tuple[Strategy, ...] = tuple(
    text_of(s) for s in CATEGORY_SELECTORS
) + (meta_property(SECTION_META_PROPERTY),)


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------


def extract_title(card: Tag) -> str | None:
    return first_match(card, TITLE_STRATEGIES)


def extract_url(card: Tag, origin: str) -> str | None:
    """Absolute article URL from a listing card, resolved against *origin*."""
    href = first_match(card, LINK_STRATEGIES)
    if href is None:
        return None
    return urljoin(origin + "/", href)


def extract_body(page: Tag) -> str | None:
    """Main text of a detail page.

    Falls back to the whole ``<body>`` (or the document) text when no
    content container holds enough text.  Returns ``None`` only for an
    empty page.
    """
    body = first_match(page, BODY_STRATEGIES)
    if body is not None:
        return body
    container = page.find("body") or page
    text = container.get_text(" ", strip=True)
    return text or None


def make_description(body: str) -> str:
    if len(body) > DESCRIPTION_LENGTH:
        return body[:DESCRIPTION_LENGTH] + "..."
    return body


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def extract_published_at(page: Tag) -> datetime | None:
    """First parseable timestamp from the published-time chain, else ``None``."""
    for strategy in PUBLISHED_STRATEGIES:
        raw = strategy(page)
        if raw is None:
            continue
        parsed = parse_timestamp(raw)
        if parsed is not None:
            return parsed
    return None


def extract_category(page: Tag) -> str | None:
    return first_match(page, CATEGORY_STRATEGIES)
