"""Configuration constants for the web blog extraction engine.

Selector chains are ordered: the first selector that yields usable text
wins.  Site-specific values live in :class:`SiteConfig` so another blog
can be added by declaring a new instance and a collector subclass.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Browser session
# ---------------------------------------------------------------------------

CHROMIUM_ARGS: list[str] = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--no-sandbox",
]
"""Launch flags passed to headless Chromium."""

DESKTOP_USER_AGENT: str = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

VIEWPORT: dict[str, int] = {"width": 1920, "height": 1080}

LISTING_SETTLE_SECONDS: float = 3.0
"""Pause after the listing page reaches network-idle, for late JS rendering."""

DETAIL_SETTLE_SECONDS: float = 2.0
"""Pause after each detail page reaches network-idle."""

# ---------------------------------------------------------------------------
# Extraction thresholds
# ---------------------------------------------------------------------------

MIN_BODY_LENGTH: int = 100
"""A content container must hold more than this many characters to count."""

DESCRIPTION_LENGTH: int = 500
"""Description is the body truncated to this many characters plus ``...``."""

HTML_EXCERPT_LENGTH: int = 1000
"""Characters of listing HTML logged when no cards are found."""

# ---------------------------------------------------------------------------
# Selector chains
# ---------------------------------------------------------------------------

CARD_SELECTOR: str = "article, [class*='blog-post'], [class*='post-card']"

TITLE_SELECTORS: tuple[str, ...] = ("h2", "h3", ".title", "[class*='title']", "a")

LINK_SELECTORS: tuple[str, ...] = ("a[href]", "[href]")

BODY_SELECTORS: tuple[str, ...] = (
    "article",
    "[class*='article-content']",
    "[class*='post-content']",
    "main",
    "[role='main']",
)

CATEGORY_SELECTORS: tuple[str, ...] = (".category", ".tag", "[class*='category']")

PUBLISHED_META_PROPERTY: str = "article:published_time"
SECTION_META_PROPERTY: str = "article:section"


# ---------------------------------------------------------------------------
# Sites
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SiteConfig:
    """Identity and defaults of one crawled blog."""

    listing_url: str
    origin: str
    source_name: str
    default_category: str


OPENAI_BLOG = SiteConfig(
    listing_url="https://openai.com/blog",
    origin="https://openai.com",
    source_name="OpenAI Blog",
    default_category="AI Development",
)
