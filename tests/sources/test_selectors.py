"""Tests for the ordered extraction strategies used by the blog crawler."""

from __future__ import annotations

from datetime import datetime, timezone

from bs4 import BeautifulSoup

from news_desk.sources.web.selectors import (
    attr_of,
    extract_body,
    extract_category,
    extract_published_at,
    extract_title,
    extract_url,
    first_match,
    make_description,
    parse_timestamp,
    text_of,
)

ORIGIN = "https://openai.com"
LONG_TEXT = "Reasoning models keep improving on hard benchmarks. " * 4


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _card(html: str):
    return _soup(html).select_one("article")


class TestFirstMatch:
    def test_returns_first_non_none(self) -> None:
        root = _soup("<p class='b'>second</p><p class='a'>first</p>")
        assert first_match(root, [text_of(".missing"), text_of(".a"), text_of(".b")]) == "first"

    def test_returns_none_when_all_fail(self) -> None:
        assert first_match(_soup("<p></p>"), [text_of("h1"), attr_of("a", "href")]) is None

    def test_empty_element_does_not_match(self) -> None:
        root = _soup("<h2>  </h2><h3>Fallback</h3>")
        assert first_match(root, [text_of("h2"), text_of("h3")]) == "Fallback"


class TestCardTitle:
    def test_h2_wins_over_title_class(self) -> None:
        card = _card(
            "<article><span class='title'>Label</span><h2>Heading</h2></article>"
        )
        assert extract_title(card) == "Heading"

    def test_falls_back_through_chain(self) -> None:
        card = _card("<article><div class='card-title'>Partial class</div></article>")
        assert extract_title(card) == "Partial class"

    def test_link_text_is_last_resort(self) -> None:
        card = _card("<article><a href='/x'>Link text</a></article>")
        assert extract_title(card) == "Link text"

    def test_no_title(self) -> None:
        assert extract_title(_card("<article><img src='x.png'></article>")) is None


class TestCardUrl:
    def test_relative_href_resolved_against_origin(self) -> None:
        card = _card("<article><a href='/index/new-model/'>x</a></article>")
        assert extract_url(card, ORIGIN) == "https://openai.com/index/new-model/"

    def test_absolute_href_kept(self) -> None:
        card = _card("<article><a href='https://cdn.openai.com/post'>x</a></article>")
        assert extract_url(card, ORIGIN) == "https://cdn.openai.com/post"

    def test_hash_href_rejected(self) -> None:
        card = _card("<article><a href='#'>x</a></article>")
        assert extract_url(card, ORIGIN) is None

    def test_missing_link(self) -> None:
        assert extract_url(_card("<article><h2>t</h2></article>"), ORIGIN) is None


class TestBody:
    def test_article_container_preferred(self) -> None:
        page = _soup(f"<body><nav>Menu</nav><article>{LONG_TEXT}</article></body>")
        assert extract_body(page) == LONG_TEXT.strip()

    def test_short_container_skipped_for_next_selector(self) -> None:
        page = _soup(f"<body><article>Too short</article><main>{LONG_TEXT}</main></body>")
        assert extract_body(page) == LONG_TEXT.strip()

    def test_falls_back_to_whole_body(self) -> None:
        page = _soup("<html><body><div>Only a little text</div></body></html>")
        assert extract_body(page) == "Only a little text"

    def test_empty_page(self) -> None:
        assert extract_body(_soup("<html><body>  </body></html>")) is None


class TestDescription:
    def test_short_body_unchanged(self) -> None:
        assert make_description("short") == "short"

    def test_long_body_truncated_with_ellipsis(self) -> None:
        description = make_description("x" * 600)
        assert description == "x" * 500 + "..."


class TestPublishedAt:
    def test_time_element_preferred(self) -> None:
        page = _soup(
            "<meta property='article:published_time' content='2026-01-01T00:00:00Z'>"
            "<time datetime='2026-10-14T16:30:00+00:00'>Oct 14</time>"
        )
        assert extract_published_at(page) == datetime(2026, 10, 14, 16, 30, tzinfo=timezone.utc)

    def test_meta_fallback(self) -> None:
        page = _soup("<meta property='article:published_time' content='2026-10-15T09:00:00Z'>")
        assert extract_published_at(page) == datetime(2026, 10, 15, 9, 0, tzinfo=timezone.utc)

    def test_unparseable_time_falls_through_to_meta(self) -> None:
        page = _soup(
            "<time datetime='last week'></time>"
            "<meta property='article:published_time' content='2026-10-15T09:00:00Z'>"
        )
        assert extract_published_at(page).day == 15

    def test_none_when_absent(self) -> None:
        assert extract_published_at(_soup("<p>x</p>")) is None

    def test_naive_timestamp_taken_as_utc(self) -> None:
        assert parse_timestamp("2026-10-14T08:00:00").tzinfo is timezone.utc


class TestCategory:
    def test_category_class(self) -> None:
        page = _soup("<span class='category'>Research</span><span class='tag'>Safety</span>")
        assert extract_category(page) == "Research"

    def test_meta_section_fallback(self) -> None:
        page = _soup("<meta property='article:section' content='Product'>")
        assert extract_category(page) == "Product"

    def test_none_when_absent(self) -> None:
        assert extract_category(_soup("<p>x</p>")) is None
