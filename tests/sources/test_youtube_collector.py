"""Tests for the YouTube channel adapter.

Covers:
- search.list + videos.list flow mapped to ContentRecord
- keyword category table
- stats block appended to the body
- quota / auth / server errors per channel
- missing API key or channel table

All HTTP traffic is mocked with respx against recorded fixtures.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest
import respx

from news_desk.config.settings import Settings
from news_desk.core.exceptions import SourceAuthError
from news_desk.core.schemas.content import SourceKind
from news_desk.sources.youtube._client import extract_error_reason
from news_desk.sources.youtube.categories import categorize
from news_desk.sources.youtube.collector import YouTubeChannelCollector
from news_desk.sources.youtube.config import YOUTUBE_API_BASE_URL

from tests.factories import VideoRecordFactory
from tests.fakes import InMemoryContentStore, SleepRecorder

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures" / "api_responses" / "youtube"

SEARCH_URL = f"{YOUTUBE_API_BASE_URL}/search"
VIDEOS_URL = f"{YOUTUBE_API_BASE_URL}/videos"


def _load(name: str) -> dict[str, Any]:
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


def _one_channel_settings(**overrides: Any) -> Settings:
    fields: dict[str, Any] = {
        "youtube_api_key": "test-youtube-key",
        "youtube_channels": {"OpenAI": "UC_openai"},
    }
    fields.update(overrides)
    return Settings(_env_file=None, **fields)


def _collector(
    store: InMemoryContentStore, settings: Settings, sleep: SleepRecorder
) -> YouTubeChannelCollector:
    return YouTubeChannelCollector(store, settings=settings, sleep=sleep)


# ---------------------------------------------------------------------------
# Category table
# ---------------------------------------------------------------------------


class TestCategorize:
    @pytest.mark.parametrize(
        ("title", "description", "expected"),
        [
            ("New GPT model announcement", "", "Language Models"),
            ("DALL-E 3 tips", "", "Computer Vision"),
            ("Sora: behind the scenes", "", "Video Generation"),
            ("Building with the Responses API", "", "API & Tools"),
            ("Paper walkthrough", "", "AI Research"),
            ("Our alignment approach", "", "AI Safety"),
            ("Product release notes", "", "Product Announcements"),
            ("Live from the meetup", "Highlights from the meetup.", "general"),
        ],
    )
    def test_first_matching_rule_wins(self, title: str, description: str, expected: str) -> None:
        assert categorize(title, description) == expected

    def test_description_is_searched(self) -> None:
        assert categorize("Weekly update", "We trained a new vision encoder") == "Computer Vision"

    def test_matching_is_case_insensitive(self) -> None:
        assert categorize("CHATGPT tips", None) == "Language Models"

    def test_rule_order_breaks_ties(self) -> None:
        # "gpt" (Language Models) is checked before "video" (Video Generation)
        assert categorize("GPT video demo", "") == "Language Models"


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestFetch:
    @pytest.mark.asyncio
    async def test_maps_videos_to_records(self, content_store, sleep_calls) -> None:
        with respx.mock() as mock:
            search = mock.get(SEARCH_URL).mock(
                return_value=httpx.Response(200, json=_load("search_list_response.json"))
            )
            videos = mock.get(VIDEOS_URL).mock(
                return_value=httpx.Response(200, json=_load("videos_list_response.json"))
            )
            records = await _collector(content_store, _one_channel_settings(), sleep_calls).fetch()

        assert len(records) == 3
        search_params = search.calls.last.request.url.params
        assert search_params["channelId"] == "UC_openai"
        assert search_params["order"] == "date"
        assert search_params["maxResults"] == "10"
        assert videos.calls.last.request.url.params["id"] == "gpt5launch01,soraupdate02,devday00003"

        first = records[0]
        assert first.title == "New GPT model announcement"
        assert first.url == "https://www.youtube.com/watch?v=gpt5launch01"
        assert first.source_name == "OpenAI YouTube"
        assert first.source_kind is SourceKind.OFFICIAL
        assert first.category == "Language Models"
        assert first.thumbnail_url == "https://i.ytimg.com/vi/gpt5launch01/hqdefault.jpg"
        assert first.published_at == datetime(2026, 10, 18, 17, 0, tzinfo=timezone.utc)
        assert first.description == "Introducing our newest model."

        assert [r.category for r in records] == ["Language Models", "Video Generation", "general"]
        assert records[2].thumbnail_url is None

    @pytest.mark.asyncio
    async def test_body_carries_stats_block(self, content_store, sleep_calls) -> None:
        with respx.mock() as mock:
            mock.get(SEARCH_URL).mock(
                return_value=httpx.Response(200, json=_load("search_list_response.json"))
            )
            mock.get(VIDEOS_URL).mock(
                return_value=httpx.Response(200, json=_load("videos_list_response.json"))
            )
            records = await _collector(content_store, _one_channel_settings(), sleep_calls).fetch()

        assert records[0].body == (
            "Introducing our newest model.\n\n"
            "[ Video stats ]\n"
            "Views: 1,234,567\n"
            "Likes: 45,678\n"
            "Comments: 2,345\n"
            "Channel: OpenAI"
        )
        # missing commentCount reads as zero
        assert "Comments: 0\n" in records[1].body

    @pytest.mark.asyncio
    async def test_stored_videos_skipped(self, sleep_calls) -> None:
        store = InMemoryContentStore(
            [VideoRecordFactory.build(url="https://www.youtube.com/watch?v=soraupdate02")]
        )
        with respx.mock() as mock:
            mock.get(SEARCH_URL).mock(
                return_value=httpx.Response(200, json=_load("search_list_response.json"))
            )
            mock.get(VIDEOS_URL).mock(
                return_value=httpx.Response(200, json=_load("videos_list_response.json"))
            )
            records = await _collector(store, _one_channel_settings(), sleep_calls).fetch()

        assert [r.url.rsplit("=", 1)[1] for r in records] == ["gpt5launch01", "devday00003"]

    @pytest.mark.asyncio
    async def test_injected_http_client_is_used(self, content_store, sleep_calls) -> None:
        with respx.mock() as mock:
            mock.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"items": []}))
            async with httpx.AsyncClient() as client:
                collector = YouTubeChannelCollector(
                    content_store,
                    settings=_one_channel_settings(),
                    sleep=sleep_calls,
                    http_client=client,
                )
                records = await collector.fetch()
                assert not client.is_closed

        assert records == []

    @pytest.mark.asyncio
    async def test_channel_without_videos_skips_batch_call(
        self, content_store, sleep_calls
    ) -> None:
        with respx.mock(assert_all_called=False) as mock:
            mock.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"items": []}))
            videos = mock.get(VIDEOS_URL).mock(return_value=httpx.Response(200, json={}))
            records = await _collector(content_store, _one_channel_settings(), sleep_calls).fetch()

        assert records == []
        assert not videos.called

    @pytest.mark.asyncio
    async def test_unusable_items_dropped(self, content_store, sleep_calls) -> None:
        batch = _load("videos_list_response.json")
        batch["items"][0]["snippet"]["title"] = "   "
        del batch["items"][1]["id"]
        with respx.mock() as mock:
            mock.get(SEARCH_URL).mock(
                return_value=httpx.Response(200, json=_load("search_list_response.json"))
            )
            mock.get(VIDEOS_URL).mock(return_value=httpx.Response(200, json=batch))
            records = await _collector(content_store, _one_channel_settings(), sleep_calls).fetch()

        assert [r.title for r in records] == ["Live from the community meetup"]


# ---------------------------------------------------------------------------
# Multi-channel behaviour and errors
# ---------------------------------------------------------------------------


class TestChannelErrors:
    @pytest.mark.asyncio
    async def test_quota_on_one_channel_skips_it(self, content_store, settings, sleep_calls) -> None:
        with respx.mock() as mock:
            mock.get(SEARCH_URL, params={"channelId": "UC_openai"}).mock(
                return_value=httpx.Response(403, json=_load("quota_exceeded_response.json"))
            )
            mock.get(SEARCH_URL, params={"channelId": "UC_anthropic"}).mock(
                return_value=httpx.Response(200, json=_load("search_list_response.json"))
            )
            mock.get(VIDEOS_URL).mock(
                return_value=httpx.Response(200, json=_load("videos_list_response.json"))
            )
            records = await _collector(content_store, settings, sleep_calls).fetch()

        assert len(records) == 3
        assert {r.source_name for r in records} == {"Anthropic YouTube"}
        assert sleep_calls.calls == [1.0]

    @pytest.mark.asyncio
    async def test_server_error_skips_channel(self, content_store, settings, sleep_calls) -> None:
        with respx.mock() as mock:
            mock.get(SEARCH_URL, params={"channelId": "UC_openai"}).mock(
                return_value=httpx.Response(200, json=_load("search_list_response.json"))
            )
            mock.get(SEARCH_URL, params={"channelId": "UC_anthropic"}).mock(
                return_value=httpx.Response(500, text="backend error")
            )
            mock.get(VIDEOS_URL).mock(
                return_value=httpx.Response(200, json=_load("videos_list_response.json"))
            )
            records = await _collector(content_store, settings, sleep_calls).fetch()

        assert {r.source_name for r in records} == {"OpenAI YouTube"}

    @pytest.mark.asyncio
    async def test_malformed_error_body_skips_channel(
        self, content_store, settings, sleep_calls
    ) -> None:
        with respx.mock() as mock:
            mock.get(SEARCH_URL, params={"channelId": "UC_openai"}).mock(
                return_value=httpx.Response(400, json={"error": "invalid_request"})
            )
            anthropic = mock.get(SEARCH_URL, params={"channelId": "UC_anthropic"}).mock(
                return_value=httpx.Response(200, json={"items": []})
            )
            records = await _collector(content_store, settings, sleep_calls).fetch()

        assert records == []
        assert anthropic.called

    @pytest.mark.asyncio
    async def test_rejected_key_aborts_run(self, content_store, settings, sleep_calls) -> None:
        with respx.mock(assert_all_called=False) as mock:
            mock.get(SEARCH_URL).mock(
                return_value=httpx.Response(403, json=_load("forbidden_response.json"))
            )
            with pytest.raises(SourceAuthError) as exc_info:
                await _collector(content_store, settings, sleep_calls).fetch()

        assert exc_info.value.adapter == "youtube_channels"
        assert sleep_calls.calls == []

    @pytest.mark.asyncio
    async def test_missing_key_returns_empty_without_requests(
        self, content_store, sleep_calls
    ) -> None:
        with respx.mock(assert_all_called=False) as mock:
            search = mock.get(SEARCH_URL)
            records = await _collector(
                content_store, _one_channel_settings(youtube_api_key=None), sleep_calls
            ).fetch()

        assert records == []
        assert not search.called

    @pytest.mark.asyncio
    async def test_empty_channel_table_returns_empty(self, content_store, sleep_calls) -> None:
        records = await _collector(
            content_store, _one_channel_settings(youtube_channels={}), sleep_calls
        ).fetch()
        assert records == []


class TestExtractErrorReason:
    @pytest.mark.parametrize(
        "body",
        [
            {"error": "invalid_request"},
            {"error": {"errors": "quotaExceeded"}},
            {"error": {"errors": ["quotaExceeded"]}},
            {"error": None},
            ["not", "a", "dict"],
        ],
    )
    def test_unexpected_shapes_read_as_unknown(self, body: Any) -> None:
        assert extract_error_reason(httpx.Response(400, json=body)) == "unknown"

    def test_non_json_body(self) -> None:
        assert extract_error_reason(httpx.Response(500, text="backend error")) == "unknown"

    def test_reason_from_quota_body(self) -> None:
        response = httpx.Response(403, json=_load("quota_exceeded_response.json"))
        assert extract_error_reason(response) == "quotaExceeded"
