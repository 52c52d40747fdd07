"""YouTube channel adapter.

For every configured channel (``name -> channel id``) the adapter makes one
``search.list`` call for the channel's latest videos and one
``videos.list`` batch call for their statistics, then maps each video to a
:class:`~news_desk.core.schemas.content.ContentRecord`.

Failure policy:

- Missing API key or empty channel table: warning, empty result.
- Credential rejected (HTTP 401/403): :class:`SourceAuthError` is raised,
  because every remaining channel would fail the same way.
- Quota exhaustion or any other per-channel API error: logged, the channel
  is skipped, no retry.
- A video that cannot be mapped is logged and dropped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from news_desk.config.settings import Settings
from news_desk.core.exceptions import SourceAuthError, SourceError
from news_desk.core.schemas.content import ContentRecord, SourceKind
from news_desk.core.store import ContentStore
from news_desk.sources.base import SleepFunc, SourceAdapter
from news_desk.sources.registry import register
from news_desk.sources.youtube._client import fetch_videos_batch, search_channel_videos
from news_desk.sources.youtube.categories import categorize
from news_desk.sources.youtube.config import (
    HTTP_TIMEOUT_SECONDS,
    STATS_HEADER,
    YOUTUBE_WATCH_URL,
)

logger = logging.getLogger(__name__)


@register
class YouTubeChannelCollector(SourceAdapter):
    """Collects the latest videos of official AI company channels.

    Args:
        store: Dedup contract.
        settings: Supplies the API key, channel table, result cap and delay.
        sleep: Delay function used between channels.
        http_client: Optional injected :class:`httpx.AsyncClient`.  It is
            not closed by the adapter.
    """

    adapter_name = "youtube_channels"
    source_kind = SourceKind.OFFICIAL

    def __init__(
        self,
        store: ContentStore,
        settings: Settings | None = None,
        sleep: SleepFunc = asyncio.sleep,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(store, settings=settings, sleep=sleep)
        self._http_client = http_client
        self.api_key = self.settings.youtube_api_key
        self.channels = dict(self.settings.youtube_channels)
        self.max_results = self.settings.youtube_max_results
        self.channel_delay = self.settings.youtube_channel_delay_seconds

    async def fetch(self) -> list[ContentRecord]:
        """Return new video records across all configured channels.

        Raises:
            SourceAuthError: The API key was rejected.
        """
        if not self.api_key:
            logger.warning("youtube: no API key configured; skipping run")
            return []
        if not self.channels:
            logger.warning("youtube: no channels configured; skipping run")
            return []

        records: list[ContentRecord] = []
        async with self._client() as client:
            for index, (channel_name, channel_id) in enumerate(self.channels.items()):
                if index > 0:
                    await self._sleep(self.channel_delay)
                try:
                    channel_records = await self._fetch_channel(
                        client, channel_name, channel_id
                    )
                except SourceAuthError:
                    raise
                except SourceError as exc:
                    logger.error(
                        "youtube: channel %s (%s) failed: %s", channel_name, channel_id, exc
                    )
                    continue
                logger.info(
                    "youtube: channel %s -> %d new videos", channel_name, len(channel_records)
                )
                records.extend(channel_records)

        logger.info("youtube: run finished, %d new videos in total", len(records))
        return records

    # ------------------------------------------------------------------
    # Per-channel work
    # ------------------------------------------------------------------

    async def _fetch_channel(
        self, client: httpx.AsyncClient, channel_name: str, channel_id: str
    ) -> list[ContentRecord]:
        video_ids = await search_channel_videos(
            client, self.api_key, channel_id, self.max_results
        )
        if not video_ids:
            logger.info("youtube: channel %s has no videos", channel_name)
            return []

        items = await fetch_videos_batch(client, self.api_key, video_ids)
        records: list[ContentRecord] = []
        for item in items:
            video_id = item.get("id")
            if not video_id:
                logger.warning("youtube: video item without id dropped")
                continue
            url = YOUTUBE_WATCH_URL.format(video_id=video_id)
            if await self.store.exists_by_url(url):
                logger.debug("youtube: already stored, skipped: %s", url)
                continue
            record = self.to_record(item, channel_name)
            if record is not None:
                records.append(record)
        return records

    def to_record(self, item: dict[str, Any], channel_name: str) -> ContentRecord | None:
        """Map one ``videos.list`` resource to a record, or ``None`` if unusable."""
        video_id = item.get("id")
        snippet: dict[str, Any] = item.get("snippet") or {}
        statistics: dict[str, Any] = item.get("statistics") or {}
        title = snippet.get("title")
        description = snippet.get("description") or ""

        now = datetime.now(timezone.utc)
        thumbnail = (snippet.get("thumbnails") or {}).get("high") or {}
        try:
            return ContentRecord(
                title=title or "",
                description=description,
                body=_build_body(description, statistics, channel_name),
                url=YOUTUBE_WATCH_URL.format(video_id=video_id),
                source_name=f"{channel_name} YouTube",
                source_kind=self.source_kind,
                category=categorize(title, description),
                thumbnail_url=thumbnail.get("url"),
                published_at=_parse_datetime(snippet.get("publishedAt")) or now,
                discovered_at=now,
            )
        except ValidationError as exc:
            logger.warning("youtube: video %s dropped: %s", video_id, exc.errors()[0]["msg"])
            return None

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as client:
            yield client


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------


def _format_count(value: Any) -> str:
    """Thousands-separated integer; missing or malformed counts read as 0."""
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return "0"


def _build_body(description: str, statistics: dict[str, Any], channel_name: str) -> str:
    return (
        f"{description}\n\n"
        f"{STATS_HEADER}\n"
        f"Views: {_format_count(statistics.get('viewCount'))}\n"
        f"Likes: {_format_count(statistics.get('likeCount'))}\n"
        f"Comments: {_format_count(statistics.get('commentCount'))}\n"
        f"Channel: {channel_name}"
    )


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
