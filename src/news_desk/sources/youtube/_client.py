"""Low-level HTTP helpers for the YouTube Data API v3.

- :func:`make_api_request`: one GET with status code to exception mapping.
- :func:`search_channel_videos`: ``search.list`` for a channel's latest videos.
- :func:`fetch_videos_batch`: ``videos.list`` for up to 50 ids.

Callers own the :class:`httpx.AsyncClient` and any spacing between calls.

The API key travels in the ``key`` query parameter.  Raised errors are
detached from the underlying httpx exception, whose message carries the
full request URL.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from news_desk.core.exceptions import (
    SourceAuthError,
    SourceError,
    SourceRateLimitError,
)
from news_desk.sources.youtube.config import (
    MAX_RESULTS_PER_SEARCH_PAGE,
    SEARCH_PART,
    VIDEOS_PART,
    YOUTUBE_API_BASE_URL,
)

logger = logging.getLogger(__name__)

_ADAPTER = "youtube_channels"
_KIND = "OFFICIAL"

_QUOTA_REASONS = frozenset({"quotaExceeded", "dailyLimitExceeded", "rateLimitExceeded"})


def extract_error_reason(response: httpx.Response) -> str:
    """Return ``error.errors[0].reason`` from an API error body, or ``"unknown"``."""
    try:
        body = response.json()
    except ValueError:
        return "unknown"
    if not isinstance(body, dict):
        return "unknown"
    error = body.get("error")
    if not isinstance(error, dict):
        return "unknown"
    errors = error.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        return str(errors[0].get("reason", "unknown"))
    return "unknown"


async def make_api_request(
    client: httpx.AsyncClient,
    endpoint: str,
    params: dict[str, Any],
) -> dict[str, Any]:
    """GET ``{base}/{endpoint}`` and return the decoded JSON body.

    Raises:
        SourceRateLimitError: HTTP 403 or 429 with a quota reason.
        SourceAuthError: HTTP 401, or HTTP 403 for any other reason.
        SourceError: Any other non-2xx status, network error or non-JSON body.
    """
    url = f"{YOUTUBE_API_BASE_URL}/{endpoint}"
    try:
        response = await client.get(url, params=params)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        reason = extract_error_reason(exc.response)
        if status_code in (403, 429) and reason in _QUOTA_REASONS:
            raise SourceRateLimitError(
                f"youtube: quota exceeded on endpoint '{endpoint}' (reason={reason})",
                retry_after=3600.0,
                adapter=_ADAPTER,
                kind=_KIND,
            ) from None
        if status_code in (401, 403):
            raise SourceAuthError(
                f"youtube: HTTP {status_code} (reason={reason}) on endpoint '{endpoint}'",
                adapter=_ADAPTER,
                kind=_KIND,
            ) from None
        raise SourceError(
            f"youtube: HTTP {status_code} on endpoint '{endpoint}'",
            adapter=_ADAPTER,
            kind=_KIND,
        ) from None
    except httpx.RequestError as exc:
        raise SourceError(
            f"youtube: connection error on endpoint '{endpoint}' ({type(exc).__name__})",
            adapter=_ADAPTER,
            kind=_KIND,
        ) from None
    except ValueError:
        raise SourceError(
            f"youtube: non-JSON response on endpoint '{endpoint}'",
            adapter=_ADAPTER,
            kind=_KIND,
        ) from None


async def search_channel_videos(
    client: httpx.AsyncClient,
    api_key: str,
    channel_id: str,
    max_results: int,
) -> list[str]:
    """Return the ids of a channel's most recent videos, newest first."""
    params: dict[str, Any] = {
        "part": SEARCH_PART,
        "channelId": channel_id,
        "type": "video",
        "order": "date",
        "maxResults": min(max_results, MAX_RESULTS_PER_SEARCH_PAGE),
        "key": api_key,
    }
    data = await make_api_request(client, "search", params)
    video_ids = [
        item["id"]["videoId"]
        for item in data.get("items", [])
        if item.get("id", {}).get("videoId")
    ]
    logger.debug("youtube: search channel=%s -> %d ids", channel_id, len(video_ids))
    return video_ids


async def fetch_videos_batch(
    client: httpx.AsyncClient,
    api_key: str,
    video_ids: list[str],
) -> list[dict[str, Any]]:
    """Return full ``videos.list`` resources for up to 50 ids."""
    params: dict[str, Any] = {
        "id": ",".join(video_ids),
        "part": VIDEOS_PART,
        "key": api_key,
    }
    data = await make_api_request(client, "videos", params)
    items: list[dict[str, Any]] = data.get("items", [])
    logger.debug(
        "youtube: videos.list batch size=%d -> %d items", len(video_ids), len(items)
    )
    return items
