"""YouTube adapter constants.

Quota unit costs (YouTube Data API v3):
- ``search.list``:  100 units per call, one call per channel per run
- ``videos.list``:    1 unit per call, one batch per channel per run

With the default three channels and two runs a day this stays well
inside the 10,000 unit daily quota.  Quota errors are not retried.
"""

from __future__ import annotations

YOUTUBE_API_BASE_URL: str = "https://www.googleapis.com/youtube/v3"
"""Base URL for all YouTube Data API v3 endpoints."""

YOUTUBE_WATCH_URL: str = "https://www.youtube.com/watch?v={video_id}"
"""Canonical video URL; the dedup key for video records."""

MAX_RESULTS_PER_SEARCH_PAGE: int = 50
"""API upper bound for ``maxResults`` on ``search.list``."""

HTTP_TIMEOUT_SECONDS: float = 30.0

SEARCH_PART: str = "id,snippet"
VIDEOS_PART: str = "snippet,contentDetails,statistics"

DEFAULT_CATEGORY: str = "general"
"""Category assigned when no keyword rule matches."""

CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Language Models", ("gpt", "chatgpt", "language model")),
    ("Computer Vision", ("dall-e", "image", "vision")),
    ("Video Generation", ("sora", "video")),
    ("API & Tools", ("api", "developer")),
    ("AI Research", ("research", "paper")),
    ("AI Safety", ("safety", "alignment")),
    ("Product Announcements", ("announcement", "release")),
)
"""Ordered keyword table; the first rule with a matching keyword wins."""

STATS_HEADER: str = "[ Video stats ]"
