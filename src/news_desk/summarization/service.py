"""Digest generation and publication.

:class:`DigestService` ties the prompt builders, the Gemini client, the
reply parser and the two stores together.  Nothing is persisted unless the
generative call succeeded, so a failed firing leaves no partial digest.

Status lifecycle: DRAFT -> PUBLISHED only.  Publishing twice is a no-op;
moving a published digest back to DRAFT raises
:class:`~news_desk.core.exceptions.InvalidStatusTransitionError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, time
from zoneinfo import ZoneInfo

from news_desk.core.exceptions import (
    DigestNotFoundError,
    GenerationError,
    InvalidStatusTransitionError,
)
from news_desk.core.schemas.digest import DigestRecord, DigestStatus
from news_desk.core.store import ContentStore, DigestStore
from news_desk.summarization._gemini import GeminiClient
from news_desk.summarization.config import WINDOW_RECORD_LIMIT
from news_desk.summarization.parser import parse_summary
from news_desk.summarization.prompts import build_daily_prompt, build_window_prompt

logger = logging.getLogger(__name__)

_TITLE_MAX = 500


def check_transition(digest_id: int, current: DigestStatus, requested: DigestStatus) -> bool:
    """Validate a status change.

    Returns:
        True if the stored status must change, False for a no-op.

    Raises:
        InvalidStatusTransitionError: For PUBLISHED -> DRAFT.
    """
    if current is requested:
        return False
    if current is DigestStatus.PUBLISHED and requested is DigestStatus.DRAFT:
        raise InvalidStatusTransitionError(digest_id, current.value, requested.value)
    return True


class DigestService:
    """Builds, stores and publishes AI news digests.

    Args:
        content_store: Source of records for window digests.
        digest_store: Destination for generated digests.
        client: Generative text client.
        timezone: IANA zone that defines "today" for the daily digest.
        clock: Returns the current aware datetime; injectable for tests.
    """

    def __init__(
        self,
        content_store: ContentStore,
        digest_store: DigestStore,
        client: GeminiClient,
        timezone: str = "Asia/Seoul",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.content_store = content_store
        self.digest_store = digest_store
        self.client = client
        self.tz = ZoneInfo(timezone)
        self._clock = clock or (lambda: datetime.now(self.tz))

    def now(self) -> datetime:
        """Current time in the service timezone."""
        return self._clock().astimezone(self.tz)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate_daily_digest(self) -> DigestRecord:
        """Generate the source-free digest for today and store it as PUBLISHED.

        The period runs from local midnight to now.

        Raises:
            GenerationError: The generative call failed; nothing was stored.
        """
        now = self.now()
        start_of_day = datetime.combine(now.date(), time.min, tzinfo=self.tz)
        prompt = build_daily_prompt(now.date())
        return await self._generate(
            prompt,
            period_start=start_of_day,
            period_end=now,
            related_count=0,
            status=DigestStatus.PUBLISHED,
        )

    async def generate_window_digest(
        self,
        start: datetime,
        end: datetime,
        publish: bool = False,
        limit: int = WINDOW_RECORD_LIMIT,
    ) -> DigestRecord:
        """Generate a digest from the records discovered in ``[start, end)``.

        Raises:
            GenerationError: No records in the window, or the generative
                call failed.  Nothing is stored in either case.
        """
        records = await self.content_store.list_discovered_between(start, end, limit)
        if not records:
            raise GenerationError(
                f"no content discovered between {start.isoformat()} and {end.isoformat()}"
            )
        prompt = build_window_prompt(records)
        return await self._generate(
            prompt,
            period_start=start,
            period_end=end,
            related_count=len(records),
            status=DigestStatus.PUBLISHED if publish else DigestStatus.DRAFT,
        )

    async def _generate(
        self,
        prompt: str,
        *,
        period_start: datetime,
        period_end: datetime,
        related_count: int,
        status: DigestStatus,
    ) -> DigestRecord:
        reply = await self.client.generate_text(prompt)
        parsed = parse_summary(reply)
        generated_at = self._clock()
        logger.info("digest: generated title=%r", parsed.title)

        digest = DigestRecord(
            period_start=period_start,
            period_end=period_end,
            title=parsed.title[:_TITLE_MAX],
            highlights=parsed.highlights,
            body=parsed.body,
            related_count=related_count,
            status=status,
            generated_at=generated_at,
            created_at=generated_at,
        )
        digest_id = await self.digest_store.insert_one(digest)
        logger.info("digest: stored id=%d status=%s", digest_id, status.value)
        return digest.model_copy(update={"id": digest_id})

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def set_status(self, digest_id: int, status: DigestStatus) -> DigestRecord:
        """Apply a status change after validating the transition.

        Raises:
            DigestNotFoundError: Unknown id.
            InvalidStatusTransitionError: PUBLISHED -> DRAFT.
        """
        digest = await self.digest_store.get(digest_id)
        if digest is None:
            raise DigestNotFoundError(digest_id)
        if not check_transition(digest_id, digest.status, status):
            return digest
        await self.digest_store.update_status(digest_id, status)
        logger.info(
            "digest: id=%d %s -> %s", digest_id, digest.status.value, status.value
        )
        return digest.model_copy(update={"status": status})

    async def publish(self, digest_id: int) -> DigestRecord:
        """Mark a digest PUBLISHED.  Idempotent."""
        return await self.set_status(digest_id, DigestStatus.PUBLISHED)
