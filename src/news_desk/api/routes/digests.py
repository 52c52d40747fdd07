"""Operator triggers for digests.

``POST /api/digests/generate``
    Dispatch the daily digest task now.  Returns 202 with the Celery task id.

``POST /api/digests/{digest_id}/publish``
    Move a DRAFT digest to PUBLISHED.  Publishing twice is a no-op.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from news_desk.core.exceptions import DigestNotFoundError
from news_desk.summarization.service import DigestService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/digests", tags=["digests"])


class DispatchResponse(BaseModel):
    task_id: str
    status: str = "queued"


class DigestStatusResponse(BaseModel):
    id: int
    title: str
    status: str
    period_start: datetime
    period_end: datetime


def get_digest_service() -> DigestService:
    """FastAPI dependency; overridden in tests."""
    from news_desk.workers._task_helpers import build_digest_service  # noqa: PLC0415

    return build_digest_service()


@router.post(
    "/generate",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=DispatchResponse,
)
async def generate_digest() -> DispatchResponse:
    """Queue one run of the daily digest task."""
    from news_desk.workers.tasks import generate_daily_digest  # noqa: PLC0415

    result = generate_daily_digest.delay(trigger="daily_digest")
    logger.info("digest generation dispatched: task_id=%s", result.id)
    return DispatchResponse(task_id=str(result.id))


@router.post("/{digest_id}/publish", response_model=DigestStatusResponse)
async def publish_digest(
    digest_id: int,
    service: DigestService = Depends(get_digest_service),
) -> DigestStatusResponse:
    """Publish a stored digest."""
    try:
        digest = await service.publish(digest_id)
    except DigestNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return DigestStatusResponse(
        id=digest_id,
        title=digest.title,
        status=digest.status.value,
        period_start=digest.period_start,
        period_end=digest.period_end,
    )
