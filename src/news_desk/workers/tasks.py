"""Celery tasks fired by the Beat triggers.

- ``ingest_source``: run one source adapter and persist its new records.
- ``generate_daily_digest``: produce and publish the daily AI digest.

Both are synchronous Celery tasks that bridge to the async bodies in
``workers._task_helpers`` via ``asyncio.run()``.

Error handling policy: each task takes the overlap lock of its trigger,
catches every exception at the outermost level, logs it at ERROR level and
does NOT re-raise.  A failing adapter therefore yields zero records for its
firing and never affects other triggers.  The returned dict always carries
a ``status`` of ``"ok"``, ``"skipped"`` or ``"failed"``.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from typing import Any

import structlog

from news_desk.config.settings import get_settings
from news_desk.config.triggers import DIGEST_TASK, INGEST_TASK
from news_desk.core.logging_config import run_id_var
from news_desk.workers._task_helpers import daily_digest_job, ingest_job
from news_desk.workers.celery_app import celery_app
from news_desk.workers.locks import trigger_lock

logger = structlog.get_logger(__name__)

settings = get_settings()


# ---------------------------------------------------------------------------
# Task 1: ingest_source
# ---------------------------------------------------------------------------


@celery_app.task(name=INGEST_TASK)
def ingest_source(adapter_name: str, trigger: str | None = None) -> dict[str, Any]:
    """Run one adapter in isolation and store what it found.

    Args:
        adapter_name: Registry name of the adapter (e.g. ``"openai_blog"``).
        trigger: Name of the firing trigger; the overlap lock key.  Defaults
            to the adapter name for ad-hoc runs.

    Returns:
        ``status`` plus, on success, ``fetched`` / ``inserted`` /
        ``duplicates`` counts, or ``error`` on failure.
    """
    trigger = trigger or adapter_name
    run_id = uuid.uuid4().hex[:12]
    token = run_id_var.set(run_id)
    log = logger.bind(task="ingest_source", adapter=adapter_name, trigger=trigger)
    task_start = time.perf_counter()
    log.info("ingest_source: starting")

    try:
        with trigger_lock(trigger, settings.trigger_lock_ttl_seconds) as acquired:
            if not acquired:
                log.warning("ingest_source: previous run still active; skipping")
                return {"status": "skipped", "adapter": adapter_name, "trigger": trigger}
            result = asyncio.run(ingest_job(adapter_name))
    except Exception as exc:
        log.error(
            "ingest_source: failed",
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=True,
        )
        return {
            "status": "failed",
            "adapter": adapter_name,
            "trigger": trigger,
            "error": str(exc),
        }
    finally:
        run_id_var.reset(token)

    elapsed = round(time.perf_counter() - task_start, 2)
    log.info("ingest_source: complete", elapsed_seconds=elapsed, **result)
    return {"status": "ok", "trigger": trigger, "elapsed_seconds": elapsed, **result}


# ---------------------------------------------------------------------------
# Task 2: generate_daily_digest
# ---------------------------------------------------------------------------


@celery_app.task(name=DIGEST_TASK)
def generate_daily_digest(trigger: str | None = None) -> dict[str, Any]:
    """Generate today's digest and store it as PUBLISHED.

    On-demand runs from the API share the ``daily_digest`` lock with the
    scheduled trigger.

    Returns:
        ``status`` plus ``digest_id`` / ``title`` on success, or ``error``.
    """
    trigger = trigger or "daily_digest"
    run_id = uuid.uuid4().hex[:12]
    token = run_id_var.set(run_id)
    log = logger.bind(task="generate_daily_digest", trigger=trigger)
    task_start = time.perf_counter()
    log.info("generate_daily_digest: starting")

    try:
        with trigger_lock(trigger, settings.trigger_lock_ttl_seconds) as acquired:
            if not acquired:
                log.warning("generate_daily_digest: previous run still active; skipping")
                return {"status": "skipped", "trigger": trigger}
            result = asyncio.run(daily_digest_job())
    except Exception as exc:
        log.error(
            "generate_daily_digest: failed",
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=True,
        )
        return {"status": "failed", "trigger": trigger, "error": str(exc)}
    finally:
        run_id_var.reset(token)

    elapsed = round(time.perf_counter() - task_start, 2)
    log.info("generate_daily_digest: complete", elapsed_seconds=elapsed, **result)
    return {"status": "ok", "trigger": trigger, "elapsed_seconds": elapsed, **result}
