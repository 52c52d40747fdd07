"""Celery application for News Desk.

Configures the broker, result backend, serialization and timezone from
``Settings`` and installs the Beat schedule built from the trigger table.

Usage (worker and scheduler)::

    celery -A news_desk.workers.celery_app worker --loglevel=info
    celery -A news_desk.workers.celery_app beat --loglevel=info
"""

from __future__ import annotations

import logging

from celery import Celery
from celery.signals import worker_process_init
from dotenv import load_dotenv

_logger = logging.getLogger(__name__)

load_dotenv()

from news_desk.config.settings import get_settings  # noqa: E402

settings = get_settings()

#: The global Celery application instance.
celery_app = Celery(
    "news_desk",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["news_desk.workers.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    # Cron triggers are wall-clock times in this zone.
    timezone=settings.timezone,
    enable_utc=True,
    task_acks_late=True,
    # A browser crawl can take minutes; do not let a second task queue
    # behind it on the same worker process.
    worker_prefetch_multiplier=1,
    result_expires=86_400,
    task_soft_time_limit=1_800,
    task_time_limit=3_600,
    beat_schedule_filename="celerybeat-schedule",
)

from news_desk.workers.beat_schedule import beat_schedule  # noqa: E402

celery_app.conf.beat_schedule = beat_schedule


@worker_process_init.connect
def _init_worker_process(**kwargs: object) -> None:  # noqa: ARG001
    """Configure logging and drop inherited DB connections after fork."""
    from news_desk.core import database as _db  # noqa: PLC0415
    from news_desk.core.logging_config import configure_logging  # noqa: PLC0415

    configure_logging(settings.log_level)
    _db.async_engine.sync_engine.dispose(close=False)
