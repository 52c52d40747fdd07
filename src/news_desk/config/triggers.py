"""Scheduled trigger table.

Triggers are plain configuration: each names a cron expression, the Celery
task it fires and that task's arguments.  :func:`load_triggers` builds the
table once from :class:`~news_desk.config.settings.Settings` at process
start; ``workers/beat_schedule.py`` turns it into the Beat schedule.

Cron expressions use the five-field form
``minute hour day-of-month month day-of-week`` and are evaluated in the
Celery app's timezone (``Settings.timezone``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from news_desk.config.settings import Settings

INGEST_TASK = "news_desk.workers.tasks.ingest_source"
DIGEST_TASK = "news_desk.workers.tasks.generate_daily_digest"

_CRON_FIELDS = ("minute", "hour", "day_of_month", "month_of_year", "day_of_week")


@dataclass(frozen=True)
class TriggerConfig:
    """One wall-clock trigger.

    Attributes:
        name: Unique trigger name; also the key of its overlap lock.
        cron: Five-field cron expression.
        task: Fully qualified Celery task name.
        args: Positional task arguments.
        expires: Seconds after which an unstarted firing is discarded.
        kwargs: Extra keyword arguments for the task.
    """

    name: str
    cron: str
    task: str
    args: tuple[Any, ...] = ()
    expires: int = 3_600
    kwargs: dict[str, Any] = field(default_factory=dict)

    def cron_fields(self) -> dict[str, str]:
        return parse_cron(self.cron)


def parse_cron(expression: str) -> dict[str, str]:
    """Split a five-field cron expression into ``crontab()`` keyword arguments.

    Raises:
        ValueError: If the expression does not have exactly five fields.
    """
    parts = expression.split()
    if len(parts) != len(_CRON_FIELDS):
        raise ValueError(
            f"cron expression must have {len(_CRON_FIELDS)} fields, got {expression!r}"
        )
    return dict(zip(_CRON_FIELDS, parts))


def load_triggers(settings: Settings) -> list[TriggerConfig]:
    """Return the trigger table for this deployment.

    Ingestion triggers pass the adapter name as the single positional
    argument.
    """
    triggers = [
        TriggerConfig(
            name="youtube_ingest",
            cron=settings.youtube_ingest_cron,
            task=INGEST_TASK,
            args=("youtube_channels",),
        ),
        TriggerConfig(
            name="web_ingest",
            cron=settings.web_ingest_cron,
            task=INGEST_TASK,
            args=("openai_blog",),
        ),
        TriggerConfig(
            name="daily_digest",
            cron=settings.daily_digest_cron,
            task=DIGEST_TASK,
        ),
    ]
    for trigger in triggers:
        # Fail at start-up rather than at first firing.
        trigger.cron_fields()
    return triggers
