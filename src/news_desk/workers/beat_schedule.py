"""Celery Beat periodic task schedule for News Desk.

Built from the trigger table in :mod:`news_desk.config.triggers`.  Times
are in the timezone configured on the Celery app (``Asia/Seoul`` by
default).

Default schedule:

+-----------------+---------------------+----------------------------------+
| Trigger         | Cron                | Purpose                          |
+=================+=====================+==================================+
| youtube_ingest  | ``0 0,12 * * *``    | Latest videos of AI channels.    |
+-----------------+---------------------+----------------------------------+
| web_ingest      | ``10 0,12 * * *``   | OpenAI blog crawl.               |
+-----------------+---------------------+----------------------------------+
| daily_digest    | ``0 0,9-23 * * *``  | Source-free AI news digest.      |
+-----------------+---------------------+----------------------------------+
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from celery.schedules import crontab

from news_desk.config.settings import get_settings
from news_desk.config.triggers import TriggerConfig, load_triggers


def build_beat_schedule(triggers: Iterable[TriggerConfig]) -> dict[str, dict[str, Any]]:
    """Map each trigger to a Beat entry keyed by trigger name.

    Every entry passes its trigger name as the ``trigger`` keyword so the
    task takes the matching overlap lock.

    Raises:
        ValueError: On duplicate trigger names or malformed cron expressions.
    """
    schedule: dict[str, dict[str, Any]] = {}
    for trigger in triggers:
        if trigger.name in schedule:
            raise ValueError(f"duplicate trigger name {trigger.name!r}")
        schedule[trigger.name] = {
            "task": trigger.task,
            "schedule": crontab(**trigger.cron_fields()),
            "args": list(trigger.args),
            "kwargs": {**trigger.kwargs, "trigger": trigger.name},
            "options": {
                "queue": "celery",
                "expires": trigger.expires,
            },
        }
    return schedule


#: Applied to ``celery_app.conf.beat_schedule`` in ``celery_app.py``.
beat_schedule: dict[str, dict[str, Any]] = build_beat_schedule(load_triggers(get_settings()))
