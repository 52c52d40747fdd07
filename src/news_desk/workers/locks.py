"""Per-trigger overlap guard backed by Redis.

A firing takes a non-blocking lock named after its trigger.  If the
previous firing of the same trigger still holds it, the new firing is
skipped.  Different triggers use different keys and run concurrently.
The lock expires after ``trigger_lock_ttl_seconds`` so a crashed worker
cannot block a trigger forever.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import redis
from redis.exceptions import LockError

from news_desk.config.settings import get_settings

logger = logging.getLogger(__name__)

LOCK_KEY_PREFIX = "news_desk:trigger_lock:"


def get_redis_client() -> redis.Redis:
    return redis.from_url(get_settings().redis_url, decode_responses=True)


@contextmanager
def trigger_lock(
    trigger_name: str,
    ttl_seconds: int,
    client: redis.Redis | None = None,
) -> Iterator[bool]:
    """Try to take the lock for *trigger_name*; yield whether it was acquired.

    The lock is released on exit only if it was acquired here.

    Usage::

        with trigger_lock("web_ingest", 3600) as acquired:
            if not acquired:
                return {"status": "skipped"}
            ...
    """
    client = client or get_redis_client()
    lock = client.lock(f"{LOCK_KEY_PREFIX}{trigger_name}", timeout=ttl_seconds)
    acquired = bool(lock.acquire(blocking=False))
    try:
        yield acquired
    finally:
        if acquired:
            try:
                lock.release()
            except LockError:
                logger.warning(
                    "trigger lock for %s expired before release; run exceeded %ds",
                    trigger_name,
                    ttl_seconds,
                )
