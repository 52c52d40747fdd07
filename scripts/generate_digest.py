#!/usr/bin/env python
"""Generate one AI news digest inline, without the Celery worker.

Run from the project root::

    python scripts/generate_digest.py                      # today's digest, published
    python scripts/generate_digest.py --window-hours 12    # from stored records, DRAFT
    python scripts/generate_digest.py --window-hours 12 --publish
    python scripts/generate_digest.py --publish-id 42      # publish an existing draft

Exit codes:
    0: Digest generated (or published).
    1: Generation failed, no records in the window, or unknown digest id.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from datetime import timedelta

# Ensure the src layout is on sys.path when run as a standalone script.
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_SRC_DIR = os.path.join(os.path.dirname(_SCRIPT_DIR), "src")
if _SRC_DIR not in sys.path:
    sys.path.insert(0, _SRC_DIR)


async def _run(window_hours: int | None, publish: bool, publish_id: int | None) -> int:
    from news_desk.core.database import dispose_engine  # noqa: PLC0415
    from news_desk.core.exceptions import NewsDeskError  # noqa: PLC0415
    from news_desk.workers._task_helpers import build_digest_service  # noqa: PLC0415

    service = build_digest_service()
    try:
        if publish_id is not None:
            digest = await service.publish(publish_id)
        elif window_hours is not None:
            end = service.now()
            digest = await service.generate_window_digest(
                end - timedelta(hours=window_hours), end, publish=publish
            )
        else:
            digest = await service.generate_daily_digest()
    except NewsDeskError as exc:
        print(f"[generate_digest] ERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        await dispose_engine()

    print(f"[generate_digest] digest {digest.id} ({digest.status.value}): {digest.title}")
    if digest.highlights:
        print(digest.highlights)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--window-hours",
        type=int,
        help="Summarize records discovered in the last N hours instead of today's news.",
    )
    group.add_argument(
        "--publish-id",
        type=int,
        help="Publish the stored digest with this id and exit.",
    )
    parser.add_argument(
        "--publish",
        action="store_true",
        help="Store a window digest as PUBLISHED instead of DRAFT.",
    )
    args = parser.parse_args()

    from news_desk.config.settings import get_settings  # noqa: PLC0415
    from news_desk.core.logging_config import configure_logging  # noqa: PLC0415

    configure_logging(get_settings().log_level)
    sys.exit(asyncio.run(_run(args.window_hours, args.publish, args.publish_id)))


if __name__ == "__main__":
    main()
