#!/usr/bin/env python
"""Run one source adapter inline and store its new records.

Run from the project root::

    python scripts/ingest_once.py --adapter openai_blog
    python scripts/ingest_once.py --list

The overlap lock is not taken; do not run this while the worker is
processing the same adapter.

Exit codes:
    0: Success (including "nothing new").
    1: Unknown adapter or adapter-level failure.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_SRC_DIR = os.path.join(os.path.dirname(_SCRIPT_DIR), "src")
if _SRC_DIR not in sys.path:
    sys.path.insert(0, _SRC_DIR)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--adapter", help="Registered adapter name.")
    parser.add_argument("--list", action="store_true", help="List adapters and exit.")
    args = parser.parse_args()

    from news_desk.config.settings import get_settings  # noqa: PLC0415
    from news_desk.core.exceptions import NewsDeskError  # noqa: PLC0415
    from news_desk.core.logging_config import configure_logging  # noqa: PLC0415
    from news_desk.sources.registry import autodiscover, list_adapters  # noqa: PLC0415
    from news_desk.workers._task_helpers import ingest_job  # noqa: PLC0415

    configure_logging(get_settings().log_level)
    autodiscover()

    if args.list or not args.adapter:
        for info in list_adapters():
            print(f"{info['adapter_name']:<20} {info['source_kind']:<13} {info['class']}")
        sys.exit(0)

    try:
        result = asyncio.run(ingest_job(args.adapter))
    except (KeyError, NewsDeskError) as exc:
        print(f"[ingest_once] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    print(
        f"[ingest_once] {result['adapter']}: fetched={result['fetched']} "
        f"inserted={result['inserted']} duplicates={result['duplicates']}"
    )


if __name__ == "__main__":
    main()
