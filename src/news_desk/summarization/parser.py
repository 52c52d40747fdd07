"""Parser for the semi-structured digest reply.

The reply is scanned line by line with a three-state machine.  A line that
starts with one of the markers switches state:

- ``TITLE:``: text after the marker starts the title; later lines in this
  state are appended with a space.
- ``HIGHLIGHTS:``: only lines starting with ``•``, ``-`` or ``*`` are kept.
- ``CONTENT:``: every non-empty line is kept.

Lines are stripped, blank lines are ignored, and anything before the first
marker is discarded.  The parser never raises: an empty title becomes
:data:`DEFAULT_DIGEST_TITLE` and empty content becomes the raw reply.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from news_desk.summarization.config import DEFAULT_DIGEST_TITLE

_BULLET_PREFIXES = ("•", "-", "*")


class _Section(enum.Enum):
    NONE = "none"
    TITLE = "title"
    HIGHLIGHTS = "highlights"
    CONTENT = "content"


_MARKERS: tuple[tuple[str, _Section], ...] = (
    ("TITLE:", _Section.TITLE),
    ("HIGHLIGHTS:", _Section.HIGHLIGHTS),
    ("CONTENT:", _Section.CONTENT),
)


@dataclass(frozen=True)
class ParsedSummary:
    title: str
    highlights: str
    body: str


def parse_summary(reply: str | None) -> ParsedSummary:
    """Split a generative reply into title, highlights and body."""
    raw = reply or ""
    title_parts: list[str] = []
    highlights: list[str] = []
    content: list[str] = []
    section = _Section.NONE

    for line in raw.splitlines():
        line = line.strip()
        marker = next(((m, s) for m, s in _MARKERS if line.startswith(m)), None)
        if marker is not None:
            prefix, section = marker
            if section is _Section.TITLE:
                rest = line[len(prefix):].strip()
                if rest:
                    title_parts.append(rest)
            continue
        if not line:
            continue
        if section is _Section.TITLE:
            title_parts.append(line)
        elif section is _Section.HIGHLIGHTS:
            if line.startswith(_BULLET_PREFIXES):
                highlights.append(line)
        elif section is _Section.CONTENT:
            content.append(line)

    title = " ".join(title_parts).strip() or DEFAULT_DIGEST_TITLE
    body = "\n".join(content).strip() or raw
    return ParsedSummary(title=title, highlights="\n".join(highlights), body=body)
