"""Abstract base class for all source adapters.

Every source integration subclasses ``SourceAdapter``, declares its static
identity as class attributes, and implements ``fetch()``.

Example::

    from news_desk.sources.base import SourceAdapter, SourceKind
    from news_desk.sources.registry import register

    @register
    class MyAdapter(SourceAdapter):
        adapter_name = "my_source"
        source_kind = SourceKind.GENERAL

        async def fetch(self): ...
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from news_desk.core.schemas.content import ContentRecord, SourceKind

if TYPE_CHECKING:
    from news_desk.config.settings import Settings
    from news_desk.core.store import ContentStore

logger = logging.getLogger(__name__)

__all__ = ["SleepFunc", "SourceAdapter", "SourceKind"]

SleepFunc = Callable[[float], Awaitable[None]]
"""Signature of the delay function adapters use between items."""


class SourceAdapter(ABC):
    """Common contract for every source the scheduler can trigger.

    Class Attributes:
        adapter_name: Unique registry key; also the task argument used by
            the Beat schedule (e.g. ``"youtube_channels"``).
        source_kind: Provenance tier stamped on every emitted record.

    Args:
        store: Dedup contract, consulted before any expensive per-item work.
        settings: Application settings.  Defaults to ``get_settings()``.
        sleep: Awaitable delay used for inter-item spacing.  Tests pass a
            recorder instead of waiting in real time.
    """

    adapter_name: str
    source_kind: SourceKind

    def __init__(
        self,
        store: ContentStore,
        settings: Settings | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        if settings is None:
            from news_desk.config.settings import get_settings  # noqa: PLC0415

            settings = get_settings()
        self.store = store
        self.settings = settings
        self._sleep = sleep

    @abstractmethod
    async def fetch(self) -> list[ContentRecord]:
        """Discover new records from the source.

        Returns:
            Fully constructed records whose URLs were not in the store at
            check time.  Empty when nothing new was found.

        Raises:
            SourceError: Only for adapter-level failure (browser launch,
                listing navigation, credential rejection).  Per-item
                failures are logged and the item is skipped.
        """

    def get_adapter_name(self) -> str:
        return self.adapter_name

    def get_source_kind(self) -> SourceKind:
        return self.source_kind

    def __repr__(self) -> str:
        return f"<{type(self).__name__} adapter={self.adapter_name} kind={self.source_kind.value}>"
