"""Application-wide exception hierarchy for News Desk.

All custom exceptions subclass ``NewsDeskError``, enabling consistent
error handling and structured logging across the pipeline.

Hierarchy::

    NewsDeskError
    ├── SourceError                 (adapter, kind)
    │   ├── SourceUnavailableError
    │   ├── SourceAuthError
    │   └── SourceRateLimitError    (retry_after: float)
    ├── ExtractionError             (url)
    ├── GenerationError
    │   └── GenerationAuthError
    ├── InvalidStatusTransitionError
    └── DigestNotFoundError
"""

from __future__ import annotations


class NewsDeskError(Exception):
    """Base class for all News Desk exceptions."""


# ---------------------------------------------------------------------------
# Source adapter exceptions
# ---------------------------------------------------------------------------


class SourceError(NewsDeskError):
    """Raised when a source adapter fails as a whole.

    Caught at the scheduler boundary; the firing yields zero records and
    other adapters are unaffected.

    Args:
        message: Human-readable description of the failure.
        adapter: Registered adapter name (e.g. ``"openai_blog"``).
        kind: Source kind value of the adapter (e.g. ``"OFFICIAL"``).
    """

    def __init__(
        self,
        message: str,
        adapter: str | None = None,
        kind: str | None = None,
    ) -> None:
        super().__init__(message)
        self.adapter = adapter
        self.kind = kind


class SourceUnavailableError(SourceError):
    """Raised when the source cannot be reached at all.

    Covers browser launch failure and listing-page navigation failure.
    """


class SourceAuthError(SourceError):
    """Raised when an upstream API rejects the configured credential."""


class SourceRateLimitError(SourceError):
    """Raised when an upstream API reports an exhausted quota or rate limit.

    Args:
        message: Human-readable description of the rate limit.
        retry_after: Seconds the upstream asked us to wait. Defaults to 60.
        adapter: Registered adapter name.
        kind: Source kind value.
    """

    def __init__(
        self,
        message: str,
        retry_after: float = 60.0,
        adapter: str | None = None,
        kind: str | None = None,
    ) -> None:
        super().__init__(message, adapter=adapter, kind=kind)
        self.retry_after = retry_after


# ---------------------------------------------------------------------------
# Item-level exceptions
# ---------------------------------------------------------------------------


class ExtractionError(NewsDeskError):
    """Raised when a single listing card or detail page cannot be extracted.

    Never escapes an adapter: the item is logged and skipped.

    Args:
        message: Description of the extraction failure.
        url: Detail URL being processed, when known.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


# ---------------------------------------------------------------------------
# Summarization exceptions
# ---------------------------------------------------------------------------


class GenerationError(NewsDeskError):
    """Raised when the generative text API call fails or returns an unexpected shape.

    When raised, no digest record is persisted for the firing.
    """


class GenerationAuthError(GenerationError):
    """Raised when the generative text API rejects the API key (HTTP 401/403)."""


# ---------------------------------------------------------------------------
# Digest lifecycle exceptions
# ---------------------------------------------------------------------------


class InvalidStatusTransitionError(NewsDeskError):
    """Raised on an attempt to move a digest from PUBLISHED back to DRAFT.

    Args:
        digest_id: Identifier of the digest.
        current: Current status value.
        requested: Requested status value.
    """

    def __init__(self, digest_id: int, current: str, requested: str) -> None:
        super().__init__(
            f"Digest {digest_id}: cannot transition from {current} to {requested}"
        )
        self.digest_id = digest_id
        self.current = current
        self.requested = requested


class DigestNotFoundError(NewsDeskError):
    """Raised when a digest id does not resolve to a stored record."""

    def __init__(self, digest_id: int) -> None:
        super().__init__(f"Digest {digest_id} not found")
        self.digest_id = digest_id
