"""Structured logging for the API process and the Celery worker.

``configure_logging()`` is called once per process: by ``create_app()``
in ``api/main.py`` and by the ``worker_process_init`` signal in
``workers/celery_app.py``.  Library modules keep using the stdlib API::

    import logging
    logger = logging.getLogger(__name__)
    logger.info("youtube: channel %s returned %d videos", name, n)

Celery tasks use structlog directly so they can bind run-scoped fields::

    log = structlog.get_logger(__name__).bind(task="ingest_source")

Two context variables are merged into every record when set:
``request_id`` (HTTP middleware) and ``run_id`` (one scheduled firing).
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, WrappedLogger

# ---------------------------------------------------------------------------
# Context variables
# ---------------------------------------------------------------------------

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
"""Set by the request-logging middleware for the lifetime of one request."""

run_id_var: ContextVar[str | None] = ContextVar("run_id", default=None)
"""Set by a Celery task for the lifetime of one scheduled firing."""


# ---------------------------------------------------------------------------
# Processors
# ---------------------------------------------------------------------------

_SECRET_SUBSTRINGS: frozenset[str] = frozenset({
    "api_key",
    "apikey",
    "token",
    "secret",
    "password",
    "authorization",
})
"""Lower-cased substrings marking event-dict keys whose values are redacted."""

_REDACTED = "[REDACTED]"


def _is_secret_key(key: str) -> bool:
    key_lower = key.lower()
    return any(secret in key_lower for secret in _SECRET_SUBSTRINGS)


def _redact_secrets(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Replace values of secret-bearing keys with ``"[REDACTED]"``.

    Top-level keys and one level of nested dicts (``params={...}``) are
    scanned.  Nested dicts are copied before redaction so the caller's
    objects are never mutated.
    """
    for key in list(event_dict.keys()):
        if _is_secret_key(key):
            event_dict[key] = _REDACTED
            continue
        val = event_dict[key]
        if isinstance(val, dict) and any(_is_secret_key(str(k)) for k in val):
            event_dict[key] = {
                k: (_REDACTED if _is_secret_key(str(k)) else v) for k, v in val.items()
            }
    return event_dict


def _inject_context_ids(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Add ``request_id`` and ``run_id`` from their context variables if set."""
    rid = request_id_var.get()
    if rid is not None and "request_id" not in event_dict:
        event_dict["request_id"] = rid
    run_id = run_id_var.get()
    if run_id is not None and "run_id" not in event_dict:
        event_dict["run_id"] = run_id
    return event_dict


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog and route stdlib logging through it.

    Output is newline-delimited JSON unless ``log_level`` is ``"DEBUG"``,
    in which case structlog's coloured console renderer is used.  Safe to
    call repeatedly; the root handler list is replaced each time.

    Args:
        log_level: One of ``"DEBUG"``, ``"INFO"``, ``"WARNING"``,
            ``"ERROR"``, ``"CRITICAL"``.  Case-insensitive; unknown values
            fall back to INFO.
    """
    level_upper = log_level.upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)
    is_development = level_upper == "DEBUG"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _inject_context_ids,
        _redact_secrets,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if is_development:
        final_renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(
            colors=True,
        )
    else:
        final_renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    # httpx logs full request URLs at INFO, and the Gemini key travels in the
    # query string.
    if not is_development:
        for noisy_logger in ("uvicorn.access", "httpx", "httpcore", "celery.beat"):
            logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
