"""Adapter registry for discovery and lookup of source adapters.

Adapters register themselves on import with the ``@register`` decorator,
keyed by their ``adapter_name``.  The ingestion task resolves the adapter
named in its Beat schedule entry through :func:`get_adapter`.

Example::

    from news_desk.sources.registry import autodiscover, get_adapter

    autodiscover()
    adapter_cls = get_adapter("openai_blog")
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from news_desk.sources.base import SourceAdapter

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type[SourceAdapter]] = {}


def register(cls: type[SourceAdapter]) -> type[SourceAdapter]:
    """Class decorator adding a ``SourceAdapter`` subclass to the registry.

    Re-registering a name overwrites the previous class and logs a warning.

    Raises:
        AttributeError: If ``cls`` does not define ``adapter_name``.
    """
    adapter_name: str = cls.adapter_name
    if adapter_name in _REGISTRY and _REGISTRY[adapter_name] is not cls:
        logger.warning(
            "Adapter '%s' is already registered (was %s). Overwriting with %s.",
            adapter_name,
            _REGISTRY[adapter_name].__qualname__,
            cls.__qualname__,
        )
    _REGISTRY[adapter_name] = cls
    logger.debug("Registered source adapter: name=%s class=%s", adapter_name, cls.__qualname__)
    return cls


def get_adapter(adapter_name: str) -> type[SourceAdapter]:
    """Return the adapter class registered under *adapter_name*.

    Raises:
        KeyError: If nothing is registered under that name.  Call
            :func:`autodiscover` before the first lookup.
    """
    try:
        return _REGISTRY[adapter_name]
    except KeyError:
        registered = sorted(_REGISTRY.keys())
        raise KeyError(
            f"No source adapter registered as '{adapter_name}'. "
            f"Registered adapters: {registered}."
        ) from None


def list_adapters() -> list[dict[str, str]]:
    """Return ``[{"adapter_name", "source_kind", "class"}]`` sorted by name."""
    return [
        {
            "adapter_name": name,
            "source_kind": cls.source_kind.value,
            "class": f"{cls.__module__}.{cls.__qualname__}",
        }
        for name, cls in sorted(_REGISTRY.items())
    ]


def autodiscover() -> None:
    """Import every ``collector`` module under ``news_desk.sources``.

    Idempotent.  A module that fails to import is logged and skipped so one
    broken adapter does not hide the others.
    """
    import news_desk.sources as sources_pkg

    prefix = sources_pkg.__name__ + "."
    for _finder, module_name, _is_pkg in pkgutil.walk_packages(
        path=sources_pkg.__path__, prefix=prefix
    ):
        if module_name.endswith(".collector"):
            try:
                importlib.import_module(module_name)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Failed to import source adapter module '%s': %s",
                    module_name,
                    exc,
                    exc_info=True,
                )
