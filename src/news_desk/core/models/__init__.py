"""SQLAlchemy ORM models for News Desk.

All models are imported here so that ``Base.metadata`` sees every table and
application code can do ``from news_desk.core.models import ContentRow``.
"""

from __future__ import annotations

from news_desk.core.models.base import Base
from news_desk.core.models.content import ContentRow
from news_desk.core.models.digest import DigestRow

__all__ = ["Base", "ContentRow", "DigestRow"]
