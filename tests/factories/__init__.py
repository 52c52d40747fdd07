"""Factory Boy factories for test data generation.

Available factories
-------------------
ContentRecordFactory   : ContentRecord value object (blog article defaults)
VideoRecordFactory     : ContentRecord for a YouTube video
DigestRecordFactory    : DigestRecord (DRAFT by default)
"""

from __future__ import annotations

from tests.factories.content import ContentRecordFactory, VideoRecordFactory
from tests.factories.digests import DigestRecordFactory

__all__ = ["ContentRecordFactory", "DigestRecordFactory", "VideoRecordFactory"]
