"""News Desk: scheduled AI news ingestion and digest generation.

Sub-packages:
- ``config``: pydantic-settings configuration and trigger table
- ``core``: schemas, ORM models, persistence contracts, logging
- ``sources``: source adapters (Playwright blog crawler, YouTube)
- ``summarization``: Gemini client, reply parser, digest service
- ``workers``: Celery app, Beat schedule, scheduled tasks
- ``api``: FastAPI app with the operator trigger surface
"""

__version__ = "0.1.0"
