"""YouTube Data API v3 adapter for official AI company channels."""
