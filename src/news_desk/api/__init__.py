"""FastAPI surface: health and operator triggers."""
