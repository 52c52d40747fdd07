"""Configuration package: environment-backed settings and the trigger table."""
