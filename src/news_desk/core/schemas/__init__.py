"""Pydantic value objects passed between adapters, stores and services."""
