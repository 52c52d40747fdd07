"""Celery application, Beat schedule and scheduled tasks."""
