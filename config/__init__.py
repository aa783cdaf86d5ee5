# config/__init__.py
"""Celery app загружается вместе с Django, чтобы shared_task видел настройки."""

from .celery import app as celery_app

__all__ = ('celery_app',)
