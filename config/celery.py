# config/celery.py
"""
Конфигурация Celery.

Celery используется для периодического пересчёта
User.last_order_at (users.tasks.sync_last_order_dates).
Расписание - CELERY_BEAT_SCHEDULE в settings.
"""

import os
from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('config')

# Все настройки Celery должны начинаться с CELERY_
app.config_from_object('django.conf:settings', namespace='CELERY')

app.autodiscover_tasks()
