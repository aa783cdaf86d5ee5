# apps/users/tasks.py
"""
Celery задачи для пользователей.

- sync_last_order_dates: пересчёт User.last_order_at по заказам
"""

import logging

from celery import shared_task
from django.db.models import Max, OuterRef, Subquery

logger = logging.getLogger(__name__)


@shared_task
def sync_last_order_dates():
    """
    Пересчитать дату последнего заказа для всех пользователей.

    Сигнал заказа обновляет дату при создании; задача исправляет
    расхождения после удаления заказов и ручных правок.

    Returns:
        Количество обновлённых пользователей
    """
    from orders.models import Order
    from .models import User

    latest = Order.objects.filter(
        user=OuterRef('pk')
    ).values('user').annotate(
        latest=Max('created_at')
    ).values('latest')

    updated = User.objects.update(last_order_at=Subquery(latest[:1]))

    logger.info(f"Пересчитана дата последнего заказа: {updated} пользователей")
    return updated
