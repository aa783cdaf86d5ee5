# apps/orders/signals.py
"""
Django сигналы для заказов.

СИГНАЛЫ:
- order_post_save: новый заказ обновляет User.last_order_at
"""

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Order

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Order)
def order_post_save(sender, instance: Order, created: bool, **kwargs):
    """Дата последнего заказа пользователя сдвигается только вперёд."""
    if not created or instance.user_id is None:
        return

    from users.models import User

    updated = User.objects.filter(
        pk=instance.user_id,
    ).exclude(
        last_order_at__gte=instance.created_at,
    ).update(last_order_at=instance.created_at)

    if updated:
        logger.debug(
            f"Пользователь {instance.user_id}: последний заказ {instance.order_number}"
        )
