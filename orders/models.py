# apps/orders/models.py
"""
Модели заказов.

МОДЕЛИ:
- Order: Заказ покупателя
- OrderItem: Позиция заказа (включая бесплатные пробники)

СТАТУСЫ:
PENDING → SHIPPED → DELIVERED
PENDING → CANCELLING → CANCELLED (запрос на отмену)
DELIVERED → REQUESTED → REFUNDED (запрос на возврат)

ORDER_STATUS_RANK - единственная таблица приоритета статусов
для сортировки списка ("требует внимания" = меньший ранг).
"""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


# =============================================================================
# СТАТУСЫ ЗАКАЗОВ
# =============================================================================

class OrderStatus(models.TextChoices):
    PENDING = 'PENDING', _('В обработке')
    REQUESTED = 'REQUESTED', _('Запрошен возврат')
    CANCELLING = 'CANCELLING', _('Запрошена отмена')
    SHIPPED = 'SHIPPED', _('Отправлен')
    DELIVERED = 'DELIVERED', _('Доставлен')
    CANCELLED = 'CANCELLED', _('Отменён')
    REFUNDED = 'REFUNDED', _('Возвращён')


ORDER_STATUS_RANK = MappingProxyType({
    OrderStatus.PENDING: 1,
    OrderStatus.REQUESTED: 2,
    OrderStatus.CANCELLING: 3,
    OrderStatus.SHIPPED: 4,
    OrderStatus.DELIVERED: 5,
    OrderStatus.CANCELLED: 6,
    OrderStatus.REFUNDED: 7,
})


# =============================================================================
# ЗАКАЗЫ
# =============================================================================

class Order(models.Model):
    """
    Заказ покупателя.

    ВАЖНО:
    - user может быть NULL (гостевой заказ), покупатель определяется по customer_email
    - total хранится в валюте currency
    - адрес доставки копируется в заказ на момент оформления
    """

    order_number = models.CharField(
        max_length=32,
        unique=True,
        verbose_name='Номер заказа'
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders',
        verbose_name='Покупатель'
    )

    customer_name = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Имя покупателя'
    )

    customer_email = models.EmailField(
        verbose_name='Email покупателя'
    )

    status = models.CharField(
        max_length=16,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        verbose_name='Статус'
    )

    total = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name='Сумма заказа'
    )

    currency = models.CharField(
        max_length=3,
        default='EUR',
        verbose_name='Валюта'
    )

    # Доставка
    recipient_name = models.CharField(max_length=100, blank=True, verbose_name='Получатель')
    recipient_phone = models.CharField(max_length=20, blank=True, verbose_name='Телефон получателя')
    shipping_line1 = models.CharField(max_length=200, verbose_name='Адрес, строка 1')
    shipping_line2 = models.CharField(max_length=200, blank=True, verbose_name='Адрес, строка 2')
    shipping_city = models.CharField(max_length=100, verbose_name='Город')
    shipping_region = models.CharField(max_length=100, blank=True, verbose_name='Регион')
    shipping_postal = models.CharField(max_length=20, verbose_name='Индекс')
    shipping_country = models.CharField(max_length=100, verbose_name='Страна')

    tracking_code = models.CharField(
        max_length=64,
        blank=True,
        verbose_name='Трек-номер'
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Дата создания'
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Дата обновления'
    )

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        verbose_name = 'Заказ'
        verbose_name_plural = 'Заказы'
        indexes = [
            models.Index(fields=['-created_at']),
            models.Index(fields=['status']),
            models.Index(fields=['user', '-created_at']),
            models.Index(fields=['customer_email']),
        ]

    def __str__(self) -> str:
        return f"Заказ {self.order_number} ({self.get_status_display()})"

    @property
    def status_rank(self) -> int:
        return ORDER_STATUS_RANK[self.status]


class OrderItem(models.Model):
    """
    Позиция заказа.

    Бесплатные пробники (is_free_sample) не считаются покупкой товара
    и не учитываются фильтром "заказ содержит товар".
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name='Заказ'
    )

    product = models.ForeignKey(
        'products.Product',
        on_delete=models.PROTECT,
        related_name='order_items',
        verbose_name='Товар'
    )

    quantity = models.PositiveIntegerField(
        default=1,
        verbose_name='Количество'
    )

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name='Цена за единицу'
    )

    is_free_sample = models.BooleanField(
        default=False,
        verbose_name='Бесплатный пробник'
    )

    class Meta:
        db_table = 'order_items'
        verbose_name = 'Позиция заказа'
        verbose_name_plural = 'Позиции заказов'
        indexes = [
            models.Index(fields=['product', 'order']),
        ]

    def __str__(self) -> str:
        sample_mark = " [ПРОБНИК]" if self.is_free_sample else ""
        return f"{self.product.name} x {self.quantity}{sample_mark}"

    def save(self, *args, **kwargs) -> None:
        """Пробник всегда бесплатный."""
        if self.is_free_sample:
            self.price = Decimal('0')
        super().save(*args, **kwargs)
