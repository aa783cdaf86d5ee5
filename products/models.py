# apps/products/models.py
"""
Товары магазина.

Здесь только то, что нужно заказам и фильтрам списка:
название, активность и дата создания. Карточка товара,
переводы и изображения живут в каталоге.
"""

from django.db import models


class Product(models.Model):
    """Товар."""

    name = models.CharField(
        max_length=200,
        verbose_name='Название'
    )

    is_active = models.BooleanField(
        default=True,
        verbose_name='Активен'
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Дата создания'
    )

    class Meta:
        db_table = 'products'
        ordering = ['-created_at']
        verbose_name = 'Товар'
        verbose_name_plural = 'Товары'

    def __str__(self) -> str:
        return self.name
