# apps/products/admin.py
"""Django Admin для products."""

from django.contrib import admin
from django.db.models import Count, Q

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin для товаров."""

    list_display = ['name', 'is_active', 'times_ordered', 'created_at']

    list_filter = ['is_active', 'created_at']

    search_fields = ['name']

    readonly_fields = ['created_at']

    actions = ['activate', 'deactivate']

    def get_queryset(self, request):
        # Пробники не считаются заказом товара
        return super().get_queryset(request).annotate(
            ordered=Count(
                'order_items__order',
                filter=Q(order_items__is_free_sample=False),
                distinct=True,
            )
        )

    @admin.display(description='В заказах', ordering='ordered')
    def times_ordered(self, obj):
        return obj.ordered

    @admin.action(description='Показывать в фильтре заказов')
    def activate(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f'Активировано {updated} товаров')

    @admin.action(description='Скрыть из фильтра заказов')
    def deactivate(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f'Скрыто {updated} товаров')
