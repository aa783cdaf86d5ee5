# apps/orders/admin.py
"""Django Admin для orders."""

from django.contrib import admin

from listing.ordering import RankOrdering

from .models import ORDER_STATUS_RANK, Order, OrderItem, OrderStatus

STATUS_ORDERING = RankOrdering('status', ORDER_STATUS_RANK)


class OrderItemInline(admin.TabularInline):
    """Inline для позиций заказа."""
    model = OrderItem
    extra = 0
    fields = ['product', 'quantity', 'price', 'is_free_sample']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin для заказов."""

    list_display = [
        'order_number', 'customer_name', 'customer_email',
        'status', 'status_priority', 'total', 'currency', 'created_at'
    ]

    list_filter = ['status', 'currency', 'created_at']

    search_fields = ['order_number', 'customer_email', 'customer_name']

    readonly_fields = ['created_at', 'updated_at']

    inlines = [OrderItemInline]

    fieldsets = [
        ('Основное', {
            'fields': ['order_number', 'user', 'customer_name', 'customer_email', 'status']
        }),
        ('Финансы', {
            'fields': ['total', 'currency']
        }),
        ('Доставка', {
            'fields': [
                ('recipient_name', 'recipient_phone'),
                'shipping_line1', 'shipping_line2',
                ('shipping_city', 'shipping_region'),
                ('shipping_postal', 'shipping_country'),
                'tracking_code',
            ]
        }),
        ('Системное', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            priority_rank=STATUS_ORDERING.rank_expression()
        )

    @admin.display(description='Приоритет', ordering='priority_rank')
    def status_priority(self, obj):
        return obj.priority_rank

    actions = ['accept_cancel_requests', 'accept_refund_requests']

    @admin.action(description='Подтвердить отмену выбранных заказов')
    def accept_cancel_requests(self, request, queryset):
        """CANCELLING → CANCELLED."""
        updated = queryset.filter(status=OrderStatus.CANCELLING).update(
            status=OrderStatus.CANCELLED
        )
        self.message_user(request, f'Отменено {updated} заказов')

    @admin.action(description='Подтвердить возврат выбранных заказов')
    def accept_refund_requests(self, request, queryset):
        """REQUESTED → REFUNDED."""
        updated = queryset.filter(status=OrderStatus.REQUESTED).update(
            status=OrderStatus.REFUNDED
        )
        self.message_user(request, f'Возвращено {updated} заказов')
