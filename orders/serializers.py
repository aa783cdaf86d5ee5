# apps/orders/serializers.py
"""
Сериализаторы для orders.

- OrderListQuerySerializer: параметры списка заказов -> ListQuery
- ProductOptionSerializer: товары для фильтра "содержит товары"
"""

from typing import Any, Dict, List

from rest_framework import serializers

from listing.criteria import (
    Constraint,
    ListQuery,
    TimeRangePreset,
    constraint_or_none,
)
from listing.serializers import BaseListQuerySerializer, FlatListField
from products.models import Product

from .listing import ORDER_LISTING, OrderSearchColumn
from .models import OrderStatus


def _unique(values: List[int]) -> tuple:
    """Убрать повторы, сохранив порядок первого вхождения."""
    return tuple(dict.fromkeys(values))


class OrderListQuerySerializer(BaseListQuerySerializer):
    """
    Параметры списка заказов (АДМИН).

    GET /api/orders/?timeRange=THIS%20MONTH&statuses=PENDING&statuses=SHIPPED
        &totalMin=100&totalMax=110&currency=EUR
        &addressConditions=city:Paris&productIds=3&productIds=7
        &sortColumn=status&sortDirection=asc&page=2&limit=20
    """

    listing = ORDER_LISTING
    default_search_column = OrderSearchColumn.ORDER_ID
    date_range_keys = {'created': ('dateFrom', 'dateTo')}
    numeric_keys = ('totalMin', 'totalMax')

    timeRange = serializers.ChoiceField(
        choices=TimeRangePreset.choices,
        required=False,
        help_text='Быстрый период: TODAY, 7 DAYS, 1 MONTH, THIS MONTH, 3 MONTHS, THIS YEAR, ALL'
    )

    statuses = FlatListField(
        child=serializers.ChoiceField(choices=OrderStatus.choices),
        required=False,
        default=list,
        help_text='Набор статусов; пусто - без фильтра'
    )

    dateFrom = serializers.DateField(required=False, allow_null=True, help_text='YYYY-MM-DD')
    dateTo = serializers.DateField(required=False, allow_null=True, help_text='YYYY-MM-DD, включительно')

    totalMin = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        required=False,
        allow_null=True
    )
    totalMax = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        required=False,
        allow_null=True
    )

    currency = serializers.CharField(
        max_length=3,
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text='Точное совпадение кода валюты'
    )
    totalCurrency = serializers.CharField(
        max_length=3,
        required=False,
        allow_blank=True,
        allow_null=True,
        write_only=True,
        help_text='Устаревший синоним currency'
    )

    productIds = FlatListField(
        child=serializers.IntegerField(min_value=1),
        required=False,
        default=list,
        help_text='Заказ должен содержать ВСЕ товары (пробники не считаются)'
    )

    def entity_criteria(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        currency = attrs.get('currency') or attrs.get('totalCurrency')
        return {
            'time_range': constraint_or_none(attrs.get('timeRange')),
            'statuses': constraint_or_none(frozenset(attrs.get('statuses', []))),
            'currency': constraint_or_none(currency),
            'product_ids': constraint_or_none(_unique(attrs.get('productIds', []))),
        }

    def entity_representation(self, query: ListQuery, data: Dict[str, Any]) -> None:
        if isinstance(query.time_range, Constraint):
            data['timeRange'] = str(query.time_range.value)
        if isinstance(query.statuses, Constraint):
            data['statuses'] = sorted(str(value) for value in query.statuses.value)
        if isinstance(query.currency, Constraint):
            data['currency'] = query.currency.value
        if isinstance(query.product_ids, Constraint):
            data['productIds'] = list(query.product_ids.value)


class ProductOptionSerializer(serializers.ModelSerializer):
    """Товар в выпадающем списке фильтра."""

    class Meta:
        model = Product
        fields = ['id', 'name']
