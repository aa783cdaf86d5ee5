# apps/orders/listing.py
"""
Список заказов для админки.

Колонки поиска:
- order_id: номер заказа
- email: email покупателя
- customer: имя покупателя

Сортировка:
- date: по дате создания
- status: по приоритету статуса (ORDER_STATUS_RANK)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict

from listing.assembler import isoformat_or_none, normalize_amount
from listing.criteria import AddressField
from listing.entities import EntityListing, ProductMembership
from listing.ordering import FieldOrdering, RankOrdering, SortResolver

from .models import ORDER_STATUS_RANK, Order, OrderItem


class OrderSearchColumn:
    ORDER_ID = 'order_id'
    EMAIL = 'email'
    CUSTOMER = 'customer'


class OrderSortColumn:
    DATE = 'date'
    STATUS = 'status'


@dataclass(frozen=True)
class OrderListItem:
    """Строка списка заказов."""
    id: int
    order_number: str
    created_at: datetime
    customer_name: str
    customer_email: str
    status: str
    total: Decimal
    currency: str

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'OrderListItem':
        return cls(
            id=row['id'],
            order_number=row['order_number'],
            created_at=row['created_at'],
            customer_name=row['customer_name'] or 'Unknown',
            customer_email=row['customer_email'],
            status=row['status'],
            total=normalize_amount(row['total']),
            currency=row['currency'],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'orderNumber': self.order_number,
            'createdAt': isoformat_or_none(self.created_at),
            'customerName': self.customer_name,
            'customerEmail': self.customer_email,
            'status': self.status,
            'total': float(self.total),
            'currency': self.currency,
        }


ORDER_LISTING = EntityListing(
    name='orders',
    queryset=lambda: Order.objects.all(),
    sort=SortResolver(
        {
            OrderSortColumn.DATE: FieldOrdering('created_at'),
            OrderSortColumn.STATUS: RankOrdering('status', ORDER_STATUS_RANK),
        },
        default_column=OrderSortColumn.DATE,
    ),
    projection=(
        'id',
        'order_number',
        'created_at',
        'customer_name',
        'customer_email',
        'status',
        'total',
        'currency',
    ),
    item_factory=OrderListItem.from_row,
    search_columns={
        OrderSearchColumn.ORDER_ID: 'order_number',
        OrderSearchColumn.EMAIL: 'customer_email',
        OrderSearchColumn.CUSTOMER: 'customer_name',
    },
    status_field='status',
    date_fields={'created': 'created_at'},
    preset_field='created',
    numeric_field='total',
    currency_field='currency',
    address_fields={
        AddressField.LINE1: 'shipping_line1',
        AddressField.LINE2: 'shipping_line2',
        AddressField.CITY: 'shipping_city',
        AddressField.REGION: 'shipping_region',
        AddressField.POSTAL: 'shipping_postal',
        AddressField.COUNTRY: 'shipping_country',
    },
    product_membership=ProductMembership(
        line_model=OrderItem,
        parent_field='order',
        product_field='product_id',
        exclude={'is_free_sample': True},
    ),
)
