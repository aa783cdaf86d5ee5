# apps/users/listing.py
"""
Список пользователей для админки.

Колонки поиска:
- email, name: подстрока в поле пользователя
- order_id: у пользователя есть заказ с таким номером (подстрока)

Сортировка: last_login, last_order. Пользователи без даты
всегда оказываются в конце при сортировке по убыванию.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from django.db.models import Count, Exists, OuterRef, Q

from listing.assembler import isoformat_or_none
from listing.criteria import AddressField
from listing.entities import EntityListing
from listing.ordering import FieldOrdering, SortResolver
from orders.models import Order

from .models import User


class UserSearchColumn:
    EMAIL = 'email'
    NAME = 'name'
    ORDER_ID = 'order_id'


class UserSortColumn:
    LAST_LOGIN = 'last_login'
    LAST_ORDER = 'last_order'


def has_order_number(text: str) -> Q:
    orders = Order.objects.filter(user=OuterRef('pk'), order_number__icontains=text)
    return Q(Exists(orders))


def users_with_order_count():
    return User.objects.annotate(order_count=Count('orders', distinct=True))


@dataclass(frozen=True)
class UserListItem:
    """Строка списка пользователей."""
    id: int
    email: str
    name: str
    last_login: Optional[datetime]
    last_order_at: Optional[datetime]
    order_count: int

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'UserListItem':
        return cls(
            id=row['id'],
            email=row['email'],
            name=row['name'] or 'Unknown',
            last_login=row['last_login'],
            last_order_at=row['last_order_at'],
            order_count=row['order_count'] or 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'lastLogIn': isoformat_or_none(self.last_login),
            'lastOrderAt': isoformat_or_none(self.last_order_at),
            'orderCount': self.order_count,
        }


USER_LISTING = EntityListing(
    name='users',
    queryset=users_with_order_count,
    sort=SortResolver(
        {
            UserSortColumn.LAST_LOGIN: FieldOrdering('last_login', nullable=True),
            UserSortColumn.LAST_ORDER: FieldOrdering('last_order_at', nullable=True),
        },
        default_column=UserSortColumn.LAST_LOGIN,
    ),
    projection=(
        'id',
        'email',
        'name',
        'last_login',
        'last_order_at',
        'order_count',
    ),
    item_factory=UserListItem.from_row,
    search_columns={
        UserSearchColumn.EMAIL: 'email',
        UserSearchColumn.NAME: 'name',
        UserSearchColumn.ORDER_ID: has_order_number,
    },
    date_fields={
        'last_login': 'last_login',
        'last_order': 'last_order_at',
    },
    numeric_field='order_count',
    address_fields={
        AddressField.LINE1: 'address__address_line1',
        AddressField.LINE2: 'address__address_line2',
        AddressField.CITY: 'address__city',
        AddressField.REGION: 'address__region',
        AddressField.POSTAL: 'address__postal_code',
        AddressField.COUNTRY: 'address__country',
    },
)
