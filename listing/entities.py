# listing/entities.py
"""
Описание сущности для движка списков.

EntityListing связывает имена критериев с реальными колонками модели.
Движок не знает ни про заказы, ни про пользователей: всё, что
специфично для сущности, объявляется здесь и передаётся снаружи.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from django.db.models import Exists, OuterRef, Q, QuerySet

from .ordering import SortResolver

# Колонка поиска: путь поля для icontains или функция text -> Q
SearchBinding = Union[str, Callable[[str], Q]]


@dataclass(frozen=True)
class ProductMembership:
    """
    Связь "запись содержит товар" через позиции.

    Позиции, попадающие под exclude (например, бесплатные пробники),
    не засчитываются как наличие товара.
    """
    line_model: Any
    parent_field: str
    product_field: str = 'product_id'
    exclude: Mapping[str, Any] = field(default_factory=dict)

    def exists_for(self, product_id: int) -> Exists:
        lines = self.line_model.objects.filter(**{
            self.parent_field: OuterRef('pk'),
            self.product_field: product_id,
        })
        if self.exclude:
            lines = lines.exclude(**self.exclude)
        return Exists(lines)


@dataclass(frozen=True)
class EntityListing:
    """
    Конфигурация списка одной сущности.

    queryset - фабрика базового QuerySet (вызывается на каждый запрос).
    projection - поля строки, которые читает исполнитель.
    item_factory - превращает строку (dict) в элемент списка.
    date_fields - ключ критерия -> поле даты; preset_field - ключ,
    к которому применяется быстрый период.
    """

    name: str
    queryset: Callable[[], QuerySet]
    sort: SortResolver
    projection: Tuple[str, ...]
    item_factory: Callable[[Dict[str, Any]], Any]
    search_columns: Mapping[str, SearchBinding] = field(default_factory=dict)
    status_field: Optional[str] = None
    date_fields: Mapping[str, str] = field(default_factory=dict)
    preset_field: Optional[str] = None
    numeric_field: Optional[str] = None
    currency_field: Optional[str] = None
    address_fields: Mapping[str, str] = field(default_factory=dict)
    product_membership: Optional[ProductMembership] = None

    def base_queryset(self) -> QuerySet:
        return self.queryset()
