# listing/criteria.py
"""
Модель критериев списка.

ListQuery - неизменяемый вход одного вызова движка: фильтры,
сортировка и пагинация. Создаётся на каждый запрос и не меняется
после начала компиляции.

Каждый необязательный фильтр хранится явно:
- NO_CONSTRAINT: фильтр не задан, ограничения нет
- Constraint(value): фильтр задан, value никогда не бывает пустой коллекцией

Пустой набор статусов означает "без фильтра", а не "ничего не найдено".
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Generic, List, Optional, TypeVar, Union

from django.conf import settings
from django.db import models

from .exceptions import ListQueryValidationError

T = TypeVar('T')


def default_page_size() -> int:
    return getattr(settings, 'LISTING_DEFAULT_PAGE_SIZE', 20)


def max_page_size() -> int:
    return getattr(settings, 'LISTING_MAX_PAGE_SIZE', 100)


# =============================================================================
# ПЕРЕЧИСЛЕНИЯ
# =============================================================================

class TimeRangePreset(models.TextChoices):
    """Быстрые периоды относительно текущего момента."""
    TODAY = 'TODAY', 'Сегодня'
    LAST_7_DAYS = '7 DAYS', '7 дней'
    LAST_MONTH = '1 MONTH', '1 месяц'
    THIS_MONTH = 'THIS MONTH', 'Этот месяц'
    LAST_3_MONTHS = '3 MONTHS', '3 месяца'
    THIS_YEAR = 'THIS YEAR', 'Этот год'
    ALL = 'ALL', 'Всё время'


class SortDirection(models.TextChoices):
    ASC = 'asc', 'По возрастанию'
    DESC = 'desc', 'По убыванию'


class AddressField(models.TextChoices):
    """Поля адреса, доступные для условий поиска."""
    LINE1 = 'line1', 'Адрес, строка 1'
    LINE2 = 'line2', 'Адрес, строка 2'
    CITY = 'city', 'Город'
    REGION = 'region', 'Регион'
    POSTAL = 'postal', 'Индекс'
    COUNTRY = 'country', 'Страна'


# =============================================================================
# ЯВНОЕ "НЕТ ОГРАНИЧЕНИЯ"
# =============================================================================

class NoConstraint:
    """Фильтр не задан."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'NO_CONSTRAINT'

    def __bool__(self) -> bool:
        return False


NO_CONSTRAINT = NoConstraint()


@dataclass(frozen=True)
class Constraint(Generic[T]):
    """Заданный фильтр."""
    value: T


Filter = Union[NoConstraint, Constraint]


def constraint_or_none(value: Any) -> Filter:
    """Пустые значения (None, '', пустые коллекции) -> NO_CONSTRAINT."""
    if value is None:
        return NO_CONSTRAINT
    if isinstance(value, (str, tuple, list, frozenset, set)) and not value:
        return NO_CONSTRAINT
    return Constraint(value)


# =============================================================================
# СОСТАВНЫЕ КРИТЕРИИ
# =============================================================================

@dataclass(frozen=True)
class SearchCriterion:
    """Поиск подстроки по одной колонке из разрешённого списка."""
    column: str
    text: str


@dataclass(frozen=True)
class DateRange:
    """
    Календарный диапазон по одному полю даты.

    Обе границы включительные; date_to закрывается концом дня
    на уровне компилятора предикатов.
    """
    field: str
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    def __post_init__(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ListQueryValidationError({
                self.field: ['Дата "от" не может быть позже даты "до"']
            })

    @property
    def is_empty(self) -> bool:
        return self.date_from is None and self.date_to is None


@dataclass(frozen=True)
class NumericRange:
    """Числовой диапазон, границы включительные, None - без границы."""
    minimum: Optional[Decimal] = None
    maximum: Optional[Decimal] = None

    def __post_init__(self):
        if (
                self.minimum is not None and
                self.maximum is not None and
                self.minimum > self.maximum
        ):
            raise ListQueryValidationError({
                'numeric_range': ['Минимум не может быть больше максимума']
            })


@dataclass(frozen=True)
class AddressCondition:
    """Подстрока в одном поле адреса (line1, line2, city, region, postal, country)."""
    field: str
    substring: str


@dataclass(frozen=True)
class SortSpec:
    column: str
    direction: str = SortDirection.DESC

    @property
    def descending(self) -> bool:
        return self.direction == SortDirection.DESC


# =============================================================================
# ЗАПРОС И РЕЗУЛЬТАТ
# =============================================================================

@dataclass(frozen=True)
class ListQuery:
    """
    Вход одного вызова движка.

    time_range - Constraint(TimeRangePreset), date_ranges - Constraint(кортеж
    DateRange, по одному на поле даты).

    Инварианты проверяются при создании:
    - page >= 1
    - 0 < page_size <= LISTING_MAX_PAGE_SIZE
    """

    sort: SortSpec
    time_range: Filter = NO_CONSTRAINT
    search: Filter = NO_CONSTRAINT
    statuses: Filter = NO_CONSTRAINT
    date_ranges: Filter = NO_CONSTRAINT
    numeric_range: Filter = NO_CONSTRAINT
    currency: Filter = NO_CONSTRAINT
    address_conditions: Filter = NO_CONSTRAINT
    product_ids: Filter = NO_CONSTRAINT
    page: int = 1
    page_size: int = field(default_factory=default_page_size)

    def __post_init__(self):
        errors = {}
        if self.page < 1:
            errors['page'] = ['Номер страницы должен быть не меньше 1']
        if self.page_size <= 0:
            errors['limit'] = ['Размер страницы должен быть больше 0']
        elif self.page_size > max_page_size():
            errors['limit'] = [f'Размер страницы не может превышать {max_page_size()}']
        if errors:
            raise ListQueryValidationError(errors)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def date_range_for(self, field_key: str) -> Optional[DateRange]:
        if not isinstance(self.date_ranges, Constraint):
            return None
        for date_range in self.date_ranges.value:
            if date_range.field == field_key and not date_range.is_empty:
                return date_range
        return None


@dataclass(frozen=True)
class ListResult:
    """
    Результат: страница элементов и общее количество.

    total_count - размер отфильтрованного множества без учёта пагинации.
    """
    items: List[Any]
    total_count: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.total_count else 0

    def to_dict(self) -> dict:
        return {
            'items': [item.to_dict() for item in self.items],
            'totalCount': self.total_count,
            'page': self.page,
            'limit': self.page_size,
            'totalPages': self.total_pages,
        }
