# listing/predicates.py
"""
Компилятор предикатов.

Превращает ListQuery в одну конъюнкцию (AND) независимых условий
над колонками сущности:
- окно времени (явный диапазон дат важнее быстрого периода)
- поиск подстроки без учёта регистра по одной колонке
- членство статуса в наборе (белый список)
- числовой диапазон и валюта
- условия адреса (каждое - отдельное AND-условие)
- "содержит все товары" (по одному EXISTS на товар)

Текст поиска и подстроки адреса сравниваются без пробелов по краям.

Критерий, который сущность не умеет выразить, - ошибка программиста:
компилятор падает с ImproperlyConfigured, а не игнорирует его.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from django.core.exceptions import ImproperlyConfigured
from django.db.models import Q
from django.utils import timezone

from .criteria import Constraint, ListQuery, TimeRangePreset
from .entities import EntityListing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledPredicate:
    """
    Итоговое условие и привязки критериев к колонкам.

    bindings: (критерий, колонка) в порядке применения.
    """
    q: Q
    bindings: Tuple[Tuple[str, str], ...]

    @property
    def criteria(self) -> Tuple[str, ...]:
        return tuple(criterion for criterion, _ in self.bindings)


# =============================================================================
# ДАТЫ
# =============================================================================

def start_of_day(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def end_of_day(day: date) -> datetime:
    """Конец календарного дня (23:59:59.999999), чтобы дата "до" включалась."""
    return timezone.make_aware(datetime.combine(day, time.max))


def shift_months(day: date, months: int) -> date:
    """Сдвиг назад на N календарных месяцев с обрезкой дня (31 марта -> 28/29 февраля)."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month_zero = divmod(month_index, 12)
    month = month_zero + 1
    last_day = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last_day))


def preset_window_start(preset: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Нижняя граница окна для быстрого периода.

    None - без нижней границы (ALL или период не задан).
    """
    local_now = timezone.localtime(now) if now else timezone.localtime()
    today = local_now.date()

    if preset == TimeRangePreset.TODAY:
        start = today
    elif preset == TimeRangePreset.LAST_7_DAYS:
        start = today - timedelta(days=7)
    elif preset == TimeRangePreset.LAST_MONTH:
        start = shift_months(today, 1)
    elif preset == TimeRangePreset.THIS_MONTH:
        start = today.replace(day=1)
    elif preset == TimeRangePreset.LAST_3_MONTHS:
        start = shift_months(today, 3)
    elif preset == TimeRangePreset.THIS_YEAR:
        start = today.replace(month=1, day=1)
    else:
        return None

    return start_of_day(start)


# =============================================================================
# КОМПИЛЯТОР
# =============================================================================

class PredicateCompiler:
    """
    Компилятор условий для одной сущности.

    Один экземпляр можно использовать для многих запросов:
    состояние живёт только внутри compile().
    """

    def __init__(self, listing: EntityListing, now: Optional[datetime] = None):
        self.listing = listing
        self.now = now

    def compile(self, query: ListQuery, scope: Optional[Q] = None) -> CompiledPredicate:
        parts: List[Tuple[Q, str, str]] = []

        if scope is not None:
            parts.append((scope, 'scope', str(scope)))

        parts.extend(self._time_window(query))
        parts.extend(self._search(query))
        parts.extend(self._statuses(query))
        parts.extend(self._numeric_range(query))
        parts.extend(self._currency(query))
        parts.extend(self._address_conditions(query))
        parts.extend(self._product_ids(query))

        predicate = Q()
        for condition, _, _ in parts:
            predicate &= condition

        bindings = tuple((criterion, column) for _, criterion, column in parts)
        logger.debug(f"Предикат {self.listing.name}: {bindings}")
        return CompiledPredicate(q=predicate, bindings=bindings)

    def _require(self, value, criterion: str):
        if not value:
            raise ImproperlyConfigured(
                f'Сущность "{self.listing.name}" не поддерживает критерий {criterion}'
            )
        return value

    def _time_window(self, query: ListQuery):
        known = set(self.listing.date_fields)
        explicit_ranges = query.date_ranges.value if isinstance(query.date_ranges, Constraint) else ()
        for date_range in explicit_ranges:
            if date_range.field not in known:
                raise ImproperlyConfigured(
                    f'Сущность "{self.listing.name}" не имеет поля даты {date_range.field}'
                )

        preset = query.time_range.value if isinstance(query.time_range, Constraint) else None
        if preset and preset != TimeRangePreset.ALL:
            self._require(self.listing.preset_field, 'timeRange')

        parts = []
        for key, column in self.listing.date_fields.items():
            explicit = query.date_range_for(key)

            if explicit is not None:
                if explicit.date_from:
                    parts.append((
                        Q(**{f'{column}__gte': start_of_day(explicit.date_from)}),
                        f'{key}.from', column,
                    ))
                if explicit.date_to:
                    parts.append((
                        Q(**{f'{column}__lte': end_of_day(explicit.date_to)}),
                        f'{key}.to', column,
                    ))
            elif key == self.listing.preset_field:
                start = preset_window_start(preset, self.now)
                if start is not None:
                    parts.append((
                        Q(**{f'{column}__gte': start}),
                        'timeRange', column,
                    ))
        return parts

    def _search(self, query: ListQuery):
        if not isinstance(query.search, Constraint):
            return []

        criterion = query.search.value
        text = criterion.text.strip()
        if not text:
            return []

        binding = self.listing.search_columns.get(criterion.column)
        if binding is None:
            raise ImproperlyConfigured(
                f'Колонка поиска "{criterion.column}" не объявлена для {self.listing.name}'
            )

        if callable(binding):
            return [(binding(text), 'search', criterion.column)]
        return [(Q(**{f'{binding}__icontains': text}), 'search', binding)]

    def _statuses(self, query: ListQuery):
        if not isinstance(query.statuses, Constraint):
            return []

        column = self._require(self.listing.status_field, 'statuses')
        values = sorted(query.statuses.value)
        return [(Q(**{f'{column}__in': values}), 'statuses', column)]

    def _numeric_range(self, query: ListQuery):
        if not isinstance(query.numeric_range, Constraint):
            return []

        column = self._require(self.listing.numeric_field, 'numericRange')
        numeric_range = query.numeric_range.value
        parts = []
        if numeric_range.minimum is not None:
            parts.append((Q(**{f'{column}__gte': numeric_range.minimum}), 'numeric.min', column))
        if numeric_range.maximum is not None:
            parts.append((Q(**{f'{column}__lte': numeric_range.maximum}), 'numeric.max', column))
        return parts

    def _currency(self, query: ListQuery):
        if not isinstance(query.currency, Constraint):
            return []

        column = self._require(self.listing.currency_field, 'currency')
        return [(Q(**{column: query.currency.value}), 'currency', column)]

    def _address_conditions(self, query: ListQuery):
        if not isinstance(query.address_conditions, Constraint):
            return []

        parts = []
        for condition in query.address_conditions.value:
            column = self.listing.address_fields.get(condition.field)
            if column is None:
                raise ImproperlyConfigured(
                    f'Поле адреса "{condition.field}" не объявлено для {self.listing.name}'
                )
            substring = condition.substring.strip()
            if not substring:
                continue
            parts.append((
                Q(**{f'{column}__icontains': substring}),
                f'address.{condition.field}', column,
            ))
        return parts

    def _product_ids(self, query: ListQuery):
        if not isinstance(query.product_ids, Constraint):
            return []

        membership = self._require(self.listing.product_membership, 'productIds')
        return [
            (Q(membership.exists_for(product_id)), f'product.{product_id}', membership.product_field)
            for product_id in query.product_ids.value
        ]


def compile_predicate(
        listing: EntityListing,
        query: ListQuery,
        scope: Optional[Q] = None,
        now: Optional[datetime] = None,
) -> CompiledPredicate:
    return PredicateCompiler(listing, now=now).compile(query, scope=scope)
