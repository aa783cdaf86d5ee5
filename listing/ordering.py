# listing/ordering.py
"""
Разрешение сортировки.

Для каждой колонки сортировки ровно одна стратегия:
- FieldOrdering: прямое сравнение хранимого поля (дата)
- RankOrdering: сортировка по бизнес-рангу перечисления
  (CASE status WHEN ... THEN rank ... END)

Направление в RankOrdering применяется к рангу, а не к значению
перечисления: asc = сначала то, что требует внимания (меньший ранг).

Обе стратегии добавляют в конец сортировку по pk в том же направлении,
поэтому порядок детерминирован, а смена направления даёт ровно
обратную последовательность.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from django.core.exceptions import ImproperlyConfigured
from django.db.models import Case, F, IntegerField, Value, When

from .criteria import SortDirection, SortSpec
from .exceptions import ListQueryValidationError


@dataclass(frozen=True)
class OrderSpec:
    """Готовая сортировка для исполнителя."""
    strategy: str
    column: str
    expressions: Tuple[Any, ...]


def _tie_break(descending: bool):
    return F('pk').desc() if descending else F('pk').asc()


class OrderStrategy:
    """Стратегия построения ORDER BY для одной колонки."""

    kind = ''

    def build_order(self, direction: str) -> OrderSpec:
        raise NotImplementedError


class FieldOrdering(OrderStrategy):
    """
    Сортировка по хранимому полю.

    nullable=True: пустые значения в конце при desc и в начале при asc,
    чтобы обратный порядок оставался точным зеркалом.
    """

    kind = 'field'

    def __init__(self, field_name: str, nullable: bool = False):
        self.field_name = field_name
        self.nullable = nullable

    def build_order(self, direction: str) -> OrderSpec:
        descending = direction == SortDirection.DESC
        expression = F(self.field_name)

        if descending:
            ordered = expression.desc(nulls_last=True) if self.nullable else expression.desc()
        else:
            ordered = expression.asc(nulls_first=True) if self.nullable else expression.asc()

        return OrderSpec(
            strategy=self.kind,
            column=self.field_name,
            expressions=(ordered, _tie_break(descending)),
        )


class RankOrdering(OrderStrategy):
    """
    Сортировка по таблице рангов перечисления.

    Таблица передаётся снаружи и должна быть единственным источником
    порядка статусов. Значения вне таблицы получают ранг после последнего.
    """

    kind = 'rank'

    def __init__(self, field_name: str, ranks: Mapping[str, int]):
        if not ranks:
            raise ImproperlyConfigured(f'Пустая таблица рангов для поля {field_name}')
        if len(set(ranks.values())) != len(ranks):
            raise ImproperlyConfigured(f'Ранги поля {field_name} должны быть уникальны')

        self.field_name = field_name
        self.ranks = ranks

    def rank_expression(self) -> Case:
        whens = [
            When(**{self.field_name: value}, then=Value(rank))
            for value, rank in sorted(self.ranks.items(), key=lambda pair: pair[1])
        ]
        return Case(
            *whens,
            default=Value(max(self.ranks.values()) + 1),
            output_field=IntegerField(),
        )

    def build_order(self, direction: str) -> OrderSpec:
        descending = direction == SortDirection.DESC
        expression = self.rank_expression()
        ordered = expression.desc() if descending else expression.asc()

        return OrderSpec(
            strategy=self.kind,
            column=self.field_name,
            expressions=(ordered, _tie_break(descending)),
        )


class SortResolver:
    """
    Выбор стратегии по колонке сортировки.

    Единственное место, которое знает о таблице рангов;
    вызывающий код работает только с именами колонок.
    """

    def __init__(
            self,
            strategies: Mapping[str, OrderStrategy],
            default_column: str,
            default_direction: str = SortDirection.DESC,
    ):
        if default_column not in strategies:
            raise ImproperlyConfigured(
                f'Колонка сортировки по умолчанию "{default_column}" не объявлена'
            )
        self.strategies = dict(strategies)
        self.default_column = default_column
        self.default_direction = default_direction

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(self.strategies)

    def default_sort(self) -> SortSpec:
        return SortSpec(column=self.default_column, direction=self.default_direction)

    def resolve(self, sort: SortSpec) -> OrderSpec:
        strategy = self.strategies.get(sort.column)
        if strategy is None:
            raise ImproperlyConfigured(f'Неизвестная колонка сортировки: {sort.column}')
        if sort.direction not in SortDirection.values:
            raise ImproperlyConfigured(f'Неизвестное направление сортировки: {sort.direction}')
        return strategy.build_order(sort.direction)

    def toggle(self, current: Optional[SortSpec], column: str) -> SortSpec:
        """
        Клик по заголовку колонки.

        Та же колонка - направление меняется на противоположное.
        Другая колонка - направление сбрасывается на значение по умолчанию.
        """
        if column not in self.strategies:
            raise ListQueryValidationError({'sortColumn': [f'Неизвестная колонка: {column}']})

        if current is not None and current.column == column:
            flipped = SortDirection.ASC if current.descending else SortDirection.DESC
            return SortSpec(column=column, direction=flipped)

        return SortSpec(column=column, direction=self.default_direction)
