# listing/serializers.py
"""
Разбор плоских параметров запроса (query string или JSON) в ListQuery.

Сериализатор каждой сущности наследует BaseListQuerySerializer и
объявляет:
- listing: EntityListing (колонки поиска и сортировки берутся отсюда)
- date_range_keys: ключ поля даты -> (ключ "от", ключ "до")
- numeric_keys: (ключ минимума, ключ максимума) или None
- entity_criteria(): остальные критерии сущности

validate() возвращает готовый ListQuery, поэтому validated_data - это ListQuery.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from rest_framework import serializers
from rest_framework.utils import html

from .criteria import (
    AddressCondition,
    AddressField,
    Constraint,
    DateRange,
    ListQuery,
    NO_CONSTRAINT,
    NumericRange,
    SearchCriterion,
    SortDirection,
    SortSpec,
    constraint_or_none,
    default_page_size,
    max_page_size,
)
from .entities import EntityListing
from .exceptions import ListQueryValidationError


class AddressConditionField(serializers.Field):
    """
    Условие по адресу.

    JSON: {"type": "city", "value": "Paris"}
    Query string: addressConditions=city:Paris
    """

    default_error_messages = {
        'invalid': 'Ожидается объект {{"type", "value"}} или строка "type:value"',
        'unknown_type': 'Неизвестное поле адреса: {type}',
    }

    def to_internal_value(self, data: Any) -> AddressCondition:
        if isinstance(data, str):
            kind, separator, value = data.partition(':')
            if not separator:
                self.fail('invalid')
        elif isinstance(data, Mapping):
            kind = data.get('type')
            value = data.get('value')
        else:
            self.fail('invalid')

        if kind not in AddressField.values:
            self.fail('unknown_type', type=kind)
        if value is None:
            value = ''
        if not isinstance(value, str):
            self.fail('invalid')

        return AddressCondition(field=kind, substring=value)

    def to_representation(self, value: AddressCondition) -> Dict[str, str]:
        return {'type': value.field, 'value': value.substring}


class FlatListField(serializers.ListField):
    """
    Список из плоских параметров.

    Query string: key=a&key=b, key[]=a&key[]=b или key[0]=a
    JSON: {"key": [...]} или {"key[]": [...]}
    """

    def get_value(self, dictionary):
        bracketed = f'{self.field_name}[]'
        if self.field_name not in dictionary and bracketed in dictionary:
            if html.is_html_input(dictionary):
                return dictionary.getlist(bracketed)
            return dictionary[bracketed]
        return super().get_value(dictionary)


class BaseListQuerySerializer(serializers.Serializer):
    """Общие параметры списков: поиск, адрес, сортировка, пагинация."""

    listing: EntityListing = None
    default_search_column: Optional[str] = None
    date_range_keys: Dict[str, Tuple[str, str]] = {}
    numeric_keys: Optional[Tuple[str, str]] = None

    searchQuery = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=False,
        help_text='Текст поиска (без учёта регистра)'
    )

    addressConditions = FlatListField(
        child=AddressConditionField(),
        required=False,
        default=list,
        help_text='Условия по адресу, объединяются через AND'
    )

    sortDirection = serializers.ChoiceField(
        choices=SortDirection.choices,
        required=False,
        default=SortDirection.DESC,
        help_text='asc или desc'
    )

    page = serializers.IntegerField(
        required=False,
        default=1,
        min_value=1,
        help_text='Номер страницы, начиная с 1'
    )

    limit = serializers.IntegerField(
        required=False,
        default=default_page_size,
        help_text='Размер страницы'
    )

    def get_fields(self):
        fields = super().get_fields()
        search_columns = list(self.listing.search_columns)

        fields['searchColumn'] = serializers.ChoiceField(
            choices=search_columns,
            required=False,
            default=self.default_search_column or search_columns[0],
            help_text='Колонка поиска'
        )
        fields['sortColumn'] = serializers.ChoiceField(
            choices=self.listing.sort.columns,
            required=False,
            default=self.listing.sort.default_column,
            help_text='Колонка сортировки'
        )
        return fields

    def validate_limit(self, value: int) -> int:
        if value <= 0:
            raise serializers.ValidationError('Размер страницы должен быть больше 0')
        if value > max_page_size():
            raise serializers.ValidationError(
                f'Размер страницы не может превышать {max_page_size()}'
            )
        return value

    # =========================================================================
    # ХУКИ СУЩНОСТИ
    # =========================================================================

    def entity_criteria(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def entity_representation(self, query: ListQuery, data: Dict[str, Any]) -> None:
        pass

    # =========================================================================
    # СБОРКА ListQuery
    # =========================================================================

    def _date_ranges(self, attrs: Dict[str, Any], errors: Dict[str, list]) -> Tuple[DateRange, ...]:
        ranges = []
        for key, (from_key, to_key) in self.date_range_keys.items():
            date_from = attrs.get(from_key)
            date_to = attrs.get(to_key)
            if date_from and date_to and date_from > date_to:
                errors[from_key] = ['Дата "от" не может быть позже даты "до"']
            elif date_from or date_to:
                ranges.append(DateRange(field=key, date_from=date_from, date_to=date_to))
        return tuple(ranges)

    def _numeric_range(self, attrs: Dict[str, Any], errors: Dict[str, list]):
        if not self.numeric_keys:
            return NO_CONSTRAINT

        min_key, max_key = self.numeric_keys
        minimum = attrs.get(min_key)
        maximum = attrs.get(max_key)

        if minimum is not None and maximum is not None and minimum > maximum:
            errors[min_key] = ['Минимум не может быть больше максимума']
            return NO_CONSTRAINT
        if minimum is None and maximum is None:
            return NO_CONSTRAINT
        return Constraint(NumericRange(minimum=minimum, maximum=maximum))

    def validate(self, attrs: Dict[str, Any]) -> ListQuery:
        errors: Dict[str, list] = {}
        date_ranges = self._date_ranges(attrs, errors)
        numeric_range = self._numeric_range(attrs, errors)
        if errors:
            raise serializers.ValidationError(errors)

        search_text = attrs.get('searchQuery') or ''
        search = NO_CONSTRAINT
        if search_text.strip():
            search = Constraint(SearchCriterion(column=attrs['searchColumn'], text=search_text))

        # Пустые условия адреса не ограничивают выборку
        address_conditions = tuple(
            condition for condition in attrs.get('addressConditions', [])
            if condition.substring.strip()
        )

        try:
            return ListQuery(
                sort=SortSpec(column=attrs['sortColumn'], direction=attrs['sortDirection']),
                search=search,
                date_ranges=constraint_or_none(date_ranges),
                numeric_range=numeric_range,
                address_conditions=constraint_or_none(address_conditions),
                page=attrs['page'],
                page_size=attrs['limit'],
                **self.entity_criteria(attrs),
            )
        except ListQueryValidationError as e:
            raise serializers.ValidationError(e.detail)

    def to_representation(self, query: ListQuery) -> Dict[str, Any]:
        """ListQuery -> плоские параметры (обратное преобразование)."""
        data: Dict[str, Any] = {}

        if isinstance(query.search, Constraint):
            data['searchColumn'] = query.search.value.column
            data['searchQuery'] = query.search.value.text

        for key, (from_key, to_key) in self.date_range_keys.items():
            date_range = query.date_range_for(key)
            if date_range is None:
                continue
            if date_range.date_from:
                data[from_key] = date_range.date_from.isoformat()
            if date_range.date_to:
                data[to_key] = date_range.date_to.isoformat()

        if self.numeric_keys and isinstance(query.numeric_range, Constraint):
            min_key, max_key = self.numeric_keys
            numeric_range = query.numeric_range.value
            if numeric_range.minimum is not None:
                data[min_key] = str(numeric_range.minimum)
            if numeric_range.maximum is not None:
                data[max_key] = str(numeric_range.maximum)

        if isinstance(query.address_conditions, Constraint):
            data['addressConditions'] = [
                {'type': condition.field, 'value': condition.substring}
                for condition in query.address_conditions.value
            ]

        self.entity_representation(query, data)

        data['sortColumn'] = query.sort.column
        data['sortDirection'] = str(query.sort.direction)
        data['page'] = query.page
        data['limit'] = query.page_size
        return data


def parse_list_query(serializer_class, data) -> ListQuery:
    """
    Плоские параметры -> ListQuery.

    Raises:
        ListQueryValidationError: с ошибками по полям
    """
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise ListQueryValidationError(serializer.errors)
    return serializer.validated_data
