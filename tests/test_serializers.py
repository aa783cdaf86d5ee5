"""Разбор плоских параметров списка в ListQuery."""

from datetime import date
from decimal import Decimal

import pytest
from django.http import QueryDict

from listing.criteria import (
    AddressCondition,
    Constraint,
    NO_CONSTRAINT,
    NumericRange,
    SearchCriterion,
    SortSpec,
)
from listing.exceptions import ListQueryValidationError
from listing.serializers import parse_list_query
from orders.serializers import OrderListQuerySerializer
from users.serializers import UserListQuerySerializer


def parse_orders(data):
    return parse_list_query(OrderListQuerySerializer, data)


def errors_of(data, serializer_class=OrderListQuerySerializer):
    with pytest.raises(ListQueryValidationError) as exc_info:
        parse_list_query(serializer_class, data)
    return exc_info.value.detail


class TestOrderQueryParsing:

    def test_empty_input_gives_defaults(self):
        query = parse_orders({})

        assert query.sort == SortSpec(column='date', direction='desc')
        assert query.page == 1
        assert query.page_size == 20
        assert query.time_range is NO_CONSTRAINT
        assert query.search is NO_CONSTRAINT
        assert query.statuses is NO_CONSTRAINT
        assert query.product_ids is NO_CONSTRAINT
        assert query.date_ranges is NO_CONSTRAINT

    def test_query_string(self):
        params = QueryDict(
            'timeRange=THIS%20MONTH&statuses=PENDING&statuses=SHIPPED'
            '&searchColumn=email&searchQuery=bob'
            '&totalMin=100&totalMax=110&currency=EUR'
            '&addressConditions=city:Paris&addressConditions=postal:750'
            '&productIds=3&productIds=7'
            '&sortColumn=status&sortDirection=asc&page=2&limit=50'
        )
        query = parse_orders(params)

        assert query.time_range == Constraint('THIS MONTH')
        assert query.statuses == Constraint(frozenset({'PENDING', 'SHIPPED'}))
        assert query.search == Constraint(SearchCriterion(column='email', text='bob'))
        assert query.numeric_range == Constraint(NumericRange(Decimal('100'), Decimal('110')))
        assert query.currency == Constraint('EUR')
        assert query.address_conditions == Constraint((
            AddressCondition('city', 'Paris'),
            AddressCondition('postal', '750'),
        ))
        assert query.product_ids == Constraint((3, 7))
        assert query.sort == SortSpec(column='status', direction='asc')
        assert query.page == 2
        assert query.page_size == 50

    def test_json_body(self):
        query = parse_orders({
            'addressConditions': [{'type': 'country', 'value': 'France'}],
            'dateFrom': '2024-01-01',
            'dateTo': '2024-01-31',
        })

        assert query.address_conditions == Constraint((AddressCondition('country', 'France'),))
        created = query.date_range_for('created')
        assert created.date_from == date(2024, 1, 1)
        assert created.date_to == date(2024, 1, 31)

    def test_product_ids_are_deduplicated_in_order(self):
        query = parse_orders({'productIds': [7, 3, 7, 3]})
        assert query.product_ids == Constraint((7, 3))

    def test_blank_search_is_no_constraint(self):
        assert parse_orders({'searchQuery': '   '}).search is NO_CONSTRAINT

    def test_search_text_is_kept_as_given(self):
        query = parse_orders({'searchQuery': ' A-1 '})
        assert query.search == Constraint(SearchCriterion(column='order_id', text=' A-1 '))

    def test_blank_address_conditions_are_dropped(self):
        query = parse_orders({'addressConditions': [
            {'type': 'city', 'value': '  '},
            {'type': 'region', 'value': ''},
        ]})
        assert query.address_conditions is NO_CONSTRAINT

    def test_empty_statuses_mean_all(self):
        assert parse_orders({'statuses': []}).statuses is NO_CONSTRAINT

    def test_total_currency_alias(self):
        assert parse_orders({'totalCurrency': 'USD'}).currency == Constraint('USD')

    def test_time_range_all(self):
        assert parse_orders({'timeRange': 'ALL'}).time_range == Constraint('ALL')


class TestOrderQueryRejections:

    @pytest.mark.parametrize('data, key', [
        ({'page': 0}, 'page'),
        ({'page': 'x'}, 'page'),
        ({'limit': 0}, 'limit'),
        ({'limit': 101}, 'limit'),
        ({'statuses': ['LOST']}, 'statuses'),
        ({'timeRange': '2 WEEKS'}, 'timeRange'),
        ({'dateFrom': '2024-13-01'}, 'dateFrom'),
        ({'dateFrom': '2024-02-01', 'dateTo': '2024-01-01'}, 'dateFrom'),
        ({'totalMin': '110', 'totalMax': '100'}, 'totalMin'),
        ({'sortColumn': 'total'}, 'sortColumn'),
        ({'sortDirection': 'up'}, 'sortDirection'),
        ({'searchColumn': 'phone'}, 'searchColumn'),
        ({'addressConditions': ['street:Main']}, 'addressConditions'),
        ({'addressConditions': ['Paris']}, 'addressConditions'),
        ({'productIds': [0]}, 'productIds'),
    ])
    def test_rejected(self, data, key):
        assert key in errors_of(data)


class TestRoundTrip:

    def test_flat_form_reparses_to_same_query(self):
        query = parse_orders({
            'timeRange': '3 MONTHS',
            'searchColumn': 'customer',
            'searchQuery': 'Ann',
            'statuses': ['REFUNDED', 'PENDING'],
            'dateFrom': '2024-01-01',
            'totalMin': '5.50',
            'currency': 'EUR',
            'addressConditions': [{'type': 'city', 'value': 'Lyon'}],
            'productIds': [2, 9],
            'sortColumn': 'status',
            'sortDirection': 'asc',
            'page': 3,
            'limit': 10,
        })

        flat = OrderListQuerySerializer(query).data

        assert flat['statuses'] == ['PENDING', 'REFUNDED']
        assert parse_orders(dict(flat)) == query

    def test_user_flat_form_reparses_to_same_query(self):
        query = parse_list_query(UserListQuerySerializer, {
            'lastOrderFrom': '2024-05-01',
            'lastOrderTo': '2024-05-31',
            'orderCountMin': 2,
            'sortColumn': 'last_order',
        })

        flat = UserListQuerySerializer(query).data

        assert flat['lastOrderFrom'] == '2024-05-01'
        assert parse_list_query(UserListQuerySerializer, dict(flat)) == query


class TestUserQueryParsing:

    def test_defaults(self):
        query = parse_list_query(UserListQuerySerializer, {})
        assert query.sort == SortSpec(column='last_login', direction='desc')

    def test_order_count_range(self):
        query = parse_list_query(UserListQuerySerializer, {'orderCountMin': 1, 'orderCountMax': 3})
        assert query.numeric_range == Constraint(NumericRange(1, 3))

    @pytest.mark.parametrize('data, key', [
        ({'lastLogInFrom': '2024-02-01', 'lastLogInTo': '2024-01-01'}, 'lastLogInFrom'),
        ({'orderCountMin': 5, 'orderCountMax': 1}, 'orderCountMin'),
        ({'orderCountMin': -1}, 'orderCountMin'),
        ({'sortColumn': 'date'}, 'sortColumn'),
        ({'searchColumn': 'customer'}, 'searchColumn'),
    ])
    def test_rejected(self, data, key):
        assert key in errors_of(data, UserListQuerySerializer)
