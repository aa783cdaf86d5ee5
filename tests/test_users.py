"""Список пользователей, сигнал заказа и пересчёт last_order_at."""

from datetime import date, timedelta

import pytest
from django.utils import timezone

from listing.criteria import (
    AddressCondition,
    Constraint,
    DateRange,
    ListQuery,
    NumericRange,
    SearchCriterion,
    SortSpec,
)
from listing.services import ListingService
from orders.models import Order
from users.listing import USER_LISTING
from users.models import User
from users.tasks import sync_last_order_dates

from .factories import aware, make_order, make_user


def list_users(sort=SortSpec('last_login', 'desc'), **criteria):
    query = ListQuery(sort=sort, page_size=100, **criteria)
    return ListingService.list_records(listing=USER_LISTING, query=query)


def emails(result):
    return [item.email for item in result.items]


@pytest.mark.django_db
class TestUserFilters:

    @pytest.fixture(autouse=True)
    def users(self, db):
        self.busy = make_user('busy@example.com', name='Busy', city='Paris')
        self.single = make_user('single@example.com', name='Single', city='Lyon')
        self.idle = make_user('idle@example.com')

        for number in ('ZX-777', 'ZX-778', 'QQ-1'):
            make_order(order_number=number, user=self.busy)
        make_order(order_number='QQ-2', user=self.single)

    @pytest.mark.parametrize('minimum, maximum, expected', [
        (1, None, {'busy@example.com', 'single@example.com'}),
        (None, 0, {'idle@example.com'}),
        (2, 3, {'busy@example.com'}),
    ])
    def test_order_count_range(self, minimum, maximum, expected):
        result = list_users(numeric_range=Constraint(NumericRange(minimum, maximum)))
        assert set(emails(result)) == expected

    def test_order_count_is_reported(self):
        counts = {item.email: item.order_count for item in list_users().items}
        assert counts == {
            'busy@example.com': 3,
            'single@example.com': 1,
            'idle@example.com': 0,
        }

    def test_search_by_order_number(self):
        result = list_users(search=Constraint(SearchCriterion('order_id', 'zx-7')))
        assert emails(result) == ['busy@example.com']

    def test_search_by_order_number_counts_user_once(self):
        result = list_users(search=Constraint(SearchCriterion('order_id', 'QQ')))
        assert result.total_count == 2

    def test_search_by_name(self):
        result = list_users(search=Constraint(SearchCriterion('name', 'sing')))
        assert emails(result) == ['single@example.com']

    def test_address_condition(self):
        result = list_users(address_conditions=Constraint((AddressCondition('city', 'lyo'),)))
        assert emails(result) == ['single@example.com']

    def test_unknown_name_falls_back(self):
        result = list_users(search=Constraint(SearchCriterion('email', 'idle')))
        assert result.items[0].name == 'Unknown'
        assert result.items[0].to_dict()['lastOrderAt'] is None

    def test_last_order_range(self):
        User.objects.filter(pk=self.busy.pk).update(last_order_at=aware(2024, 5, 10))
        User.objects.filter(pk=self.single.pk).update(last_order_at=aware(2024, 6, 1))

        result = list_users(date_ranges=Constraint((
            DateRange('last_order', date(2024, 5, 1), date(2024, 5, 31)),
        )))

        assert emails(result) == ['busy@example.com']


@pytest.mark.django_db
class TestUserSort:

    @pytest.fixture(autouse=True)
    def users(self, db):
        for email, last_login in [
            ('old@example.com', aware(2024, 1, 1)),
            ('never@example.com', None),
            ('new@example.com', aware(2024, 6, 1)),
        ]:
            user = make_user(email)
            User.objects.filter(pk=user.pk).update(last_login=last_login)

    def test_desc_puts_never_logged_in_last(self):
        assert emails(list_users()) == ['new@example.com', 'old@example.com', 'never@example.com']

    def test_asc_is_exact_reverse(self):
        ascending = emails(list_users(sort=SortSpec('last_login', 'asc')))
        assert ascending == ['never@example.com', 'old@example.com', 'new@example.com']


@pytest.mark.django_db
class TestLastOrderDate:

    def test_new_order_updates_user(self, customer):
        order = make_order(user=customer)
        customer.refresh_from_db()
        assert customer.last_order_at == order.created_at

    def test_older_date_is_not_applied(self, customer):
        future = timezone.now() + timedelta(days=1)
        User.objects.filter(pk=customer.pk).update(last_order_at=future)

        make_order(user=customer)

        customer.refresh_from_db()
        assert customer.last_order_at == future

    def test_guest_order(self):
        order = make_order(user=None)
        assert order.user_id is None

    def test_sync_task_recomputes_from_orders(self, customer):
        first = make_order(user=customer, created_at=aware(2024, 2, 1))
        make_order(user=customer, created_at=aware(2024, 1, 1))
        idle = make_user('idle@example.com')
        User.objects.filter(pk=idle.pk).update(last_order_at=aware(2023, 1, 1))

        sync_last_order_dates()

        customer.refresh_from_db()
        idle.refresh_from_db()
        assert customer.last_order_at == first.created_at
        assert idle.last_order_at is None

    def test_sync_task_after_order_deleted(self, customer):
        kept = make_order(user=customer, created_at=aware(2024, 1, 1))
        latest = make_order(user=customer, created_at=aware(2024, 3, 1))
        Order.objects.filter(pk=latest.pk).delete()

        sync_last_order_dates()

        customer.refresh_from_db()
        assert customer.last_order_at == kept.created_at
