"""Модель критериев: инварианты ListQuery и ListResult."""

from datetime import date
from decimal import Decimal

import pytest

from listing.criteria import (
    Constraint,
    DateRange,
    ListQuery,
    ListResult,
    NO_CONSTRAINT,
    NoConstraint,
    NumericRange,
    SortSpec,
    constraint_or_none,
)
from listing.exceptions import ListQueryValidationError


SORT = SortSpec(column='date')


class TestConstraint:

    def test_empty_values_mean_no_constraint(self):
        for value in (None, '', (), [], frozenset()):
            assert constraint_or_none(value) is NO_CONSTRAINT

    def test_value_is_wrapped(self):
        assert constraint_or_none(frozenset({'PENDING'})) == Constraint(frozenset({'PENDING'}))

    def test_no_constraint_is_singleton_and_falsy(self):
        assert NoConstraint() is NO_CONSTRAINT
        assert not NO_CONSTRAINT


class TestListQuery:

    def test_defaults(self):
        query = ListQuery(sort=SORT)
        assert query.page == 1
        assert query.page_size == 20
        assert query.offset == 0
        assert query.statuses is NO_CONSTRAINT

    def test_offset(self):
        assert ListQuery(sort=SORT, page=3, page_size=20).offset == 40

    @pytest.mark.parametrize('page, page_size, key', [
        (0, 20, 'page'),
        (1, 0, 'limit'),
        (1, 101, 'limit'),
    ])
    def test_rejects_bad_pagination(self, page, page_size, key):
        with pytest.raises(ListQueryValidationError) as exc_info:
            ListQuery(sort=SORT, page=page, page_size=page_size)
        assert key in exc_info.value.detail

    def test_max_page_size_follows_settings(self, settings):
        settings.LISTING_MAX_PAGE_SIZE = 10
        with pytest.raises(ListQueryValidationError):
            ListQuery(sort=SORT, page_size=11)

    def test_date_range_for_skips_empty_ranges(self):
        query = ListQuery(
            sort=SORT,
            date_ranges=Constraint((
                DateRange(field='created'),
                DateRange(field='created', date_from=date(2024, 1, 1)),
            )),
        )
        assert query.date_range_for('created').date_from == date(2024, 1, 1)
        assert query.date_range_for('missing') is None


class TestRanges:

    def test_date_from_after_date_to_is_rejected(self):
        with pytest.raises(ListQueryValidationError):
            DateRange(field='created', date_from=date(2024, 2, 1), date_to=date(2024, 1, 1))

    def test_same_day_range_is_allowed(self):
        assert not DateRange(field='created', date_from=date(2024, 1, 1), date_to=date(2024, 1, 1)).is_empty

    def test_min_above_max_is_rejected(self):
        with pytest.raises(ListQueryValidationError):
            NumericRange(minimum=Decimal('110'), maximum=Decimal('100'))


class TestListResult:

    @pytest.mark.parametrize('total, page_size, pages', [
        (0, 20, 0),
        (1, 20, 1),
        (20, 20, 1),
        (45, 20, 3),
    ])
    def test_total_pages(self, total, page_size, pages):
        assert ListResult(items=[], total_count=total, page=1, page_size=page_size).total_pages == pages

    def test_to_dict_shape(self):
        data = ListResult(items=[], total_count=45, page=2, page_size=20).to_dict()
        assert data == {'items': [], 'totalCount': 45, 'page': 2, 'limit': 20, 'totalPages': 3}
