"""Админка заказов: приоритет статуса и массовые действия."""

import pytest
from django.contrib import admin

from orders.admin import OrderAdmin
from orders.models import Order, OrderStatus

from .factories import make_order


@pytest.fixture
def order_admin(monkeypatch):
    model_admin = OrderAdmin(Order, admin.site)
    monkeypatch.setattr(model_admin, 'message_user', lambda request, message: None)
    return model_admin


@pytest.fixture
def admin_request(rf, admin_user):
    request = rf.get('/admin/orders/order/')
    request.user = admin_user
    return request


@pytest.mark.django_db
def test_priority_uses_status_rank(order_admin, admin_request):
    make_order(order_number='R', status=OrderStatus.REFUNDED)
    make_order(order_number='P', status=OrderStatus.PENDING)

    rows = order_admin.get_queryset(admin_request).order_by('priority_rank')

    assert [order.order_number for order in rows] == ['P', 'R']
    assert [order_admin.status_priority(order) for order in rows] == [1, 7]


@pytest.mark.django_db
def test_accept_cancel_requests_touches_only_cancelling(order_admin, admin_request):
    cancelling = make_order(status=OrderStatus.CANCELLING)
    shipped = make_order(status=OrderStatus.SHIPPED)

    order_admin.accept_cancel_requests(admin_request, Order.objects.all())

    cancelling.refresh_from_db()
    shipped.refresh_from_db()
    assert cancelling.status == OrderStatus.CANCELLED
    assert shipped.status == OrderStatus.SHIPPED


@pytest.mark.django_db
def test_accept_refund_requests(order_admin, admin_request):
    requested = make_order(status=OrderStatus.REQUESTED)

    order_admin.accept_refund_requests(admin_request, Order.objects.all())

    requested.refresh_from_db()
    assert requested.status == OrderStatus.REFUNDED
