"""Общие фикстуры: пользователи, товары, API клиенты."""

import pytest
from rest_framework.test import APIClient

from products.models import Product
from users.models import User

from .factories import make_user


@pytest.fixture(autouse=True)
def plain_http(settings):
    """Тестовый клиент ходит по http."""
    settings.SECURE_SSL_REDIRECT = False


@pytest.fixture
def admin_user(db):
    return User.objects.create_superuser(email='admin@example.com', password='admin-pass-123', name='Admin')


@pytest.fixture
def customer(db):
    return make_user('buyer@example.com', name='Buyer')


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def customer_client(customer):
    client = APIClient()
    client.force_authenticate(user=customer)
    return client


@pytest.fixture
def products(db):
    return [Product.objects.create(name=name) for name in ('Tea', 'Coffee', 'Cocoa')]
