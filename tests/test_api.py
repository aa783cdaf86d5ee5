"""HTTP API списков заказов и пользователей."""

import pytest
from rest_framework.test import APIClient

from products.models import Product

from .factories import make_order, make_user


@pytest.mark.django_db
class TestOrdersEndpoint:

    def test_list_shape(self, admin_client):
        for status in ('CANCELLED', 'PENDING', 'SHIPPED', 'DELIVERED'):
            make_order(order_number=status, status=status)

        response = admin_client.get('/api/orders/', {
            'statuses': ['PENDING', 'SHIPPED', 'CANCELLED'],
            'sortColumn': 'status',
            'sortDirection': 'asc',
            'limit': 2,
        })

        assert response.status_code == 200
        assert response.data['totalCount'] == 3
        assert response.data['page'] == 1
        assert response.data['limit'] == 2
        assert response.data['totalPages'] == 2
        assert [item['orderNumber'] for item in response.data['items']] == ['PENDING', 'SHIPPED']
        assert set(response.data['items'][0]) == {
            'id', 'orderNumber', 'createdAt', 'customerName',
            'customerEmail', 'status', 'total', 'currency',
        }

    def test_address_conditions_in_query_string(self, admin_client):
        make_order(order_number='PARIS', shipping_city='Paris')
        make_order(order_number='LYON', shipping_city='Lyon')

        response = admin_client.get('/api/orders/?addressConditions=city:pari')

        assert [item['orderNumber'] for item in response.data['items']] == ['PARIS']

    def test_statuses_with_bracket_key(self, admin_client):
        make_order(order_number='P', status='PENDING')
        make_order(order_number='S', status='SHIPPED')

        response = admin_client.get('/api/orders/?statuses[]=PENDING')

        assert response.status_code == 200
        assert response.data['totalCount'] == 1
        assert response.data['items'][0]['orderNumber'] == 'P'

    def test_unknown_status_with_bracket_key(self, admin_client):
        response = admin_client.get('/api/orders/?statuses[]=LOST')

        assert response.status_code == 400
        assert 'statuses' in response.data

    def test_product_ids_with_bracket_key(self, admin_client, products):
        tea, coffee, _ = products
        both = make_order(order_number='BOTH')
        both.items.create(product=tea, quantity=1)
        both.items.create(product=coffee, quantity=1)
        only_tea = make_order(order_number='TEA')
        only_tea.items.create(product=tea, quantity=1)

        response = admin_client.get(f'/api/orders/?productIds[]={tea.pk}&productIds[]={coffee.pk}')

        assert [item['orderNumber'] for item in response.data['items']] == ['BOTH']

    def test_address_conditions_with_bracket_key(self, admin_client):
        make_order(order_number='PARIS', shipping_city='Paris')
        make_order(order_number='LYON', shipping_city='Lyon')

        response = admin_client.get('/api/orders/?addressConditions[]=city:lyo')

        assert [item['orderNumber'] for item in response.data['items']] == ['LYON']

    def test_search_with_json_body(self, admin_client, products):
        tea = products[0]
        order = make_order(order_number='WITH-TEA')
        order.items.create(product=tea, quantity=1)
        make_order(order_number='NO-TEA')

        response = admin_client.post('/api/orders/search/', {
            'productIds': [tea.pk],
            'addressConditions': [{'type': 'country', 'value': 'france'}],
        }, format='json')

        assert response.status_code == 200
        assert [item['orderNumber'] for item in response.data['items']] == ['WITH-TEA']

    @pytest.mark.parametrize('params, key', [
        ({'limit': 101}, 'limit'),
        ({'page': 0}, 'page'),
        ({'statuses': 'LOST'}, 'statuses'),
        ({'dateFrom': '2024-02-01', 'dateTo': '2024-01-01'}, 'dateFrom'),
        ({'sortColumn': 'total'}, 'sortColumn'),
    ])
    def test_invalid_params(self, admin_client, params, key):
        response = admin_client.get('/api/orders/', params)

        assert response.status_code == 400
        assert key in response.data

    def test_customer_is_forbidden(self, customer_client):
        response = customer_client.get('/api/orders/')
        assert response.status_code == 403

    def test_anonymous_is_rejected(self, db):
        response = APIClient().get('/api/orders/')
        assert response.status_code == 401

    def test_product_options(self, admin_client):
        Product.objects.create(name='Hidden', is_active=False)
        Product.objects.create(name='Older')
        Product.objects.create(name='Newer')

        response = admin_client.get('/api/orders/products/')

        assert response.status_code == 200
        assert [option['name'] for option in response.data] == ['Newer', 'Older']
        assert set(response.data[0]) == {'id', 'name'}

    def test_product_options_for_customer(self, customer_client):
        assert customer_client.get('/api/orders/products/').status_code == 403


@pytest.mark.django_db
class TestUsersEndpoint:

    def test_list(self, admin_client, admin_user):
        buyer = make_user('buyer@example.com', name='Buyer')
        make_order(user=buyer)

        response = admin_client.get('/api/users/', {'searchColumn': 'email', 'searchQuery': 'buyer'})

        assert response.status_code == 200
        assert response.data['totalCount'] == 1
        item = response.data['items'][0]
        assert item['email'] == 'buyer@example.com'
        assert item['orderCount'] == 1
        assert item['lastOrderAt'] is not None

    def test_search_with_json_body(self, admin_client):
        make_user('a@example.com')
        make_user('b@example.com')

        response = admin_client.post('/api/users/search/', {
            'searchColumn': 'email',
            'searchQuery': 'b@',
        }, format='json')

        assert [item['email'] for item in response.data['items']] == ['b@example.com']

    def test_invalid_order_count_range(self, admin_client):
        response = admin_client.get('/api/users/', {'orderCountMin': 3, 'orderCountMax': 1})

        assert response.status_code == 400
        assert 'orderCountMin' in response.data

    def test_customer_is_forbidden(self, customer_client):
        assert customer_client.get('/api/users/').status_code == 403

    def test_user_orders_are_scoped(self, admin_client):
        buyer = make_user('buyer@example.com')
        other = make_user('other@example.com')
        make_order(order_number='MINE-1', user=buyer)
        make_order(order_number='MINE-2', user=buyer)
        make_order(order_number='THEIRS', user=other)

        response = admin_client.get(f'/api/users/{buyer.pk}/orders/', {'sortDirection': 'asc'})

        assert response.status_code == 200
        assert response.data['totalCount'] == 2
        assert [item['orderNumber'] for item in response.data['items']] == ['MINE-1', 'MINE-2']

    def test_user_orders_for_missing_user(self, admin_client):
        assert admin_client.get('/api/users/999999/orders/').status_code == 404


@pytest.mark.django_db
class TestHealth:

    def test_healthy(self, client, monkeypatch):
        monkeypatch.setattr('config.urls._check_cache', lambda: 'ok')

        response = client.get('/health/')

        assert response.status_code == 200
        assert response.json() == {'status': 'healthy', 'checks': {'database': 'ok', 'redis': 'ok'}}

    def test_cache_down(self, client, monkeypatch):
        monkeypatch.setattr('config.urls._check_cache', lambda: 'error: down')

        response = client.get('/health/')

        assert response.status_code == 503
        assert response.json()['status'] == 'unhealthy'
