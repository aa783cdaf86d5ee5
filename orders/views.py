# apps/orders/views.py
"""
Views для orders.

API ENDPOINTS:
- GET /api/orders/ - список заказов, параметры в query string (админ)
- POST /api/orders/search/ - то же, параметры в JSON (админ)
- GET /api/orders/products/ - товары для фильтра "содержит товары" (админ)
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from listing.serializers import parse_list_query
from listing.services import ListingService
from products.models import Product
from users.permissions import IsAdminUser, is_admin

from .listing import ORDER_LISTING
from .serializers import OrderListQuerySerializer, ProductOptionSerializer


def list_orders_response(request: Request, data, scope=None) -> Response:
    """Общий путь для GET, POST и заказов одного пользователя."""
    query = parse_list_query(OrderListQuerySerializer, data)
    result = ListingService.list_records(
        listing=ORDER_LISTING,
        query=query,
        gate=lambda: is_admin(request.user),
        scope=scope,
    )
    return Response(result.to_dict())


@extend_schema(
    tags=['Orders'],
    summary='Список заказов',
    parameters=[OrderListQuerySerializer],
    responses={
        200: OpenApiResponse(description='{items, totalCount, page, limit, totalPages}'),
        400: OpenApiResponse(description='Некорректные параметры'),
        403: OpenApiResponse(description='Только для администраторов'),
    },
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_orders(request: Request) -> Response:
    """
    GET /api/orders/

    Query параметры: timeRange, searchColumn, searchQuery, statuses,
    dateFrom, dateTo, totalMin, totalMax, currency, addressConditions,
    productIds, sortColumn, sortDirection, page, limit
    """
    return list_orders_response(request, request.query_params)


@extend_schema(
    tags=['Orders'],
    summary='Поиск заказов (JSON)',
    request=OrderListQuerySerializer,
    responses={200: OpenApiResponse(description='{items, totalCount, page, limit, totalPages}')},
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def search_orders(request: Request) -> Response:
    """
    POST /api/orders/search/

    {
        "statuses": ["PENDING", "SHIPPED"],
        "addressConditions": [{"type": "city", "value": "Paris"}],
        "productIds": [3, 7],
        "sortColumn": "status",
        "sortDirection": "asc",
        "page": 1,
        "limit": 20
    }
    """
    return list_orders_response(request, request.data)


@extend_schema(
    tags=['Orders'],
    summary='Товары для фильтра',
    responses={200: ProductOptionSerializer(many=True)},
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def product_options(request: Request) -> Response:
    """GET /api/orders/products/ - активные товары, новые первыми."""
    products = Product.objects.filter(is_active=True).order_by('-created_at', '-id')
    return Response(ProductOptionSerializer(products, many=True).data)
