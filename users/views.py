# apps/users/views.py
"""
Views для users.

API ENDPOINTS:
- GET /api/users/ - список пользователей (админ)
- POST /api/users/search/ - то же, параметры в JSON (админ)
- GET /api/users/{id}/orders/ - заказы одного пользователя (админ)
"""

from django.db.models import Q
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from listing.serializers import parse_list_query
from listing.services import ListingService
from orders.serializers import OrderListQuerySerializer
from orders.views import list_orders_response

from .listing import USER_LISTING
from .models import User
from .permissions import IsAdminUser, is_admin
from .serializers import UserListQuerySerializer


def list_users_response(request: Request, data) -> Response:
    query = parse_list_query(UserListQuerySerializer, data)
    result = ListingService.list_records(
        listing=USER_LISTING,
        query=query,
        gate=lambda: is_admin(request.user),
    )
    return Response(result.to_dict())


@extend_schema(
    tags=['Users'],
    summary='Список пользователей',
    parameters=[UserListQuerySerializer],
    responses={
        200: OpenApiResponse(description='{items, totalCount, page, limit, totalPages}'),
        400: OpenApiResponse(description='Некорректные параметры'),
        403: OpenApiResponse(description='Только для администраторов'),
    },
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_users(request: Request) -> Response:
    """
    GET /api/users/

    Query параметры: searchColumn (email, name, order_id), searchQuery,
    lastLogInFrom, lastLogInTo, lastOrderFrom, lastOrderTo,
    orderCountMin, orderCountMax, addressConditions,
    sortColumn (last_login, last_order), sortDirection, page, limit
    """
    return list_users_response(request, request.query_params)


@extend_schema(
    tags=['Users'],
    summary='Поиск пользователей (JSON)',
    request=UserListQuerySerializer,
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def search_users(request: Request) -> Response:
    """POST /api/users/search/"""
    return list_users_response(request, request.data)


@extend_schema(
    tags=['Users'],
    summary='Заказы пользователя',
    parameters=[OrderListQuerySerializer],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def user_orders(request: Request, user_id: int) -> Response:
    """
    GET /api/users/{id}/orders/

    Те же параметры, что и у списка заказов; выборка ограничена
    заказами пользователя.
    """
    user = get_object_or_404(User, pk=user_id)
    return list_orders_response(request, request.query_params, scope=Q(user_id=user.pk))
