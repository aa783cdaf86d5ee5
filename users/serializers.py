# apps/users/serializers.py
"""Параметры списка пользователей (АДМИН)."""

from rest_framework import serializers

from listing.serializers import BaseListQuerySerializer

from .listing import USER_LISTING, UserSearchColumn


class UserListQuerySerializer(BaseListQuerySerializer):
    """
    GET /api/users/?searchColumn=order_id&searchQuery=A-10
        &lastOrderFrom=2024-01-01&orderCountMin=2
        &sortColumn=last_order&sortDirection=desc
    """

    listing = USER_LISTING
    default_search_column = UserSearchColumn.EMAIL
    date_range_keys = {
        'last_login': ('lastLogInFrom', 'lastLogInTo'),
        'last_order': ('lastOrderFrom', 'lastOrderTo'),
    }
    numeric_keys = ('orderCountMin', 'orderCountMax')

    lastLogInFrom = serializers.DateField(required=False, allow_null=True)
    lastLogInTo = serializers.DateField(required=False, allow_null=True)
    lastOrderFrom = serializers.DateField(required=False, allow_null=True)
    lastOrderTo = serializers.DateField(required=False, allow_null=True)

    orderCountMin = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    orderCountMax = serializers.IntegerField(required=False, allow_null=True, min_value=0)

