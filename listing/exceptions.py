# listing/exceptions.py
"""
Ошибки движка списков.

ТАКСОНОМИЯ:
- ListQueryValidationError: некорректные параметры запроса (400)
- ListingAuthorizationError: доступ запрещён внешней проверкой (403)
- ListingStoreError: хранилище недоступно, таймаут или отмена (503)

Все ошибки наследуют APIException, поэтому стандартный
exception handler DRF сам формирует ответ.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class ListingError(APIException):
    """Базовая ошибка движка списков."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Ошибка получения списка'
    default_code = 'listing_error'


class ListQueryValidationError(ListingError):
    """
    Параметры запроса не прошли валидацию.

    detail содержит ошибки по полям, например:
    {"page": ["Номер страницы должен быть не меньше 1"]}
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Некорректные параметры запроса'
    default_code = 'invalid'


class ListingAuthorizationError(ListingError):
    """Внешняя проверка доступа отклонила запрос."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Недостаточно прав для просмотра списка'
    default_code = 'permission_denied'


class ListingStoreError(ListingError):
    """Хранилище не ответило, запрос прерван или отменён."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Хранилище временно недоступно'
    default_code = 'store_unavailable'
