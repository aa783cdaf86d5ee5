"""
Корневые URL.

- /health/ - проверка базы и кэша для балансировщика
- /api/orders/, /api/users/ - списки
- /api/schema/, /api/docs/ - OpenAPI
"""
import logging

from django.contrib import admin
from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import include, path
from django.views.decorators.http import require_GET
from django_redis.exceptions import ConnectionInterrupted
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

logger = logging.getLogger(__name__)


def _check_database() -> str:
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError as e:
        logger.error(f"Health: база недоступна: {e}")
        return f'error: {e}'
    return 'ok'


def _check_cache() -> str:
    try:
        cache.set('health_check', 'ok', timeout=10)
        if cache.get('health_check') != 'ok':
            return 'error: cache not working'
    except ConnectionInterrupted as e:
        logger.error(f"Health: Redis недоступен: {e}")
        return f'error: {e}'
    return 'ok'


@require_GET
def health_check(request):
    """Health check для мониторинга и load balancer"""
    checks = {
        'database': _check_database(),
        'redis': _check_cache(),
    }
    healthy = all(value == 'ok' for value in checks.values())
    return JsonResponse(
        {'status': 'healthy' if healthy else 'unhealthy', 'checks': checks},
        status=200 if healthy else 503,
    )


urlpatterns = [
    path('health/', health_check, name='health-check'),
    path('admin/', admin.site.urls),

    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    path('api/orders/', include('orders.urls')),
    path('api/users/', include('users.urls')),
]

admin.site.site_header = 'Заказы и покупатели'
admin.site.index_title = 'Панель управления'
