from rest_framework.permissions import BasePermission


def is_admin(user) -> bool:
    """Пользователь - администратор магазина"""
    return bool(
        user and
        user.is_authenticated and
        user.role == 'admin'
    )


class IsAdminUser(BasePermission):
    """Разрешение только для администраторов"""

    def has_permission(self, request, view):
        return is_admin(request.user)
