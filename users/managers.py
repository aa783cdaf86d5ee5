# apps/users/managers.py
"""Менеджер пользователей: вход по email."""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Менеджер пользователей.

    - create_user: покупатель (role='customer')
    - create_superuser: администратор (role='admin')
    """

    def create_user(
        self,
        email: str,
        password: str = None,
        **extra_fields
    ):
        """
        Создает пользователя.

        Args:
            email: Email пользователя (логин)
            password: Пароль; без пароля вход по паролю невозможен
            **extra_fields: Дополнительные поля

        Raises:
            ValueError: Если email не указан
        """
        if not email:
            raise ValueError('Email обязателен')

        email = self.normalize_email(email)
        extra_fields.setdefault('role', 'customer')

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)

        return user

    def create_superuser(
        self,
        email: str,
        password: str = None,
        **extra_fields
    ):
        """Создает суперпользователя (администратора)."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', 'admin')

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Суперпользователь должен иметь is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Суперпользователь должен иметь is_superuser=True')

        return self.create_user(email, password, **extra_fields)
