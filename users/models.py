# apps/users/models.py
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from .managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """Пользователь: покупатель или администратор магазина"""

    ROLE_CHOICES = [
        ('admin', 'Администратор'),
        ('customer', 'Покупатель'),
    ]

    email = models.EmailField(
        max_length=254,
        unique=True,
        verbose_name='Email'
    )
    name = models.CharField(max_length=100, blank=True, verbose_name='Имя')
    phone = models.CharField(max_length=20, blank=True, verbose_name='Телефон')
    birthday = models.DateField(blank=True, null=True, verbose_name='Дата рождения')

    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='customer', verbose_name='Роль')
    is_active = models.BooleanField(default=True, verbose_name='Активен (не заблокирован)')
    is_staff = models.BooleanField(default=False, verbose_name='Персонал')

    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Дата создания')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Дата обновления')
    last_login = models.DateTimeField(blank=True, null=True, verbose_name='Последний вход')
    last_order_at = models.DateTimeField(blank=True, null=True, verbose_name='Последний заказ')

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'users'
        verbose_name = 'Пользователь'
        verbose_name_plural = 'Пользователи'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name or 'Unknown'} ({self.email})"

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name

    def save(self, *args, **kwargs):
        # Администраторы автоматически становятся персоналом
        if self.role == 'admin':
            self.is_staff = True

        super().save(*args, **kwargs)


class Address(models.Model):
    """Адрес доставки пользователя по умолчанию"""

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='address',
        verbose_name='Пользователь'
    )
    recipient_name = models.CharField(max_length=100, blank=True, verbose_name='Получатель')
    recipient_phone = models.CharField(max_length=20, blank=True, verbose_name='Телефон получателя')
    address_line1 = models.CharField(max_length=200, blank=True, verbose_name='Адрес, строка 1')
    address_line2 = models.CharField(max_length=200, blank=True, verbose_name='Адрес, строка 2')
    city = models.CharField(max_length=100, blank=True, verbose_name='Город')
    region = models.CharField(max_length=100, blank=True, verbose_name='Регион')
    postal_code = models.CharField(max_length=20, blank=True, verbose_name='Индекс')
    country = models.CharField(max_length=100, blank=True, verbose_name='Страна')

    class Meta:
        db_table = 'user_addresses'
        verbose_name = 'Адрес'
        verbose_name_plural = 'Адреса'

    def __str__(self):
        return f"{self.city}, {self.address_line1}"
