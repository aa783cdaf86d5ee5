from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.contrib.auth.forms import BaseUserCreationForm
from django.db.models import Count

from .models import Address, User


class UserCreationForm(BaseUserCreationForm):
    """Создание пользователя в админке: логин - email"""

    class Meta:
        model = User
        fields = ('email', 'name', 'role')


class AddressInline(admin.StackedInline):
    model = Address
    can_delete = False
    extra = 0


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ['email', 'name', 'role', 'order_count', 'last_login', 'last_order_at', 'is_active']
    list_filter = ['role', 'is_active', 'created_at']
    search_fields = ['email', 'name', 'phone']
    ordering = ['-created_at']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Личная информация', {'fields': ('name', 'phone', 'birthday')}),
        ('Роль и права', {'fields': ('role', 'is_active', 'is_staff', 'is_superuser')}),
        ('Группы', {'fields': ('groups', 'user_permissions')}),
        ('Даты', {'fields': ('last_login', 'last_order_at', 'created_at', 'updated_at')}),
    )

    readonly_fields = ['last_order_at', 'created_at', 'updated_at']

    add_form = UserCreationForm

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'password1', 'password2', 'role'),
        }),
    )

    inlines = [AddressInline]

    actions = ['block_users', 'unblock_users']

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(order_total=Count('orders', distinct=True))

    @admin.display(description='Заказов', ordering='order_total')
    def order_count(self, obj):
        return obj.order_total

    @admin.action(description='Заблокировать выбранных пользователей')
    def block_users(self, request, queryset):
        """Массовая блокировка пользователей"""
        updated = queryset.exclude(role='admin').update(is_active=False)
        self.message_user(request, f'Заблокировано {updated} пользователей')

    @admin.action(description='Разблокировать выбранных пользователей')
    def unblock_users(self, request, queryset):
        """Массовая разблокировка пользователей"""
        updated = queryset.update(is_active=True)
        self.message_user(request, f'Разблокировано {updated} пользователей')
