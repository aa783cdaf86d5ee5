# apps/users/urls.py
"""URL маршруты для users."""

from django.urls import path

from . import views

app_name = 'users'

urlpatterns = [
    path('', views.list_users, name='list'),
    path('search/', views.search_users, name='search'),
    path('<int:user_id>/orders/', views.user_orders, name='user-orders'),
]
