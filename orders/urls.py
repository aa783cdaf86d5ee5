# apps/orders/urls.py
"""URL маршруты для orders."""

from django.urls import path

from . import views

app_name = 'orders'

urlpatterns = [
    path('', views.list_orders, name='list'),
    path('search/', views.search_orders, name='search'),
    path('products/', views.product_options, name='product-options'),
]
