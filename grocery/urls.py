from django.urls import path
from . import views

urlpatterns = [
    path('health', views.health, name='health'),

    path('products', views.products, name='products'),
    path('products/<str:product_id>', views.product_detail, name='product_detail'),

    path('auth/register', views.register, name='register'),
    path('auth/login', views.login, name='login'),
    path('auth/verify', views.verify, name='verify'),

    path('orders', views.orders, name='orders'),
    path('orders/<str:order_id>', views.order_detail, name='order_detail'),
    path('orders/<str:order_id>/status', views.order_status, name='order_status'),

    path('cart', views.cart_detail, name='cart'),
    path('cart/items', views.cart_items, name='cart_items'),
    path('cart/items/<str:product_id>', views.cart_item_detail, name='cart_item_detail'),
    path('cart/checkout', views.cart_checkout, name='cart_checkout'),

    # Admin
    path('admin/orders', views.admin_orders, name='admin_orders'),
    path('admin/dashboard', views.admin_dashboard, name='admin_dashboard'),
]
