from django.urls import path
from .views import (
    AdminOrderListView,
    AdminOrderStatusView,
    AdminStatsView,
    CheckoutView,
    OrderDetailView,
    OrderListView,
)

urlpatterns = [
    path('orders/', OrderListView.as_view(), name='api-orders'),
    path('orders/checkout/', CheckoutView.as_view(), name='api-orders-checkout'),
    path('orders/<int:order_id>/', OrderDetailView.as_view(), name='api-order-detail'),
    path('admin/orders/', AdminOrderListView.as_view(), name='api-admin-orders'),
    path(
        'admin/orders/<int:order_id>/status/',
        AdminOrderStatusView.as_view(),
        name='api-admin-order-status',
    ),
    path('admin/stats/', AdminStatsView.as_view(), name='api-admin-stats'),
]
