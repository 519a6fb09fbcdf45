from django.urls import path
from .views import CartItemDetailView, CartItemsView, CartTotalsView, CartView

urlpatterns = [
    path('cart/', CartView.as_view(), name='api-cart'),
    path('cart/totals/', CartTotalsView.as_view(), name='api-cart-totals'),
    path('cart/items/', CartItemsView.as_view(), name='api-cart-items'),
    path('cart/items/<int:product_id>/', CartItemDetailView.as_view(), name='api-cart-item-detail'),
]
