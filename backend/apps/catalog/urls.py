from django.urls import path
from .views import (
    FeaturedProductsView,
    ProductBySlugView,
    ProductDetailView,
    ProductListView,
    RelatedProductsView,
)

urlpatterns = [
    path('products/', ProductListView.as_view(), name='api-products-list'),
    path('products/featured/', FeaturedProductsView.as_view(), name='api-products-featured'),
    path('products/slug/<slug:slug>/', ProductBySlugView.as_view(), name='api-products-slug'),
    path('products/<int:product_id>/', ProductDetailView.as_view(), name='api-products-detail'),
    path('products/<int:product_id>/related/', RelatedProductsView.as_view(), name='api-products-related'),
]
