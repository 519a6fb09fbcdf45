from __future__ import annotations

from django.conf import settings
from django.core.cache import cache

from .repositories import ProductRepository
from .services import ProductService


def build_product_service(*, disable_cache: bool = False) -> ProductService:
    return ProductService(
        products=ProductRepository(),
        cache_backend=cache,
        disable_cache=disable_cache,
        cache_ttl=getattr(settings, "CACHE_TTL", None),
    )
