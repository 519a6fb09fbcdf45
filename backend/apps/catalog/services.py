from __future__ import annotations

from typing import List, Optional

from django.utils.text import slugify

from apps.common import get_logger
from apps.common.errors import ConflictError, NotFoundError
from apps.common.pagination import pagination_payload
from .commands import ProductCreateCommand, ProductSearchCommand, ProductUpdateCommand
from .dtos import ProductDTO, ProductPageDTO
from .mappers import ProductMapper
from .models import Product
from .protocols import CacheBackendProtocol, ProductRepositoryProtocol

logger = get_logger(__name__).bind(component="catalog", layer="service")


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        disable_cache: bool = False,
        cache_ttl: Optional[int] = None,
    ):
        self.products = products
        self.cache = cache_backend
        self.disable_cache = disable_cache
        self.cache_ttl = cache_ttl
        self.logger = logger.bind(service="ProductService")
        self._cache_prefix = "products:list"
        self._cache_version_key = f"{self._cache_prefix}:version"
        self._default_version = 1

    def _get_cache_version(self) -> int:
        v = self.cache.get(self._cache_version_key)
        return v or self._default_version

    def _bump_cache_version(self) -> None:
        v = self._get_cache_version()
        # Version key should not expire
        self.cache.set(self._cache_version_key, v + 1, timeout=None)
        self.logger.debug("Bumped product cache version", new_version=v + 1)

    def _cache_key(self, command: ProductSearchCommand) -> str:
        return f"{self._cache_prefix}:v{self._get_cache_version()}:{command.cache_fragment()}"

    def invalidate_listing_cache(self) -> None:
        """Drop every cached product page, e.g. after stock moved at checkout."""
        if self.disable_cache:
            return
        self._bump_cache_version()

    def _load_page(self, command: ProductSearchCommand) -> ProductPageDTO:
        rows, total = self.products.search(
            filters=command.filters(),
            query=command.query,
            ordering=command.ordering,
            offset=command.page.offset,
            limit=command.page.limit,
        )
        return ProductPageDTO(
            products=ProductMapper.many_to_dto(rows),
            pagination=pagination_payload(command.page, total),
        )

    def list_products(self, command: ProductSearchCommand) -> ProductPageDTO:
        self.logger.debug(
            "Listing products",
            category=command.category,
            query=command.query,
            sort_by=command.sort_by,
            page=command.page.page,
            cache_enabled=not self.disable_cache,
        )
        if self.disable_cache:
            return self._load_page(command)
        key = self._cache_key(command)
        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug("Product list cache hit", cache_key=key)
            return cached
        self.logger.debug("Product list cache miss", cache_key=key)
        page = self._load_page(command)
        self.cache.set(key, page, timeout=self.cache_ttl)
        return page

    def _get_or_404(self, *, include_inactive: bool = False, **filters) -> Product:
        if not include_inactive:
            filters["is_active"] = True
        product = self.products.get(**filters)
        if product is None:
            self.logger.info("Product not found", **filters)
            raise NotFoundError("Product not found", details=filters)
        return product

    def get_product(self, product_id: int, *, include_inactive: bool = False) -> ProductDTO:
        self.logger.debug("Fetching product", product_id=product_id)
        return ProductMapper.to_dto(
            self._get_or_404(id=product_id, include_inactive=include_inactive)
        )

    def get_product_by_slug(self, slug: str) -> ProductDTO:
        self.logger.debug("Fetching product by slug", slug=slug)
        return ProductMapper.to_dto(self._get_or_404(slug=slug))

    def featured_products(self, limit: int = 3) -> List[ProductDTO]:
        self.logger.debug("Listing featured products", limit=limit)
        return ProductMapper.many_to_dto(self.products.list_featured(limit))

    def related_products(self, product_id: int, limit: int = 4) -> List[ProductDTO]:
        product = self._get_or_404(id=product_id)
        return ProductMapper.many_to_dto(self.products.list_related(product, limit))

    def _unique_slug(self, name: str, exclude_id: Optional[int] = None) -> str:
        base = slugify(name)[:200] or "product"
        candidate = base
        suffix = 2
        while self.products.slug_exists(candidate, exclude_id=exclude_id):
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _ensure_sku_available(self, sku: str, exclude_id: Optional[int] = None) -> None:
        if self.products.sku_exists(sku, exclude_id=exclude_id):
            self.logger.warning("Rejected duplicate SKU", sku=sku)
            raise ConflictError("SKU already exists", details={"sku": sku})

    def create_product(self, cmd: ProductCreateCommand) -> ProductDTO:
        self.logger.info("Creating product", sku=cmd.sku, name=cmd.name)
        self._ensure_sku_available(cmd.sku)
        product = self.products.create(
            name=cmd.name,
            slug=self._unique_slug(cmd.name),
            sku=cmd.sku,
            description=cmd.description,
            price=cmd.price,
            stock=cmd.stock,
            images=cmd.images,
            category=cmd.category,
            brand=cmd.brand,
            tags=cmd.tags,
            specifications=cmd.specifications,
            is_active=cmd.is_active,
            featured=cmd.featured,
        )
        self.invalidate_listing_cache()
        self.logger.info("Product created", product_id=product.id, sku=product.sku)
        return ProductMapper.to_dto(product)

    def update_product(self, cmd: ProductUpdateCommand) -> ProductDTO:
        self.logger.info(
            "Updating product", product_id=cmd.product_id, fields=sorted(cmd.changes)
        )
        product = self._get_or_404(id=cmd.product_id, include_inactive=True)
        changes = dict(cmd.changes)
        if "sku" in changes and changes["sku"] != product.sku:
            self._ensure_sku_available(changes["sku"], exclude_id=product.id)
        if "name" in changes and changes["name"] != product.name:
            changes["slug"] = self._unique_slug(changes["name"], exclude_id=product.id)
        if changes:
            self.products.update(product, **changes)
            self.invalidate_listing_cache()
        self.logger.info("Product updated", product_id=product.id)
        return ProductMapper.to_dto(product)

    def deactivate_product(self, product_id: int) -> None:
        """Soft delete: the row stays so order history keeps its product link."""
        self.logger.info("Deactivating product", product_id=product_id)
        product = self._get_or_404(id=product_id, include_inactive=True)
        if product.is_active:
            self.products.update(product, is_active=False)
            self.invalidate_listing_cache()
        self.logger.info("Product deactivated", product_id=product_id)
