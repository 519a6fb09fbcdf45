from typing import Iterable, List

from .dtos import ProductDTO, ProductSummaryDTO
from .models import Product


def _iso(value) -> str:
    return value.isoformat() if value is not None else ""


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            slug=product.slug,
            sku=product.sku,
            description=product.description,
            price=str(product.price),
            stock=product.stock,
            in_stock=product.stock > 0,
            images=list(product.images or []),
            category=product.category,
            brand=product.brand or "",
            tags=list(product.tags or []),
            specifications=dict(product.specifications or {}),
            is_active=product.is_active,
            featured=product.featured,
            created_at=_iso(getattr(product, "created_at", None)),
            updated_at=_iso(getattr(product, "updated_at", None)),
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p) for p in products]

    @staticmethod
    def to_summary(product: Product) -> ProductSummaryDTO:
        images = product.images or []
        return ProductSummaryDTO(
            id=product.id,
            name=product.name,
            slug=product.slug,
            price=str(product.price),
            image=images[0] if images else "",
            stock=product.stock,
            is_active=product.is_active,
        )
