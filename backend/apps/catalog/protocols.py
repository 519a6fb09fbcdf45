from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from .models import Product


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Product]:
        ...

    def count(self, **filters) -> int:
        ...

    def create(self, **data) -> Product:
        ...

    def update(self, obj: Product, **data) -> Product:
        ...

    def search(
        self,
        *,
        filters: Dict[str, Any],
        query: Optional[str],
        ordering: Sequence[str],
        offset: int,
        limit: int,
    ) -> Tuple[List[Product], int]:
        ...

    def list_featured(self, limit: int) -> Iterable[Product]:
        ...

    def list_related(self, product: Product, limit: int) -> Iterable[Product]:
        ...

    def sku_exists(self, sku: str, exclude_id: Optional[int] = None) -> bool:
        ...

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        ...

    def get_many(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        ...

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        ...

    def increment_stock(self, product_id: int, quantity: int) -> None:
        ...


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        ...
