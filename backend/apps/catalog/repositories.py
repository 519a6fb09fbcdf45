from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from django.db.models import F, Q

from apps.common.repository import GenericRepository
from .models import Product


class ProductRepository(GenericRepository[Product]):
    default_ordering = ("-created_at", "-id")

    def __init__(self):
        super().__init__(Product)

    def search(
        self,
        *,
        filters: Dict[str, Any],
        query: Optional[str],
        ordering: Sequence[str],
        offset: int,
        limit: int,
    ) -> Tuple[List[Product], int]:
        qs = self.model.objects.filter(**filters)
        if query:
            qs = qs.filter(
                Q(name__icontains=query)
                | Q(description__icontains=query)
                | Q(brand__icontains=query)
            )
        total = qs.count()
        rows = list(qs.order_by(*ordering)[offset : offset + limit])
        return rows, total

    def list_featured(self, limit: int) -> Iterable[Product]:
        return self.model.objects.filter(
            featured=True, is_active=True, stock__gt=0
        ).order_by(*self.default_ordering)[:limit]

    def list_related(self, product: Product, limit: int) -> Iterable[Product]:
        return (
            self.model.objects.filter(
                category=product.category, is_active=True, stock__gt=0
            )
            .exclude(pk=product.pk)
            .order_by(*self.default_ordering)[:limit]
        )

    def sku_exists(self, sku: str, exclude_id: Optional[int] = None) -> bool:
        qs = self.model.objects.filter(sku__iexact=sku)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        qs = self.model.objects.filter(slug=slug)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    def get_many(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        return self.model.objects.in_bulk(list(product_ids))

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Conditionally take ``quantity`` units in a single UPDATE.

        Returns False when the product is inactive or has fewer units left, in
        which case nothing is written.
        """
        updated = self.model.objects.filter(
            pk=product_id, is_active=True, stock__gte=quantity
        ).update(stock=F("stock") - quantity)
        return updated == 1

    def increment_stock(self, product_id: int, quantity: int) -> None:
        self.model.objects.filter(pk=product_id).update(stock=F("stock") + quantity)
