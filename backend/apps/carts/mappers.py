from typing import Iterable, List, Optional

from apps.catalog.mappers import ProductMapper
from apps.orders.pricing import PricingPolicy, line_total, subtotal_of
from .dtos import CartDTO, CartLineDTO, CartTotalsDTO
from .models import Cart, CartItem


class CartMapper:
    def __init__(self, pricing: Optional[PricingPolicy] = None) -> None:
        self.pricing = pricing or PricingPolicy()

    def line_to_dto(self, item: CartItem) -> CartLineDTO:
        product = item.product
        return CartLineDTO(
            product=ProductMapper.to_summary(product),
            quantity=item.quantity,
            line_total=str(line_total(product.price, item.quantity)),
        )

    def totals_for(self, items: Iterable[CartItem]) -> CartTotalsDTO:
        items = list(items)
        totals = self.pricing.totals(
            subtotal_of((item.product.price, item.quantity) for item in items)
        )
        return CartTotalsDTO(
            item_count=sum(item.quantity for item in items),
            **totals.as_dict(),
        )

    def to_dto(self, owner: str, cart: Optional[Cart], items: List[CartItem]) -> CartDTO:
        updated_at = getattr(cart, "updated_at", None) if cart is not None else None
        totals = self.totals_for(items)
        return CartDTO(
            owner=owner,
            items=[self.line_to_dto(item) for item in items],
            total_item_count=totals.item_count,
            totals=totals,
            updated_at=updated_at.isoformat() if updated_at else None,
        )
