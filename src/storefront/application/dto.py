"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.cart import CartState


@dataclass(frozen=True)
class CartLineDTO:
    item_id: str
    product_name: str
    variant_id: str | None
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    cart_id: str | None
    authenticated: bool
    items: list[CartLineDTO]
    item_count: int
    total: str

    @staticmethod
    def from_state(state: CartState, authenticated: bool) -> CartDTO:
        return CartDTO(
            cart_id=state.id,
            authenticated=authenticated,
            items=[
                CartLineDTO(
                    item_id=item.id,
                    product_name=item.product_name,
                    variant_id=item.variant_id,
                    quantity=item.quantity.value,
                    unit_price=str(item.effective_price),
                    line_total=str(item.line_total),
                )
                for item in state.items
            ],
            item_count=state.item_count,
            total=str(state.total),
        )


@dataclass(frozen=True)
class PriceQuoteDTO:
    """Output: the price a shopper would pay for a selection."""

    product_id: str
    product_name: str
    variant_sku: str | None
    quantity: int
    unit_price: str
    line_total: str
    tier_min_quantity: int | None  # None when no bulk tier applied


@dataclass(frozen=True)
class LowStockLineDTO:
    product_id: str
    product_name: str
    sku: str | None  # variant sku, None for the product itself
    stock: int
    threshold: int
