"""Cart line items, cart snapshots and the backing-store cart aggregate.

``CartState`` is what every cart operation hands back to callers: an
immutable snapshot of the cart as the backing store last confirmed it.
``StoredCart`` is the backing store's own aggregate; the local JSON store
and the test fakes both keep carts as ``StoredCart`` so they share one set
of rules (line coalescing, stock checks, id assignment).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace

from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class CartItem:
    """One line of a cart.

    ``id`` is assigned by the backing store, never by the client.
    ``product_price`` and ``variant_price`` are the store's price snapshot
    for the line; the cart total reads them and nothing else.
    """

    id: str
    product_id: str
    quantity: Quantity
    product_name: str
    product_price: Money
    variant_id: str | None = None
    variant_price: Money | None = None

    @property
    def effective_price(self) -> Money:
        if self.variant_price is not None:
            return self.variant_price
        return self.product_price

    @property
    def line_total(self) -> Money:
        return self.effective_price * self.quantity.value

    def same_line(self, product_id: str, variant_id: str | None) -> bool:
        return self.product_id == product_id and self.variant_id == variant_id


@dataclass(frozen=True)
class CartState:
    """A confirmed snapshot of a cart.

    Item order is display order; totals do not depend on it.
    """

    id: str | None = None
    items: tuple[CartItem, ...] = ()

    @property
    def total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


@dataclass
class StoredCart:
    """Aggregate root for a cart as the backing store keeps it.

    Invariants:
    - at most one line per product+variant (adds are coalesced)
    - a line's quantity never exceeds the stock available for it
    """

    id: str
    items: list[CartItem] = field(default_factory=list)

    @staticmethod
    def new_id(prefix: str = "cart") -> str:
        return f"{prefix}-{uuid.uuid4()}"

    # --- Mutations ------------------------------------------------------------

    def add(self, product: Product, quantity: int, variant_id: str | None = None) -> CartItem:
        """Add ``quantity`` units, merging into an existing line if present."""
        qty = Quantity(quantity)
        variant = product.get_variant(variant_id) if variant_id is not None else None

        index = self._index_of_line(product.id, variant_id)
        already = self.items[index].quantity.value if index is not None else 0
        self._check_stock(product, variant_id, already + qty.value)

        line = CartItem(
            id=self.items[index].id if index is not None else str(uuid.uuid4()),
            product_id=product.id,
            variant_id=variant_id,
            quantity=Quantity(already + qty.value),
            product_name=product.name,
            product_price=product.base_price,
            variant_price=variant.price if variant is not None else None,
        )
        if index is None:
            self.items.append(line)
        else:
            self.items[index] = line
        return line

    def update(self, item_id: str, product: Product, quantity: int) -> CartItem:
        """Replace the quantity of an existing line."""
        qty = Quantity(quantity)
        index = self._index_of(item_id)
        current = self.items[index]
        self._check_stock(product, current.variant_id, qty.value)
        updated = replace(current, quantity=qty)
        self.items[index] = updated
        return updated

    def remove(self, item_id: str) -> None:
        del self.items[self._index_of(item_id)]

    def clear(self) -> None:
        self.items.clear()

    def snapshot(self) -> CartState:
        return CartState(id=self.id, items=tuple(self.items))

    # --- Internal helpers -----------------------------------------------------

    def _index_of(self, item_id: str) -> int:
        for i, item in enumerate(self.items):
            if item.id == item_id:
                return i
        raise EntityNotFoundError(f"Cart item '{item_id}' not found")

    def _index_of_line(self, product_id: str, variant_id: str | None) -> int | None:
        for i, item in enumerate(self.items):
            if item.same_line(product_id, variant_id):
                return i
        return None

    @staticmethod
    def _check_stock(product: Product, variant_id: str | None, wanted: int) -> None:
        available = product.available_stock(variant_id)
        if wanted > available:
            raise InsufficientStockError(
                f"Insufficient stock for {product.name} "
                f"(need {wanted}, have {available} available)"
            )
