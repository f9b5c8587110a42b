"""Abstract backing store for carts.

Every call returns the *entire* refreshed cart. The store may coalesce an
add into an existing line, so callers replace their item list wholesale.

Guest carts are addressed by ``cart_id``. Session-addressed stores (the
authenticated cart) ignore ``cart_id`` and use the session they were
built with.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import CartState


class CartBackend(ABC):

    @abstractmethod
    async def get_cart(self, cart_id: str | None = None) -> CartState:
        """Return the addressed cart, creating a fresh one if it is absent."""

    @abstractmethod
    async def add_item(
        self,
        cart_id: str | None,
        product_id: str,
        quantity: int,
        variant_id: str | None = None,
    ) -> CartState:
        """Add a line (or grow an existing one)."""

    @abstractmethod
    async def update_item(
        self, cart_id: str | None, item_id: str, quantity: int
    ) -> CartState:
        """Set the quantity of an existing line."""

    @abstractmethod
    async def remove_item(self, cart_id: str | None, item_id: str) -> CartState:
        """Delete a line."""

    @abstractmethod
    async def clear(self, cart_id: str | None) -> CartState:
        """Delete every line of the cart."""

    async def close(self) -> None:
        """Release transport resources. Stores without any keep the default."""
