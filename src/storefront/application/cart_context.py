"""CartContext: the single cart callers talk to.

Holds whichever concrete cart is active (the guest cart until the
shopper signs in) and forwards every operation to it, so call sites never
branch on authentication themselves. Only the merge coordinator switches
the active cart.
"""

from __future__ import annotations

from storefront.application.cart import AuthCart, Cart, GuestCart
from storefront.domain.model.cart import CartItem, CartState
from storefront.domain.model.value_objects import Money


class CartContext:

    def __init__(self, guest: GuestCart) -> None:
        self._guest = guest
        self._active: Cart = guest

    @property
    def guest(self) -> GuestCart:
        return self._guest

    @property
    def active(self) -> Cart:
        return self._active

    @property
    def is_authenticated(self) -> bool:
        return isinstance(self._active, AuthCart)

    @property
    def items(self) -> tuple[CartItem, ...]:
        return self._active.items

    def activate(self, cart: Cart) -> None:
        self._active = cart

    # --- Forwarded cart operations --------------------------------------------

    async def add_item(
        self, product_id: str, quantity: int, variant_id: str | None = None
    ) -> CartState:
        return await self._active.add_item(product_id, quantity, variant_id)

    async def update_quantity(self, item_id: str, quantity: int) -> CartState:
        return await self._active.update_quantity(item_id, quantity)

    async def remove_item(self, item_id: str) -> CartState:
        return await self._active.remove_item(item_id)

    async def load_cart(self) -> CartState:
        return await self._active.load_cart()

    async def clear_cart(self) -> CartState:
        return await self._active.clear_cart()

    def get_cart_total(self) -> Money:
        return self._active.get_cart_total()

    def get_cart_item_count(self) -> int:
        return self._active.get_cart_item_count()

    # --- Lifecycle ------------------------------------------------------------

    async def init(self) -> CartState:
        """Start of a session: load whichever cart is active."""
        return await self._active.init()

    async def dispose(self) -> None:
        """End of a session: drop state and close every cart's backend."""
        if self._active is not self._guest:
            await self._active.dispose()
        await self._guest.dispose()
        self._active = self._guest
