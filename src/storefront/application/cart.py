"""Cart services: one contract, two backing identities.

``GuestCart`` is addressed by an opaque id that is remembered client-side.
``AuthCart`` is addressed by the authenticated session bound into its
backend. Both hold the last cart state the backing store confirmed and
never change it ahead of a confirmed response.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.cart import CartItem, CartState
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.cart_backend import CartBackend
from storefront.domain.repository.cart_id_store import CartIdStore

logger = logging.getLogger(__name__)


def _require_quantity(quantity: int) -> None:
    try:
        Quantity(quantity)
    except ValidationError as exc:
        raise ValidationError(
            f"{exc} (got {quantity!r}); remove the item instead of setting it to zero"
        ) from exc


class Cart(ABC):
    """Shared cart contract.

    Every mutating call awaits the backing store and then replaces the
    whole local state with the store's answer. On error the previous state
    is kept and the error propagates to the caller.
    """

    authenticated: bool = False

    def __init__(self, backend: CartBackend) -> None:
        self._backend = backend
        self._state = CartState()

    # --- State ----------------------------------------------------------------

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> tuple[CartItem, ...]:
        return self._state.items

    # --- Operations -----------------------------------------------------------

    async def add_item(
        self, product_id: str, quantity: int, variant_id: str | None = None
    ) -> CartState:
        _require_quantity(quantity)
        cart_id = await self._address_for_add()
        state = await self._backend.add_item(cart_id, product_id, quantity, variant_id)
        return self._accept(state)

    async def update_quantity(self, item_id: str, quantity: int) -> CartState:
        _require_quantity(quantity)
        state = await self._backend.update_item(self._existing_address(), item_id, quantity)
        return self._accept(state)

    async def remove_item(self, item_id: str) -> CartState:
        state = await self._backend.remove_item(self._existing_address(), item_id)
        return self._accept(state)

    async def load_cart(self) -> CartState:
        """Fetch the cart from the backing store. Safe to call repeatedly."""
        state = await self._backend.get_cart(self._load_address())
        return self._accept(state)

    async def clear_cart(self) -> CartState:
        state = await self._backend.clear(self._existing_address())
        return self._accept(state)

    # --- Reducers over confirmed state (no I/O) -------------------------------

    def get_cart_total(self) -> Money:
        return self._state.total

    def get_cart_item_count(self) -> int:
        return self._state.item_count

    # --- Lifecycle ------------------------------------------------------------

    async def init(self) -> CartState:
        return await self.load_cart()

    async def dispose(self) -> None:
        self._state = CartState()
        await self._backend.close()

    # --- Addressing hooks -----------------------------------------------------

    @abstractmethod
    async def _address_for_add(self) -> str | None:
        """Cart id to add to, creating the cart first if needed."""

    @abstractmethod
    def _existing_address(self) -> str | None:
        """Cart id of a cart that must already exist."""

    @abstractmethod
    def _load_address(self) -> str | None:
        """Cart id to load, or None to let the store pick/create one."""

    def _accept(self, state: CartState) -> CartState:
        self._state = state
        return state


class GuestCart(Cart):
    """Anonymous shopper's cart, addressed by a remembered opaque id."""

    def __init__(self, backend: CartBackend, id_store: CartIdStore) -> None:
        super().__init__(backend)
        self._id_store = id_store
        self._cart_id = id_store.load()
        self._state = CartState(id=self._cart_id)

    @property
    def cart_id(self) -> str | None:
        return self._cart_id

    async def clear_cart(self) -> CartState:
        if self._cart_id is None:
            # Nothing was ever created server-side.
            return self._accept(CartState())
        return await super().clear_cart()

    async def _address_for_add(self) -> str | None:
        if self._cart_id is None:
            created = await self._backend.get_cart(None)
            self._remember(created.id)
            logger.debug("Created guest cart %s", created.id)
        return self._cart_id

    def _existing_address(self) -> str | None:
        if self._cart_id is None:
            raise EntityNotFoundError("No guest cart found")
        return self._cart_id

    def _load_address(self) -> str | None:
        return self._cart_id

    def _accept(self, state: CartState) -> CartState:
        self._remember(state.id)
        return super()._accept(state)

    def _remember(self, cart_id: str | None) -> None:
        if cart_id is not None and cart_id != self._cart_id:
            self._cart_id = cart_id
            self._id_store.save(cart_id)


class AuthCart(Cart):
    """Cart of a signed-in customer; the session is the address."""

    authenticated = True

    async def _address_for_add(self) -> str | None:
        return None

    def _existing_address(self) -> str | None:
        return None

    def _load_address(self) -> str | None:
        return None
