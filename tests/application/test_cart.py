"""Tests for the GuestCart and AuthCart services.

Uses in-memory fakes; no network.
"""

import pytest

from storefront.application.cart import AuthCart, GuestCart
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    NetworkError,
    ValidationError,
)
from storefront.domain.model.value_objects import Money
from tests.catalog import robe, slippers, towel
from tests.fakes import FakeCartBackend, FakeCartIdStore, FakeCatalogRepository


def _catalog() -> FakeCatalogRepository:
    return FakeCatalogRepository([towel(), robe(), slippers()])


def _guest(id_store: FakeCartIdStore | None = None):
    backend = FakeCartBackend(_catalog())
    return GuestCart(backend, id_store or FakeCartIdStore()), backend


def _auth():
    backend = FakeCartBackend(_catalog(), session_key="alice")
    return AuthCart(backend), backend


pytestmark = pytest.mark.asyncio


class TestGuestCartAdd:

    async def test_first_add_creates_and_remembers_cart(self):
        id_store = FakeCartIdStore()
        cart, backend = _guest(id_store)

        state = await cart.add_item("1", 2)

        assert state.id is not None
        assert id_store.cart_id == state.id
        assert cart.cart_id == state.id
        assert [c[0] for c in backend.calls] == ["get_cart", "add_item"]

    async def test_add_returns_whole_cart(self):
        cart, _ = _guest()
        await cart.add_item("1", 2)
        state = await cart.add_item("3", 1)
        assert [item.product_id for item in state.items] == ["1", "3"]
        assert cart.items == state.items

    async def test_add_is_coalesced_by_store(self):
        cart, _ = _guest()
        await cart.add_item("1", 2)
        await cart.add_item("1", 3)
        assert len(cart.items) == 1
        assert cart.get_cart_item_count() == 5

    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_invalid_quantity_rejected_before_store(self, quantity):
        cart, backend = _guest()
        with pytest.raises(ValidationError, match="must be positive"):
            await cart.add_item("1", quantity)
        assert backend.calls == []

    async def test_insufficient_stock_propagates_and_keeps_state(self):
        cart, _ = _guest()
        await cart.add_item("3", 2)
        before = cart.state

        with pytest.raises(InsufficientStockError):
            await cart.add_item("3", 10)

        assert cart.state == before

    async def test_unknown_product_propagates(self):
        cart, _ = _guest()
        with pytest.raises(EntityNotFoundError, match="Product with ID '99'"):
            await cart.add_item("99", 1)

    async def test_network_error_propagates(self):
        cart, backend = _guest()
        backend.failures["1"] = NetworkError("connection reset")
        with pytest.raises(NetworkError):
            await cart.add_item("1", 1)
        assert cart.items == ()


class TestGuestCartPersistence:

    async def test_remembered_id_is_reused(self):
        cart, backend = _guest()
        await cart.add_item("1", 1)

        # a new session for the same shopper reads the stored id
        revived = GuestCart(backend, FakeCartIdStore(cart.cart_id))
        state = await revived.load_cart()

        assert state.id == cart.cart_id
        assert revived.get_cart_item_count() == 1

    async def test_load_without_id_creates_cart(self):
        id_store = FakeCartIdStore()
        cart, _ = _guest(id_store)
        state = await cart.load_cart()
        assert state.is_empty
        assert id_store.cart_id == state.id

    async def test_load_is_idempotent(self):
        cart, backend = _guest()
        await cart.add_item("1", 2)
        first = await cart.load_cart()
        second = await cart.load_cart()
        assert first == second
        assert len(backend.carts) == 1


class TestGuestCartUpdateRemoveClear:

    async def test_update_quantity(self):
        cart, _ = _guest()
        state = await cart.add_item("1", 2)
        state = await cart.update_quantity(state.items[0].id, 6)
        assert state.items[0].quantity.value == 6

    @pytest.mark.parametrize("quantity", [0, -4])
    async def test_update_to_non_positive_rejected(self, quantity):
        cart, backend = _guest()
        state = await cart.add_item("1", 2)
        calls = len(backend.calls)

        with pytest.raises(ValidationError, match="remove the item"):
            await cart.update_quantity(state.items[0].id, quantity)

        assert len(backend.calls) == calls
        assert cart.items[0].quantity.value == 2

    async def test_update_without_cart_is_not_found(self):
        cart, backend = _guest()
        with pytest.raises(EntityNotFoundError, match="No guest cart"):
            await cart.update_quantity("x", 1)
        assert backend.calls == []

    async def test_remove_item(self):
        cart, _ = _guest()
        await cart.add_item("1", 2)
        state = await cart.add_item("3", 1)
        state = await cart.remove_item(state.items[0].id)
        assert [item.product_id for item in state.items] == ["3"]

    async def test_remove_unknown_item(self):
        cart, _ = _guest()
        await cart.add_item("1", 1)
        with pytest.raises(EntityNotFoundError):
            await cart.remove_item("missing")

    async def test_clear_keeps_cart_id(self):
        cart, _ = _guest()
        state = await cart.add_item("1", 1)
        cleared = await cart.clear_cart()
        assert cleared.is_empty
        assert cleared.id == state.id

    async def test_clear_without_cart_is_local_only(self):
        cart, backend = _guest()
        state = await cart.clear_cart()
        assert state.is_empty
        assert backend.calls == []


class TestCartReducers:

    async def test_total_matches_recomputation_after_every_step(self):
        cart, _ = _guest()

        def recomputed():
            total = Money.zero()
            for item in cart.items:
                price = item.variant_price if item.variant_id else item.product_price
                total = total + price * item.quantity.value
            return total

        await cart.add_item("1", 2)
        assert cart.get_cart_total() == recomputed()
        await cart.add_item("2", 1, "v1")
        assert cart.get_cart_total() == recomputed()
        state = await cart.add_item("3", 3)
        assert cart.get_cart_total() == recomputed()
        await cart.update_quantity(state.items[0].id, 5)
        assert cart.get_cart_total() == recomputed()
        await cart.remove_item(state.items[2].id)
        assert cart.get_cart_total() == recomputed()

        assert cart.get_cart_total() == Money.of("141.95")  # 5 x 19.99 + 42.00
        assert cart.get_cart_item_count() == 6

    async def test_total_does_not_apply_bulk_tiers(self):
        cart, _ = _guest()
        await cart.add_item("1", 25)
        # cart totals read the line's price snapshot, which is the base price
        assert cart.get_cart_total() == Money.of("19.99") * 25


class TestAuthCart:

    async def test_session_addressed(self):
        cart, backend = _auth()
        state = await cart.add_item("1", 1)
        assert state.id == "alice"
        assert backend.calls_named("get_cart") == []

    async def test_same_contract_as_guest(self):
        cart, _ = _auth()
        state = await cart.add_item("2", 2, "v1")
        state = await cart.update_quantity(state.items[0].id, 3)
        assert cart.get_cart_total() == Money.of("126.00")
        state = await cart.clear_cart()
        assert state.is_empty

    async def test_dispose_drops_state_and_closes_backend(self):
        cart, backend = _auth()
        await cart.add_item("1", 1)
        await cart.dispose()
        assert cart.items == ()
        assert backend.closed
