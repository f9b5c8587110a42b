"""Unit tests for the StoredCart aggregate and CartState reducers."""

import pytest

from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.cart import CartState, StoredCart
from storefront.domain.model.value_objects import Money
from tests.catalog import robe, slippers, towel


@pytest.fixture
def cart():
    return StoredCart(id="cart-1")


class TestAdd:

    def test_add_new_line(self, cart):
        line = cart.add(towel(), 3)
        assert line.quantity.value == 3
        assert line.product_price == Money.of("19.99")
        assert line.variant_price is None
        assert len(cart.items) == 1

    def test_same_product_is_coalesced(self, cart):
        first = cart.add(towel(), 3)
        second = cart.add(towel(), 2)
        assert second.id == first.id
        assert [i.quantity.value for i in cart.items] == [5]

    def test_different_variants_are_separate_lines(self, cart):
        product = robe()
        cart.add(product, 1, "v1")
        cart.add(product, 1, "v2")
        assert len(cart.items) == 2
        assert cart.items[0].variant_price == Money.of("42.00")

    def test_variant_stock_is_checked(self, cart):
        with pytest.raises(InsufficientStockError, match="need 4, have 3"):
            cart.add(robe(), 4, "v2")
        assert cart.items == []

    def test_coalesced_quantity_is_stock_checked(self, cart):
        cart.add(slippers(stock=5), 4)
        with pytest.raises(InsufficientStockError):
            cart.add(slippers(stock=5), 2)
        assert cart.items[0].quantity.value == 4

    def test_unknown_variant_rejected(self, cart):
        with pytest.raises(EntityNotFoundError):
            cart.add(robe(), 1, "v404")

    def test_zero_quantity_rejected(self, cart):
        with pytest.raises(ValidationError):
            cart.add(towel(), 0)


class TestUpdateRemoveClear:

    def test_update(self, cart):
        line = cart.add(towel(), 1)
        cart.update(line.id, towel(), 7)
        assert cart.items[0].quantity.value == 7

    def test_update_beyond_stock_rejected(self, cart):
        line = cart.add(slippers(stock=5), 1)
        with pytest.raises(InsufficientStockError):
            cart.update(line.id, slippers(stock=5), 6)

    def test_update_unknown_item(self, cart):
        with pytest.raises(EntityNotFoundError, match="Cart item 'x' not found"):
            cart.update("x", towel(), 1)

    def test_remove(self, cart):
        line = cart.add(towel(), 1)
        cart.remove(line.id)
        assert cart.items == []

    def test_clear(self, cart):
        cart.add(towel(), 1)
        cart.add(slippers(), 1)
        cart.clear()
        assert cart.snapshot().is_empty


class TestCartStateReducers:

    def test_total_uses_variant_price_then_product_price(self, cart):
        cart.add(towel(), 2)          # 2 x 19.99
        cart.add(robe(), 1, "v1")     # 1 x 42.00
        state = cart.snapshot()
        assert state.total == Money.of("81.98")
        assert state.item_count == 3

    def test_empty_state(self):
        state = CartState()
        assert state.total == Money.zero()
        assert state.item_count == 0
