"""JSON-file-backed cart store.

A local stand-in for the cart backends, used by the CLI. Carts are kept
as StoredCart aggregates so adds are coalesced and stock-checked exactly
as the remote store does it. One file holds every cart plus the mapping
from signed-in session to cart id.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import CartItem, CartState, StoredCart
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.cart_backend import CartBackend
from storefront.domain.repository.catalog_repository import CatalogRepository


class JsonCartBackend(CartBackend):
    """Guest store when ``session_key`` is None, session store otherwise."""

    def __init__(
        self,
        file_path: Path,
        catalog_repo: CatalogRepository,
        session_key: str | None = None,
    ) -> None:
        self._file_path = file_path
        self._catalog_repo = catalog_repo
        self._session_key = session_key
        self._ensure_file()

    # --- CartBackend interface ------------------------------------------------

    async def get_cart(self, cart_id: str | None = None) -> CartState:
        data = self._load_raw()
        cart = self._find(data, cart_id)
        if cart is None:
            cart = self._create(data)
            self._persist_raw(data)
        return cart.snapshot()

    async def add_item(
        self,
        cart_id: str | None,
        product_id: str,
        quantity: int,
        variant_id: str | None = None,
    ) -> CartState:
        data = self._load_raw()
        product = self._product(product_id)
        cart = self._find(data, cart_id) or self._create(data)
        cart.add(product, quantity, variant_id)
        return self._store(data, cart)

    async def update_item(
        self, cart_id: str | None, item_id: str, quantity: int
    ) -> CartState:
        data = self._load_raw()
        cart = self._require(data, cart_id)
        item = cart.snapshot().find_item(item_id)
        if item is None:
            raise EntityNotFoundError(f"Cart item '{item_id}' not found")
        cart.update(item_id, self._product(item.product_id), quantity)
        return self._store(data, cart)

    async def remove_item(self, cart_id: str | None, item_id: str) -> CartState:
        data = self._load_raw()
        cart = self._require(data, cart_id)
        cart.remove(item_id)
        return self._store(data, cart)

    async def clear(self, cart_id: str | None) -> CartState:
        data = self._load_raw()
        cart = self._require(data, cart_id)
        cart.clear()
        return self._store(data, cart)

    # --- Cart lookup ----------------------------------------------------------

    def _find(self, data: dict, cart_id: str | None) -> StoredCart | None:
        if self._session_key is not None:
            cart_id = data["sessions"].get(self._session_key)
        if cart_id is None or cart_id not in data["carts"]:
            return None
        return self._to_domain(data["carts"][cart_id])

    def _require(self, data: dict, cart_id: str | None) -> StoredCart:
        cart = self._find(data, cart_id)
        if cart is None:
            raise EntityNotFoundError("Cart not found")
        return cart

    def _create(self, data: dict) -> StoredCart:
        if self._session_key is None:
            cart = StoredCart(id=StoredCart.new_id("guest-cart"))
        else:
            cart = StoredCart(id=StoredCart.new_id("cart"))
            data["sessions"][self._session_key] = cart.id
        data["carts"][cart.id] = self._to_raw(cart)
        return cart

    def _store(self, data: dict, cart: StoredCart) -> CartState:
        data["carts"][cart.id] = self._to_raw(cart)
        self._persist_raw(data)
        return cart.snapshot()

    def _product(self, product_id: str) -> Product:
        product = self._catalog_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: StoredCart) -> dict:
        return {
            "id": cart.id,
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "variant_id": item.variant_id,
                    "quantity": item.quantity.value,
                    "product_name": item.product_name,
                    "product_price": str(item.product_price.amount),
                    "variant_price": (
                        str(item.variant_price.amount)
                        if item.variant_price is not None
                        else None
                    ),
                    "currency": item.product_price.currency,
                }
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> StoredCart:
        items = []
        for item in raw["items"]:
            currency = item.get("currency", "USD")
            variant_price = item.get("variant_price")
            items.append(
                CartItem(
                    id=item["id"],
                    product_id=item["product_id"],
                    variant_id=item.get("variant_id"),
                    quantity=Quantity(item["quantity"]),
                    product_name=item["product_name"],
                    product_price=Money(Decimal(item["product_price"]), currency),
                    variant_price=(
                        Money(Decimal(variant_price), currency)
                        if variant_price is not None
                        else None
                    ),
                )
            )
        return StoredCart(id=raw["id"], items=items)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, data: dict) -> None:
        self._file_path.write_text(
            json.dumps(data, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps({"carts": {}, "sessions": {}}), encoding="utf-8"
            )
