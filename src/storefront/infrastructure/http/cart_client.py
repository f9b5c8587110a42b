"""HTTP clients for the remote cart backends.

Both backends answer every call with the full refreshed cart wrapped in
``{"status": "success", "data": {"item": <cart>}}``. Errors come back as
``{"status": "error", "message": ...}`` with a 4xx/5xx status code and are
mapped onto the domain exception taxonomy here, so nothing above this
module ever sees an httpx exception.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from storefront.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    InsufficientStockError,
    NetworkError,
    ValidationError,
)
from storefront.domain.model.cart import CartItem, CartState
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.cart_backend import CartBackend

logger = logging.getLogger(__name__)


def build_client(
    base_url: str,
    timeout: float,
    session_token: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Get a configured async httpx client, authenticated if a token is given."""
    headers = {"Accept": "application/json"}
    if session_token:
        headers["Authorization"] = f"Bearer {session_token}"
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        headers=headers,
        transport=transport,
    )


def _message_of(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"


def _error_for(response: httpx.Response) -> DomainException:
    message = _message_of(response)
    status = response.status_code
    if status == 404:
        return EntityNotFoundError(message)
    if status == 409 or (status == 400 and "stock" in message.lower()):
        return InsufficientStockError(message)
    if 400 <= status < 500:
        return ValidationError(message)
    return NetworkError(f"Cart service error {status}: {message}")


def _handle_response(response: httpx.Response) -> CartState:
    """Return the cart of a successful response or raise.

    Anything unreadable in a 2xx body is a NetworkError, never a bare
    KeyError or TypeError.
    """
    if not response.is_success:
        raise _error_for(response)
    try:
        body = response.json()
    except ValueError as exc:
        raise NetworkError("Cart service returned a malformed response") from exc
    if not isinstance(body, dict):
        raise NetworkError("Cart service returned a malformed response")
    if body.get("status") != "success" or not body.get("data"):
        raise ValidationError(body.get("message") or "Cart request was rejected")
    try:
        return _to_state(body["data"]["item"])
    except (KeyError, TypeError, AttributeError, ValueError, ValidationError) as exc:
        logger.error("Unreadable cart in response: %r", exc)
        raise NetworkError(f"Cart service returned a malformed cart: {exc!r}") from exc


def _to_item(raw: dict[str, Any]) -> CartItem:
    product = raw.get("product") or {}
    variant = raw.get("variant")
    return CartItem(
        id=raw["id"],
        product_id=raw["productId"],
        variant_id=raw.get("variantId"),
        quantity=Quantity(int(raw["quantity"])),
        product_name=product.get("name", "Unknown Product"),
        product_price=Money.of(product.get("price", 0)),
        variant_price=Money.of(variant["price"]) if variant else None,
    )


def _to_state(raw: dict[str, Any]) -> CartState:
    return CartState(
        id=raw.get("id"),
        items=tuple(_to_item(item) for item in raw.get("items", [])),
    )


class _HttpCartBackend(CartBackend):

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self, method: str, url: str, payload: dict[str, Any] | None = None
    ) -> CartState:
        try:
            response = await self._client.request(method, url, json=payload)
        except httpx.RequestError as exc:
            logger.error("Cart service unavailable (%s %s): %s", method, url, exc)
            raise NetworkError(str(exc)) from exc
        return _handle_response(response)

    @staticmethod
    def _item_payload(
        product_id: str, quantity: int, variant_id: str | None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"productId": product_id, "quantity": quantity}
        if variant_id is not None:
            payload["variantId"] = variant_id
        return payload


class HttpGuestCartBackend(_HttpCartBackend):
    """Guest cart endpoints, addressed by the cart id in the path."""

    async def get_cart(self, cart_id: str | None = None) -> CartState:
        url = f"/guest-cart/{cart_id}" if cart_id else "/guest-cart"
        return await self._request("GET", url)

    async def add_item(
        self,
        cart_id: str | None,
        product_id: str,
        quantity: int,
        variant_id: str | None = None,
    ) -> CartState:
        return await self._request(
            "POST",
            f"/guest-cart/{self._require_id(cart_id)}/items",
            self._item_payload(product_id, quantity, variant_id),
        )

    async def update_item(
        self, cart_id: str | None, item_id: str, quantity: int
    ) -> CartState:
        return await self._request(
            "PUT",
            f"/guest-cart/{self._require_id(cart_id)}/items/{item_id}",
            {"quantity": quantity},
        )

    async def remove_item(self, cart_id: str | None, item_id: str) -> CartState:
        return await self._request(
            "DELETE", f"/guest-cart/{self._require_id(cart_id)}/items/{item_id}"
        )

    async def clear(self, cart_id: str | None) -> CartState:
        return await self._request("DELETE", f"/guest-cart/{self._require_id(cart_id)}")

    @staticmethod
    def _require_id(cart_id: str | None) -> str:
        if not cart_id:
            raise EntityNotFoundError("No guest cart found")
        return cart_id


class HttpAuthCartBackend(_HttpCartBackend):
    """Customer cart endpoints; the session travels in the client's headers."""

    async def get_cart(self, cart_id: str | None = None) -> CartState:
        return await self._request("GET", "/cart")

    async def add_item(
        self,
        cart_id: str | None,
        product_id: str,
        quantity: int,
        variant_id: str | None = None,
    ) -> CartState:
        return await self._request(
            "POST", "/cart/items", self._item_payload(product_id, quantity, variant_id)
        )

    async def update_item(
        self, cart_id: str | None, item_id: str, quantity: int
    ) -> CartState:
        return await self._request("PUT", f"/cart/items/{item_id}", {"quantity": quantity})

    async def remove_item(self, cart_id: str | None, item_id: str) -> CartState:
        return await self._request("DELETE", f"/cart/items/{item_id}")

    async def clear(self, cart_id: str | None) -> CartState:
        return await self._request("DELETE", "/cart")
