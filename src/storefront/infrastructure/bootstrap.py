"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storefront.application.cart import AuthCart, GuestCart
from storefront.application.cart_context import CartContext
from storefront.application.merge_carts import CartMergeCoordinator
from storefront.domain.repository.cart_backend import CartBackend
from storefront.infrastructure.config import Settings
from storefront.infrastructure.http.cart_client import (
    HttpAuthCartBackend,
    HttpGuestCartBackend,
    build_client,
)
from storefront.infrastructure.persistence.json_cart_backend import JsonCartBackend
from storefront.infrastructure.persistence.json_cart_id_store import JsonCartIdStore
from storefront.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)


def catalog_repository(settings: Settings) -> JsonCatalogRepository:
    return JsonCatalogRepository(settings.data_dir / "products.json")


def cart_id_store(settings: Settings) -> JsonCartIdStore:
    return JsonCartIdStore(settings.data_dir / "guest_cart_id.json")


def guest_cart_backend(settings: Settings) -> CartBackend:
    if settings.api_url:
        return HttpGuestCartBackend(build_client(settings.api_url, settings.api_timeout))
    return JsonCartBackend(settings.data_dir / "carts.json", catalog_repository(settings))


def auth_cart_backend(settings: Settings, session: str | None) -> CartBackend:
    if settings.api_url:
        return HttpAuthCartBackend(
            build_client(settings.api_url, settings.api_timeout, session_token=session)
        )
    return JsonCartBackend(
        settings.data_dir / "carts.json",
        catalog_repository(settings),
        session_key=session,
    )


def cart_context(settings: Settings) -> CartContext:
    return CartContext(GuestCart(guest_cart_backend(settings), cart_id_store(settings)))


def merge_coordinator(settings: Settings, context: CartContext) -> CartMergeCoordinator:
    return CartMergeCoordinator(
        context,
        auth_cart_factory=lambda session: AuthCart(auth_cart_backend(settings, session)),
    )
