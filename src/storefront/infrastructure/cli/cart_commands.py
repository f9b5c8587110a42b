"""CLI commands for the shopping cart.

Without ``--customer`` the commands act on the guest cart whose id is
remembered in the data directory. With ``--customer`` they act on that
customer's cart directly. ``login`` performs the guest -> customer
transition, merging the guest cart.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import click

from storefront.application.cart import AuthCart
from storefront.application.cart_context import CartContext
from storefront.application.dto import CartDTO
from storefront.application.merge_carts import AuthStateChanged, MergeReport
from storefront.domain.exceptions import DomainException
from storefront.domain.model.cart import CartState
from storefront.infrastructure.bootstrap import (
    auth_cart_backend,
    cart_context,
    merge_coordinator,
)
from storefront.infrastructure.config import Settings

customer_option = click.option(
    "--customer", default=None, help="Act on this signed-in customer's cart."
)


def _open_cart(settings: Settings, customer: str | None) -> AuthCart | CartContext:
    if customer:
        return AuthCart(auth_cart_backend(settings, customer))
    return cart_context(settings)


def _run(
    settings: Settings,
    customer: str | None,
    action: Callable[[AuthCart | CartContext], Awaitable[CartState]],
) -> CartDTO:
    async def go() -> CartState:
        cart = _open_cart(settings, customer)
        try:
            return await action(cart)
        finally:
            await cart.dispose()

    try:
        state = asyncio.run(go())
    except DomainException as exc:
        raise click.ClickException(str(exc))
    return CartDTO.from_state(state, authenticated=customer is not None)


def _display_cart(dto: CartDTO) -> None:
    """Shared formatting for displaying a cart."""
    owner = "customer" if dto.authenticated else "guest"
    click.echo(f"Cart {dto.cart_id or '(new)'}  ({owner})")

    if not dto.items:
        click.echo("  Cart is empty.")
        return

    click.echo(f"  {'Item':<38} {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*86}")
    for item in dto.items:
        click.echo(
            f"  {item.item_id:<38} {item.product_name:<20} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*86}")
    click.echo(f"  {'Items':<38} {dto.item_count:>26}")
    click.echo(f"  {'Cart Total':<38} {dto.total:>48}")


@click.command("show")
@customer_option
@click.pass_obj
def cart_show(settings: Settings, customer: str | None) -> None:
    """Show the cart."""
    _display_cart(_run(settings, customer, lambda cart: cart.load_cart()))


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
@click.option("--variant", "variant_id", default=None, help="Variant ID.")
@customer_option
@click.pass_obj
def cart_add(
    settings: Settings,
    product_id: str,
    quantity: int,
    variant_id: str | None,
    customer: str | None,
) -> None:
    """Add a product (or variant) to the cart."""
    dto = _run(
        settings,
        customer,
        lambda cart: cart.add_item(product_id, quantity, variant_id),
    )
    _display_cart(dto)


@click.command("update")
@click.option("--item", "item_id", required=True, help="Cart item ID.")
@click.option("--quantity", required=True, type=int, help="New quantity (>= 1).")
@customer_option
@click.pass_obj
def cart_update(settings: Settings, item_id: str, quantity: int, customer: str | None) -> None:
    """Change the quantity of a cart item."""
    _display_cart(
        _run(settings, customer, lambda cart: cart.update_quantity(item_id, quantity))
    )


@click.command("remove")
@click.option("--item", "item_id", required=True, help="Cart item ID.")
@customer_option
@click.pass_obj
def cart_remove(settings: Settings, item_id: str, customer: str | None) -> None:
    """Remove an item from the cart."""
    _display_cart(_run(settings, customer, lambda cart: cart.remove_item(item_id)))


@click.command("clear")
@customer_option
@click.pass_obj
def cart_clear(settings: Settings, customer: str | None) -> None:
    """Remove every item from the cart."""
    _display_cart(_run(settings, customer, lambda cart: cart.clear_cart()))


def _display_report(report: MergeReport | None) -> None:
    if report is None or report.attempted == 0:
        click.echo("No guest cart items to transfer.")
        return
    click.echo(f"Transferred {len(report.transferred)} of {report.attempted} guest cart item(s).")
    for failure in report.failed:
        click.echo(
            f"  Not transferred: {failure.item.product_name} x{failure.item.quantity} "
            f"({failure.reason})"
        )


@click.command("login")
@click.option("--customer", required=True, help="Customer signing in.")
@click.pass_obj
def cart_login(settings: Settings, customer: str) -> None:
    """Sign in: move the guest cart into the customer's cart."""

    async def go() -> tuple[MergeReport | None, CartState]:
        context = cart_context(settings)
        coordinator = merge_coordinator(settings, context)
        try:
            await context.init()
            report = await coordinator.handle(
                AuthStateChanged(authenticated=True, session=customer)
            )
            return report, context.active.state
        finally:
            await context.dispose()

    try:
        report, state = asyncio.run(go())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_report(report)
    _display_cart(CartDTO.from_state(state, authenticated=True))
