"""CLI commands for price quotes."""

from __future__ import annotations

import click

from storefront.application.quote_price import QuotePriceHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import catalog_repository
from storefront.infrastructure.config import Settings


def _parse_attributes(raw: tuple[str, ...]) -> dict[str, str]:
    """Parse ('color=Red', 'size=L') into {'color': 'Red', 'size': 'L'}."""
    selected: dict[str, str] = {}
    for pair in raw:
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid attribute '{pair}'. Expected 'name=value'."
            )
        name, value = pair.split("=", 1)
        selected[name.strip()] = value.strip()
    return selected


@click.command("quote")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Quantity to price.")
@click.option("--attr", "attrs", multiple=True, help="Selected attribute as 'name=value'.")
@click.pass_obj
def price_quote(settings: Settings, product_id: str, quantity: int, attrs: tuple[str, ...]) -> None:
    """Quote the unit price for a product selection."""
    handler = QuotePriceHandler(catalog_repo=catalog_repository(settings))

    try:
        quote = handler.handle(product_id, _parse_attributes(attrs), quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    label = quote.product_name
    if quote.variant_sku:
        label += f" ({quote.variant_sku})"
    click.echo(f"{label}: {quote.quantity} x {quote.unit_price} = {quote.line_total}")
    if quote.tier_min_quantity is not None:
        click.echo(f"Bulk tier applied: {quote.tier_min_quantity}+ units")
