"""CLI commands for stock management."""

from __future__ import annotations

import click

from storefront.application.adjust_stock import AdjustStockHandler
from storefront.application.show_low_stock import ShowLowStockHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import catalog_repository
from storefront.infrastructure.config import Settings


@click.command("adjust")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID (omit for the product itself).")
@click.option("--delta", required=True, type=int, help="Units to add or remove.")
@click.option(
    "--direction",
    required=True,
    type=click.Choice(["add", "subtract"], case_sensitive=False),
    help="Whether to add or remove stock.",
)
@click.pass_obj
def stock_adjust(
    settings: Settings,
    product_id: str,
    variant_id: str | None,
    delta: int,
    direction: str,
) -> None:
    """Add or remove stock for a product or variant."""
    handler = AdjustStockHandler(catalog_repo=catalog_repository(settings))

    try:
        new_stock = handler.handle(product_id, delta, direction, variant_id=variant_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    target = f"variant {variant_id}" if variant_id else f"product #{product_id}"
    click.echo(f"Stock for {target} is now {new_stock}")


@click.command("low")
@click.pass_obj
def stock_low(settings: Settings) -> None:
    """List products and variants at or below their reorder level."""
    lines = ShowLowStockHandler(catalog_repo=catalog_repository(settings)).handle()

    if not lines:
        click.echo("No low-stock products.")
        return

    click.echo(f"{'Product':<24} {'SKU':<16} {'Stock':>7} {'Threshold':>10}")
    click.echo("-" * 60)
    for line in lines:
        click.echo(
            f"{line.product_name:<24} {line.sku or '-':<16} {line.stock:>7} {line.threshold:>10}"
        )
