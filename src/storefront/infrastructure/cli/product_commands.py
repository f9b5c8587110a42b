"""CLI commands for browsing the catalog."""

from __future__ import annotations

import click

from storefront.domain.service.variant_resolver import VariantResolver
from storefront.infrastructure.bootstrap import catalog_repository
from storefront.infrastructure.config import Settings


@click.command("list")
@click.pass_obj
def product_list(settings: Settings) -> None:
    """List all products in the catalog."""
    products = catalog_repository(settings).list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>10} {'Stock':>7} {'Variants':>9}")
    click.echo("-" * 60)
    for p in products:
        click.echo(
            f"{p.id:<6} {p.name:<24} {str(p.base_price):>10} {p.stock:>7} {len(p.variants):>9}"
        )


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_show(settings: Settings, product_id: str) -> None:
    """Show variants, attribute options and bulk tiers of a product."""
    p = catalog_repository(settings).get_by_id(product_id)
    if p is None:
        raise click.ClickException(f"Product with ID '{product_id}' not found")

    click.echo(f"Product #{p.id} {p.name}  base price {p.base_price}, stock {p.stock}")

    options = VariantResolver.available_values(p.variants)
    for name, values in options.items():
        click.echo(f"  {name}: {', '.join(values)}")

    if p.variants:
        click.echo()
        click.echo(f"  {'Variant':<10} {'SKU':<16} {'Price':>10} {'Stock':>7}  Attributes")
        for v in p.variants:
            attrs = ", ".join(f"{k}={val}" for k, val in v.attributes.items())
            click.echo(f"  {v.id:<10} {v.sku:<16} {str(v.price):>10} {v.stock:>7}  {attrs}")

    if p.bulk_pricing_tiers:
        click.echo()
        click.echo("  Bulk pricing (no variant selected):")
        for tier in sorted(p.bulk_pricing_tiers, key=lambda t: t.min_quantity):
            click.echo(f"    {tier.min_quantity:>5}+  {tier.price}")
