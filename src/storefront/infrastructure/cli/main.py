import click

from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_login,
    cart_remove,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.price_commands import price_quote
from storefront.infrastructure.cli.product_commands import product_list, product_show
from storefront.infrastructure.cli.stock_commands import stock_adjust, stock_low
from storefront.infrastructure.config import Settings
from storefront.infrastructure.log_config import configure_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log at INFO level.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Storefront: pricing, stock and carts"""
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc))
    configure_logging("INFO" if verbose else settings.log_level)
    ctx.obj = settings


@cli.group()
def product() -> None:
    """Browse the catalog."""


@cli.group()
def price() -> None:
    """Quote prices."""


@cli.group()
def stock() -> None:
    """Manage stock levels."""


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


# Register subcommands
product.add_command(product_list)
product.add_command(product_show)
price.add_command(price_quote)
stock.add_command(stock_adjust)
stock.add_command(stock_low)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_login)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
