"""End-to-end tests for the click CLI against the local JSON store."""

import json
import logging

import pytest
from click.testing import CliRunner

from storefront.infrastructure.cli.main import cli
from storefront.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from tests.catalog import robe, slippers, towel


@pytest.fixture
def data_dir(tmp_path):
    repo = JsonCatalogRepository(tmp_path / "products.json")
    for product in (towel(), robe(), slippers()):
        repo.save(product)
    return tmp_path


@pytest.fixture
def invoke(data_dir):
    runner = CliRunner()

    def _invoke(*args):
        result = runner.invoke(cli, list(args), env={"STOREFRONT_DATA_DIR": str(data_dir), "STOREFRONT_API_URL": ""})
        # the handler is bound to the runner's stderr for this invocation only
        logging.getLogger("storefront").handlers.clear()
        return result

    return _invoke


def _guest_cart_id(data_dir):
    return json.loads((data_dir / "guest_cart_id.json").read_text())["guest_cart_id"]


class TestProductCommands:

    def test_list(self, invoke):
        result = invoke("product", "list")
        assert result.exit_code == 0
        assert "Beach Towel" in result.output
        assert "Bath Robe" in result.output

    def test_show_lists_attribute_options(self, invoke):
        result = invoke("product", "show", "--id", "2")
        assert result.exit_code == 0
        assert "color: White, Blue" in result.output
        assert "size: M, L" in result.output
        assert "ROBE-WHT-L" in result.output

    def test_show_unknown(self, invoke):
        result = invoke("product", "show", "--id", "99")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestPriceQuote:

    def test_bulk_tier(self, invoke):
        result = invoke("price", "quote", "--product", "1", "--quantity", "20")
        assert result.exit_code == 0
        assert "Beach Towel: 20 x $17.99 = $359.80" in result.output
        assert "Bulk tier applied: 20+ units" in result.output

    def test_variant_price_ignores_tiers(self, invoke):
        result = invoke(
            "price", "quote", "--product", "2", "--quantity", "12",
            "--attr", "color=White", "--attr", "size=L",
        )
        assert result.exit_code == 0
        assert "Bath Robe (ROBE-WHT-L): 12 x $44.00 = $528.00" in result.output
        assert "Bulk tier" not in result.output

    def test_incomplete_selection(self, invoke):
        result = invoke("price", "quote", "--product", "2", "--quantity", "1", "--attr", "color=White")
        assert result.exit_code == 1
        assert "Select size for Bath Robe" in result.output

    def test_malformed_attribute(self, invoke):
        result = invoke("price", "quote", "--product", "2", "--quantity", "1", "--attr", "color")
        assert result.exit_code == 2
        assert "Expected 'name=value'" in result.output


class TestStockCommands:

    def test_add_then_subtract(self, invoke):
        assert "is now 8" in invoke(
            "stock", "adjust", "--product", "3", "--delta", "3", "--direction", "add"
        ).output
        result = invoke("stock", "adjust", "--product", "3", "--delta", "8", "--direction", "subtract")
        assert result.exit_code == 0
        assert "Stock for product #3 is now 0" in result.output

    def test_subtract_below_zero_is_rejected(self, invoke, data_dir):
        result = invoke(
            "stock", "adjust", "--product", "2", "--variant", "v2",
            "--delta", "5", "--direction", "subtract",
        )
        assert result.exit_code == 1
        assert "only 3 in stock" in result.output
        stored = JsonCatalogRepository(data_dir / "products.json").get_by_id("2")
        assert stored.get_variant("v2").stock == 3

    def test_low_stock(self, invoke):
        result = invoke("stock", "low")
        assert result.exit_code == 0
        assert "Slippers" in result.output
        assert "ROBE-WHT-L" in result.output
        assert "ROBE-WHT-M" not in result.output
        assert "Beach Towel" not in result.output


class TestCartCommands:

    def test_guest_add_and_show(self, invoke, data_dir):
        result = invoke("cart", "add", "--product", "1", "--quantity", "2")
        assert result.exit_code == 0
        cart_id = _guest_cart_id(data_dir)
        assert cart_id.startswith("guest-cart-")

        invoke("cart", "add", "--product", "2", "--variant", "v1")
        result = invoke("cart", "show")
        assert result.exit_code == 0
        assert f"Cart {cart_id}  (guest)" in result.output
        assert "$81.98" in result.output

    def test_add_over_stock(self, invoke):
        result = invoke("cart", "add", "--product", "2", "--variant", "v2", "--quantity", "4")
        assert result.exit_code == 1
        assert "Insufficient stock for Bath Robe" in result.output

    def test_zero_quantity_is_rejected(self, invoke):
        invoke("cart", "add", "--product", "1")
        result = invoke("cart", "update", "--item", "whatever", "--quantity", "0")
        assert result.exit_code == 1
        assert "remove the item" in result.output

    def test_clear(self, invoke):
        invoke("cart", "add", "--product", "1")
        result = invoke("cart", "clear")
        assert result.exit_code == 0
        assert "Cart is empty." in result.output

    def test_customer_cart(self, invoke):
        result = invoke("cart", "add", "--product", "1", "--customer", "alice")
        assert result.exit_code == 0
        assert "(customer)" in result.output
        assert "Cart is empty." in invoke("cart", "show").output


class TestLogin:

    def test_merges_guest_cart(self, invoke):
        invoke("cart", "add", "--product", "1", "--quantity", "2")
        invoke("cart", "add", "--product", "1", "--quantity", "1", "--customer", "alice")

        result = invoke("cart", "login", "--customer", "alice")
        assert result.exit_code == 0
        assert "Transferred 1 of 1 guest cart item(s)." in result.output
        assert "(customer)" in result.output
        assert "$59.97" in result.output
        assert "Cart is empty." in invoke("cart", "show").output

    def test_failed_line_is_dropped(self, invoke):
        invoke("cart", "add", "--product", "2", "--variant", "v2", "--quantity", "3")
        invoke("cart", "add", "--product", "1")
        invoke("stock", "adjust", "--product", "2", "--variant", "v2", "--delta", "2", "--direction", "subtract")

        result = invoke("cart", "login", "--customer", "bob")
        assert result.exit_code == 0
        assert "Transferred 1 of 2 guest cart item(s)." in result.output
        assert "Not transferred: Bath Robe x3" in result.output
        assert "Cart is empty." in invoke("cart", "show").output

    def test_empty_guest_cart(self, invoke):
        result = invoke("cart", "login", "--customer", "carol")
        assert result.exit_code == 0
        assert "No guest cart items to transfer." in result.output


class TestSettings:

    def test_bad_timeout_is_a_usage_error(self, data_dir):
        result = CliRunner().invoke(
            cli,
            ["product", "list"],
            env={"STOREFRONT_DATA_DIR": str(data_dir), "STOREFRONT_API_TIMEOUT": "soon"},
        )
        assert result.exit_code == 2
        assert "STOREFRONT_API_TIMEOUT must be a number of seconds, got 'soon'" in result.output
