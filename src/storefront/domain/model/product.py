"""Product aggregate, with its variants and bulk pricing tiers.

The catalog owns products. From the pricing and cart side they are
read-only, except for ``stock`` which the stock ledger adjusts.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.value_objects import Money


def _check_stock(stock: int, owner: str) -> None:
    if not isinstance(stock, int) or isinstance(stock, bool):
        raise ValidationError(f"Stock for {owner} must be an integer")
    if stock < 0:
        raise ValidationError(f"Stock for {owner} cannot be negative, got {stock}")


@dataclass(frozen=True)
class BulkPricingTier:
    """Volume discount: ``price`` applies from ``min_quantity`` units up.

    Tiers belong to the product, never to a variant.
    """

    product_id: str
    min_quantity: int
    price: Money

    def __post_init__(self) -> None:
        if not isinstance(self.min_quantity, int) or self.min_quantity < 1:
            raise ValidationError(
                f"Tier minimum quantity must be an integer >= 1, got {self.min_quantity!r}"
            )


@dataclass
class ProductVariant:
    """A concrete purchasable configuration of a product.

    ``attributes`` maps attribute name (e.g. "color") to the chosen value.
    ``price`` overrides the product's base price when this variant is
    selected.
    """

    id: str
    product_id: str
    sku: str
    price: Money
    stock: int = 0
    attributes: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_stock(self.stock, f"variant {self.sku}")


@dataclass
class Product:
    """A product in the catalog.

    This is an aggregate root: variants and tiers are only reached
    through it.
    """

    id: str
    name: str
    base_price: Money
    stock: int = 0
    min_order_quantity: int = 1
    variants: list[ProductVariant] = field(default_factory=list)
    bulk_pricing_tiers: list[BulkPricingTier] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_stock(self.stock, f"product {self.name}")

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    def get_variant(self, variant_id: str) -> ProductVariant:
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        raise EntityNotFoundError(
            f"Variant '{variant_id}' not found for product '{self.name}'"
        )

    def set_stock(self, stock: int, variant_id: str | None = None) -> None:
        """Store a new stock level on the product or one of its variants."""
        if variant_id is None:
            _check_stock(stock, f"product {self.name}")
            self.stock = stock
            return
        variant = self.get_variant(variant_id)
        _check_stock(stock, f"variant {variant.sku}")
        variant.stock = stock

    def available_stock(self, variant_id: str | None = None) -> int:
        if variant_id is None:
            return self.stock
        return self.get_variant(variant_id).stock
