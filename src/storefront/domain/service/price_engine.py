"""Domain service: Price Engine.

Computes the effective unit price for a product. Two pricing modes exist
and they never combine:

- a selected variant always sells at its own price;
- without a variant, the product's bulk pricing tiers apply, falling back
  to the base price below the lowest tier.
"""

from __future__ import annotations

from storefront.domain.model.product import BulkPricingTier, Product, ProductVariant
from storefront.domain.model.value_objects import Money


class PriceEngine:

    @staticmethod
    def applicable_tier(product: Product, quantity: int) -> BulkPricingTier | None:
        """Return the tier that prices ``quantity`` units, or None.

        Picks the greatest ``min_quantity`` not above ``quantity``. Several
        tiers sharing that threshold resolve to the cheapest one.
        """
        best: BulkPricingTier | None = None
        for tier in product.bulk_pricing_tiers:
            if tier.min_quantity > quantity:
                continue
            if best is None or tier.min_quantity > best.min_quantity:
                best = tier
            elif tier.min_quantity == best.min_quantity and tier.price < best.price:
                best = tier
        return best

    def price_for(
        self,
        product: Product,
        variant: ProductVariant | None,
        quantity: int,
    ) -> Money:
        """Effective unit price for ``quantity`` units.

        Never raises for a non-negative quantity, including products
        without any tiers.
        """
        if variant is not None:
            return variant.price
        tier = self.applicable_tier(product, quantity)
        if tier is None:
            return product.base_price
        return tier.price

    def line_total(
        self,
        product: Product,
        variant: ProductVariant | None,
        quantity: int,
    ) -> Money:
        return self.price_for(product, variant, quantity) * quantity
