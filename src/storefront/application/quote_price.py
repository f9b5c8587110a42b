"""Application service: Quote Price use case (query).

Attribute picks -> VariantResolver -> PriceEngine -> the price to show.
"""

from __future__ import annotations

from collections.abc import Mapping

from storefront.application.dto import PriceQuoteDTO
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import ProductVariant
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.price_engine import PriceEngine
from storefront.domain.service.variant_resolver import (
    ResolutionStatus,
    VariantResolver,
)


class QuotePriceHandler:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        resolver: VariantResolver | None = None,
        engine: PriceEngine | None = None,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._resolver = resolver or VariantResolver()
        self._engine = engine or PriceEngine()

    def handle(
        self,
        product_id: str,
        selected: Mapping[str, str],
        quantity: int,
    ) -> PriceQuoteDTO:
        if not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Quantity must be positive")

        product = self._catalog_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        variant: ProductVariant | None = None
        if product.has_variants:
            resolution = self._resolver.resolve(product.variants, selected)
            if resolution.status is ResolutionStatus.NOT_SELECTED:
                raise ValidationError(
                    f"Select {', '.join(resolution.missing)} for {product.name}"
                )
            if resolution.status is ResolutionStatus.NO_MATCH:
                raise ValidationError(
                    f"No {product.name} variant matches {dict(selected)}"
                )
            variant = resolution.variant

        tier = None if variant is not None else self._engine.applicable_tier(product, quantity)
        unit_price = self._engine.price_for(product, variant, quantity)
        return PriceQuoteDTO(
            product_id=product.id,
            product_name=product.name,
            variant_sku=variant.sku if variant is not None else None,
            quantity=quantity,
            unit_price=str(unit_price),
            line_total=str(unit_price * quantity),
            tier_min_quantity=tier.min_quantity if tier is not None else None,
        )
