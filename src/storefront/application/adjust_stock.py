"""Application service: Adjust Stock use case.

Loads the product, lets the StockLedger compute the new level and saves
only when the ledger accepted the adjustment, so a rejected subtraction
leaves the stored value untouched.
"""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.stock import StockDirection
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.stock_ledger import StockLedger


class AdjustStockHandler:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        ledger: StockLedger | None = None,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._ledger = ledger or StockLedger()

    def handle(
        self,
        product_id: str,
        delta: int,
        direction: str | StockDirection,
        variant_id: str | None = None,
    ) -> int:
        """Apply the adjustment and return the new stock level."""
        product = self._catalog_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        current = product.available_stock(variant_id)
        new_stock = self._ledger.adjust(current, delta, direction)

        product.set_stock(new_stock, variant_id)
        self._catalog_repo.save(product)
        return new_stock
