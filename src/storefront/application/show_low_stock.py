"""Application service: Show Low Stock use case (query).

A product is low on stock when its stock is at or below its minimum
order quantity. Variants are checked against their product's threshold.
"""

from __future__ import annotations

from storefront.application.dto import LowStockLineDTO
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.stock_ledger import StockLedger


class ShowLowStockHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(self) -> list[LowStockLineDTO]:
        lines: list[LowStockLineDTO] = []
        for product in self._catalog_repo.list_all():
            threshold = product.min_order_quantity
            if StockLedger.is_low_stock(product.stock, threshold):
                lines.append(
                    LowStockLineDTO(
                        product_id=product.id,
                        product_name=product.name,
                        sku=None,
                        stock=product.stock,
                        threshold=threshold,
                    )
                )
            for variant in product.variants:
                if StockLedger.is_low_stock(variant.stock, threshold):
                    lines.append(
                        LowStockLineDTO(
                            product_id=product.id,
                            product_name=product.name,
                            sku=variant.sku,
                            stock=variant.stock,
                            threshold=threshold,
                        )
                    )
        return sorted(lines, key=lambda line: line.stock)
