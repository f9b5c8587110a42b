"""JSON-file-backed implementation of CatalogRepository."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.product import BulkPricingTier, Product, ProductVariant
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.catalog_repository import CatalogRepository


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- CatalogRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        products = self._load()
        products[product.id] = product
        self._persist(products)

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", "USD")
        return Product(
            id=raw["id"],
            name=raw["name"],
            base_price=Money(Decimal(raw["price"]), currency),
            stock=raw.get("stock", 0),
            min_order_quantity=raw.get("min_order_quantity", 1),
            variants=[
                ProductVariant(
                    id=v["id"],
                    product_id=raw["id"],
                    sku=v["sku"],
                    price=Money(Decimal(v["price"]), currency),
                    stock=v.get("stock", 0),
                    attributes=dict(v.get("attributes", {})),
                )
                for v in raw.get("variants", [])
            ],
            bulk_pricing_tiers=[
                BulkPricingTier(
                    product_id=raw["id"],
                    min_quantity=t["min_quantity"],
                    price=Money(Decimal(t["price"]), currency),
                )
                for t in raw.get("bulk_pricing_tiers", [])
            ],
        )

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "price": str(product.base_price.amount),
            "currency": product.base_price.currency,
            "stock": product.stock,
            "min_order_quantity": product.min_order_quantity,
            "variants": [
                {
                    "id": v.id,
                    "sku": v.sku,
                    "price": str(v.price.amount),
                    "stock": v.stock,
                    "attributes": v.attributes,
                }
                for v in product.variants
            ],
            "bulk_pricing_tiers": [
                {"min_quantity": t.min_quantity, "price": str(t.price.amount)}
                for t in product.bulk_pricing_tiers
            ],
        }

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> dict[str, Product]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {item["id"]: self._to_domain(item) for item in raw}

    def _persist(self, products: dict[str, Product]) -> None:
        raw = [self._to_raw(p) for p in products.values()]
        self._file_path.write_text(
            json.dumps(raw, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
