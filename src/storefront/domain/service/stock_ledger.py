"""Domain service: Stock Ledger.

Applies bounded add/subtract adjustments to a stock count. The ledger
only computes the new value; persisting it is the caller's job, and the
caller never gets a negative value to persist.
"""

from __future__ import annotations

from storefront.domain.exceptions import InsufficientStockError
from storefront.domain.model.stock import StockAdjustment, StockDirection


class StockLedger:

    def apply(self, current: int, adjustment: StockAdjustment) -> int:
        """Return the stock level after ``adjustment``.

        Raises InsufficientStockError if a subtraction would go below zero.
        """
        if adjustment.direction is StockDirection.ADD:
            return current + adjustment.delta

        result = current - adjustment.delta
        if result < 0:
            raise InsufficientStockError(
                f"Cannot remove {adjustment.delta} units "
                f"(only {current} in stock)"
            )
        return result

    def adjust(self, current: int, delta: int, direction: str | StockDirection) -> int:
        return self.apply(current, StockAdjustment.parse(delta, direction))

    @staticmethod
    def is_low_stock(stock: int, threshold: int) -> bool:
        """Read-time low-stock signal; nothing is stored or emitted."""
        return stock <= threshold
