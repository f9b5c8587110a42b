"""Stock adjustment value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront.domain.exceptions import ValidationError


class StockDirection(Enum):
    ADD = "add"
    SUBTRACT = "subtract"


@dataclass(frozen=True)
class StockAdjustment:
    """An ephemeral request to move a stock count by ``delta`` units.

    Never persisted. ``delta`` must be a positive integer, so a bad request
    is rejected here and never reaches the ledger.
    """

    delta: int
    direction: StockDirection

    def __post_init__(self) -> None:
        if not isinstance(self.delta, int) or isinstance(self.delta, bool):
            raise ValidationError(
                f"Stock adjustment must be an integer, got {type(self.delta).__name__}"
            )
        if self.delta <= 0:
            raise ValidationError("Stock adjustment must be positive")

    @staticmethod
    def parse(delta: int, direction: str | StockDirection) -> StockAdjustment:
        if isinstance(direction, StockDirection):
            return StockAdjustment(delta, direction)
        try:
            parsed = StockDirection(direction.lower())
        except ValueError as exc:
            raise ValidationError(
                f"Unknown stock direction {direction!r}, expected 'add' or 'subtract'"
            ) from exc
        return StockAdjustment(delta, parsed)
