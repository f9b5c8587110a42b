"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so callers (the CLI, the merge coordinator) can catch them uniformly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storefront.application.merge_carts import MergeReport


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Malformed input to an operation, rejected before any backend call."""


class EntityNotFoundError(DomainException):
    """A referenced cart, item, product or variant does not exist."""


class InsufficientStockError(DomainException):
    """A stock-reducing operation cannot be satisfied."""


class NetworkError(DomainException):
    """Transport-level failure talking to a backing store.

    The operation is considered to have had no effect.
    """


class PartialMergeFailure(DomainException):
    """One or more guest cart items could not be transferred on login."""

    def __init__(self, report: MergeReport) -> None:
        self.report = report
        super().__init__(
            f"{len(report.failed)} of {report.attempted} guest cart item(s) "
            f"could not be transferred"
        )
