"""Domain service: Variant Resolution.

Maps the attribute values a shopper picked (color, size, ...) to exactly
one concrete ProductVariant. A product's variants collectively define
which attribute names must be picked before pricing or add-to-cart can
happen.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from storefront.domain.model.product import ProductVariant

logger = logging.getLogger(__name__)


class ResolutionStatus(Enum):
    RESOLVED = "RESOLVED"
    NOT_SELECTED = "NOT_SELECTED"
    NO_MATCH = "NO_MATCH"


@dataclass(frozen=True)
class VariantResolution:
    """Outcome of a resolve call.

    ``ambiguous`` is set when several variants carry the same attribute
    combination; ``variant`` is then the first of them in catalog order.
    """

    status: ResolutionStatus
    variant: ProductVariant | None = None
    ambiguous: bool = False
    missing: tuple[str, ...] = ()

    @property
    def is_resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED


class VariantResolver:

    @staticmethod
    def required_attribute_names(variants: Sequence[ProductVariant]) -> list[str]:
        """Union of attribute keys across all variants, in first-seen order."""
        names: list[str] = []
        for variant in variants:
            for name in variant.attributes:
                if name not in names:
                    names.append(name)
        return names

    @staticmethod
    def available_values(variants: Sequence[ProductVariant]) -> dict[str, list[str]]:
        """Distinct values offered per attribute name, in catalog order."""
        values: dict[str, list[str]] = {}
        for variant in variants:
            for name, value in variant.attributes.items():
                seen = values.setdefault(name, [])
                if value not in seen:
                    seen.append(value)
        return values

    def resolve(
        self,
        variants: Sequence[ProductVariant],
        selected: Mapping[str, str],
    ) -> VariantResolution:
        """Resolve ``selected`` attribute values to a single variant.

        A required attribute that is absent or empty in ``selected`` yields
        NOT_SELECTED. Otherwise the variant whose attribute map equals
        ``selected`` exactly is returned, or NO_MATCH if there is none.
        """
        missing = tuple(
            name
            for name in self.required_attribute_names(variants)
            if not selected.get(name)
        )
        if missing:
            return VariantResolution(ResolutionStatus.NOT_SELECTED, missing=missing)

        wanted = dict(selected)
        matches = [v for v in variants if v.attributes == wanted]
        if not matches:
            return VariantResolution(ResolutionStatus.NO_MATCH)

        if len(matches) > 1:
            # Duplicate attribute combinations are a catalog data problem;
            # the first variant in catalog order wins.
            logger.warning(
                "Attributes %s match %d variants (%s); using %s",
                wanted,
                len(matches),
                ", ".join(v.id for v in matches),
                matches[0].id,
            )
        return VariantResolution(
            ResolutionStatus.RESOLVED,
            variant=matches[0],
            ambiguous=len(matches) > 1,
        )
