"""Stability tiers and the rules deriving them from item metadata."""

from collections.abc import Iterable
from enum import Enum

from apistats.item import Item

DEFAULT_UNSTABLE_MARKERS = ("#[unstable",)


class StabilityTier(Enum):
    """How much an item's API can be relied upon."""

    STABLE = "stable"
    UNSTABLE = "unstable"
    DEPRECATED = "deprecated"


def parse_stability(
    item: Item, unstable_markers: Iterable[str] = DEFAULT_UNSTABLE_MARKERS
) -> StabilityTier:
    """Derive the stability tier of an item.

    Deprecation metadata wins over attributes; otherwise any attribute
    containing an unstable marker makes the item unstable.
    """
    if item.deprecation is not None:
        return StabilityTier.DEPRECATED
    markers = tuple(unstable_markers)
    for attr in item.attrs:
        if any(m in attr for m in markers):
            return StabilityTier.UNSTABLE
    return StabilityTier.STABLE
