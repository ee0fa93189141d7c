"""Grouping modes understood by the aggregator."""

from enum import Enum

from apistats.classify_item import ClassifiedItem


class Grouping(Enum):
    """How classified items are bucketed into aggregation rows."""

    CATEGORY = "category"
    MODULE = "module"
    STABILITY = "stability"
    CRATE = "crate"

    @property
    def dimension(self) -> str | None:
        """Return the secondary column name, or None for category-only rows."""
        return None if self is Grouping.CATEGORY else self.value


def parse_grouping(value: "str | Grouping") -> Grouping:
    """Accept a Grouping or its string value."""
    if isinstance(value, Grouping):
        return value
    try:
        return Grouping(value.strip().lower())
    except ValueError:
        choices = ", ".join(g.value for g in Grouping)
        msg = f"unknown grouping {value!r} (choose from: {choices})"
        raise ValueError(msg) from None


def group_key(item: ClassifiedItem, grouping: Grouping) -> tuple[str, str | None]:
    """Return the (category, dimension) key of an item."""
    category = item.category.value
    if grouping is Grouping.MODULE:
        return category, item.module
    if grouping is Grouping.STABILITY:
        return category, item.stability.value
    if grouping is Grouping.CRATE:
        return category, item.crate
    return category, None
