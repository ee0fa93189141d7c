"""Logic for computing grouped metrics over classified items."""

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from fractions import Fraction

from apistats.aggregation_row import COUNT_COLUMNS, AggregationRow, ratio
from apistats.category import Category
from apistats.classify_item import ClassifiedItem
from apistats.grouping import Grouping, group_key, parse_grouping
from apistats.stability import StabilityTier

logger = logging.getLogger(__name__)

_FUNCTION_CATEGORIES = {
    Category.FUNCTION,
    Category.METHOD,
    Category.REQUIRED_METHOD,
    Category.PROVIDED_METHOD,
}


def aggregate(
    items: Iterable[ClassifiedItem], grouping: "Grouping | str" = Grouping.CATEGORY
) -> list[AggregationRow]:
    """Group classified items and compute per-group metrics.

    Rows are sorted by (category, dimension). Groups without items never
    appear, so every row has a count of at least one.
    """
    grouping = parse_grouping(grouping)
    counters: dict[tuple[str, str | None], Counter[str]] = {}
    for item in items:
        c = counters.setdefault(group_key(item, grouping), Counter())
        c["count"] += 1
        c["public"] += item.is_public
        c["deprecated"] += item.stability is StabilityTier.DEPRECATED
        c["unstable"] += item.stability is StabilityTier.UNSTABLE
        c["documented"] += item.has_docs
        c["generics"] += item.generic_count
        if item.category in _FUNCTION_CATEGORIES:
            c["const_fns"] += item.is_const
            c["async_fns"] += item.is_async

    rows = [
        AggregationRow(
            category=category,
            dimension=dimension,
            **{col: int(c[col]) for col in COUNT_COLUMNS},
        )
        for (category, dimension), c in counters.items()
    ]
    rows.sort(key=lambda r: r.key)
    logger.debug("Aggregated %d rows grouped by %s", len(rows), grouping.value)
    return rows


def filter_excluded(
    items: Iterable[ClassifiedItem], prefixes: Sequence[str]
) -> tuple[list[ClassifiedItem], int]:
    """Drop items whose resolved path starts with any excluded prefix."""
    kept: list[ClassifiedItem] = []
    excluded = 0
    for item in items:
        if prefixes and any(item.path.startswith(p) for p in prefixes):
            excluded += 1
        else:
            kept.append(item)
    return kept, excluded


@dataclass(frozen=True)
class Summary:
    """Totals across a set of aggregation rows."""

    items: int = 0
    public: int = 0
    deprecated: int = 0
    unstable: int = 0
    documented: int = 0
    generics: int = 0
    const_fns: int = 0
    async_fns: int = 0
    by_category: dict[str, int] = field(default_factory=dict)

    @property
    def avg_generics(self) -> Fraction:
        """Average generic-parameter count over all items."""
        return ratio(self.generics, self.items)

    @property
    def public_ratio(self) -> Fraction:
        """Share of public items."""
        return ratio(self.public, self.items)

    @property
    def deprecated_ratio(self) -> Fraction:
        """Share of deprecated items."""
        return ratio(self.deprecated, self.items)

    @property
    def documented_ratio(self) -> Fraction:
        """Share of documented items."""
        return ratio(self.documented, self.items)


def summarize(rows: Iterable[AggregationRow]) -> Summary:
    """Sum the metrics of all rows, keeping per-category counts."""
    totals: Counter[str] = Counter()
    by_category: Counter[str] = Counter()
    for r in rows:
        for col in COUNT_COLUMNS:
            totals[col] += getattr(r, col)
        by_category[r.category] += r.count
    return Summary(
        items=totals["count"],
        public=totals["public"],
        deprecated=totals["deprecated"],
        unstable=totals["unstable"],
        documented=totals["documented"],
        generics=totals["generics"],
        const_fns=totals["const_fns"],
        async_fns=totals["async_fns"],
        by_category=dict(sorted(by_category.items())),
    )
