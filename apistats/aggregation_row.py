"""Data model for one grouped result record."""

from dataclasses import dataclass
from fractions import Fraction

# Integer metrics in emission order; ratios are derived from these.
COUNT_COLUMNS = (
    "count",
    "public",
    "deprecated",
    "unstable",
    "documented",
    "generics",
    "const_fns",
    "async_fns",
)
RATIO_COLUMNS = (
    "avg_generics",
    "public_ratio",
    "deprecated_ratio",
    "documented_ratio",
)


def ratio(numerator: int, denominator: int) -> Fraction:
    """Exact ratio of two counts; zero when the denominator is zero."""
    if denominator == 0:
        return Fraction(0)
    return Fraction(numerator, denominator)


@dataclass(frozen=True)
class AggregationRow:
    """A grouping key paired with its metrics."""

    category: str
    dimension: str | None = None
    count: int = 0
    public: int = 0
    deprecated: int = 0
    unstable: int = 0
    documented: int = 0
    generics: int = 0
    const_fns: int = 0
    async_fns: int = 0

    @property
    def key(self) -> tuple[str, str]:
        """Return the grouping key used for ordering."""
        return self.category, self.dimension or ""

    @property
    def avg_generics(self) -> Fraction:
        """Average generic-parameter count per item."""
        return ratio(self.generics, self.count)

    @property
    def public_ratio(self) -> Fraction:
        """Share of items that are public."""
        return ratio(self.public, self.count)

    @property
    def deprecated_ratio(self) -> Fraction:
        """Share of items that are deprecated."""
        return ratio(self.deprecated, self.count)

    @property
    def documented_ratio(self) -> Fraction:
        """Share of items carrying documentation."""
        return ratio(self.documented, self.count)
