"""Render aggregation rows and item listings as text.

Every function here is pure formatting: the same rows always produce the same
text, and the only failure is asking for a presentation that does not exist.
"""

import csv
import io
from collections.abc import Iterable, Sequence
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Any

from tabulate import tabulate

from apistats.aggregate import summarize
from apistats.aggregation_row import COUNT_COLUMNS, RATIO_COLUMNS, AggregationRow
from apistats.classify_item import ClassifiedItem
from apistats.errors import ApiIndexError, UnsupportedPresentationError
from apistats.grouping import Grouping, parse_grouping
from apistats.md_table import md_table

if TYPE_CHECKING:
    from apistats.list_items import ItemListing

DEFAULT_TABLE_FORMAT = "simple"
DEFAULT_RATIO_PRECISION = 4

LISTING_COLUMNS = ("kind", "path", "signature", "generics", "stability", "methods")


class Presentation(Enum):
    """Output formats the emitter implements."""

    CSV = "csv"
    TABLE = "table"
    STATS = "stats"
    MARKDOWN = "markdown"


def parse_presentation(value: "Presentation | str") -> Presentation:
    """Accept a Presentation or its string value."""
    if isinstance(value, Presentation):
        return value
    try:
        return Presentation(str(value).strip().lower())
    except ValueError:
        raise UnsupportedPresentationError(
            str(value), [p.value for p in Presentation]
        ) from None


def report_columns(grouping: Grouping) -> list[str]:
    """Return the column names for rows of a grouping, in emission order."""
    columns = ["category"]
    if grouping.dimension:
        columns.append(grouping.dimension)
    return [*columns, *COUNT_COLUMNS, *RATIO_COLUMNS]


def emit_report(
    rows: Sequence[AggregationRow],
    presentation: "Presentation | str",
    *,
    grouping: "Grouping | str" = Grouping.CATEGORY,
    warnings: Iterable[ApiIndexError] = (),
    deprecated: Iterable[ClassifiedItem] = (),
    config: dict[str, Any] | None = None,
) -> str:
    """Render aggregation rows in the requested presentation."""
    presentation = parse_presentation(presentation)
    grouping = parse_grouping(grouping)
    output = (config or {}).get("output") or {}
    precision = int(output.get("ratio_precision", DEFAULT_RATIO_PRECISION))

    if presentation is Presentation.STATS:
        return render_stats(
            rows, grouping, list(warnings), precision, deprecated=list(deprecated)
        )

    header = report_columns(grouping)
    body = [_row_cells(r, grouping, precision) for r in rows]
    if presentation is Presentation.CSV:
        return render_csv(header, body)
    numeric = [i >= (2 if grouping.dimension else 1) for i in range(len(header))]
    if presentation is Presentation.MARKDOWN:
        return md_table(header, body, right_align=numeric) + "\n"
    table_format = output.get("table_format") or DEFAULT_TABLE_FORMAT
    return render_table(header, body, numeric, table_format)


def emit_listing(
    listings: Sequence["ItemListing"],
    presentation: "Presentation | str",
    config: dict[str, Any] | None = None,
) -> str:
    """Render per-item listings as csv, table, or markdown."""
    presentation = parse_presentation(presentation)
    header = list(LISTING_COLUMNS)
    body = [
        [
            li.kind,
            li.path,
            li.signature,
            str(li.generics),
            li.stability,
            str(li.methods),
        ]
        for li in listings
    ]
    numeric = [c in {"generics", "methods"} for c in header]
    if presentation is Presentation.CSV:
        return render_csv(header, body)
    if presentation is Presentation.MARKDOWN:
        return md_table(header, body, right_align=numeric) + "\n"
    if presentation is Presentation.TABLE:
        output = (config or {}).get("output") or {}
        table_format = output.get("table_format") or DEFAULT_TABLE_FORMAT
        return render_table(header, body, numeric, table_format)
    raise UnsupportedPresentationError(
        presentation.value, ["csv", "table", "markdown"]
    )


def render_csv(header: Sequence[str], body: Sequence[Sequence[str]]) -> str:
    """Write a header line and one line per row."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(body)
    return buf.getvalue()


def render_table(
    header: Sequence[str],
    body: Sequence[Sequence[str]],
    numeric: Sequence[bool],
    table_format: str = DEFAULT_TABLE_FORMAT,
) -> str:
    """Render an aligned grid; with no rows only the header is printed."""
    if not body:
        return tabulate([], headers=list(header), tablefmt=table_format) + "\n"
    colalign = ["right" if n else "left" for n in numeric]
    return (
        tabulate(
            [list(r) for r in body],
            headers=list(header),
            tablefmt=table_format,
            disable_numparse=True,
            colalign=colalign,
        )
        + "\n"
    )


def render_stats(
    rows: Sequence[AggregationRow],
    grouping: Grouping,
    warnings: Sequence[ApiIndexError],
    precision: int = DEFAULT_RATIO_PRECISION,
    *,
    deprecated: Sequence[ClassifiedItem] = (),
) -> str:
    """Render a narrative summary of named metrics."""
    s = summarize(rows)
    lines = [
        "API statistics",
        "==============",
        f"Items: {s.items}",
        f"Public items: {s.public} ({_pct(s.public_ratio)})",
        f"Deprecated items: {s.deprecated} ({_pct(s.deprecated_ratio)})",
        f"Unstable items: {s.unstable}",
        f"Documented items: {s.documented} ({_pct(s.documented_ratio)})",
        f"Generic parameters: {s.generics} "
        f"(average {format_ratio(s.avg_generics, precision)} per item)",
        f"Const functions: {s.const_fns}",
        f"Async functions: {s.async_fns}",
    ]
    if s.by_category:
        lines.extend(["", "By category:"])
        width = max(len(c) for c in s.by_category)
        lines.extend(f"  {c.ljust(width)}  {n}" for c, n in s.by_category.items())
    if grouping.dimension and rows:
        lines.extend(["", f"By category and {grouping.dimension}:"])
        for r in rows:
            lines.append(f"  {r.category} / {r.dimension or '(root)'}: {r.count}")
    if deprecated:
        lines.extend(["", "Deprecated:"])
        for item in sorted(deprecated, key=lambda i: (i.path, i.id)):
            note = f": {item.deprecation_note}" if item.deprecation_note else ""
            lines.append(f"  - {item.path}{note}")
    if warnings:
        lines.extend(["", "Warnings:"])
        lines.extend(f"  - {w}" for w in warnings)
    return "\n".join(lines) + "\n"


def format_ratio(value: Fraction, precision: int = DEFAULT_RATIO_PRECISION) -> str:
    """Format an exact ratio as a fixed-precision decimal."""
    return f"{float(value):.{precision}f}"


def _pct(value: Fraction) -> str:
    return f"{float(value) * 100:.1f}%"


def _row_cells(row: AggregationRow, grouping: Grouping, precision: int) -> list[str]:
    cells = [row.category]
    if grouping.dimension:
        cells.append(row.dimension or "")
    cells.extend(str(getattr(row, col)) for col in COUNT_COLUMNS)
    cells.extend(format_ratio(getattr(row, col), precision) for col in RATIO_COLUMNS)
    return cells


def parse_csv(text: str) -> list[AggregationRow]:
    """Parse text produced by the csv presentation back into rows.

    Ratio columns are derived from the counts, so only the key and integer
    columns are read.
    """
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if not header:
        return []
    has_dimension = len(header) > 1 and header[1] not in COUNT_COLUMNS
    positions = {name: i for i, name in enumerate(header)}
    rows = []
    for cells in reader:
        if not cells:
            continue
        rows.append(
            AggregationRow(
                category=cells[0],
                dimension=cells[1] if has_dimension else None,
                **{col: int(cells[positions[col]]) for col in COUNT_COLUMNS},
            )
        )
    return rows
