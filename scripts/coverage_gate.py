"""Fail when any apistats module falls below a coverage threshold.

Reads the JSON report written by ``pytest --cov-report=json``:

    python scripts/coverage_gate.py --file coverage.json --threshold 85
"""

import argparse
import json
import pathlib
import sys
from typing import Any

from tabulate import tabulate

PACKAGE = "apistats/"
SKIPPED = {"__main__.py"}


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments for the coverage gate."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--file",
        type=pathlib.Path,
        default=pathlib.Path("coverage.json"),
        help="Path to the coverage JSON report",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=85.0,
        help="Minimum line and branch percentage per module",
    )
    return parser.parse_args()


def percent(covered: float | None, total: float | None) -> float | None:
    """Compute a percentage, or None when there is nothing to measure."""
    if covered is None or not total:
        return None
    return covered / total * 100


def module_rows(files: dict[str, Any]) -> list[tuple[str, float | None, float | None]]:
    """Return (path, line %, branch %) for every package module in the report."""
    rows = []
    for path, info in sorted(files.items()):
        norm = path.replace("\\", "/")
        if PACKAGE not in norm or norm.rsplit("/", maxsplit=1)[-1] in SKIPPED:
            continue
        summary = info.get("summary", {})
        rows.append(
            (
                norm,
                percent(summary.get("covered_lines"), summary.get("num_statements")),
                percent(summary.get("covered_branches"), summary.get("num_branches")),
            )
        )
    return rows


def main() -> int:
    """Print modules under the threshold; return 1 if there are any."""
    args = parse_args()
    try:
        data = json.loads(args.file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"cannot read coverage report {args.file}: {exc}", file=sys.stderr)
        return 1

    rows = module_rows(data.get("files", {}))
    failing = [
        (path, line, branch)
        for path, line, branch in rows
        if any(p is not None and p < args.threshold for p in (line, branch))
    ]
    if not failing:
        print(f"coverage gate passed ({len(rows)} modules >= {args.threshold:.0f}%)")
        return 0

    print(
        tabulate(
            failing,
            headers=["module", "lines %", "branches %"],
            floatfmt=".1f",
            missingval="n/a",
        )
    )
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
