"""Command-line entry point: report statistics about rustdoc JSON API indexes."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import yaml

from apistats.emit_report import emit_listing, emit_report
from apistats.errors import ApiIndexError
from apistats.grouping import Grouping
from apistats.list_items import list_items
from apistats.load_config import load_config
from apistats.run_analysis import run_analysis

logger = logging.getLogger(__name__)

REPORTS = {
    "csv": "Emit aggregation rows as comma-separated values",
    "table": "Emit aggregation rows as an aligned table",
    "stats": "Emit a narrative summary of the API surface",
    "markdown": "Emit aggregation rows as a Markdown table",
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per report."""
    ap = argparse.ArgumentParser(
        prog="apistats",
        description="Count and classify the items of rustdoc JSON API indexes.",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        help="rustdoc JSON files (several files are aggregated together)",
    )
    common.add_argument("--config", help="Path to a YAML configuration file")
    common.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the report to this file instead of stdout",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress (-v) or debug details (-vv)",
    )

    sub = ap.add_subparsers(dest="command", required=True)
    for name, help_text in REPORTS.items():
        p = sub.add_parser(name, parents=[common], help=help_text)
        p.add_argument(
            "--group-by",
            choices=[g.value for g in Grouping],
            default=Grouping.CATEGORY.value,
            help="Secondary grouping dimension (default: category only)",
        )

    items = sub.add_parser(
        "items",
        parents=[common],
        help="List traits, types, functions and trait impls with signatures",
    )
    items.add_argument(
        "--format",
        choices=["csv", "table", "markdown"],
        default="table",
        help="Presentation of the listing (default: table)",
    )
    return ap


def main(argv: Sequence[str] | None = None) -> int:
    """Run the requested report."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"error [config]: {e}", file=sys.stderr)
        return 1

    grouping = getattr(args, "group_by", Grouping.CATEGORY.value)
    try:
        result = run_analysis(args.inputs, grouping, config)
    except ApiIndexError as e:
        print(f"error [{e.stage}]: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error [load]: cannot read input: {e}", file=sys.stderr)
        return 1

    if args.command == "items":
        exclude = config.get("exclude_paths") or []
        listings = []
        for analyzed in result.documents:
            listings.extend(
                list_items(analyzed.classification, analyzed.document, exclude)
            )
        listings.sort(key=lambda li: (li.kind, li.path, li.signature))
        text = emit_listing(listings, args.format, config)
    else:
        text = emit_report(
            result.rows,
            args.command,
            grouping=result.grouping,
            warnings=result.warnings,
            config=config,
            deprecated=result.deprecated,
        )

    if args.output:
        try:
            args.output.write_text(text, encoding="utf-8")
        except OSError as e:
            print(f"error [emit]: cannot write output: {e}", file=sys.stderr)
            return 1
        logger.info("Wrote %s report to %s", args.command, args.output)
    else:
        sys.stdout.write(text)
    return 0


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


if __name__ == "__main__":
    raise SystemExit(main())
