"""Utility for generating Markdown tables."""

from collections.abc import Sequence


def md_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    right_align: Sequence[bool] | None = None,
) -> str:
    """Generate a GitHub Markdown table; header-only when there are no rows."""
    if not headers:
        return ""
    right = list(right_align or [False] * len(headers))
    out = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join("---:" if r else "---" for r in right) + " |",
    ]
    out.extend("| " + " | ".join(_escape(c) for c in r) + " |" for r in rows)
    return "\n".join(out)


def _escape(cell: str) -> str:
    return cell.replace("|", "\\|").replace("\n", " ")
