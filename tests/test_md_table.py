"""Tests for Markdown table generation."""

from apistats.md_table import md_table


def test_md_table() -> None:
    """Test Markdown table generation."""
    assert md_table([], []) == ""

    headers = ["Name", "Value"]
    rows = [["A", "1"], ["B", "2"]]
    expected = "| Name | Value |\n| --- | --- |\n| A | 1 |\n| B | 2 |"
    assert md_table(headers, rows) == expected


def test_md_table_header_only() -> None:
    """Test a table without rows keeps its header."""
    assert md_table(["a", "b"], [], right_align=[False, True]) == (
        "| a | b |\n| --- | ---: |"
    )


def test_md_table_escapes_cells() -> None:
    """Test pipes and newlines cannot break the table."""
    out = md_table(["sig"], [["fn f(x: u8)\n| y"]])
    assert out.splitlines()[2] == "| fn f(x: u8) \\| y |"
