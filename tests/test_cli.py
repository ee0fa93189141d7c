"""Tests for the command-line interface."""

from pathlib import Path

import pytest
from index_builder import IndexBuilder

from apistats.cli import main
from apistats.emit_report import parse_csv


def test_csv_report(
    sample_index_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify the csv subcommand prints parseable rows."""
    assert main(["csv", str(sample_index_path)]) == 0
    rows = parse_csv(capsys.readouterr().out)
    assert sum(r.count for r in rows) == 20  # noqa: PLR2004


def test_table_report_grouped(
    sample_index_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify the table subcommand honours --group-by."""
    assert main(["table", str(sample_index_path), "--group-by", "stability"]) == 0
    out = capsys.readouterr().out
    assert "stability" in out.splitlines()[0]
    assert "deprecated" in out


def test_stats_report(
    sample_index_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify the stats subcommand prints a summary."""
    assert main(["stats", str(sample_index_path)]) == 0
    out = capsys.readouterr().out
    assert "Items: 20" in out
    assert "Async functions: 1" in out


def test_items_listing(
    sample_index_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify the items subcommand lists signatures."""
    assert main(["items", str(sample_index_path), "--format", "markdown"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("| kind | path | signature |")
    assert "struct Point<T> { .. }" in out


def test_output_file(sample_index_path: Path, tmp_path: Path) -> None:
    """Verify -o writes the report to a file."""
    target = tmp_path / "report.md"
    assert main(["markdown", str(sample_index_path), "-o", str(target)]) == 0
    assert target.read_text(encoding="utf-8").startswith("| category |")


def test_config_file_applies(
    sample_index_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify --config settings reach the analysis."""
    config_file = tmp_path / "apistats.yml"
    config_file.write_text("exclude_paths:\n  - geom::shapes\n", encoding="utf-8")
    assert main(["csv", str(sample_index_path), "--config", str(config_file)]) == 0
    rows = parse_csv(capsys.readouterr().out)
    categories = {r.category for r in rows}
    assert "Enum" not in categories
    assert "Variant" not in categories


def test_items_listing_honours_config(
    sample_index_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify exclude_paths also applies to the items listing."""
    config_file = tmp_path / "apistats.yml"
    config_file.write_text("exclude_paths:\n  - geom::shapes\n", encoding="utf-8")
    argv = ["items", str(sample_index_path), "--config", str(config_file)]
    assert main(argv) == 0
    out = capsys.readouterr().out
    assert "geom::shapes::Kind" not in out
    assert "geom::Point" in out


def test_stats_lists_deprecated_items(
    sample_index_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify the summary names deprecated items with their notes."""
    assert main(["stats", str(sample_index_path)]) == 0
    out = capsys.readouterr().out
    assert "Deprecated:" in out
    assert "geom::shapes::Kind: use Shape instead" in out


def test_unwritable_output_exit_code(
    sample_index_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify a failed report write is reported, not raised."""
    target = tmp_path / "missing" / "out.csv"
    assert main(["csv", str(sample_index_path), "-o", str(target)]) == 1
    err = capsys.readouterr().err
    assert err.startswith("error [emit]: cannot write output:")
    assert not target.exists()


def test_format_error_exit_code(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify malformed input exits non-zero with a staged message."""
    bad = tmp_path / "bad.json"
    bad.write_text("{oops", encoding="utf-8")
    assert main(["csv", str(bad)]) == 1
    assert capsys.readouterr().err.startswith("error [load]:")


def test_missing_input_exit_code(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify an unreadable input file is reported, not raised."""
    assert main(["stats", str(tmp_path / "nope.json")]) == 1
    assert "cannot read input" in capsys.readouterr().err


def test_bad_config_exit_code(
    sample_index_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify a config file that is not a mapping is rejected."""
    config_file = tmp_path / "apistats.yml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")
    assert main(["csv", str(sample_index_path), "--config", str(config_file)]) == 1
    assert capsys.readouterr().err.startswith("error [config]:")


def test_multiple_inputs(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify several files are aggregated into one report."""
    paths = []
    for crate in ("alpha", "beta"):
        b = IndexBuilder(crate=crate)
        b.function("run")
        p = tmp_path / f"{crate}.json"
        p.write_text(b.text(), encoding="utf-8")
        paths.append(str(p))
    assert main(["csv", *paths, "--group-by", "crate"]) == 0
    rows = parse_csv(capsys.readouterr().out)
    functions = {r.dimension: r.count for r in rows if r.category == "Function"}
    assert functions == {"alpha": 1, "beta": 1}


def test_unknown_subcommand_exits() -> None:
    """Verify argparse rejects unknown report names."""
    with pytest.raises(SystemExit):
        main(["xml", "input.json"])
