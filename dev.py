"""Development script to run checks (formatting, linting, tests) and a sample report."""

import argparse
import subprocess
import sys

SAMPLE_INDEX = "tests/fixtures/sample_index.json"


def run_command(command: list[str], step_name: str) -> None:
    """Run a shell command as a step in the development process."""
    print(f"\n--- Running Step: {step_name} ---")
    print(f"$ {' '.join(command)}")
    try:
        subprocess.run(command, check=True)
    except subprocess.CalledProcessError:
        print(f"\n❌ Failed: {step_name}")
        sys.exit(1)


def run_checks() -> None:
    """Lint, test with coverage, and enforce the coverage gate."""
    run_command(["uv", "run", "ruff", "format", "--check"], "Ruff Format Check")
    run_command(["uv", "run", "ruff", "check"], "Ruff Linting")
    run_command(
        [
            "uv",
            "run",
            "pytest",
            "--cov=apistats",
            "--cov-branch",
            "--cov-report=json:coverage.json",
        ],
        "Tests",
    )
    run_command(
        ["uv", "run", "python", "scripts/coverage_gate.py", "--file", "coverage.json"],
        "Coverage Gate",
    )


def main() -> None:
    """Run the development checks and optionally a sample report."""
    parser = argparse.ArgumentParser(
        description="Run development checks and a sample report."
    )
    parser.add_argument(
        "--ci",
        action="store_true",
        help="Run checks and tests only, skipping the sample report",
    )
    args = parser.parse_args()

    if args.ci:
        run_checks()
        print("\n✅ CI checks passed successfully. Skipping the sample report.")
        return

    # Run auto-formatting and fixing
    run_command(["uv", "run", "ruff", "format"], "Ruff Formatting")
    run_command(
        ["uv", "run", "ruff", "check", "--fix", "--unsafe-fixes"],
        "Ruff Linting & Fixes",
    )

    run_checks()

    run_command(
        ["uv", "run", "python", "-m", "apistats", "stats", SAMPLE_INDEX],
        "Sample Report",
    )

    print("\n✅ All development checks and the sample report passed successfully.")


if __name__ == "__main__":
    main()
