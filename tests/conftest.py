"""Shared fixtures for the test suite."""

from pathlib import Path

import pytest
from index_builder import IndexBuilder

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def builder() -> IndexBuilder:
    """A fresh index builder with only a crate root."""
    return IndexBuilder()


@pytest.fixture
def sample_index_path() -> Path:
    """Path to the bundled sample index."""
    return FIXTURES / "sample_index.json"
