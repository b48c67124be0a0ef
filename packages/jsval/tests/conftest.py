"""Pytest configuration for dataknobs_jsval tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_jsval import TypeOf  # noqa: E402


@pytest.fixture
def string_constraint():
    """Constraint accepting only strings."""
    return TypeOf(str)


@pytest.fixture
def number_constraint():
    """Constraint accepting ints and floats (but not bools)."""
    return TypeOf(int, float)
