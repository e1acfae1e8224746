"""Pytest configuration to make the project root importable.

This ensures that ``import plot_recipes`` works when tests are run from the
repository root without installing the package.
"""

import os
import sys

import pandas as pd
import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def scores_df():
    """Small long-format frame with two keys and a numeric value."""
    return pd.DataFrame({
        "site": ["north", "north", "north", "south", "south", "east"],
        "arm": ["a", "a", "b", "a", "a", "a"],
        "score": [1.0, 3.0, 5.0, 10.0, 14.0, 7.0],
    })
