"""Deterministic demo dataset used by the gallery app and the tests."""

from __future__ import annotations

import numpy as np
import pandas as pd

# Deliberately long so the category axis needs wrapping.
REGIONS: dict[str, float] = {
    "North Atlantic Coastal Highlands": 12.0,
    "Central River Valley Agricultural Zone": 9.5,
    "Southern Desert Plateau": 7.0,
    "Eastern Metropolitan Commuter Belt": 11.0,
}

GROUPS: dict[str, float] = {"A": 0.0, "B": 1.5, "C": -1.0}

# (region, group) cells capped at a couple of rows, so min-obs rules bite.
SPARSE_CELLS: set[tuple[str, str]] = {("Southern Desert Plateau", "C")}
SPARSE_MAX_ROWS: int = 2


def make_demo_frame(
    seed: int = 7, *, n_months: int = 24, n_per_month: int = 12
) -> pd.DataFrame:
    """Long-format frame with ``date``, ``region``, ``group`` and ``value`` columns."""
    rng = np.random.default_rng(seed)
    dates = pd.date_range("2022-01-01", periods=n_months, freq="MS")

    rows = []
    sparse_seen = 0
    for i, date in enumerate(dates):
        seasonal = 2.0 * np.sin(2 * np.pi * i / 12)
        for _ in range(n_per_month):
            region = rng.choice(list(REGIONS))
            group = rng.choice(list(GROUPS))
            if (region, group) in SPARSE_CELLS:
                if sparse_seen >= SPARSE_MAX_ROWS:
                    continue
                sparse_seen += 1
            value = REGIONS[region] + GROUPS[group] + seasonal + rng.normal(0, 1.5)
            rows.append(
                {
                    "date": date,
                    "region": str(region),
                    "group": str(group),
                    "value": round(float(value), 3),
                }
            )
    return pd.DataFrame(rows)
