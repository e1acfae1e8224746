"""Grouped summaries: confidence intervals and minimum-observation rules.

Every function partitions rows by one or more key columns and returns a new
DataFrame; inputs are never modified.  Missing key values form their own
group rather than being silently dropped.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np
import pandas as pd
from scipy import stats

from .config import DEFAULT_CONFIDENCE

logger = logging.getLogger(__name__)

# Aggregations allowed in `summarize_min_obs`, mapped to pandas names.
STATISTICS: dict[str, str] = {
    "mean": "mean",
    "median": "median",
    "sum": "sum",
    "sd": "std",
    "min": "min",
    "max": "max",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def ensure_columns(df: pd.DataFrame, required: List[str]) -> None:
    """Raise an error if the DataFrame lacks any of the required columns."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")


def _as_list(group_cols: str | Sequence[str]) -> List[str]:
    cols = [group_cols] if isinstance(group_cols, str) else list(group_cols)
    if not cols:
        raise ValueError("At least one group column is required.")
    return cols


def group_counts(df: pd.DataFrame, group_cols: str | Sequence[str]) -> pd.DataFrame:
    """Row counts per group, in column ``n``."""
    keys = _as_list(group_cols)
    ensure_columns(df, keys)
    return df.groupby(keys, dropna=False).size().reset_index(name="n")


# ---------------------------------------------------------------------------
# Confidence intervals
# ---------------------------------------------------------------------------


def summarize_ci(
    df: pd.DataFrame,
    group_cols: str | Sequence[str],
    value_col: str,
    *,
    level: float = DEFAULT_CONFIDENCE,
) -> pd.DataFrame:
    """Per-group mean with a Student's t confidence interval.

    Parameters
    ----------
    df : pd.DataFrame
        Long-format data with one observation per row.
    group_cols : str or sequence of str
        Key column(s) to partition by.
    value_col : str
        Numeric column to summarize.  Missing values are not counted.
    level : float, default 0.95
        Two-sided confidence level, strictly between 0 and 1.

    Returns
    -------
    pd.DataFrame
        One row per group with columns ``n``, ``mean``, ``sd``, ``se``,
        ``ci_low`` and ``ci_high``.  Groups with fewer than two observations
        have missing ``sd``, ``se`` and interval bounds.
    """
    if not 0 < level < 1:
        raise ValueError(f"Confidence level must be between 0 and 1, got {level!r}")

    keys = _as_list(group_cols)
    ensure_columns(df, [*keys, value_col])

    values = pd.to_numeric(df[value_col], errors="coerce")
    summary = (
        values.groupby([df[k] for k in keys], dropna=False)
        .agg(n="count", mean="mean", sd="std")
        .reset_index()
    )
    summary["n"] = summary["n"].astype(int)

    n = summary["n"].to_numpy(dtype=float)
    dof = np.where(n >= 2, n - 1, np.nan)
    t_crit = stats.t.ppf((1 + level) / 2, dof)

    summary["se"] = summary["sd"] / np.sqrt(summary["n"].where(summary["n"] > 0))
    summary["ci_low"] = summary["mean"] - t_crit * summary["se"]
    summary["ci_high"] = summary["mean"] + t_crit * summary["se"]
    return summary[[*keys, "n", "mean", "sd", "se", "ci_low", "ci_high"]]


# ---------------------------------------------------------------------------
# Minimum-observation rules
# ---------------------------------------------------------------------------


def filter_min_obs(
    df: pd.DataFrame,
    group_cols: str | Sequence[str],
    min_obs: int,
    *,
    value_col: str | None = None,
) -> pd.DataFrame:
    """
    Keep only rows belonging to groups with at least ``min_obs`` observations.

    An observation is a row, or a non-missing ``value_col`` entry when one is
    given.
    """
    if min_obs < 0:
        raise ValueError(f"min_obs must be non-negative, got {min_obs!r}")

    keys = _as_list(group_cols)
    ensure_columns(df, keys if value_col is None else [*keys, value_col])

    grouped = df.groupby(keys, dropna=False)
    if value_col is None:
        sizes = grouped[keys[0]].transform("size")
    else:
        sizes = grouped[value_col].transform("count")

    keep = sizes >= min_obs
    if logger.isEnabledFor(logging.DEBUG):
        n_groups = grouped.ngroups
        n_kept = df.loc[keep].groupby(keys, dropna=False).ngroups
        logger.debug(
            "filter_min_obs: kept %d of %d groups (min_obs=%d)",
            n_kept,
            n_groups,
            min_obs,
        )
    return df.loc[keep].copy()


def summarize_min_obs(
    df: pd.DataFrame,
    group_cols: str | Sequence[str],
    value_col: str,
    min_obs: int,
    *,
    stat: str = "mean",
) -> pd.DataFrame:
    """
    Aggregate ``value_col`` per group, but only where the group is large enough.

    Each group keeps its row; the statistic is missing when fewer than
    ``min_obs`` non-missing values are available.
    """
    if stat not in STATISTICS:
        raise ValueError(f"Unknown statistic {stat!r}; expected one of {list(STATISTICS)}")
    if min_obs < 0:
        raise ValueError(f"min_obs must be non-negative, got {min_obs!r}")

    keys = _as_list(group_cols)
    ensure_columns(df, [*keys, value_col])

    values = pd.to_numeric(df[value_col], errors="coerce")
    summary = (
        values.groupby([df[k] for k in keys], dropna=False)
        .agg(n="count", value=STATISTICS[stat])
        .reset_index()
    )
    summary["n"] = summary["n"].astype(int)
    summary[value_col] = summary["value"].where(summary["n"] >= min_obs)
    return summary[[*keys, "n", value_col]]
