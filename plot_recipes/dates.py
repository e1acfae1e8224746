"""Date-axis formatting recipes.

``format_date_axis`` takes strftime-style label patterns (``"%b %Y"``), which
plotly's d3 time formatter accepts directly, and human-readable break
intervals (``"3 months"``), which are translated to plotly ``dtick`` values.
"""

from __future__ import annotations

import logging
import re
from typing import Literal, Optional

import pandas as pd
import plotly.graph_objects as go

from .config import DEFAULT_DATE_LABELS

logger = logging.getLogger(__name__)

_MS_PER_SECOND = 1000

# Units plotly can step through as calendar months.
MONTH_UNITS: dict[str, int] = {
    "month": 1,
    "quarter": 3,
    "year": 12,
}

# Fixed-length units, in milliseconds.
FIXED_UNITS: dict[str, int] = {
    "sec": _MS_PER_SECOND,
    "min": 60 * _MS_PER_SECOND,
    "hour": 60 * 60 * _MS_PER_SECOND,
    "day": 24 * 60 * 60 * _MS_PER_SECOND,
    "week": 7 * 24 * 60 * 60 * _MS_PER_SECOND,
}

_UNIT_ALIASES: dict[str, str] = {
    "second": "sec",
    "minute": "min",
}

_BREAKS_RE = re.compile(r"^\s*(?:(\d+)\s*)?([a-z]+?)s?\s*$")


def parse_date_breaks(spec: str) -> str | int:
    """
    Translate a break interval such as ``"2 weeks"`` into a plotly ``dtick``.

    Month-based units return ``"M<n>"``; fixed units return milliseconds.

    >>> parse_date_breaks("3 months")
    'M3'
    >>> parse_date_breaks("1 day")
    86400000
    """
    match = _BREAKS_RE.match(str(spec).lower())
    if match is None:
        raise ValueError(f"Cannot parse date breaks {spec!r}")

    count = int(match.group(1)) if match.group(1) else 1
    unit = _UNIT_ALIASES.get(match.group(2), match.group(2))
    if count < 1:
        raise ValueError(f"Date breaks need a positive count, got {spec!r}")

    if unit in MONTH_UNITS:
        return f"M{count * MONTH_UNITS[unit]}"
    if unit in FIXED_UNITS:
        return count * FIXED_UNITS[unit]
    raise ValueError(
        f"Unknown date break unit in {spec!r}; expected one of "
        f"{sorted([*MONTH_UNITS, *FIXED_UNITS])}"
    )


def format_date_axis(
    fig: go.Figure,
    *,
    date_labels: str = DEFAULT_DATE_LABELS,
    date_breaks: Optional[str] = None,
    axis: Literal["x", "y"] = "x",
    tickangle: Optional[float] = None,
    tick0: Optional[str] = None,
) -> go.Figure:
    """Format every ``axis`` axis of ``fig`` as a date axis."""
    if axis not in ("x", "y"):
        raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")

    updates: dict = dict(type="date", tickformat=date_labels, hoverformat=date_labels)
    if date_breaks is not None:
        updates["dtick"] = parse_date_breaks(date_breaks)
    if tick0 is not None:
        updates["tick0"] = tick0
    if tickangle is not None:
        updates["tickangle"] = tickangle

    if axis == "x":
        fig.update_xaxes(**updates)
    else:
        fig.update_yaxes(**updates)
    return fig


def coerce_dates(
    df: pd.DataFrame, column: str, *, format: Optional[str] = None
) -> pd.DataFrame:
    """Return a copy of ``df`` with ``column`` parsed to datetimes (bad values -> NaT)."""
    if column not in df.columns:
        raise KeyError(f"Missing expected columns: {[column]}")

    out = df.copy()
    parsed = pd.to_datetime(out[column], format=format, errors="coerce")
    n_bad = int((parsed.isna() & out[column].notna()).sum())
    if n_bad:
        logger.warning("%d value(s) in %r could not be parsed as dates", n_bad, column)
    out[column] = parsed
    return out
