"""Axis label wrapping recipes.

Long category names crowd a categorical axis.  Plotly does not wrap tick
labels on its own, so the labels are wrapped up front and handed back to the
axis as ``ticktext`` with ``<br>`` line breaks.
"""

from __future__ import annotations

import textwrap
from typing import Iterable, List, Literal

import pandas as pd
import plotly.graph_objects as go

from .config import LINE_BREAK

AxisLetter = Literal["x", "y"]


def _check_width(width: int) -> None:
    if isinstance(width, bool) or not isinstance(width, int) or width < 1:
        raise ValueError(f"Label width must be a positive integer, got {width!r}")


def _check_axis(axis: str) -> None:
    if axis not in ("x", "y"):
        raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")


def wrap_label(text, width: int) -> str:
    """
    Wrap ``text`` into lines of at most ``width`` characters.

    Breaks happen only between words, so a single word longer than ``width``
    stays on one line.  Lines are joined with plotly's ``<br>``.
    """
    _check_width(width)
    if text is None or (not isinstance(text, str) and pd.isna(text)):
        return ""
    words = " ".join(str(text).split())
    lines = textwrap.wrap(
        words, width=width, break_long_words=False, break_on_hyphens=False
    )
    return LINE_BREAK.join(lines)


def wrap_labels(labels: Iterable, width: int) -> List[str]:
    _check_width(width)
    return [wrap_label(label, width) for label in labels]


def _axis_categories(fig: go.Figure, axis: AxisLetter) -> list:
    """Values plotted along ``axis`` across all traces, in first-appearance order."""
    values: list = []
    for trace in fig.data:
        data = getattr(trace, axis, None)
        if data is None:
            continue
        values.extend(data)
    if not values:
        return []
    return list(pd.unique(pd.Series(values, dtype=object).dropna()))


def wrap_axis_labels(fig: go.Figure, width: int, *, axis: AxisLetter = "x") -> go.Figure:
    """Wrap the category tick labels of every ``axis`` axis in ``fig``."""
    _check_width(width)
    _check_axis(axis)

    categories = _axis_categories(fig, axis)
    if not categories:
        return fig

    ticks = dict(
        tickmode="array",
        tickvals=categories,
        ticktext=wrap_labels(categories, width),
    )
    if axis == "x":
        fig.update_xaxes(**ticks)
    else:
        fig.update_yaxes(**ticks)
    return fig


def wrap_axis_title(fig: go.Figure, width: int, *, axis: AxisLetter = "x") -> go.Figure:
    """Wrap existing axis titles; axes without a title are left alone."""
    _check_width(width)
    _check_axis(axis)

    def _wrap(ax) -> None:
        if ax.title.text:
            ax.update(title_text=wrap_label(ax.title.text, width))

    if axis == "x":
        fig.for_each_xaxis(_wrap)
    else:
        fig.for_each_yaxis(_wrap)
    return fig
