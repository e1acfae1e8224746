"""Legend ordering recipes for plotly figures.

Plotly draws the legend in trace order unless a trace carries an explicit
``legendrank``.  The helpers here use ``legendrank`` so that the legend can be
re-sorted without touching the drawing order of ``fig.data``.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from .config import DEFAULT_LEGEND_RANK, LegendPosition

# Layout fragments for each supported legend position.
LEGEND_POSITIONS: dict[str, dict] = {
    "top": dict(orientation="h", x=0.5, y=1.02, xanchor="center", yanchor="bottom"),
    "bottom": dict(orientation="h", x=0.5, y=-0.15, xanchor="center", yanchor="top"),
    "right": dict(orientation="v", x=1.02, y=1.0, xanchor="left", yanchor="top"),
    "left": dict(orientation="v", x=-0.15, y=1.0, xanchor="right", yanchor="top"),
}


def reorder_legend(fig: go.Figure, order: Sequence[str]) -> go.Figure:
    """
    Rank legend entries so the traces named in ``order`` appear first, in order.

    Traces sharing a name (for example the same series across subplots) get
    the same rank.  Unlisted traces keep plotly's default rank and follow in
    their original order.
    """
    order = list(order)
    if len(set(order)) != len(order):
        raise ValueError(f"Duplicate names in legend order: {order}")

    trace_names = {trace.name for trace in fig.data}
    unknown = [name for name in order if name not in trace_names]
    if unknown:
        raise ValueError(f"No traces named {unknown} in figure")

    ranks = {name: i for i, name in enumerate(order, start=1)}
    for trace in fig.data:
        trace.legendrank = ranks.get(trace.name, DEFAULT_LEGEND_RANK)
    return fig


def reverse_legend(fig: go.Figure) -> go.Figure:
    """Reverse the legend item order (grouped legends stay grouped)."""
    grouped = any(getattr(trace, "legendgroup", None) for trace in fig.data)
    fig.update_layout(legend_traceorder="reversed+grouped" if grouped else "reversed")
    return fig


def position_legend(fig: go.Figure, position: LegendPosition) -> go.Figure:
    """Move the legend to one side of the plot, or hide it with ``"none"``."""
    if position == "none":
        fig.update_layout(showlegend=False)
        return fig

    try:
        placement = LEGEND_POSITIONS[position]
    except KeyError:
        raise ValueError(
            f"Unknown legend position {position!r}; "
            f"expected one of {[*LEGEND_POSITIONS, 'none']}"
        ) from None

    fig.update_layout(showlegend=True, legend=placement)
    return fig


def category_order(
    df: pd.DataFrame,
    column: str,
    *,
    by: Optional[str] = None,
    agg: str = "mean",
    descending: bool = False,
) -> List:
    """
    Compute an ordering of the categories in ``column``.

    Parameters
    ----------
    df : pd.DataFrame
        Long-format data.
    column : str
        Categorical column whose levels are ordered.
    by : str, optional
        Numeric column to order by.  When omitted, categories are ordered by
        frequency, most frequent first.
    agg : str, default "mean"
        Aggregation applied to ``by`` within each category.
    descending : bool, default False
        Sort the aggregated values from largest to smallest.

    Returns
    -------
    list
        Category values, suitable for ``category_orders={column: ...}`` in
        plotly express.

    Notes
    -----
    Ties keep the order in which categories first appear in ``df``; missing
    categories are dropped.
    """
    required = [column] if by is None else [column, by]
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")

    data = df.dropna(subset=[column])
    appearance = pd.unique(data[column])

    if by is None:
        scores = data[column].value_counts(sort=False)
        ascending = False
    else:
        scores = data.groupby(column, sort=False)[by].agg(agg)
        ascending = not descending

    scores = scores.reindex(appearance)
    # stable sort keeps first-appearance order among ties
    ordered = scores.sort_values(ascending=ascending, kind="mergesort", na_position="last")
    return ordered.index.tolist()


def order_legend_by(
    fig: go.Figure,
    df: pd.DataFrame,
    column: str,
    *,
    by: Optional[str] = None,
    agg: str = "mean",
    descending: bool = False,
) -> go.Figure:
    """
    Rank the legend by :func:`category_order` of ``column`` in ``df``.

    Categories without a trace in ``fig`` (for example groups removed by a
    minimum-observation filter) are skipped.
    """
    trace_names = {trace.name for trace in fig.data}
    order = [
        str(value)
        for value in category_order(df, column, by=by, agg=agg, descending=descending)
    ]
    return reorder_legend(fig, [name for name in order if name in trace_names])
