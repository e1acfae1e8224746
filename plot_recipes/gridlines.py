"""Gridline removal recipes."""

from __future__ import annotations

from typing import Literal

import plotly.graph_objects as go

Axis = Literal["x", "y", "both"]
Which = Literal["major", "minor", "both"]


def remove_gridlines(
    fig: go.Figure, *, axis: Axis = "both", which: Which = "both"
) -> go.Figure:
    """
    Hide gridlines on the chosen axes of every subplot.

    Parameters
    ----------
    fig : go.Figure
        Figure to modify in place.
    axis : {"x", "y", "both"}, default "both"
        Which axis direction loses its gridlines.
    which : {"major", "minor", "both"}, default "both"
        Major gridlines, minor gridlines, or both.

    Returns
    -------
    go.Figure
        The same figure, for chaining.
    """
    if axis not in ("x", "y", "both"):
        raise ValueError(f"axis must be 'x', 'y' or 'both', got {axis!r}")
    if which not in ("major", "minor", "both"):
        raise ValueError(f"which must be 'major', 'minor' or 'both', got {which!r}")

    updates: dict = {}
    if which in ("major", "both"):
        updates["showgrid"] = False
    if which in ("minor", "both"):
        updates["minor_showgrid"] = False

    if axis in ("x", "both"):
        fig.update_xaxes(**updates)
    if axis in ("y", "both"):
        fig.update_yaxes(**updates)
    return fig


def classic_axes(fig: go.Figure) -> go.Figure:
    """White background, no gridlines or zero lines, solid axis lines with outside ticks."""
    remove_gridlines(fig)
    axis_style = dict(
        zeroline=False,
        showline=True,
        linecolor="black",
        linewidth=1,
        ticks="outside",
    )
    fig.update_xaxes(**axis_style)
    fig.update_yaxes(**axis_style)
    fig.update_layout(plot_bgcolor="white")
    return fig
