import pandas as pd
import plotly.graph_objects as go

from .config import DEFAULT_COLORS, DEFAULT_DATE_LABELS, NA_LABEL
from .dates import format_date_axis
from .labels import wrap_axis_labels, wrap_label
from .summarize import ensure_columns


# ============================================================
# Configuration / constants
# ============================================================

HOVER_TEMPLATE_CI = (
    "%{x}<br>"
    "Mean: %{y:.2f}<br>"
    "CI: %{customdata[0]:.2f} to %{customdata[1]:.2f}<br>"
    "n: %{customdata[2]}<extra>%{fullData.name}</extra>"
)

HOVER_TEMPLATE_SERIES = "Date: %{x}<br>Value: %{y:,.2f}<extra>%{fullData.name}</extra>"

LAYOUT_DEFAULTS: dict = dict(
    margin=dict(t=90, l=60, r=40, b=60),
    plot_bgcolor="#f5f7fb",
    legend=dict(
        orientation="h",
        x=0.5,
        y=1.02,
        xanchor="center",
        yanchor="bottom",
        bordercolor="#c7c7c7",
        borderwidth=1,
        bgcolor="#f9f9f9",
        font=dict(size=12),
    ),
)


# ============================================================
# Helper functions
# ============================================================


def _build_palette(
    groups: list, line_colors: dict[str, str] | None
) -> dict[str, str]:
    """
    Assign default colors to groups in order, then apply user overrides.
    """
    palette = {
        group: DEFAULT_COLORS[i % len(DEFAULT_COLORS)] for i, group in enumerate(groups)
    }
    return {**palette, **(line_colors or {})}


def _title_layout(title: str | None) -> dict:
    return {"title": dict(text=f"<b>{title}</b>")} if title else {}


def _split_groups(df: pd.DataFrame, color: str | None) -> list[tuple[str | None, pd.DataFrame]]:
    """(name, rows) pairs per color group in first-appearance order; one unnamed group if no color.

    Rows with a missing color key form their own group named ``NA_LABEL``.
    """
    if color is None:
        return [(None, df)]
    return [
        (NA_LABEL if pd.isna(name) else str(name), sub)
        for name, sub in df.groupby(color, sort=False, dropna=False)
    ]


# ============================================================
# Figure builders
# ============================================================


def create_ci_plot(
    summary: pd.DataFrame,
    x: str,
    *,
    color: str | None = None,
    mean_col: str = "mean",
    low_col: str = "ci_low",
    high_col: str = "ci_high",
    title: str | None = None,
    y_axis_label: str = "Mean",
    wrap_width: int | None = None,
    line_colors: dict[str, str] | None = None,
) -> go.Figure:
    """
    Point estimates with asymmetric confidence-interval error bars.

    Parameters
    ----------
    summary : pd.DataFrame
        Output of :func:`plot_recipes.summarize.summarize_ci` (or any frame
        with the mean and bound columns).
    x : str
        Categorical column placed on the x-axis.
    color : str, optional
        Column splitting the points into separately colored traces.
    wrap_width : int, optional
        Wrap x tick labels to this many characters.
    line_colors : dict, optional
        Mapping of color group -> hex color. Overrides defaults.

    Returns
    -------
    go.Figure
        Empty when no complete rows remain.
    """
    required = [x, mean_col, low_col, high_col] + ([color] if color else [])
    ensure_columns(summary, required)

    df_clean = summary.dropna(subset=[x, mean_col]).copy()
    if df_clean.empty:
        return go.Figure()

    has_n = "n" in df_clean.columns
    groups = _split_groups(df_clean, color)
    palette = _build_palette([name for name, _ in groups], line_colors)

    fig = go.Figure()
    for name, sub in groups:
        trace_color = palette.get(name) if name is not None else DEFAULT_COLORS[0]
        customdata = list(
            zip(
                sub[low_col],
                sub[high_col],
                sub["n"] if has_n else [None] * len(sub),
            )
        )
        fig.add_trace(
            go.Scatter(
                x=sub[x],
                y=sub[mean_col],
                mode="markers",
                name=name or mean_col,
                marker=dict(size=10, color=trace_color),
                error_y=dict(
                    type="data",
                    symmetric=False,
                    array=(sub[high_col] - sub[mean_col]).tolist(),
                    arrayminus=(sub[mean_col] - sub[low_col]).tolist(),
                    thickness=2,
                    width=6,
                    color=trace_color,
                ),
                customdata=customdata,
                hovertemplate=HOVER_TEMPLATE_CI,
                showlegend=color is not None,
            )
        )

    fig.update_layout(
        **_title_layout(title),
        **LAYOUT_DEFAULTS,
    )
    fig.update_xaxes(title_text=wrap_label(x, 30), type="category")
    fig.update_yaxes(title_text=y_axis_label)

    if wrap_width is not None:
        wrap_axis_labels(fig, wrap_width, axis="x")
    return fig


def create_timeseries_plot(
    df: pd.DataFrame,
    date_col: str,
    value_col: str,
    *,
    color: str | None = None,
    title: str | None = None,
    y_axis_label: str | None = None,
    date_labels: str = DEFAULT_DATE_LABELS,
    date_breaks: str | None = None,
    line_colors: dict[str, str] | None = None,
) -> go.Figure:
    """
    Lines with markers over a formatted date axis, one line per color group.

    Values sharing a date within a group are summed before plotting.
    """
    required = [date_col, value_col] + ([color] if color else [])
    ensure_columns(df, required)

    df_clean = df.dropna(subset=[date_col, value_col]).copy()
    if df_clean.empty:
        return go.Figure()

    keys = [color, date_col] if color else [date_col]
    df_plot = df_clean.groupby(keys, as_index=False, sort=False, dropna=False)[value_col].sum()

    groups = _split_groups(df_plot, color)
    palette = _build_palette([name for name, _ in groups], line_colors)

    fig = go.Figure()
    for name, sub in groups:
        sub = sub.sort_values(date_col)
        trace_color = palette.get(name) if name is not None else DEFAULT_COLORS[0]
        fig.add_trace(
            go.Scatter(
                x=sub[date_col],
                y=sub[value_col],
                mode="lines+markers",
                name=name or value_col,
                line=dict(width=3, color=trace_color),
                marker=dict(size=7, color=trace_color),
                hovertemplate=HOVER_TEMPLATE_SERIES,
                showlegend=color is not None,
            )
        )

    fig.update_layout(
        **_title_layout(title),
        **LAYOUT_DEFAULTS,
    )
    fig.update_yaxes(title_text=y_axis_label or value_col, tickformat=",")
    format_date_axis(fig, date_labels=date_labels, date_breaks=date_breaks)
    return fig


def create_bar_plot(
    df: pd.DataFrame,
    x: str,
    y: str,
    *,
    color: str | None = None,
    title: str | None = None,
    wrap_width: int | None = None,
    line_colors: dict[str, str] | None = None,
) -> go.Figure:
    """Grouped bars of ``y`` by category ``x`` with optionally wrapped tick labels."""
    required = [x, y] + ([color] if color else [])
    ensure_columns(df, required)

    df_clean = df.dropna(subset=[x, y]).copy()
    if df_clean.empty:
        return go.Figure()

    groups = _split_groups(df_clean, color)
    palette = _build_palette([name for name, _ in groups], line_colors)

    fig = go.Figure()
    for name, sub in groups:
        fig.add_trace(
            go.Bar(
                x=sub[x],
                y=sub[y],
                name=name or y,
                marker_color=palette.get(name) if name is not None else DEFAULT_COLORS[0],
                showlegend=color is not None,
            )
        )

    fig.update_layout(
        barmode="group",
        **_title_layout(title),
        **LAYOUT_DEFAULTS,
    )
    fig.update_yaxes(title_text=y)

    if wrap_width is not None:
        wrap_axis_labels(fig, wrap_width, axis="x")
    return fig
