"""Unit tests for legend ordering recipes."""

import pandas as pd
import plotly.graph_objects as go
import pytest
from plotly.subplots import make_subplots

from plot_recipes.legend import (
    category_order,
    order_legend_by,
    position_legend,
    reorder_legend,
    reverse_legend,
)
from plot_recipes.plotting import create_ci_plot
from plot_recipes.sample_data import make_demo_frame
from plot_recipes.summarize import filter_min_obs, summarize_ci


@pytest.fixture
def three_trace_fig():
    fig = go.Figure()
    for name in ["low", "mid", "high"]:
        fig.add_trace(go.Scatter(x=[1, 2], y=[1, 2], name=name))
    return fig


def test_reorder_legend_sets_ranks_without_moving_traces(three_trace_fig):
    reorder_legend(three_trace_fig, ["high", "low"])
    names = [t.name for t in three_trace_fig.data]
    ranks = {t.name: t.legendrank for t in three_trace_fig.data}
    assert names == ["low", "mid", "high"]
    assert ranks == {"high": 1, "low": 2, "mid": 1000}


def test_reorder_legend_shared_names_share_rank():
    fig = make_subplots(rows=1, cols=2)
    for col in (1, 2):
        fig.add_trace(go.Scatter(x=[0], y=[0], name="a"), row=1, col=col)
        fig.add_trace(go.Scatter(x=[0], y=[0], name="b"), row=1, col=col)
    reorder_legend(fig, ["b", "a"])
    assert [t.legendrank for t in fig.data] == [2, 1, 2, 1]


def test_reorder_legend_unknown_name_raises(three_trace_fig):
    with pytest.raises(ValueError, match="missing"):
        reorder_legend(three_trace_fig, ["missing"])


def test_reorder_legend_duplicate_name_raises(three_trace_fig):
    with pytest.raises(ValueError, match="Duplicate"):
        reorder_legend(three_trace_fig, ["low", "low"])


def test_reverse_legend(three_trace_fig):
    reverse_legend(three_trace_fig)
    assert three_trace_fig.layout.legend.traceorder == "reversed"


def test_reverse_legend_keeps_groups():
    fig = go.Figure(go.Scatter(x=[1], y=[1], name="a", legendgroup="g1"))
    reverse_legend(fig)
    assert fig.layout.legend.traceorder == "reversed+grouped"


def test_position_legend_bottom_is_horizontal(three_trace_fig):
    position_legend(three_trace_fig, "bottom")
    legend = three_trace_fig.layout.legend
    assert legend.orientation == "h"
    assert legend.yanchor == "top"
    assert legend.y < 0


def test_position_legend_none_hides(three_trace_fig):
    position_legend(three_trace_fig, "none")
    assert three_trace_fig.layout.showlegend is False


def test_position_legend_unknown_raises(three_trace_fig):
    with pytest.raises(ValueError):
        position_legend(three_trace_fig, "middle")


def test_category_order_by_frequency():
    df = pd.DataFrame({"c": ["x", "y", "y", "z", "z", "z", None]})
    assert category_order(df, "c") == ["z", "y", "x"]


def test_category_order_by_value():
    df = pd.DataFrame({"c": ["x", "x", "y", "z"], "v": [1.0, 3.0, 5.0, 0.5]})
    assert category_order(df, "c", by="v") == ["z", "x", "y"]
    assert category_order(df, "c", by="v", descending=True) == ["y", "x", "z"]
    assert category_order(df, "c", by="v", agg="sum", descending=True) == ["y", "x", "z"]


def test_category_order_ties_keep_appearance_order():
    df = pd.DataFrame({"c": ["b", "a", "c"], "v": [1.0, 1.0, 1.0]})
    assert category_order(df, "c", by="v") == ["b", "a", "c"]


def test_category_order_missing_column():
    with pytest.raises(KeyError):
        category_order(pd.DataFrame({"c": ["x"]}), "c", by="v")


def test_order_legend_by_skips_categories_without_traces(three_trace_fig):
    df = pd.DataFrame({
        "level": ["low", "mid", "high", "gone", "gone"],
        "value": [1.0, 2.0, 3.0, 9.0, 9.0],
    })
    order_legend_by(three_trace_fig, df, "level", by="value", descending=True)
    ranks = {t.name: t.legendrank for t in three_trace_fig.data}
    assert ranks == {"high": 1, "mid": 2, "low": 3}


def test_order_legend_by_survives_min_obs_filtering():
    demo = make_demo_frame()
    for min_obs in (0, 20, 25, 30):
        filtered = filter_min_obs(demo, ["region", "group"], min_obs)
        if filtered.empty:
            continue
        summary = summarize_ci(filtered, ["region", "group"], "value")
        fig = create_ci_plot(summary, "region", color="group")
        order_legend_by(fig, demo, "group", by="value", descending=True)
        ranked = sorted((t.legendrank, t.name) for t in fig.data)
        assert [rank for rank, _ in ranked] == list(range(1, len(fig.data) + 1))


def test_order_legend_by_labels_match_string_trace_names():
    fig = go.Figure([go.Bar(x=[0], y=[1], name="1"), go.Bar(x=[0], y=[2], name="2")])
    df = pd.DataFrame({"code": [1, 2], "v": [1.0, 5.0]})
    order_legend_by(fig, df, "code", by="v", descending=True)
    assert [t.legendrank for t in fig.data] == [2, 1]
