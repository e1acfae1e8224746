"""Tests for the figure builders and the demo dataset."""

import pandas as pd
import plotly.graph_objects as go
import pytest

from plot_recipes.plotting import create_bar_plot, create_ci_plot, create_timeseries_plot
from plot_recipes.sample_data import SPARSE_CELLS, make_demo_frame
from plot_recipes.summarize import filter_min_obs, summarize_ci


@pytest.fixture
def demo_df():
    return make_demo_frame()


@pytest.fixture
def ci_summary(demo_df):
    return summarize_ci(demo_df, ["region", "group"], "value")


def test_demo_frame_is_deterministic():
    pd.testing.assert_frame_equal(make_demo_frame(seed=3), make_demo_frame(seed=3))
    assert list(make_demo_frame().columns) == ["date", "region", "group", "value"]


def test_demo_frame_sparse_cells_are_filtered(demo_df):
    filtered = filter_min_obs(demo_df, ["region", "group"], 5)
    kept = set(zip(filtered["region"], filtered["group"]))
    assert SPARSE_CELLS.isdisjoint(kept)
    assert len(kept) > 0


def test_ci_plot_one_trace_per_color_with_asymmetric_errors(ci_summary):
    fig = create_ci_plot(ci_summary, "region", color="group", title="Demo")
    assert sorted(t.name for t in fig.data) == ["A", "B", "C"]

    trace = next(t for t in fig.data if t.name == "A")
    rows = ci_summary[ci_summary["group"] == "A"]
    assert trace.error_y.symmetric is False
    assert list(trace.error_y.array) == pytest.approx((rows["ci_high"] - rows["mean"]).tolist(), nan_ok=True)
    assert list(trace.error_y.arrayminus) == pytest.approx((rows["mean"] - rows["ci_low"]).tolist(), nan_ok=True)
    assert fig.layout.title.text == "<b>Demo</b>"


def test_ci_plot_wraps_labels(ci_summary):
    fig = create_ci_plot(ci_summary, "region", color="group", wrap_width=10)
    assert fig.layout.xaxis.tickmode == "array"
    assert all(len(line) <= 12 for text in fig.layout.xaxis.ticktext for line in text.split("<br>"))


def test_ci_plot_line_color_override(ci_summary):
    fig = create_ci_plot(ci_summary, "region", color="group", line_colors={"B": "#000000"})
    trace = next(t for t in fig.data if t.name == "B")
    assert trace.marker.color == "#000000"


def test_ci_plot_without_color_has_single_unlegended_trace():
    summary = summarize_ci(make_demo_frame(), "region", "value")
    fig = create_ci_plot(summary, "region")
    assert len(fig.data) == 1
    assert fig.data[0].showlegend is False


def test_ci_plot_empty_input_returns_empty_figure():
    empty = pd.DataFrame(columns=["region", "mean", "ci_low", "ci_high"])
    fig = create_ci_plot(empty, "region")
    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 0


def test_ci_plot_missing_columns():
    with pytest.raises(KeyError):
        create_ci_plot(pd.DataFrame({"region": ["x"]}), "region")


def test_timeseries_plot_sums_per_date_and_formats_axis(demo_df):
    fig = create_timeseries_plot(
        demo_df, "date", "value", color="group", date_labels="%Y-%m", date_breaks="6 months"
    )
    assert len(fig.data) == 3
    assert fig.layout.xaxis.type == "date"
    assert fig.layout.xaxis.tickformat == "%Y-%m"
    assert fig.layout.xaxis.dtick == "M6"

    trace = next(t for t in fig.data if t.name == "A")
    expected = (
        demo_df[demo_df["group"] == "A"].groupby("date")["value"].sum().sort_index()
    )
    assert list(trace.y) == pytest.approx(expected.tolist())


def test_timeseries_plot_without_groups():
    df = pd.DataFrame({
        "when": pd.to_datetime(["2024-02-01", "2024-01-01", "2024-01-01"]),
        "v": [5.0, 1.0, 2.0],
    })
    fig = create_timeseries_plot(df, "when", "v")
    assert len(fig.data) == 1
    assert list(fig.data[0].y) == [3.0, 5.0]


def test_bar_plot_groups_and_wraps():
    df = pd.DataFrame({
        "region": ["Long Region Name One", "Long Region Name One", "Short"],
        "kind": ["x", "y", "x"],
        "total": [1, 2, 3],
    })
    fig = create_bar_plot(df, "region", "total", color="kind", wrap_width=8)
    assert fig.layout.barmode == "group"
    assert [t.name for t in fig.data] == ["x", "y"]
    assert list(fig.layout.xaxis.ticktext) == ["Long<br>Region<br>Name One", "Short"]


def test_missing_color_keys_get_their_own_trace():
    summary = pd.DataFrame({
        "x": ["p", "p"],
        "g": ["a", None],
        "mean": [1.0, 2.0],
        "ci_low": [0.5, 1.5],
        "ci_high": [1.5, 2.5],
    })
    fig = create_ci_plot(summary, "x", color="g")
    assert [t.name for t in fig.data] == ["a", "NA"]

    bars = create_bar_plot(summary, "x", "mean", color="g")
    assert [t.name for t in bars.data] == ["a", "NA"]


def test_timeseries_plot_keeps_missing_color_keys():
    df = pd.DataFrame({
        "when": pd.to_datetime(["2024-01-01", "2024-01-01", "2024-02-01"]),
        "g": ["a", None, None],
        "v": [1.0, 2.0, 3.0],
    })
    fig = create_timeseries_plot(df, "when", "v", color="g")
    assert [t.name for t in fig.data] == ["a", "NA"]
    assert list(fig.data[1].y) == [2.0, 3.0]
