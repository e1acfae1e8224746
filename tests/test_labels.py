"""Unit tests for axis label wrapping."""

import plotly.graph_objects as go
import pytest
from plotly.subplots import make_subplots

from plot_recipes.labels import (
    wrap_axis_labels,
    wrap_axis_title,
    wrap_label,
    wrap_labels,
)


def test_wrap_label_breaks_between_words():
    assert wrap_label("Central River Valley Agricultural Zone", 12) == (
        "Central<br>River Valley<br>Agricultural<br>Zone"
    )


def test_wrap_label_keeps_long_words_whole():
    assert wrap_label("Supercalifragilistic day", 5) == "Supercalifragilistic<br>day"


def test_wrap_label_short_text_unchanged():
    assert wrap_label("North", 10) == "North"


def test_wrap_label_collapses_whitespace():
    assert wrap_label("a   b\n c", 20) == "a b c"


@pytest.mark.parametrize("value, expected", [(None, ""), ("", ""), (float("nan"), ""), (2024, "2024")])
def test_wrap_label_odd_inputs(value, expected):
    assert wrap_label(value, 10) == expected


@pytest.mark.parametrize("width", [0, -3, 2.5, True])
def test_wrap_label_rejects_bad_width(width):
    with pytest.raises(ValueError):
        wrap_label("text", width)


def test_wrap_labels_elementwise():
    assert wrap_labels(["one two", "three"], 3) == ["one<br>two", "three"]


def test_wrap_axis_labels_sets_tick_text():
    fig = go.Figure(go.Bar(x=["Eastern Metropolitan Belt", "South"], y=[1, 2]))
    wrap_axis_labels(fig, 10)
    xaxis = fig.layout.xaxis
    assert xaxis.tickmode == "array"
    assert list(xaxis.tickvals) == ["Eastern Metropolitan Belt", "South"]
    assert list(xaxis.ticktext) == ["Eastern<br>Metropolitan<br>Belt", "South"]


def test_wrap_axis_labels_collects_across_traces_in_order():
    fig = go.Figure()
    fig.add_trace(go.Bar(x=["b long name", "a long name"], y=[1, 2]))
    fig.add_trace(go.Bar(x=["a long name", "c long name"], y=[3, 4]))
    wrap_axis_labels(fig, 6)
    assert list(fig.layout.xaxis.tickvals) == ["b long name", "a long name", "c long name"]


def test_wrap_axis_labels_y_axis_and_subplots():
    fig = make_subplots(rows=1, cols=2)
    fig.add_trace(go.Bar(y=["first category", "second one"], x=[1, 2], orientation="h"), row=1, col=1)
    fig.add_trace(go.Bar(y=["first category"], x=[3], orientation="h"), row=1, col=2)
    wrap_axis_labels(fig, 6, axis="y")
    assert list(fig.layout.yaxis.ticktext) == ["first<br>category", "second<br>one"]
    assert list(fig.layout.yaxis2.ticktext) == ["first<br>category", "second<br>one"]


def test_wrap_axis_labels_without_categories_is_noop():
    fig = go.Figure()
    wrap_axis_labels(fig, 5)
    assert fig.layout.xaxis.tickmode is None


def test_wrap_axis_labels_bad_axis():
    with pytest.raises(ValueError):
        wrap_axis_labels(go.Figure(), 5, axis="z")


def test_wrap_axis_title():
    fig = go.Figure(go.Scatter(x=[1], y=[1]))
    fig.update_xaxes(title_text="Number of employed persons")
    wrap_axis_title(fig, 10)
    assert fig.layout.xaxis.title.text == "Number of<br>employed<br>persons"
    assert fig.layout.yaxis.title.text is None
