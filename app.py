import pandas as pd
from shiny import reactive
from shiny.express import input, ui
from shinywidgets import render_plotly

# Import organized modules
from plot_recipes.config import (
    DATE_BREAK_OPTIONS,
    DATE_LABEL_OPTIONS,
    DEFAULT_CONFIDENCE,
    DEFAULT_DATE_BREAKS,
    DEFAULT_DATE_LABELS,
    DEFAULT_LEGEND_ORDER,
    DEFAULT_LEGEND_POSITION,
    DEFAULT_MIN_OBS,
    DEFAULT_WRAP_WIDTH,
    LEGEND_ORDER_OPTIONS,
    LEGEND_POSITION_OPTIONS,
)
from plot_recipes.gridlines import remove_gridlines
from plot_recipes.legend import order_legend_by, position_legend, reverse_legend
from plot_recipes.plotting import create_ci_plot, create_timeseries_plot
from plot_recipes.sample_data import make_demo_frame
from plot_recipes.summarize import filter_min_obs, summarize_ci

# Helpers for UI mapping
LEGEND_ORDER_CHOICES = {value: label for label, value in LEGEND_ORDER_OPTIONS}
LEGEND_POSITION_CHOICES = {value: label for label, value in LEGEND_POSITION_OPTIONS}

# ======================================================
#  REACTIVE STATE
# ======================================================
# Demo data is generated once; values stay in-memory until app restart.
data_store = reactive.Value(make_demo_frame())


@reactive.calc
def summary_table():
    df = data_store.get()
    filtered = filter_min_obs(
        df, ["region", "group"], int(input.min_obs() or 0), value_col="value"
    )
    if filtered.empty:
        return pd.DataFrame()
    return summarize_ci(filtered, ["region", "group"], "value", level=input.level())


def _apply_legend_recipes(fig, df: pd.DataFrame, by: str):
    order_mode = input.legend_order()
    if order_mode == "reversed":
        reverse_legend(fig)
    elif order_mode == "mean":
        order_legend_by(fig, df, "group", by=by, descending=True)
    position_legend(fig, input.legend_position())
    if input.no_grid():
        remove_gridlines(fig)
    return fig


# ======================================================
#  UI LAYOUT
# ======================================================
ui.page_opts(
    title="Plot recipes gallery",
    fillable=False,
    fillable_mobile=True,
    full_width=True,
    id="page",
    lang="en",
)

with ui.sidebar(open="always", position="right"):
    ui.input_select(
        "legend_order", "Legend order", LEGEND_ORDER_CHOICES, selected=DEFAULT_LEGEND_ORDER
    )
    ui.input_select(
        "legend_position",
        "Legend position",
        LEGEND_POSITION_CHOICES,
        selected=DEFAULT_LEGEND_POSITION,
    )
    ui.input_slider(
        "wrap_width", "Axis label width", min=4, max=40, value=DEFAULT_WRAP_WIDTH, step=1
    )
    ui.input_checkbox("no_grid", "Remove gridlines", value=False)
    ui.input_select(
        "date_labels", "Date labels", DATE_LABEL_OPTIONS, selected=DEFAULT_DATE_LABELS
    )
    ui.input_select(
        "date_breaks", "Date breaks", DATE_BREAK_OPTIONS, selected=DEFAULT_DATE_BREAKS
    )
    ui.input_slider(
        "level", "Confidence level", min=0.5, max=0.99, value=DEFAULT_CONFIDENCE, step=0.01
    )
    ui.input_numeric("min_obs", "Minimum observations per group", value=DEFAULT_MIN_OBS, min=0)
    ui.input_action_button("reset_filters", "Reset", class_="btn-primary mt-3")


@reactive.effect
@reactive.event(input.reset_filters)
def _reset_filters():
    ui.update_select("legend_order", selected=DEFAULT_LEGEND_ORDER)
    ui.update_select("legend_position", selected=DEFAULT_LEGEND_POSITION)
    ui.update_slider("wrap_width", value=DEFAULT_WRAP_WIDTH)
    ui.update_checkbox("no_grid", value=False)
    ui.update_select("date_labels", selected=DEFAULT_DATE_LABELS)
    ui.update_select("date_breaks", selected=DEFAULT_DATE_BREAKS)
    ui.update_slider("level", value=DEFAULT_CONFIDENCE)
    ui.update_numeric("min_obs", value=DEFAULT_MIN_OBS)


with ui.div(style="display:flex; flex-direction:column; align-items:center;"):
    @render_plotly
    def ci_plot():
        summary = summary_table()
        if summary.empty:
            return None

        fig = create_ci_plot(
            summary,
            x="region",
            color="group",
            title=f"Mean value by region ({input.level():.0%} CI)",
            y_axis_label="Value",
            wrap_width=input.wrap_width(),
        )
        return _apply_legend_recipes(fig, summary, by="mean")

    @render_plotly
    def series_plot():
        df = data_store.get()
        fig = create_timeseries_plot(
            df,
            "date",
            "value",
            color="group",
            title="Monthly total by group",
            y_axis_label="Total value",
            date_labels=input.date_labels(),
            date_breaks=input.date_breaks(),
        )
        return _apply_legend_recipes(fig, df, by="value")
