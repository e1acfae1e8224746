"""plot_recipes package initializer.

This package collects small, independent recipes for customizing plotly
figures (legend order, wrapped axis labels, gridlines, date axes) and for
summarizing grouped pandas data (confidence intervals, minimum-observation
filtering), plus a helper for pulling tabular files from a Dataverse
archive.  See individual module docstrings for details.
"""
