"""
Configuration constants for the plotting and summary recipes.
"""

from typing import Dict, List, Literal, Tuple

# ======================================================
#  DATAVERSE ACCESS
# ======================================================
DATAVERSE_SERVER_ENV: str = "DATAVERSE_SERVER"
DATAVERSE_KEY_ENV: str = "DATAVERSE_KEY"
DEFAULT_DATAVERSE_SERVER: str = "dataverse.harvard.edu"
DEFAULT_DATASET_VERSION: str = ":latest"
REQUEST_TIMEOUT: int = 30

# Download cache location override (see `data_manager.py`)
DATA_CACHE_DIR_ENV: str = "DATA_CACHE_DIR"

# ======================================================
#  RECIPE DEFAULTS
# ======================================================
LINE_BREAK: str = "<br>"
DEFAULT_WRAP_WIDTH: int = 12

DEFAULT_CONFIDENCE: float = 0.95
DEFAULT_MIN_OBS: int = 5

DEFAULT_DATE_LABELS: str = "%b %Y"
DEFAULT_DATE_BREAKS: str = "3 months"

# plotly's own default legendrank; unranked traces sort after ranked ones
DEFAULT_LEGEND_RANK: int = 1000

# Trace name given to rows whose color key is missing.
NA_LABEL: str = "NA"

LegendPosition = Literal["top", "bottom", "left", "right", "none"]

DEFAULT_COLORS: List[str] = [
    "#1f77b4",
    "#d62728",
    "#2ca02c",
    "#9467bd",
    "#ff7f0e",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
]

# ======================================================
#  UI DEFAULTS
# ======================================================
LEGEND_ORDER_OPTIONS: List[Tuple[str, str]] = [
    ("Data order", "data"),
    ("Reversed", "reversed"),
    ("By mean (descending)", "mean"),
]

LEGEND_POSITION_OPTIONS: List[Tuple[str, str]] = [
    ("Top", "top"),
    ("Bottom", "bottom"),
    ("Right", "right"),
    ("Left", "left"),
    ("Hidden", "none"),
]

DATE_LABEL_OPTIONS: Dict[str, str] = {
    "%b %Y": "Jan 2024",
    "%Y-%m": "2024-01",
    "%b": "Jan",
    "%d %b %Y": "01 Jan 2024",
    "%Y": "2024",
}

DATE_BREAK_OPTIONS: List[str] = ["1 month", "2 months", "3 months", "6 months", "1 year"]

DEFAULT_LEGEND_ORDER: str = "data"
DEFAULT_LEGEND_POSITION: str = "top"
