"""
Command-line entry point: fetch a named file from a Dataverse dataset, drop
sparse groups, and write per-group confidence intervals (optionally with an
HTML plot).

    python -m plot_recipes.main --doi 10.7910/DVN/XXXXXX --file survey.tab \
        --group region --value score --min-obs 5 --out ci.csv --plot ci.html
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_CONFIDENCE, DEFAULT_MIN_OBS, DEFAULT_WRAP_WIDTH
from .data_manager import load_dataframe
from .dataverse import DataverseClient
from .plotting import create_ci_plot
from .summarize import filter_min_obs, summarize_ci

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Download a tabular file from a Dataverse dataset and summarize a "
            "value column per group with t-based confidence intervals."
        )
    )
    parser.add_argument("--doi", required=True, help="Dataset DOI (e.g. 10.7910/DVN/ABCDEF).")
    parser.add_argument("--file", help="File name inside the dataset.")
    parser.add_argument(
        "--server",
        default=None,
        help="Dataverse host (default: $DATAVERSE_SERVER or dataverse.harvard.edu).",
    )
    parser.add_argument(
        "--original",
        action="store_true",
        help="Fetch the uploaded original instead of the archival .tab version.",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        help="List the files in the dataset and exit.",
    )
    parser.add_argument(
        "--group",
        action="append",
        default=None,
        help="Grouping column; repeat for several keys.",
    )
    parser.add_argument("--value", help="Numeric column to summarize.")
    parser.add_argument(
        "--min-obs",
        type=int,
        default=DEFAULT_MIN_OBS,
        help=f"Drop groups with fewer observations (default: {DEFAULT_MIN_OBS}).",
    )
    parser.add_argument(
        "--level",
        type=float,
        default=DEFAULT_CONFIDENCE,
        help=f"Confidence level (default: {DEFAULT_CONFIDENCE}).",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("ci_summary.csv"),
        help="Where to write the summary CSV (default: ci_summary.csv).",
    )
    parser.add_argument("--plot", type=Path, default=None, help="Optional HTML plot path.")
    parser.add_argument(
        "--force-download",
        action="store_true",
        help="Ignore the local cache and download again.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")

    args = parser.parse_args(argv)
    if not args.list_files and not (args.file and args.group and args.value):
        parser.error("--file, --group and --value are required unless --list-files is given")
    return args


def run(args: argparse.Namespace) -> int:
    if args.list_files:
        client = DataverseClient(args.server)
        for entry in client.list_files(args.doi):
            print(entry.get("label"))
        return 0

    df = load_dataframe(
        args.file,
        args.doi,
        server=args.server,
        original=args.original,
        force_download=args.force_download,
    )
    logger.info("Loaded %d rows x %d columns", len(df), len(df.columns))

    filtered = filter_min_obs(df, args.group, args.min_obs, value_col=args.value)
    summary = summarize_ci(filtered, args.group, args.value, level=args.level)

    args.out.parent.mkdir(parents=True, exist_ok=True)
    summary.to_csv(args.out, index=False)

    print("\n--- GROUP SUMMARY ---")
    print(
        f"Groups: {len(summary)} | Rows used: {len(filtered)} of {len(df)} | "
        f"Level: {args.level:.0%}"
    )
    print(f"Saved summary to {args.out}")
    print(summary.head(10))

    if args.plot is not None:
        fig = create_ci_plot(
            summary,
            x=args.group[0],
            color=args.group[1] if len(args.group) > 1 else None,
            title=f"Mean {args.value} by {', '.join(args.group)} ({args.level:.0%} CI)",
            y_axis_label=args.value,
            wrap_width=DEFAULT_WRAP_WIDTH,
        )
        args.plot.parent.mkdir(parents=True, exist_ok=True)
        fig.write_html(args.plot)
        print(f"Saved plot to {args.plot}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except (LookupError, ValueError) as exc:
        # KeyError is a LookupError
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
