"""Data manager for downloading and caching Dataverse files.

This module wraps :mod:`plot_recipes.dataverse` with a small on-disk cache so
that repeated runs of an analysis script do not hit the archive every time.
It adds some resilience around caching and uses ``logging`` instead of
printing directly to stdout.  The cache files include a version tag to make
it easy to invalidate caches when the naming or parsing logic changes.
"""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import pandas as pd

from .config import DATA_CACHE_DIR_ENV, DEFAULT_DATASET_VERSION
from .dataverse import DataverseClient, Reader, normalize_doi, read_table_bytes

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Cache setup
# ---------------------------------------------------------------------------
# A version tag embedded into the cache filenames.  Bump this value whenever
# the cache key or the stored format changes.
CACHE_VERSION: str = "v1"
CACHE_PREFIX: str = "dv"
# Suffix for cached downloads whose file name has no extension.
CACHE_FALLBACK_SUFFIX: str = ".bin"


def _resolve_cache_dir() -> Path:
    """Pick the directory holding cached Dataverse downloads.

    ``$DATA_CACHE_DIR`` wins when set; otherwise the project-level ``data``
    folder is used, and a ``plot_recipes_cache`` folder under the system temp
    directory when that is read-only (for example an installed wheel).
    """
    temp_dir = Path(tempfile.gettempdir()) / "plot_recipes_cache"
    env = os.getenv(DATA_CACHE_DIR_ENV)
    preferred = [Path(env).expanduser().resolve()] if env else []
    preferred.append(Path(__file__).resolve().parent.parent / "data")

    for path in preferred:
        sentinel = path / ".write_test"
        try:
            path.mkdir(parents=True, exist_ok=True)
            sentinel.write_text("ok", encoding="utf-8")
            sentinel.unlink()
        except OSError as exc:
            logger.debug("Cache directory %s not writable: %s", path, exc)
            continue
        return path

    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


# Resolve the directory once at import time
DATA_DIR: Path = _resolve_cache_dir()


def _safe(part: str) -> str:
    return re.sub(r"[^A-Za-z0-9.-]+", "_", part).strip("_")


def cache_stem(
    filename: str,
    doi: str,
    *,
    server: str,
    version: str = DEFAULT_DATASET_VERSION,
    original: bool = False,
) -> str:
    """Cache file name without extension, e.g. ``dv_v1__host__doi_10.7910_DVN_X__latest__data.csv__tab``."""
    host = urlparse(server).netloc or server
    parts = [
        f"{CACHE_PREFIX}_{CACHE_VERSION}",
        _safe(host),
        _safe(normalize_doi(doi)),
        _safe(version),
        _safe(filename),
        "orig" if original else "tab",
    ]
    return "__".join(parts)


def _find_cached(stem: str) -> Optional[Path]:
    for path in sorted(DATA_DIR.glob(f"{stem}.*")):
        if path.suffix != ".tmp":
            return path
    return None


def _atomic_write_bytes(content: bytes, path: Path) -> None:
    """Write bytes atomically.

    The content is first written to a temporary file in the same directory
    and then renamed to the final location.  This avoids leaving a
    partially written file if the process is interrupted mid-write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_bytes(content)
    tmp_path.replace(path)


def load_dataframe(
    filename: str,
    doi: str,
    *,
    server: Optional[str] = None,
    original: bool = False,
    version: str = DEFAULT_DATASET_VERSION,
    reader: Optional[Reader] = None,
    force_download: bool = False,
    client: Optional[DataverseClient] = None,
) -> pd.DataFrame:
    """
    Load a named Dataverse file from disk cache if available, otherwise download it.

    Parameters
    ----------
    filename : str
        File name as shown in the dataset (label or original name).
    doi : str
        Dataset DOI.
    server : str, optional
        Dataverse host; defaults to ``$DATAVERSE_SERVER``.
    original : bool, default False
        Fetch the uploaded original instead of the archival ``.tab`` version.
    version : str, default ":latest"
        Dataset version to read from.
    reader : callable, optional
        Parser taking a file-like object; inferred from the extension if omitted.
    force_download : bool, default False
        Ignore any cached copy and download again.
    client : DataverseClient, optional
        Pre-built client (mainly for tests).

    Returns
    -------
    pd.DataFrame
    """
    client = client or DataverseClient(server)
    stem = cache_stem(
        filename, doi, server=client.base_url, version=version, original=original
    )

    cached = None if force_download else _find_cached(stem)
    if cached is not None:
        logger.info("Loading %s from cache %s", filename, cached)
        try:
            return read_table_bytes(cached.read_bytes(), cached.name, reader=reader)
        except (OSError, ValueError) as exc:
            logger.warning(
                "Error reading cache file %s: %s; falling back to download", cached, exc
            )

    logger.info("Downloading %s from %s", filename, client.base_url)
    content, name = client.get_file_by_name(
        filename, doi, original=original, version=version
    )

    suffix = Path(name).suffix.lower() or CACHE_FALLBACK_SUFFIX
    target = DATA_DIR / f"{stem}{suffix}"
    try:
        _atomic_write_bytes(content, target)
        logger.info("Cache updated: %s", target.name)
    except OSError as exc:
        logger.warning("Could not write cache file %s: %s", target, exc)

    return read_table_bytes(content, name, reader=reader)


def clear_cache() -> int:
    """Remove cached downloads for the current ``CACHE_VERSION``."""
    removed = 0
    for path in DATA_DIR.glob(f"{CACHE_PREFIX}_{CACHE_VERSION}__*"):
        try:
            path.unlink()
            removed += 1
        except OSError as exc:
            logger.warning("Could not remove cache file %s: %s", path, exc)
    logger.info("Removed %d cached file(s) from %s", removed, DATA_DIR)
    return removed
