"""
Handles interactions with a Dataverse research-data archive.

Only the small slice of the Dataverse native API needed to pull one named
file out of a dataset is covered: list a dataset version's files, resolve a
file name to its id, download it, and parse it into a DataFrame.
"""

from __future__ import annotations

import logging
import os
import re
from io import BytesIO
from pathlib import PurePosixPath
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd
import requests

from .config import (
    DATAVERSE_KEY_ENV,
    DATAVERSE_SERVER_ENV,
    DEFAULT_DATASET_VERSION,
    DEFAULT_DATAVERSE_SERVER,
    REQUEST_TIMEOUT,
)

logger = logging.getLogger(__name__)

Reader = Callable[[BytesIO], pd.DataFrame]

_DOI_RE = re.compile(r"^(?:doi:|https?://(?:dx\.)?doi\.org/)?(10\.\d{4,}/\S+)$", re.I)

# Extension -> parser used when the caller does not pass a reader.
READERS: Dict[str, Reader] = {
    ".csv": pd.read_csv,
    ".tab": lambda buf: pd.read_csv(buf, sep="\t"),
    ".tsv": lambda buf: pd.read_csv(buf, sep="\t"),
    ".txt": lambda buf: pd.read_csv(buf, sep="\t"),
    ".json": pd.read_json,
    ".dta": pd.read_stata,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def resolve_server(server: Optional[str] = None) -> str:
    """Return the API base URL for ``server``, ``$DATAVERSE_SERVER`` or the default host."""
    host = server or os.getenv(DATAVERSE_SERVER_ENV) or DEFAULT_DATAVERSE_SERVER
    host = host.strip().rstrip("/")
    if host.endswith("/api"):
        host = host[: -len("/api")]
    if not host.lower().startswith(("http://", "https://")):
        host = f"https://{host}"
    return f"{host}/api"


def normalize_doi(doi: str) -> str:
    """Normalize a DOI given as bare, ``doi:`` prefixed or doi.org URL to ``doi:10.x/...``."""
    match = _DOI_RE.match(str(doi).strip())
    if match is None:
        raise ValueError(f"Not a dataset DOI: {doi!r}")
    return f"doi:{match.group(1)}"


def read_table_bytes(
    content: bytes, name: str, *, reader: Optional[Reader] = None
) -> pd.DataFrame:
    """Parse downloaded file bytes into a DataFrame, choosing a parser by extension."""
    if reader is None:
        suffix = PurePosixPath(name).suffix.lower()
        reader = READERS.get(suffix)
        if reader is None:
            raise ValueError(
                f"No default reader for {name!r}; pass reader= "
                f"(known extensions: {sorted(READERS)})"
            )
    return reader(BytesIO(content))


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class DataverseClient:
    """Thin wrapper over the Dataverse native and data-access APIs."""

    def __init__(
        self,
        server: Optional[str] = None,
        *,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.base_url = resolve_server(server)
        self.timeout = timeout
        self.session = session or requests.Session()
        key = api_key or os.getenv(DATAVERSE_KEY_ENV)
        if key:
            self.session.headers["X-Dataverse-key"] = key

    def _get(self, path: str, **params: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        response = self.session.get(url, params=params or None, timeout=self.timeout)
        response.raise_for_status()
        return response

    def list_files(
        self, doi: str, *, version: str = DEFAULT_DATASET_VERSION
    ) -> List[Dict[str, Any]]:
        """File metadata entries for one version of a dataset."""
        pid = normalize_doi(doi)
        payload = self._get(
            f"/datasets/:persistentId/versions/{version}/files", persistentId=pid
        ).json()
        if payload.get("status") != "OK":
            raise RuntimeError(
                f"Dataverse error listing files for {pid}: "
                f"{payload.get('message', payload.get('status'))}"
            )
        files = payload.get("data", [])
        logger.info("Dataset %s (%s) has %d file(s)", pid, version, len(files))
        return files

    def find_file(
        self, filename: str, doi: str, *, version: str = DEFAULT_DATASET_VERSION
    ) -> Dict[str, Any]:
        """Return the metadata entry whose label, original name or stored name is ``filename``."""
        files = self.list_files(doi, version=version)
        for key in ("label", "originalFileName", "filename"):
            for entry in files:
                source = entry if key == "label" else entry.get("dataFile", {})
                if source.get(key) == filename:
                    return entry

        available = [entry.get("label") for entry in files]
        raise LookupError(f"File {filename!r} not found in {doi}; available: {available}")

    def get_file_by_id(self, file_id: int | str, *, original: bool = False) -> bytes:
        params = {"format": "original"} if original else {}
        return self._get(f"/access/datafile/{file_id}", **params).content

    def get_file_by_name(
        self,
        filename: str,
        doi: str,
        *,
        original: bool = False,
        version: str = DEFAULT_DATASET_VERSION,
    ) -> Tuple[bytes, str]:
        """
        Download a named file from a dataset.

        Returns
        -------
        Tuple[bytes, str]
            The file content and the name it should be parsed as.  Ingested
            tabular files are served as tab-separated ``.tab`` unless
            ``original`` is set, in which case the uploaded original is
            returned under its original name.
        """
        entry = self.find_file(filename, doi, version=version)
        data_file = entry.get("dataFile", {})
        file_id = data_file["id"]

        ingested = bool(data_file.get("originalFileFormat"))
        want_original = original and ingested
        name = (
            data_file.get("originalFileName") or entry.get("label") or filename
            if want_original
            else entry.get("label") or filename
        )

        content = self.get_file_by_id(file_id, original=want_original)
        logger.info("Downloaded %s (id=%s, %d bytes)", name, file_id, len(content))
        return content, name

    def get_dataframe_by_name(
        self,
        filename: str,
        doi: str,
        *,
        reader: Optional[Reader] = None,
        original: bool = False,
        version: str = DEFAULT_DATASET_VERSION,
    ) -> pd.DataFrame:
        """Look up ``filename`` in the dataset and return it as a DataFrame."""
        content, name = self.get_file_by_name(
            filename, doi, original=original, version=version
        )
        return read_table_bytes(content, name, reader=reader)


def get_dataframe_by_name(
    filename: str, doi: str, *, server: Optional[str] = None, **kwargs: Any
) -> pd.DataFrame:
    """Module-level shortcut: ``DataverseClient(server).get_dataframe_by_name(...)``."""
    return DataverseClient(server).get_dataframe_by_name(filename, doi, **kwargs)
