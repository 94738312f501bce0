"""Data sources for the facilities dataset.

A source yields raw rows (column -> string mappings) or None when the
backing resource does not exist. The dataset treats None as "unavailable"
rather than an error.
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

import requests

logger = logging.getLogger(__name__)


class CsvFileSource:
    """Reads the facilities CSV from disk, downloading it first if configured."""

    def __init__(self, path: Path, download_url: str = "", timeout: float = 60.0):
        self.path = Path(path)
        self.download_url = download_url
        self.timeout = timeout

    @property
    def name(self) -> str:
        return str(self.path)

    def _download(self) -> bool:
        """Fetch the CSV to self.path. Returns True if the file is now present."""
        if not self.download_url:
            logger.info("Dataset download URL not configured - skipping download")
            return False
        logger.info(f"Downloading facilities CSV from {self.download_url}")
        tmp_path = self.path.with_suffix(self.path.suffix + ".part")
        try:
            resp = requests.get(self.download_url, timeout=self.timeout, stream=True)
            resp.raise_for_status()
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "wb") as f:
                for chunk in resp.iter_content(chunk_size=64 * 1024):
                    if chunk:
                        f.write(chunk)
            tmp_path.replace(self.path)
        except (requests.RequestException, OSError) as e:
            logger.error(f"Failed to download facilities CSV: {e}")
            if tmp_path.exists():
                tmp_path.unlink()
            return False
        logger.info(f"Downloaded facilities CSV to {self.path}")
        return True

    def open_rows(self) -> Optional[Iterable[Mapping[str, str]]]:
        if not self.path.exists() and not self._download():
            return None
        # utf-8-sig: the atlas export ships with a BOM on the X column
        with open(self.path, "r", encoding="utf-8-sig", newline="") as f:
            return list(csv.DictReader(f))


class RowSource:
    """In-memory rows, for fixtures and callers that already hold the data."""

    def __init__(self, rows: Optional[List[Mapping[str, str]]], name: str = "memory"):
        self._rows = rows
        self.name = name

    def open_rows(self) -> Optional[Iterable[Mapping[str, str]]]:
        if self._rows is None:
            return None
        return list(self._rows)
