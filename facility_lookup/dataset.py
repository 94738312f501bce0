"""Facilities dataset lifecycle: load once, index, serve read-only."""

import csv
import enum
import logging
import threading
import time
from collections import Counter
from dataclasses import replace
from typing import Dict, List, Optional, Set, Tuple

from .config import Config
from .geo_index import GeoIndex
from .models import FacilityRecord, LoadReport
from .normalizer import normalize
from .sources import CsvFileSource
from .text_index import TextIndex

logger = logging.getLogger(__name__)


class DatasetState(enum.Enum):
    NOT_LOADED = "not_loaded"
    LOADED = "loaded"


class FacilityDataset:
    """
    The national facilities reference table.

    Loaded at most once per instance. Concurrent first calls to load() share
    a single read of the source: later callers wait on the lock and then see
    the finished result. A missing dataset is not an error; the dataset
    stays empty and is_data_available() reports False.
    """

    def __init__(self, source=None, config: Optional[Config] = None):
        self.config = config or Config()
        self.source = source or CsvFileSource(
            self.config.dataset_path,
            download_url=self.config.dataset_url,
            timeout=self.config.download_timeout,
        )
        self.state = DatasetState.NOT_LOADED
        self._lock = threading.Lock()
        self._records: Tuple[FacilityRecord, ...] = ()
        self._available = False
        self._report: Optional[LoadReport] = None
        self.text_index = TextIndex(())
        self.geo_index = GeoIndex((), radius_km=self.config.earth_radius_km)

    def load(self) -> LoadReport:
        """Load and index the dataset. No-op after the first call completes."""
        if self.state is DatasetState.LOADED:
            return self._report
        with self._lock:
            if self.state is DatasetState.LOADED:
                return self._report
            self._report = self._load_locked()
            self.state = DatasetState.LOADED
        return self._report

    def _load_locked(self) -> LoadReport:
        t0 = time.time()
        source_name = getattr(self.source, "name", type(self.source).__name__)
        report = LoadReport(source=source_name)

        try:
            rows = self.source.open_rows()
        except (OSError, csv.Error, UnicodeDecodeError):
            logger.exception(f"Error reading fire service facilities from {source_name}")
            rows = None
        else:
            if rows is None:
                logger.warning(
                    f"Facilities dataset not found at {source_name} - "
                    f"station lookup features will be unavailable"
                )
                logger.warning(
                    "  To enable station lookup, download rfs-facilities.csv from "
                    "atlas.gov.au and place it at the configured path, or set FACILITIES_CSV_URL"
                )

        if rows is None:
            report.elapsed_s = time.time() - t0
            return report

        records: List[FacilityRecord] = []
        used: Set[str] = set()
        for line_no, raw in enumerate(rows, start=2):
            rec = normalize(raw)
            if rec is None:
                report.skipped += 1
                logger.debug(f"Skipping row {line_no}: no usable facility name")
                continue
            if rec.id in used:
                n = 2
                while f"{rec.id}-{n}" in used:
                    n += 1
                rec = replace(rec, id=f"{rec.id}-{n}")
            used.add(rec.id)
            records.append(rec)

        self._records = tuple(records)
        self.text_index = TextIndex(self._records)
        self.geo_index = GeoIndex(self._records, radius_km=self.config.earth_radius_km)
        self._available = len(self._records) > 0

        report.loaded = len(self._records)
        report.available = self._available
        report.by_state = dict(Counter(r.state for r in self._records))
        report.elapsed_s = time.time() - t0

        logger.info(
            f"Loaded {report.loaded} fire service facilities nationally from {source_name} "
            f"in {report.elapsed_s:.2f}s ({report.skipped} rows skipped, "
            f"{len(self.geo_index)} geocoded)"
        )
        if report.by_state:
            breakdown = ", ".join(f"{s}: {c}" for s, c in sorted(report.by_state.items()))
            logger.info(f"  Breakdown by state: {breakdown}")
        return report

    @property
    def report(self) -> Optional[LoadReport]:
        return self._report

    @property
    def records(self) -> Tuple[FacilityRecord, ...]:
        return self._records

    def is_data_available(self) -> bool:
        return self.state is DatasetState.LOADED and self._available

    def get_count(self) -> int:
        return len(self._records)

    def get_all_stations(self) -> List[FacilityRecord]:
        return list(self._records)

    def count_by_state(self) -> Dict[str, int]:
        return dict(self._report.by_state) if self._report else {}
