"""FacilityLookupEngine — text search, nearest-station ranking, and combined lookup."""

import logging
from typing import Dict, List, Optional

from .config import Config
from .dataset import FacilityDataset
from .geo_index import valid_coordinates
from .models import FacilityRecord, LoadReport, LookupResult
from .normalizer import coerce_limit

logger = logging.getLogger(__name__)


class FacilityLookupEngine:
    """
    Station lookup against the national fire service facilities dataset.

    Query methods never raise. Before load(), or when the dataset is
    unavailable, they return empty lists; invalid input (blank query, NaN or
    out-of-range coordinates, no criteria at all) does the same.
    """

    def __init__(self, config: Optional[Config] = None, dataset: Optional[FacilityDataset] = None):
        self.config = config or Config()
        self.dataset = dataset or FacilityDataset(config=self.config)

    # -- lifecycle ---------------------------------------------------------

    def load(self) -> LoadReport:
        return self.dataset.load()

    def is_data_available(self) -> bool:
        return self.dataset.is_data_available()

    def get_count(self) -> int:
        return self.dataset.get_count()

    def get_all_stations(self) -> List[FacilityRecord]:
        return self.dataset.get_all_stations()

    # -- queries -----------------------------------------------------------

    def search(self, query: Optional[str], limit: Optional[int] = None) -> List[LookupResult]:
        """Rank stations by how well name, suburb or brigade match the query."""
        if not self.is_data_available():
            return []
        return self.dataset.text_index.search(query, limit)

    def get_closest_stations(self, lat, lon, limit: Optional[int] = None) -> List[LookupResult]:
        """Nearest geocoded stations to (lat, lon), closest first."""
        if not self.is_data_available():
            return []
        if limit is None:
            limit = self.config.default_limit
        return self.dataset.geo_index.nearest(lat, lon, limit)

    def lookup(
        self,
        query: Optional[str] = None,
        lat=None,
        lon=None,
        limit: Optional[int] = None,
    ) -> List[LookupResult]:
        """
        Combined lookup: nearest stations and/or text matches, deduplicated.

        With both a query and a location, the two ranked lists are
        interleaved (nearest first, then best text match, and so on) so both
        kinds of result make it into the first `limit` slots. A station found
        by both keeps its distance and its relevance score.
        """
        if limit is None:
            limit = self.config.default_limit
        limit = coerce_limit(limit)
        if limit is None or limit <= 0:
            return []

        has_query = isinstance(query, str) and bool(query.strip())
        has_location = lat is not None and lon is not None and valid_coordinates(lat, lon)

        if has_query and not has_location:
            return self.search(query, limit)
        if has_location and not has_query:
            return self.get_closest_stations(lat, lon, limit)
        if not has_query:
            return []

        nearby = self.get_closest_stations(lat, lon, limit)
        matches = self.search(query)
        merged = merge_results(nearby, matches, limit)
        logger.debug(
            f"Combined lookup q={query!r}: {len(nearby)} nearby, "
            f"{len(matches)} text matches, {len(merged)} returned"
        )
        return merged


def merge_results(nearby: List[LookupResult], matches: List[LookupResult], limit: int) -> List[LookupResult]:
    """Round-robin merge of geo and text results, one entry per station id."""
    by_id: Dict[str, LookupResult] = {}
    text_by_id = {m.id: m for m in matches}
    geo_by_id = {n.id: n for n in nearby}

    def _take(item: LookupResult):
        if item.id in by_id:
            return
        if item.distance is None and item.id in geo_by_id:
            item.distance = geo_by_id[item.id].distance
        if item.relevance_score is None and item.id in text_by_id:
            item.relevance_score = text_by_id[item.id].relevance_score
        by_id[item.id] = item

    for i in range(max(len(nearby), len(matches))):
        if len(by_id) >= limit:
            break
        if i < len(nearby):
            _take(nearby[i])
        if len(by_id) >= limit:
            break
        if i < len(matches):
            _take(matches[i])

    # dicts keep insertion order
    return list(by_id.values())[:limit]
