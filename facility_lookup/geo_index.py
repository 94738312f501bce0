"""Nearest-facility ranking by great-circle distance."""

import math
from typing import List, Sequence

import numpy as np

from .models import FacilityRecord, LookupResult
from .normalizer import coerce_limit

EARTH_RADIUS_KM = 6371.0


def valid_coordinates(lat, lon) -> bool:
    """True for a finite, in-range (lat, lon) pair. Never raises."""
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return abs(lat) <= 90 and abs(lon) <= 180


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float,
                 radius_km: float = EARTH_RADIUS_KM) -> float:
    """Great-circle distance between two points in kilometers."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return radius_km * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class GeoIndex:
    """Coordinates of geocoded facilities as numpy arrays (radians)."""

    def __init__(self, records: Sequence[FacilityRecord], radius_km: float = EARTH_RADIUS_KM):
        self.radius_km = radius_km
        self._records = [r for r in records if r.has_coordinates]
        self._lat = np.radians(np.array([r.latitude for r in self._records], dtype=float))
        self._lon = np.radians(np.array([r.longitude for r in self._records], dtype=float))

    def __len__(self) -> int:
        return len(self._records)

    def distances_km(self, lat: float, lon: float) -> np.ndarray:
        """Distance from (lat, lon) to every geocoded facility, in index order."""
        lat1, lon1 = np.radians([lat, lon])
        dlat = self._lat - lat1
        dlon = self._lon - lon1
        a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(self._lat) * np.sin(dlon / 2) ** 2
        a = np.clip(a, 0.0, 1.0)
        return self.radius_km * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    def nearest(self, lat, lon, limit: int) -> List[LookupResult]:
        if not valid_coordinates(lat, lon):
            return []
        limit = coerce_limit(limit)
        if limit is None or limit <= 0 or not self._records:
            return []

        dist = self.distances_km(float(lat), float(lon))
        order = np.argsort(dist, kind="stable")[:limit]
        return [
            LookupResult.from_record(self._records[i], distance=float(dist[i]))
            for i in order
        ]
