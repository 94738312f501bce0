"""Data models for the facility lookup engine."""

from dataclasses import dataclass, field, fields
from typing import Dict, Optional


@dataclass(frozen=True)
class FacilityRecord:
    id: str
    name: str
    suburb: str = ""
    state: str = ""
    postcode: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    brigade: Optional[str] = None
    area: Optional[str] = None
    district: Optional[str] = None
    operational_status: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass
class LookupResult:
    """A facility record plus the scores the query produced for it."""

    id: str
    name: str
    suburb: str = ""
    state: str = ""
    postcode: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    brigade: Optional[str] = None
    area: Optional[str] = None
    district: Optional[str] = None
    operational_status: Optional[str] = None
    distance: Optional[float] = None
    relevance_score: Optional[float] = None

    @classmethod
    def from_record(
        cls,
        record: FacilityRecord,
        distance: Optional[float] = None,
        relevance_score: Optional[float] = None,
    ) -> "LookupResult":
        values = {f.name: getattr(record, f.name) for f in fields(FacilityRecord)}
        return cls(**values, distance=distance, relevance_score=relevance_score)

    def to_dict(self) -> dict:
        """Serialize to the JSON shape the station admin UI consumes."""
        out = {
            "id": self.id,
            "name": self.name,
            "brigade": self.brigade,
            "suburb": self.suburb,
            "state": self.state,
            "postcode": self.postcode,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }
        if self.area is not None:
            out["area"] = self.area
        if self.district is not None:
            out["district"] = self.district
        if self.operational_status is not None:
            out["operationalStatus"] = self.operational_status
        if self.distance is not None:
            out["distance"] = round(self.distance, 2)
        if self.relevance_score is not None:
            out["relevanceScore"] = round(self.relevance_score, 3)
        return out


@dataclass
class LoadReport:
    loaded: int = 0
    skipped: int = 0
    available: bool = False
    source: str = ""
    elapsed_s: float = 0.0
    by_state: Dict[str, int] = field(default_factory=dict)
