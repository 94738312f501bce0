"""National fire service facility lookup — in-memory text and nearest-station search."""

from .dataset import FacilityDataset
from .engine import FacilityLookupEngine
from .models import FacilityRecord, LoadReport, LookupResult

__all__ = ["FacilityDataset", "FacilityLookupEngine", "FacilityRecord", "LoadReport", "LookupResult"]
