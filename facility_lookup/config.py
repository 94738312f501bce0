"""Configuration for the facility lookup engine."""

from dataclasses import dataclass
from pathlib import Path


_ROOT = Path(__file__).parent.parent


@dataclass
class Config:
    # Dataset (national fire service facilities, ~2MB CSV, not committed)
    dataset_path: Path = _ROOT / "data" / "rfs-facilities.csv"

    # Optional URL to fetch the CSV from when it isn't present locally
    dataset_url: str = ""
    download_timeout: float = 60.0

    # Result limits
    default_limit: int = 10
    max_limit: int = 50

    # Geo
    earth_radius_km: float = 6371.0
