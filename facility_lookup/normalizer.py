"""Row normalization for the national fire service facilities dataset.

The dataset (atlas.gov.au "Fire Stations" layer) has one row per facility:

    X, Y, comment_, objectid, featuretype, descripton, class, facility_name,
    facility_operationalstatus, facility_address, abs_suburb, facility_state,
    abs_postcode, facility_attribute_source, facility_lat, facility_long, ...

X/Y are longitude/latitude. There is no separate brigade column; most
brigades share the station's name, so brigade defaults to the name.
"""

import math
import re
from typing import Mapping, Optional

from .models import FacilityRecord

# Column aliases, checked in order (case-insensitive header match)
_NAME_COLS = ("facility_name", "name", "station_name")
_SUBURB_COLS = ("abs_suburb", "suburb", "gnaf_suburb", "locality")
_STATE_COLS = ("facility_state", "state")
_POSTCODE_COLS = ("abs_postcode", "postcode", "gnaf_postcode")
_LAT_COLS = ("y", "facility_lat", "latitude", "lat")
_LON_COLS = ("x", "facility_long", "longitude", "lon", "lng")
_BRIGADE_COLS = ("brigade", "brigade_name")
_AREA_COLS = ("area",)
_DISTRICT_COLS = ("district",)
_STATUS_COLS = ("facility_operationalstatus", "operational_status", "status")

STATE_NAMES = {
    "NSW": "NEW SOUTH WALES",
    "VIC": "VICTORIA",
    "QLD": "QUEENSLAND",
    "SA": "SOUTH AUSTRALIA",
    "WA": "WESTERN AUSTRALIA",
    "TAS": "TASMANIA",
    "NT": "NORTHERN TERRITORY",
    "ACT": "AUSTRALIAN CAPITAL TERRITORY",
}
_FULL_STATE_NAMES = set(STATE_NAMES.values())


def _clean(value) -> str:
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip()


def _pick(row: Mapping[str, str], candidates) -> str:
    """First non-empty value among candidate columns."""
    for col in candidates:
        val = _clean(row.get(col))
        if val:
            return val
    return ""


def _parse_float(value: str) -> Optional[float]:
    if not value:
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def normalize_state(value: str) -> str:
    """Map a state value to its upper-case full name; unknown values pass through upper-cased."""
    key = _clean(value).upper().replace(".", "")
    if key in _FULL_STATE_NAMES:
        return key
    return STATE_NAMES.get(key, key)


def parse_coordinates(lat_raw: str, lon_raw: str):
    """Return (lat, lon) or (None, None) — never a half-geocoded pair."""
    lat = _parse_float(lat_raw)
    lon = _parse_float(lon_raw)
    if lat is None or lon is None:
        return None, None
    if abs(lat) > 90 or abs(lon) > 180:
        return None, None
    return lat, lon


def make_station_id(name: str, suburb: str, postcode: str) -> str:
    slug = f"{name}-{suburb}-{postcode}".lower()
    slug = re.sub(r"[^a-z0-9-]", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    return f"station-{slug}"


def normalize(raw_row: Mapping[str, str]) -> Optional[FacilityRecord]:
    """Parse one raw dataset row into a FacilityRecord, or None if unusable."""
    if not raw_row:
        return None
    row = {str(k).strip().lower(): v for k, v in raw_row.items() if k is not None}

    name = _pick(row, _NAME_COLS)
    if not name:
        return None

    suburb = _pick(row, _SUBURB_COLS)
    postcode = _pick(row, _POSTCODE_COLS)
    lat, lon = parse_coordinates(_pick(row, _LAT_COLS), _pick(row, _LON_COLS))

    return FacilityRecord(
        id=make_station_id(name, suburb, postcode),
        name=name,
        suburb=suburb,
        state=normalize_state(_pick(row, _STATE_COLS)),
        postcode=postcode,
        latitude=lat,
        longitude=lon,
        brigade=_pick(row, _BRIGADE_COLS) or name,
        area=_pick(row, _AREA_COLS) or None,
        district=_pick(row, _DISTRICT_COLS) or None,
        operational_status=_pick(row, _STATUS_COLS) or None,
    )


def coerce_limit(limit) -> Optional[int]:
    """Result limit as a plain int, or None if it can't be read as one. Never raises."""
    try:
        return int(limit)
    except (TypeError, ValueError, OverflowError):
        return None
