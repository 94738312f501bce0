"""
FastAPI server for the fire station facility lookup.

Loads the national facilities CSV once (lazily, or at startup with
FACILITIES_EAGER_LOAD=1), then serves station search and nearest-station
lookups from memory.
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from facility_lookup.config import Config
from facility_lookup.engine import FacilityLookupEngine

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("api")

# ---------------------------------------------------------------------------
# Global engine (one dataset per process)
# ---------------------------------------------------------------------------
engine: Optional[FacilityLookupEngine] = None


def _load_env_file(env_path: Path):
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, val = line.split("=", 1)
            os.environ.setdefault(key.strip(), val.strip())


def build_config() -> Config:
    config = Config()
    csv_path = os.environ.get("FACILITIES_CSV", "")
    if csv_path:
        config.dataset_path = Path(csv_path)
    config.dataset_url = os.environ.get("FACILITIES_CSV_URL", config.dataset_url)
    return config


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the engine on startup; optionally load the dataset eagerly."""
    global engine
    _load_env_file(Path(__file__).parent / ".env")

    if engine is None:
        engine = FacilityLookupEngine(build_config())

    if os.environ.get("FACILITIES_EAGER_LOAD", "").lower() in ("1", "true", "yes"):
        t0 = time.time()
        report = await run_in_threadpool(engine.load)
        logger.info(
            f"Facilities dataset loaded at startup in {time.time() - t0:.1f}s "
            f"(available={report.available}, count={report.loaded})"
        )

    yield

    logger.info("Shutdown complete.")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Fire Station Lookup API",
    description="Search and locate fire service stations from the national facilities dataset.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------
class Location(BaseModel):
    lat: float
    lon: float


class LookupResponse(BaseModel):
    results: List[dict]
    count: int
    query: Optional[str] = None
    location: Optional[Location] = None


class CountResponse(BaseModel):
    count: int
    available: bool
    message: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    dataset_loaded: bool
    uptime_seconds: float


_start_time = time.time()


async def _ensure_loaded() -> FacilityLookupEngine:
    if engine is None:
        raise HTTPException(status_code=503, detail="Engine is still starting. Try again shortly.")
    await run_in_threadpool(engine.load)
    return engine


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
@app.get("/health", response_model=HealthResponse)
async def health():
    loaded = engine is not None and engine.is_data_available()
    return HealthResponse(
        status="ok" if engine else "loading",
        dataset_loaded=loaded,
        uptime_seconds=round(time.time() - _start_time, 1),
    )


@app.get("/lookup", response_model=LookupResponse)
async def lookup(
    q: Optional[str] = Query(None, description="Station name, suburb or brigade"),
    lat: Optional[float] = Query(None, description="User latitude"),
    lon: Optional[float] = Query(None, description="User longitude"),
    limit: int = Query(10, ge=1, description="Max results (capped at 50)"),
):
    """
    Search and locate fire service stations.

    At least one of q or (lat, lon) is required. With both, nearest stations
    and text matches are merged and deduplicated.
    """
    eng = await _ensure_loaded()
    if not eng.is_data_available():
        raise HTTPException(
            status_code=503,
            detail="Station lookup service unavailable: facilities dataset is not available.",
        )

    query = q.strip() if q else None
    if not query and (lat is None or lon is None):
        raise HTTPException(
            status_code=400,
            detail="At least one of query (q) or location (lat, lon) must be provided",
        )

    limit = min(limit, eng.config.max_limit)
    try:
        results = eng.lookup(query, lat, lon, limit)
    except Exception as e:
        logger.error(f"Lookup error for q={q!r} lat={lat} lon={lon}: {e}")
        raise HTTPException(status_code=500, detail=f"Lookup failed: {str(e)}")

    location = Location(lat=lat, lon=lon) if lat is not None and lon is not None else None
    return LookupResponse(
        results=[r.to_dict() for r in results],
        count=len(results),
        query=query,
        location=location,
    )


@app.get("/count", response_model=CountResponse)
async def count():
    """Number of loaded stations (for monitoring)."""
    eng = await _ensure_loaded()
    try:
        if not eng.is_data_available():
            return CountResponse(count=0, available=False, message="Facilities dataset is not available")
        return CountResponse(count=eng.get_count(), available=True)
    except Exception as e:
        logger.error(f"Error getting station count: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get station count: {str(e)}")
