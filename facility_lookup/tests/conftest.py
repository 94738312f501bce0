import random
from pathlib import Path

import pytest

from facility_lookup.config import Config
from facility_lookup.dataset import FacilityDataset
from facility_lookup.engine import FacilityLookupEngine
from facility_lookup.sources import RowSource

FIXTURES = Path(__file__).parent / "fixtures"
SAMPLE_CSV = FIXTURES / "facilities_sample.csv"

SYDNEY = (-33.8688, 151.2093)


@pytest.fixture
def sample_engine():
    config = Config(dataset_path=SAMPLE_CSV)
    engine = FacilityLookupEngine(config)
    engine.load()
    return engine


@pytest.fixture
def missing_engine(tmp_path):
    config = Config(dataset_path=tmp_path / "nope.csv")
    return FacilityLookupEngine(config)


def synthetic_rows(n=4400, seed=7):
    """Rows spread over south-east Australia, roughly the size of the national set."""
    rng = random.Random(seed)
    states = ["New South Wales", "Victoria", "Queensland", "South Australia", "Tasmania"]
    words = ["CREEK", "HILL", "RIVER", "VALE", "PARK", "GLEN", "PLAINS", "BRIDGE", "LAKES", "RIDGE"]
    rows = []
    for i in range(n):
        name = f"{rng.choice(words)} {rng.choice(words)} {i}"
        rows.append({
            "X": f"{rng.uniform(138.0, 153.5):.5f}",
            "Y": f"{rng.uniform(-43.0, -26.0):.5f}",
            "facility_name": name,
            "abs_suburb": f"{rng.choice(words)} {rng.choice(words)}",
            "facility_state": rng.choice(states),
            "abs_postcode": str(2000 + i % 2000),
        })
    return rows


@pytest.fixture(scope="session")
def national_engine():
    dataset = FacilityDataset(RowSource(synthetic_rows(), name="synthetic"))
    engine = FacilityLookupEngine(dataset=dataset)
    engine.load()
    return engine


@pytest.fixture
def tie_engine():
    """Three stations sharing a suburb and a location, in non-alphabetical source order."""
    rows = [
        {"name": name, "suburb": "RIVERTON", "state": "NSW", "postcode": "2000",
         "latitude": "-34.0", "longitude": "151.0"}
        for name in ("ZETA", "ALPHA", "MU")
    ]
    engine = FacilityLookupEngine(dataset=FacilityDataset(RowSource(rows, name="ties")))
    engine.load()
    return engine
