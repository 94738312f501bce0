"""Tests for the HTTP surface in api.py."""

import pytest
from fastapi.testclient import TestClient

import api
from facility_lookup.config import Config
from facility_lookup.engine import FacilityLookupEngine
from facility_lookup.tests.conftest import SAMPLE_CSV


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(api, "engine", FacilityLookupEngine(Config(dataset_path=SAMPLE_CSV)))
    with TestClient(api.app) as c:
        yield c


@pytest.fixture
def unavailable_client(monkeypatch, tmp_path):
    monkeypatch.setattr(api, "engine", FacilityLookupEngine(Config(dataset_path=tmp_path / "x.csv")))
    with TestClient(api.app) as c:
        yield c


def test_lookup_by_query(client):
    resp = client.get("/lookup", params={"q": "bulli"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 2
    assert body["query"] == "bulli"
    assert body["location"] is None
    assert body["results"][0]["name"] == "BULLI"
    assert body["results"][0]["relevanceScore"] > 0.9


def test_lookup_by_location(client):
    resp = client.get("/lookup", params={"lat": -33.8688, "lon": 151.2093, "limit": 5})
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 5
    assert body["location"] == {"lat": -33.8688, "lon": 151.2093}
    distances = [r["distance"] for r in body["results"]]
    assert distances == sorted(distances)


def test_lookup_combined(client):
    resp = client.get("/lookup", params={"q": "eng", "lat": -33.8688, "lon": 151.2093, "limit": 10})
    body = resp.json()
    ids = [r["id"] for r in body["results"]]
    assert len(ids) == len(set(ids)) <= 10


def test_limit_capped(client):
    resp = client.get("/lookup", params={"lat": -33.8688, "lon": 151.2093, "limit": 500})
    assert resp.status_code == 200
    assert resp.json()["count"] == 24


def test_missing_criteria_is_400(client):
    assert client.get("/lookup").status_code == 400
    assert client.get("/lookup", params={"lat": -33.8}).status_code == 400
    assert client.get("/lookup", params={"q": "   "}).status_code == 400


def test_unavailable_is_503(unavailable_client):
    resp = unavailable_client.get("/lookup", params={"q": "bulli"})
    assert resp.status_code == 503


def test_count(client):
    body = client.get("/count").json()
    assert body == {"count": 26, "available": True, "message": None}


def test_count_unavailable(unavailable_client):
    body = unavailable_client.get("/count").json()
    assert body["count"] == 0
    assert body["available"] is False


def test_health(client):
    client.get("/count")
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["dataset_loaded"] is True


def test_count_error_is_500(client, monkeypatch):
    def broken():
        raise RuntimeError("index corrupted")

    monkeypatch.setattr(api.engine, "get_count", broken)
    resp = client.get("/count")
    assert resp.status_code == 500
    assert "index corrupted" in resp.json()["detail"]
