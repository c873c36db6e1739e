from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from coastal_surf import config, main, pipeline
from coastal_surf.main import app
from coastal_surf.models import TideReading
from coastal_surf.sections import COASTLINE_POINTS
from coastal_surf.sources import DataSourceError, SourceData


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "CACHE_DIR", tmp_path)
    return TestClient(app)


@pytest.fixture
def fake_source(wave_station, wind_station):
    return SourceData(
        wave_stations=[wave_station(33.9, -118.5), wave_station(34.0, -118.9)],
        wind_stations=[wind_station(34.0, -118.5)],
        tides={"santa_monica": TideReading("santa_monica", 2.8, "rising")},
        fetched_at=datetime(2025, 8, 8, 12, 5, tzinfo=timezone.utc),
    )


def test_wave_data_endpoint_fresh_then_cached(client, monkeypatch, fake_source):
    calls = []

    def fake_run():
        calls.append(1)
        return pipeline.build_wave_data(fake_source.wave_stations, fake_source.wind_stations,
                                        fake_source.tides)

    monkeypatch.setattr(pipeline, "run_pipeline", fake_run)
    resp = client.get("/api/wave-data")
    assert resp.status_code == 200
    body = resp.json()
    assert body["cached"] is False
    assert len(body["data"]) == len(COASTLINE_POINTS)
    assert body["data"][0]["tideTrend"] == "rising"

    again = client.get("/api/wave-data").json()
    assert again["cached"] is True
    assert again["data"] == body["data"]
    assert len(calls) == 1


def test_wave_data_endpoint_serves_stale_on_failure(client, monkeypatch, fake_source):
    monkeypatch.setattr(pipeline, "run_pipeline", lambda: pipeline.build_wave_data(
        fake_source.wave_stations, fake_source.wind_stations, fake_source.tides))
    client.get("/api/wave-data")

    monkeypatch.setattr(config, "CACHE_TTL_SECONDS", -1)
    main._write_cache(main._read_cache(allow_stale=True))

    def failing():
        raise DataSourceError("provider down")

    monkeypatch.setattr(pipeline, "run_pipeline", failing)
    body = client.get("/api/wave-data").json()
    assert body["stale"] is True
    assert body["cached"] is True
    assert len(body["data"]) == len(COASTLINE_POINTS)


def test_wave_data_endpoint_fails_without_cache(client, monkeypatch):
    def failing():
        raise DataSourceError("provider down")

    monkeypatch.setattr(pipeline, "run_pipeline", failing)
    resp = client.get("/api/wave-data")
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to fetch wave data"


def test_sections_endpoint(client, monkeypatch, fake_source):
    monkeypatch.setattr(pipeline, "run_pipeline", lambda: pipeline.build_wave_data(
        fake_source.wave_stations, fake_source.wind_stations, fake_source.tides))
    resp = client.get("/api/sections")
    assert resp.status_code == 200
    rows = resp.json()["sections"]
    assert rows[0]["section"] == "Oxnard/Ventura County"
    assert rows[0]["color"].startswith("hsl(")
    assert sum(r["points"] for r in rows) == len(COASTLINE_POINTS)


def test_chart_endpoint(client, monkeypatch, fake_source):
    monkeypatch.setattr(pipeline, "run_pipeline", lambda: pipeline.build_wave_data(
        fake_source.wave_stations, fake_source.wind_stations, fake_source.tides))
    resp = client.get("/chart")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"


def test_chart_endpoint_without_data(client, monkeypatch):
    def failing():
        raise DataSourceError("provider down")

    monkeypatch.setattr(pipeline, "run_pipeline", failing)
    resp = client.get("/chart")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
