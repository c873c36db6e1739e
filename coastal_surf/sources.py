"""
Upstream data sources: Open-Meteo (waves, wind) and NOAA CO-OPS (tides).

All requests for one run are issued concurrently.  A wave or wind failure
aborts the run with ``DataSourceError``; a tide station failure only drops
that station.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import requests

from . import config
from .geo import Bounds
from .models import (
    AIR_TEMP,
    SWELL_HEIGHT,
    SWELL_PERIOD,
    WATER_TEMP,
    WAVE_DIRECTION,
    WAVE_HEIGHT,
    WAVE_PERIOD,
    WIND_DIRECTION,
    WIND_SPEED,
    StationReading,
    TideReading,
    tide_from_series,
)
from .sections import COASTLINE_BOUNDS, TIDE_STATIONS

logger = logging.getLogger(__name__)

MARINE_VARIABLES = (WAVE_HEIGHT, WAVE_DIRECTION, WAVE_PERIOD, SWELL_HEIGHT, SWELL_PERIOD, WATER_TEMP)
WIND_VARIABLES = (WIND_SPEED, WIND_DIRECTION, AIR_TEMP)

GRID_STEP = 0.2


class DataSourceError(RuntimeError):
    """The wave or wind provider could not be reached or returned unusable data."""


@dataclass
class SourceData:
    wave_stations: List[StationReading]
    wind_stations: List[StationReading]
    tides: Dict[str, TideReading] = field(default_factory=dict)
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def query_grid(bounds: Bounds = COASTLINE_BOUNDS, step: float = GRID_STEP) -> List[Tuple[float, float]]:
    """Regular lat/lng grid over ``bounds`` used as provider query locations."""
    lat_count = int(round((bounds.north - bounds.south) / step)) + 1
    lng_count = int(round((bounds.east - bounds.west) / step)) + 1
    return [
        (round(bounds.south + i * step, 4), round(bounds.west + j * step, 4))
        for i in range(lat_count)
        for j in range(lng_count)
    ]


def _parse_time(value: Any) -> Optional[datetime]:
    """Parse provider timestamps ('2025-08-08T12:00' or '2025-08-08 12:00') as UTC."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _series(block: Mapping[str, Any], key: str) -> List[Any]:
    """Hourly array for ``key``; anything that is not a list counts as missing."""
    values = block.get(key)
    return values if isinstance(values, list) else []


def parse_open_meteo(payload: Any, variables: Sequence[str]) -> List[StationReading]:
    """Turn an Open-Meteo response (one object or a list of them) into stations.

    Locations with no value at all for ``variables`` are skipped.
    """
    if isinstance(payload, dict):
        items = [payload]
    elif isinstance(payload, list):
        items = payload
    else:
        raise DataSourceError(f"Unexpected Open-Meteo payload type {type(payload).__name__}")

    stations: List[StationReading] = []
    for obj in items:
        if not isinstance(obj, dict) or obj.get("error"):
            continue
        lat = _number(obj.get("latitude"))
        lng = _number(obj.get("longitude"))
        if lat is None or lng is None:
            continue
        current_raw = obj.get("current") or {}
        hourly_raw = obj.get("hourly") or {}
        if not isinstance(current_raw, dict) or not isinstance(hourly_raw, dict):
            logger.warning("Skipping malformed Open-Meteo location (%s, %s)", lat, lng)
            continue
        current = {v: _number(current_raw.get(v)) for v in variables}
        hourly = {v: [_number(x) for x in _series(hourly_raw, v)] for v in variables}
        has_data = any(x is not None for x in current.values()) or any(
            x is not None for series in hourly.values() for x in series
        )
        if not has_data:
            continue
        stations.append(StationReading(
            lat=lat,
            lng=lng,
            current=current,
            current_time=_parse_time(current_raw.get("time")),
            hourly=hourly,
            hourly_times=tuple(_parse_time(t) for t in _series(hourly_raw, "time")),
        ))
    return stations


def _get_json(url: str, params: Mapping[str, Any], timeout: float) -> Any:
    response = requests.get(
        url,
        params=params,
        timeout=timeout,
        headers={"User-Agent": config.USER_AGENT},
    )
    response.raise_for_status()
    return response.json()


def _fetch_stations(
    url: str, variables: Sequence[str], extra: Mapping[str, Any], label: str, timeout: float
) -> List[StationReading]:
    grid = query_grid()
    params = {
        "latitude": ",".join(f"{lat:.4f}" for lat, _ in grid),
        "longitude": ",".join(f"{lng:.4f}" for _, lng in grid),
        "current": ",".join(variables),
        "hourly": ",".join(variables),
        "forecast_days": 1,
        "timezone": "GMT",
        "timeformat": "iso8601",
        "temperature_unit": "fahrenheit",
        **extra,
    }
    try:
        payload = _get_json(url, params, timeout)
    except (requests.RequestException, ValueError) as e:
        raise DataSourceError(f"{label} data unavailable: {e}") from e
    stations = parse_open_meteo(payload, variables)
    if not stations:
        raise DataSourceError(f"{label} provider returned no usable stations")
    logger.info("Fetched %d %s stations", len(stations), label)
    return stations


def fetch_wave_stations(timeout: float = config.REQUEST_TIMEOUT) -> List[StationReading]:
    return _fetch_stations(config.OPEN_METEO_MARINE_URL, MARINE_VARIABLES, {}, "wave", timeout)


def fetch_wind_stations(timeout: float = config.REQUEST_TIMEOUT) -> List[StationReading]:
    return _fetch_stations(
        config.OPEN_METEO_FORECAST_URL, WIND_VARIABLES, {"wind_speed_unit": "kn"}, "wind", timeout
    )


def parse_coops_series(payload: Any) -> List[Tuple[datetime, float]]:
    """Extract (time, level_ft) pairs from a CO-OPS datagetter response."""
    if not isinstance(payload, dict):
        return []
    series: List[Tuple[datetime, float]] = []
    rows = payload.get("data")
    if not isinstance(rows, list):
        return []
    for row in rows:
        if not isinstance(row, dict):
            continue
        when = _parse_time(row.get("t"))
        level = _number(row.get("v"))
        if when is None or level is None:
            continue
        series.append((when, level))
    return series


def fetch_tide(name: str, station_id: str, timeout: float = config.REQUEST_TIMEOUT) -> Optional[TideReading]:
    """Latest water level and trend for one CO-OPS station."""
    params = {
        "product": "water_level",
        "application": config.USER_AGENT,
        "range": 2,
        "station": station_id,
        "datum": "MLLW",
        "time_zone": "gmt",
        "units": "english",
        "format": "json",
    }
    payload = _get_json(config.COOPS_DATAGETTER_URL, params, timeout)
    if isinstance(payload, dict) and payload.get("error"):
        err = payload["error"]
        message = err.get("message") if isinstance(err, dict) else err
        raise ValueError(str(message or "CO-OPS error"))
    return tide_from_series(name, parse_coops_series(payload))


def fetch_all(
    timeout: float = config.REQUEST_TIMEOUT,
    tide_stations: Mapping[str, str] = TIDE_STATIONS,
) -> SourceData:
    """Fetch waves, wind and every tide station concurrently.

    Raises:
        DataSourceError: wave or wind data could not be fetched.
    """
    with ThreadPoolExecutor(max_workers=2 + len(tide_stations)) as pool:
        wave_future = pool.submit(fetch_wave_stations, timeout)
        wind_future = pool.submit(fetch_wind_stations, timeout)
        tide_futures = {
            name: pool.submit(fetch_tide, name, station_id, timeout)
            for name, station_id in tide_stations.items()
        }

        tides: Dict[str, TideReading] = {}
        for name, future in tide_futures.items():
            try:
                reading = future.result()
            except Exception as e:
                # Tides are optional; the section falls back to another station
                logger.warning("Tide station %s unavailable: %s", name, e)
                continue
            if reading is None:
                logger.warning("Tide station %s returned no samples", name)
                continue
            tides[name] = reading

        try:
            wave_stations = wave_future.result()
            wind_stations = wind_future.result()
        except DataSourceError:
            logger.error("Upstream weather data unavailable; aborting run")
            raise

    return SourceData(wave_stations=wave_stations, wind_stations=wind_stations, tides=tides)
