"""
Inverse-distance interpolation of station readings onto coastline points.

For each target point the three nearest stations of a pool are weighted by
``1 / (distance + EPSILON)``.  A station's value for a variable family comes
from its "current" snapshot when complete, otherwise from the first hourly
index where the whole family is present.  Wave, swell, water temperature and
wind are accumulated separately, each normalised by its own total weight.
"""

from __future__ import annotations

import logging
import math
import random
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from .geo import distance, distance_squared
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
    RawReading,
    StationReading,
)
from .sections import CoastlinePoint

logger = logging.getLogger(__name__)

EPSILON = 0.01
MAX_STATIONS = 3

WAVE_KEYS = (WAVE_HEIGHT, WAVE_PERIOD, WAVE_DIRECTION)
SWELL_KEYS = (SWELL_HEIGHT, SWELL_PERIOD)
WATER_KEYS = (WATER_TEMP,)
WIND_KEYS = (WIND_SPEED, WIND_DIRECTION, AIR_TEMP)

ANGULAR_KEYS = frozenset({WAVE_DIRECTION, WIND_DIRECTION})

# Bounds of the synthetic reading used when no station has data
FALLBACK_WAVE_HEIGHT_M = (1.0, 1.5)
FALLBACK_WAVE_PERIOD_S = (10.0, 13.0)
FALLBACK_WAVE_DIRECTION = (250.0, 270.0)
FALLBACK_WIND_SPEED_KTS = (8.0, 14.0)
FALLBACK_WIND_DIRECTION = (260.0, 280.0)


def _usable(value) -> bool:
    if value is None:
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def resolve_values(
    station: StationReading, keys: Sequence[str]
) -> Optional[Tuple[List[float], Optional[datetime]]]:
    """Return (values, timestamp) for ``keys`` or None if the station never has them all."""
    current = [station.current.get(k) for k in keys]
    if all(_usable(v) for v in current):
        return [float(v) for v in current], station.current_time

    for i in range(station.hourly_length(keys)):
        row = [station.hourly[k][i] for k in keys]
        if all(_usable(v) for v in row):
            return [float(v) for v in row], station.hourly_time(i)
    return None


def nearest_stations(
    lat: float, lng: float, stations: Sequence[StationReading], limit: int = MAX_STATIONS
) -> List[Tuple[StationReading, float]]:
    """Up to ``limit`` stations ordered by planar distance, paired with that distance."""
    ranked = sorted(stations, key=lambda s: distance_squared(s.lat, s.lng, lat, lng))
    return [(s, distance(s.lat, s.lng, lat, lng)) for s in ranked[:limit]]


class _WeightedFamily:
    """Running weighted mean for one family of variables."""

    def __init__(self, keys: Sequence[str]):
        self.keys = tuple(keys)
        self.total = 0.0
        self.sums: Dict[str, float] = {k: 0.0 for k in self.keys}
        self.vectors: Dict[str, List[float]] = {k: [0.0, 0.0] for k in self.keys if k in ANGULAR_KEYS}
        self.earliest: Optional[datetime] = None

    def add(self, values: Sequence[float], weight: float, when: Optional[datetime]) -> None:
        for key, value in zip(self.keys, values):
            if key in self.vectors:
                rad = math.radians(value)
                self.vectors[key][0] += weight * math.sin(rad)
                self.vectors[key][1] += weight * math.cos(rad)
            else:
                self.sums[key] += weight * value
        self.total += weight
        if when is not None and (self.earliest is None or when < self.earliest):
            self.earliest = when

    def result(self) -> Optional[Dict[str, float]]:
        if self.total <= 0:
            return None
        out: Dict[str, float] = {}
        for key in self.keys:
            if key in self.vectors:
                s, c = self.vectors[key]
                out[key] = math.degrees(math.atan2(s, c)) % 360.0
            else:
                out[key] = self.sums[key] / self.total
        return out


def _accumulate(
    candidates: Sequence[Tuple[StationReading, float]], keys: Sequence[str]
) -> _WeightedFamily:
    family = _WeightedFamily(keys)
    for station, dist in candidates:
        resolved = resolve_values(station, keys)
        if resolved is None:
            continue
        values, when = resolved
        family.add(values, 1.0 / (dist + EPSILON), when)
    return family


def fallback_rng(point: CoastlinePoint) -> random.Random:
    """Per-point generator so a point's synthetic reading is stable across runs."""
    return random.Random(f"{point.lat:.6f},{point.lng:.6f}")


def interpolate_point(
    point: CoastlinePoint,
    wave_stations: Sequence[StationReading],
    wind_stations: Sequence[StationReading],
) -> RawReading:
    """Interpolate one coastline point from the wave and wind station pools.

    Always returns a complete reading.  When a pool yields no usable data the
    affected family is replaced by a bounded synthetic value and the reading
    is flagged ``fallback=True``.
    """
    wave_candidates = nearest_stations(point.lat, point.lng, wave_stations)
    wind_candidates = nearest_stations(point.lat, point.lng, wind_stations)

    wave_family = _accumulate(wave_candidates, WAVE_KEYS)
    swell_family = _accumulate(wave_candidates, SWELL_KEYS)
    water_family = _accumulate(wave_candidates, WATER_KEYS)
    wind_family = _accumulate(wind_candidates, WIND_KEYS)

    wave = wave_family.result()
    wind = wind_family.result()
    fallback = wave is None or wind is None
    if fallback:
        rng = fallback_rng(point)
        missing = [label for label, fam in (("wave", wave), ("wind", wind)) if fam is None]
        logger.warning(
            "No usable %s station data for %s (%.4f, %.4f); using fallback reading",
            "/".join(missing), point.name or "unnamed point", point.lat, point.lng,
        )
        if wave is None:
            wave = {
                WAVE_HEIGHT: rng.uniform(*FALLBACK_WAVE_HEIGHT_M),
                WAVE_PERIOD: rng.uniform(*FALLBACK_WAVE_PERIOD_S),
                WAVE_DIRECTION: rng.uniform(*FALLBACK_WAVE_DIRECTION),
            }
        if wind is None:
            wind = {
                WIND_SPEED: rng.uniform(*FALLBACK_WIND_SPEED_KTS),
                WIND_DIRECTION: rng.uniform(*FALLBACK_WIND_DIRECTION),
                AIR_TEMP: None,
            }

    swell = swell_family.result() or {
        SWELL_HEIGHT: wave[WAVE_HEIGHT],
        SWELL_PERIOD: wave[WAVE_PERIOD],
    }
    water = water_family.result() or {WATER_TEMP: None}

    times = [f.earliest for f in (wave_family, wind_family) if f.earliest is not None]
    return RawReading(
        wave_height_m=wave[WAVE_HEIGHT],
        wave_period_s=wave[WAVE_PERIOD],
        wave_direction_deg=wave[WAVE_DIRECTION],
        swell_height_m=swell[SWELL_HEIGHT],
        swell_period_s=swell[SWELL_PERIOD],
        water_temp_f=water[WATER_TEMP],
        wind_speed_kts=wind[WIND_SPEED],
        wind_direction_deg=wind[WIND_DIRECTION],
        air_temp_f=wind[AIR_TEMP],
        measurement_time=min(times) if times else None,
        fallback=fallback,
    )
