"""
Data records flowing through the pipeline.

``StationReading`` and ``TideReading`` describe provider input,
``RawReading`` and ``AdjustedReading`` are intermediate values, and
``WaveDataPoint`` is the published per-point record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

# Keys used in StationReading.current / StationReading.hourly
WAVE_HEIGHT = "wave_height"          # m
WAVE_PERIOD = "wave_period"          # s
WAVE_DIRECTION = "wave_direction"    # deg
SWELL_HEIGHT = "swell_wave_height"   # m
SWELL_PERIOD = "swell_wave_period"   # s
WATER_TEMP = "sea_surface_temperature"  # F
WIND_SPEED = "wind_speed_10m"        # kts
WIND_DIRECTION = "wind_direction_10m"  # deg
AIR_TEMP = "temperature_2m"          # F


@dataclass(frozen=True)
class StationReading:
    """One provider query location with its current snapshot and hourly series.

    Any value may be None.  ``hourly`` maps a variable name to a list aligned
    with ``hourly_times``.
    """

    lat: float
    lng: float
    current: Dict[str, Optional[float]] = field(default_factory=dict)
    current_time: Optional[datetime] = None
    hourly: Dict[str, List[Optional[float]]] = field(default_factory=dict)
    hourly_times: Tuple[Optional[datetime], ...] = ()

    def hourly_length(self, keys: Sequence[str]) -> int:
        lengths = [len(self.hourly.get(k) or []) for k in keys]
        return min(lengths) if lengths else 0

    def hourly_time(self, index: int) -> Optional[datetime]:
        if 0 <= index < len(self.hourly_times):
            return self.hourly_times[index]
        return None


@dataclass(frozen=True)
class TideReading:
    station: str
    height_ft: float
    trend: str
    observed_at: Optional[datetime] = None


DEFAULT_TIDE = TideReading(station="default", height_ft=2.5, trend="steady")


def tide_from_series(station: str, series: Sequence[Tuple[datetime, float]]) -> Optional[TideReading]:
    """Reduce a (time, level_ft) series to the latest height and its trend.

    Only the two most recent samples matter: rising if the latest is higher
    than the one before it, falling otherwise.
    """
    if not series:
        return None
    ordered = sorted(series, key=lambda s: s[0])
    t_now, h_now = ordered[-1]
    if len(ordered) < 2:
        return TideReading(station, float(h_now), "steady", t_now)
    _, h_prev = ordered[-2]
    trend = "rising" if h_now > h_prev else "falling"
    return TideReading(station, float(h_now), trend, t_now)


@dataclass(frozen=True)
class RawReading:
    """Inverse-distance-weighted reading at a target point, provider units."""

    wave_height_m: float
    wave_period_s: float
    wave_direction_deg: float
    swell_height_m: float
    swell_period_s: float
    water_temp_f: Optional[float]
    wind_speed_kts: float
    wind_direction_deg: float
    air_temp_f: Optional[float]
    measurement_time: Optional[datetime] = None
    fallback: bool = False


@dataclass(frozen=True)
class AdjustedReading:
    """Bias-corrected reading in display units (ft, s, deg, kts, F)."""

    wave_height_ft: float
    wave_period_s: float
    wave_direction_deg: float
    swell_height_ft: float
    swell_period_s: float
    wind_speed_kts: float
    wind_direction_deg: float
    water_temp_f: float
    air_temp_f: float


@dataclass(frozen=True)
class WaveDataPoint:
    id: str
    lat: float
    lng: float
    name: Optional[str]
    section: str
    wave_height: float
    wave_period: float
    wave_direction: float
    swell_height: float
    swell_period: float
    wind_speed: float
    wind_direction: float
    water_temp: float
    air_temp: float
    tide_height: float
    tide_trend: str
    quality_score: int
    quality_level: str
    timestamp: datetime
    measurement_time: Optional[datetime]
    fallback: bool = False

    def as_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase field names consumers key off."""
        return {
            "id": self.id,
            "lat": self.lat,
            "lng": self.lng,
            "name": self.name,
            "section": self.section,
            "waveHeight": self.wave_height,
            "wavePeriod": self.wave_period,
            "waveDirection": self.wave_direction,
            "swellHeight": self.swell_height,
            "swellPeriod": self.swell_period,
            "windSpeed": self.wind_speed,
            "windDirection": self.wind_direction,
            "waterTemp": self.water_temp,
            "airTemp": self.air_temp,
            "tideHeight": self.tide_height,
            "tideTrend": self.tide_trend,
            "qualityScore": self.quality_score,
            "qualityLevel": self.quality_level,
            "timestamp": self.timestamp.isoformat(),
            "measurementTime": self.measurement_time.isoformat() if self.measurement_time else None,
            "fallback": self.fallback,
        }
