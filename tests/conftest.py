from datetime import datetime, timedelta, timezone

import pytest

from coastal_surf.models import (
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
)

T0 = datetime(2025, 8, 8, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def wave_station():
    """Build a wave station with a complete current snapshot by default."""

    def make(lat, lng, height=1.2, period=12.0, direction=250.0, current=True,
             hourly=None, current_time=T0, hours=3):
        values = {
            WAVE_HEIGHT: height,
            WAVE_PERIOD: period,
            WAVE_DIRECTION: direction,
            SWELL_HEIGHT: height * 0.8 if height is not None else None,
            SWELL_PERIOD: period + 1 if period is not None else None,
            WATER_TEMP: 64.0,
        }
        return StationReading(
            lat=lat,
            lng=lng,
            current=values if current else {k: None for k in values},
            current_time=current_time,
            hourly=hourly if hourly is not None else {k: [None] * hours for k in values},
            hourly_times=tuple(T0 + timedelta(hours=i) for i in range(hours)),
        )

    return make


@pytest.fixture
def wind_station():
    def make(lat, lng, speed=5.0, direction=60.0, air=70.0, current=True, hourly=None,
             current_time=T0, hours=3):
        values = {WIND_SPEED: speed, WIND_DIRECTION: direction, AIR_TEMP: air}
        return StationReading(
            lat=lat,
            lng=lng,
            current=values if current else {k: None for k in values},
            current_time=current_time,
            hourly=hourly if hourly is not None else {k: [None] * hours for k in values},
            hourly_times=tuple(T0 + timedelta(hours=i) for i in range(hours)),
        )

    return make
