"""
Section bias correction and conversion to display units.

A single regional wave model under-resolves local effects such as point-break
focusing and bay sheltering, so each section scales or offsets the
interpolated reading before it is converted to feet/knots/Fahrenheit.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .models import AdjustedReading, RawReading
from .sections import SectionBias

M_TO_FT = 3.28084

# Bias stage limits (provider units)
HEIGHT_M_RANGE = (0.3, 3.0)
PERIOD_S_RANGE = (6.0, 20.0)
WIND_KTS_RANGE = (0.0, 35.0)

# Display stage limits
HEIGHT_FT_RANGE = (0.5, 15.0)
DISPLAY_PERIOD_RANGE = (5.0, 25.0)
DISPLAY_WIND_RANGE = (0.0, 30.0)

# Sanity backstops against provider glitches: (low, high, substitute)
WATER_TEMP_CHECK = (45.0, 85.0, 62.0)
AIR_TEMP_CHECK = (35.0, 110.0, 68.0)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _validated_temp(value: Optional[float], check: Tuple[float, float, float]) -> float:
    lo, hi, substitute = check
    if value is None or not (lo <= value <= hi):
        return substitute
    return value


def apply_section_bias(raw: RawReading, bias: SectionBias) -> RawReading:
    """Scale/offset a raw reading with the section's coefficients (still metres and knots).

    Direction is offset without wrapping; downstream only uses differences.
    """
    water = raw.water_temp_f + bias.temp_offset if raw.water_temp_f is not None else None
    return RawReading(
        wave_height_m=clamp(raw.wave_height_m * bias.height_multiplier, *HEIGHT_M_RANGE),
        wave_period_s=clamp(raw.wave_period_s * bias.period_multiplier, *PERIOD_S_RANGE),
        wave_direction_deg=raw.wave_direction_deg + bias.direction_offset,
        swell_height_m=clamp(raw.swell_height_m * bias.height_multiplier, *HEIGHT_M_RANGE),
        swell_period_s=clamp(raw.swell_period_s * bias.period_multiplier, *PERIOD_S_RANGE),
        water_temp_f=water,
        wind_speed_kts=clamp(raw.wind_speed_kts + bias.wind_offset, *WIND_KTS_RANGE),
        wind_direction_deg=raw.wind_direction_deg,
        air_temp_f=raw.air_temp_f,
        measurement_time=raw.measurement_time,
        fallback=raw.fallback,
    )


def to_display_units(reading: RawReading) -> AdjustedReading:
    return AdjustedReading(
        wave_height_ft=clamp(reading.wave_height_m * M_TO_FT, *HEIGHT_FT_RANGE),
        wave_period_s=clamp(reading.wave_period_s, *DISPLAY_PERIOD_RANGE),
        wave_direction_deg=reading.wave_direction_deg,
        swell_height_ft=clamp(reading.swell_height_m * M_TO_FT, *HEIGHT_FT_RANGE),
        swell_period_s=clamp(reading.swell_period_s, *DISPLAY_PERIOD_RANGE),
        wind_speed_kts=clamp(reading.wind_speed_kts, *DISPLAY_WIND_RANGE),
        wind_direction_deg=reading.wind_direction_deg,
        water_temp_f=_validated_temp(reading.water_temp_f, WATER_TEMP_CHECK),
        air_temp_f=_validated_temp(reading.air_temp_f, AIR_TEMP_CHECK),
    )


def adjust_reading(raw: RawReading, bias: SectionBias) -> AdjustedReading:
    """Bias-correct ``raw`` and convert it for scoring and display."""
    return to_display_units(apply_section_bias(raw, bias))
