"""
Surf quality scoring.

Maps a reading (height ft, period s, wind kts, wind/wave direction deg) and a
spot's location factor to an integer score from 0 (flat/blown out) to 100
(epic).  Each component is a piecewise-linear curve over named breakpoints so
every regime can be tuned on its own:

* Height: tiny surf barely registers, the 2.8-7 ft band climbs to the peak,
  large surf tapers off and very large surf keeps declining.
* Period: short wind waves score low, mid-period swell is good, 14-17 s
  groundswell is best and anything longer is slightly too powerful.
* Wind: glassy conditions score near 1.0 and anything above ~18 kts is
  blown out.  The speed score is then multiplied by a direction modifier:
  offshore winds groom the faces (x1.5), cross-shore helps a little (x1.08)
  and onshore winds ruin them (x0.25).

The three components are blended with ``WEIGHTS`` and the location factor
contributes a fixed ``LOCATION_WEIGHT`` share.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

Curve = Sequence[Tuple[float, float]]

HEIGHT_CURVE: Curve = (
    (0.0, 0.0),
    (1.8, 0.2),     # tiny: knee high and below
    (2.8, 0.5),     # start of the optimal band
    (7.0, 1.0),     # top of the optimal band
    (10.0, 0.6),    # large, experts only
    (16.0, 0.2),    # closing out
    (20.0, 0.1),
)

PERIOD_CURVE: Curve = (
    (0.0, 0.0),
    (8.0, 0.2),     # wind waves
    (11.0, 0.5),    # medium
    (14.0, 0.8),    # excellent band starts
    (17.0, 1.0),
    (25.0, 0.85),   # very long period, a bit too powerful
)

WIND_SPEED_CURVE: Curve = (
    (0.0, 1.0),     # glass
    (4.0, 0.92),
    (8.0, 0.65),    # light
    (11.0, 0.35),   # moderate
    (18.0, 0.12),   # strong
    (30.0, 0.02),   # blown out
)

# Wind direction modifiers keyed by angular difference to wave direction
ONSHORE_MAX_DIFF = 45.0
CROSS_SHORE_MIN_DIFF = 90.0
OFFSHORE_MIN_DIFF = 135.0
ONSHORE_MODIFIER = 0.25
CROSS_SHORE_MODIFIER = 1.08
OFFSHORE_MODIFIER = 1.5

WEIGHTS = {
    "wave_height": 0.20,
    "wave_period": 0.12,
    "wind_speed": 0.68,
}
LOCATION_WEIGHT = 0.10

QUALITY_LEVELS = (
    (75, "excellent"),
    (55, "good"),
    (35, "fair"),
)


def _piecewise(value: float, curve: Curve) -> float:
    """Linear interpolation over ``curve``; flat outside the first/last breakpoint."""
    if value <= curve[0][0]:
        return curve[0][1]
    for (x0, y0), (x1, y1) in zip(curve, curve[1:]):
        if value <= x1:
            return y0 + (y1 - y0) * (value - x0) / (x1 - x0)
    return curve[-1][1]


def wave_height_score(height_ft: float) -> float:
    if height_ft <= 0:
        return 0.0
    return _piecewise(height_ft, HEIGHT_CURVE)


def wave_period_score(period_s: float) -> float:
    if period_s <= 0:
        return 0.0
    return _piecewise(period_s, PERIOD_CURVE)


def angular_difference(a: float, b: float) -> float:
    """Smallest absolute angle in degrees between two bearings (0-180)."""
    diff = abs((a % 360.0) - (b % 360.0))
    return 360.0 - diff if diff > 180.0 else diff


def wind_direction_modifier(wind_direction: float, wave_direction: float) -> float:
    """Multiplier on the wind speed score.

    Wind blowing the same way as the waves travel is onshore; the opposite
    bearing is offshore.
    """
    diff = angular_difference(wind_direction, wave_direction)
    if diff <= ONSHORE_MAX_DIFF:
        return ONSHORE_MODIFIER
    if diff >= OFFSHORE_MIN_DIFF:
        return OFFSHORE_MODIFIER
    if diff >= CROSS_SHORE_MIN_DIFF:
        return CROSS_SHORE_MODIFIER
    progress = (diff - ONSHORE_MAX_DIFF) / (CROSS_SHORE_MIN_DIFF - ONSHORE_MAX_DIFF)
    return ONSHORE_MODIFIER + progress * (CROSS_SHORE_MODIFIER - ONSHORE_MODIFIER)


def wind_score(
    wind_speed_kts: float,
    wind_direction: Optional[float] = None,
    wave_direction: Optional[float] = None,
) -> float:
    """Wind speed score, scaled by direction when both bearings are known.

    The result can exceed 1.0 for light offshore wind; the final score is
    clamped instead.
    """
    if wind_speed_kts < 0:
        return 0.0
    speed_score = _piecewise(wind_speed_kts, WIND_SPEED_CURVE)
    if wind_direction is None or wave_direction is None:
        return speed_score
    return speed_score * wind_direction_modifier(wind_direction, wave_direction)


def calculate_wave_quality(reading: Mapping[str, Any], location_factor: float = 1.0) -> int:
    """Compute the 0-100 surf quality score for a reading.

    Args:
        reading: Mapping with ``wave_height_ft``, ``wave_period_s`` and
            ``wind_speed_kts``; ``wind_direction`` and ``wave_direction``
            (degrees) are optional.
        location_factor: Spot quality (0.7 poor spot, 1.0 average, 1.2
            premium).  Clamped to [0, 1] before blending.

    Returns:
        Integer score in [0, 100].
    """
    height = float(reading["wave_height_ft"])
    period = float(reading["wave_period_s"])
    wind_speed = float(reading["wind_speed_kts"])
    wind_dir = reading.get("wind_direction")
    wave_dir = reading.get("wave_direction")

    conditions = (
        wave_height_score(height) * WEIGHTS["wave_height"]
        + wave_period_score(period) * WEIGHTS["wave_period"]
        + wind_score(
            wind_speed,
            float(wind_dir) if wind_dir is not None else None,
            float(wave_dir) if wave_dir is not None else None,
        ) * WEIGHTS["wind_speed"]
    )
    location_score = max(0.0, min(1.0, location_factor))
    total = conditions * (1 - LOCATION_WEIGHT) + location_score * LOCATION_WEIGHT
    return int(round(max(0.0, min(100.0, total * 100))))


def get_wave_quality_level(score: float) -> str:
    for threshold, level in QUALITY_LEVELS:
        if score >= threshold:
            return level
    return "poor"


def get_quality_color(score: float) -> str:
    """HSL colour for a score: 0 is red, 60 yellow, 120 green."""
    hue = max(0.0, min(100.0, score)) / 100 * 120
    return f"hsl({hue:g}, 80%, 50%)"


def get_quality_color_rgb(score: float) -> str:
    """Red -> yellow -> green gradient as an ``rgb()`` string."""
    normalized = max(0.0, min(100.0, score)) / 100
    if normalized < 0.5:
        return f"rgb(255, {round(255 * normalized * 2)}, 0)"
    return f"rgb({round(255 * (1 - (normalized - 0.5) * 2))}, 255, 0)"
