"""
Static registry of LA County coastline sections.

Points are defined once in ``COASTLINE_POINTS`` (north to south) and handed
to sections by fixed index ranges.  A section's ``bounds`` is a deliberately
loose box used only to prefilter candidate stations; it is never used to
decide which section a point belongs to.

Per-section bias coefficients and location factors live in read-only tables
keyed by section name.  Lookups for unknown names return neutral values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .geo import Bounds


@dataclass(frozen=True)
class CoastlinePoint:
    lat: float
    lng: float
    name: Optional[str] = None


@dataclass(frozen=True)
class SectionBias:
    height_multiplier: float = 1.0
    period_multiplier: float = 1.0
    direction_offset: float = 0.0
    wind_offset: float = 0.0
    temp_offset: float = 0.0


NEUTRAL_BIAS = SectionBias()
NEUTRAL_LOCATION_FACTOR = 1.0


@dataclass(frozen=True)
class Section:
    name: str
    bounds: Bounds
    points: Tuple[CoastlinePoint, ...]
    tide_station: str = "santa_monica"

    @property
    def slug(self) -> str:
        return section_slug(self.name)


def section_slug(name: str) -> str:
    """'Malibu Point/Surfrider' -> 'malibu-point-surfrider'."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


# Region queried from the wave/wind providers
COASTLINE_BOUNDS = Bounds(north=34.5, south=33.7, west=-119.3, east=-117.7)

# Marina del Rey entrance channel: breakwater geometry produces meaningless readings
# None of the current COASTLINE_POINTS fall inside; points added later are filtered here
MARINA_EXCLUSION_ZONE = Bounds(north=33.9700, south=33.9600, west=-118.4600, east=-118.4500)

# NOAA CO-OPS water level stations
TIDE_STATIONS: Mapping[str, str] = MappingProxyType({
    "santa_monica": "9410840",
    "los_angeles": "9410660",
})
DEFAULT_TIDE_STATION = "santa_monica"

COASTLINE_POINTS: Tuple[CoastlinePoint, ...] = (
    # Oxnard/Ventura County
    CoastlinePoint(34.09413904941302, -119.07850285736356, "North Starting Point"),
    CoastlinePoint(34.0950, -119.0500, "Oxnard Beach"),
    CoastlinePoint(34.0900, -119.0200, "Silver Strand Beach"),
    # Zuma/Point Dume
    CoastlinePoint(34.0823, -118.8001, "Zuma Beach"),
    CoastlinePoint(34.0790, -118.7800, "Broad Beach"),
    CoastlinePoint(34.0745, -118.7200, "Point Dume"),
    # Malibu Point/Surfrider
    CoastlinePoint(34.0678, -118.7001, "Malibu Point"),
    CoastlinePoint(34.0630, -118.6900, "Surfrider Beach"),
    CoastlinePoint(34.0580, -118.6850, "Malibu Pier"),
    CoastlinePoint(34.0456, -118.6778, "Malibu Lagoon"),
    # Malibu Creek/Big Rock
    CoastlinePoint(34.0420, -118.6650, "Malibu Creek"),
    CoastlinePoint(34.0390, -118.6500, "Big Rock Beach"),
    CoastlinePoint(34.0380, -118.5800, "Las Flores Beach"),
    # Topanga/Sunset Point
    CoastlinePoint(34.0367, -118.5334, "Topanga Beach"),
    CoastlinePoint(34.0350, -118.5200, "Sunset Point"),
    CoastlinePoint(34.0320, -118.5100, "Castle Rock"),
    # Will Rogers/Santa Monica
    CoastlinePoint(34.0301, -118.5001, "Will Rogers Beach"),
    CoastlinePoint(34.0280, -118.4900, "Temescal Beach"),
    CoastlinePoint(34.0250, -118.4750, "Palisades Beach"),
    CoastlinePoint(34.0220, -118.4600, "Santa Monica State Beach"),
    CoastlinePoint(34.0189, -118.4445, "Santa Monica Pier"),
    # Santa Monica Pier/Venice
    CoastlinePoint(34.0150, -118.4350, "Ocean Park"),
    CoastlinePoint(34.0120, -118.4250, "Venice Pier"),
    CoastlinePoint(34.0101, -118.4001, "Venice Beach"),
    # Venice/El Segundo
    CoastlinePoint(34.0050, -118.3800, "Dockweiler Beach"),
    CoastlinePoint(34.0000, -118.3500, "El Segundo Beach"),
    CoastlinePoint(33.9980, -118.3200, "Manhattan Beach North"),
    # Manhattan Beach/Hermosa
    CoastlinePoint(33.9945, -118.2889, "Manhattan Beach"),
    CoastlinePoint(33.9900, -118.2700, "Manhattan Beach South"),
    CoastlinePoint(33.9850, -118.2500, "Hermosa Beach North"),
    CoastlinePoint(33.9823, -118.2001, "Hermosa Beach"),
    # Hermosa/Redondo Beach
    CoastlinePoint(33.9780, -118.1900, "Hermosa Beach South"),
    CoastlinePoint(33.9740, -118.1750, "Redondo Beach North"),
    CoastlinePoint(33.9689, -118.1556, "Redondo Beach"),
    # Redondo/Palos Verdes
    CoastlinePoint(33.9600, -118.1400, "Redondo Beach South"),
    CoastlinePoint(33.9500, -118.1200, "Torrance Beach"),
    CoastlinePoint(33.9456, -118.0556, "Palos Verdes"),
    CoastlinePoint(33.9200, -118.1800, "Malaga Cove"),
    # Palos Verdes Peninsula
    CoastlinePoint(33.8445, -118.3170, "Palos Verdes Peninsula"),
    CoastlinePoint(33.8200, -118.3300, "Abalone Cove"),
    CoastlinePoint(33.7945, -118.3370, "Point Vicente"),
    CoastlinePoint(33.7700, -118.3500, "Portuguese Point"),
    CoastlinePoint(33.7445, -118.3870, "Rancho Palos Verdes"),
)

# name, [start, stop) into COASTLINE_POINTS, station prefilter box, tide station
_SECTION_LAYOUT = (
    ("Oxnard/Ventura County", (0, 3), Bounds(34.1950, 33.9900, -119.2785, -118.8200), "santa_monica"),
    ("Zuma/Point Dume", (3, 6), Bounds(34.1823, 33.9745, -119.0001, -118.5200), "santa_monica"),
    ("Malibu Point/Surfrider", (6, 10), Bounds(34.1678, 33.9456, -118.9001, -118.4778), "santa_monica"),
    ("Malibu Creek/Big Rock", (10, 13), Bounds(34.1420, 33.9380, -118.7650, -118.3800), "santa_monica"),
    ("Topanga/Sunset Point", (13, 16), Bounds(34.1367, 33.9320, -118.6334, -118.3100), "santa_monica"),
    ("Will Rogers/Santa Monica", (16, 21), Bounds(34.1301, 33.9189, -118.6001, -118.2445), "santa_monica"),
    ("Santa Monica Pier/Venice", (21, 24), Bounds(34.1150, 33.9050, -118.6350, -118.2000), "santa_monica"),
    ("Venice/El Segundo", (24, 27), Bounds(34.0991, 33.8850, -118.5181, -118.2100), "santa_monica"),
    ("Manhattan Beach/Hermosa", (27, 31), Bounds(33.9844, 33.7563, -118.5085, -118.1929), "los_angeles"),
    ("Hermosa/Redondo Beach", (31, 34), Bounds(33.9485, 33.7375, -118.4889, -118.1821), "los_angeles"),
    ("Redondo/Palos Verdes", (34, 38), Bounds(33.9320, 33.6800, -118.4787, -118.1400), "los_angeles"),
    ("Palos Verdes Peninsula", (38, 43), Bounds(33.9445, 33.6445, -118.4870, -118.1170), "los_angeles"),
)

SECTIONS: Tuple[Section, ...] = tuple(
    Section(name=name, bounds=box, points=COASTLINE_POINTS[start:stop], tide_station=tide)
    for name, (start, stop), box, tide in _SECTION_LAYOUT
)

# Empirical regional corrections to the single regional wave model
SECTION_BIAS: Mapping[str, SectionBias] = MappingProxyType({
    "Oxnard/Ventura County": SectionBias(1.20, 1.15, -10, +4),
    "Zuma/Point Dume": SectionBias(1.15, 1.10, -8, +2),
    "Malibu Point/Surfrider": SectionBias(1.05, 1.05, -2, -3),
    "Malibu Creek/Big Rock": SectionBias(0.90, 0.95, +2, -2),
    "Topanga/Sunset Point": SectionBias(0.85, 0.90, +5, +1),
    "Will Rogers/Santa Monica": SectionBias(0.80, 0.88, +10, +3),
    "Santa Monica Pier/Venice": SectionBias(0.75, 0.85, +12, +4),
    "Venice/El Segundo": SectionBias(0.80, 0.83, +15, +5),
    "Manhattan Beach/Hermosa": SectionBias(1.00, 0.85, +18, +4),
    "Hermosa/Redondo Beach": SectionBias(0.85, 0.85, +20, +5),
    "Redondo/Palos Verdes": SectionBias(0.90, 0.88, +22, +3),
    "Palos Verdes Peninsula": SectionBias(1.10, 1.05, +30, -1),
})

# Relative spot quality (0.7 = poor spot, 1.0 = average, 1.2+ = premium)
SECTION_LOCATION_FACTOR: Mapping[str, float] = MappingProxyType({
    "Oxnard/Ventura County": 1.15,
    "Zuma/Point Dume": 1.20,
    "Malibu Point/Surfrider": 1.30,
    "Malibu Creek/Big Rock": 0.95,
    "Topanga/Sunset Point": 0.90,
    "Will Rogers/Santa Monica": 0.70,
    "Santa Monica Pier/Venice": 0.60,
    "Venice/El Segundo": 0.65,
    "Manhattan Beach/Hermosa": 1.05,
    "Hermosa/Redondo Beach": 0.85,
    "Redondo/Palos Verdes": 1.05,
    "Palos Verdes Peninsula": 1.20,
})


def get_section_bias(name: str) -> SectionBias:
    return SECTION_BIAS.get(name, NEUTRAL_BIAS)


def get_location_factor(name: str) -> float:
    return SECTION_LOCATION_FACTOR.get(name, NEUTRAL_LOCATION_FACTOR)


def is_excluded(point: CoastlinePoint) -> bool:
    """True if the point sits inside the marina exclusion zone."""
    return MARINA_EXCLUSION_ZONE.contains(point.lat, point.lng)
