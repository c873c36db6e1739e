"""Planar geometry helpers shared by the section registry and interpolation."""

from __future__ import annotations

import math
from dataclasses import dataclass


def distance_squared(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = lat1 - lat2
    d_lng = lng1 - lng2
    return d_lat * d_lat + d_lng * d_lng


def distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Euclidean distance in degree space (no geodesic correction)."""
    return math.sqrt(distance_squared(lat1, lng1, lat2, lng2))


@dataclass(frozen=True)
class Bounds:
    north: float
    south: float
    west: float
    east: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.south <= lat <= self.north and self.west <= lng <= self.east

