import pytest

from coastal_surf import sections
from coastal_surf.geo import Bounds, distance, distance_squared
from coastal_surf.sections import (
    COASTLINE_POINTS,
    NEUTRAL_BIAS,
    SECTION_BIAS,
    SECTION_LOCATION_FACTOR,
    SECTIONS,
    CoastlinePoint,
    get_location_factor,
    get_section_bias,
    is_excluded,
    section_slug,
)


def test_every_point_belongs_to_exactly_one_section():
    assigned = [p for s in SECTIONS for p in s.points]
    assert assigned == list(COASTLINE_POINTS)


def test_section_names_are_unique():
    names = [s.name for s in SECTIONS]
    assert len(names) == len(set(names))
    assert len({s.slug for s in SECTIONS}) == len(names)


def test_tables_cover_every_section():
    names = {s.name for s in SECTIONS}
    assert set(SECTION_BIAS) == names
    assert set(SECTION_LOCATION_FACTOR) == names
    assert all(0.5 <= f <= 1.5 for f in SECTION_LOCATION_FACTOR.values())


def test_tide_stations_are_known():
    for section in SECTIONS:
        assert section.tide_station in sections.TIDE_STATIONS
    assert sections.DEFAULT_TIDE_STATION in sections.TIDE_STATIONS


def section_named(name):
    return next(s for s in SECTIONS if s.name == name)


def test_unknown_section_gets_neutral_defaults():
    assert get_section_bias("Atlantis") == NEUTRAL_BIAS
    assert get_location_factor("Atlantis") == 1.0


def test_lookup_by_name():
    assert get_section_bias("Malibu Point/Surfrider").height_multiplier == 1.05
    assert get_location_factor("Malibu Point/Surfrider") == 1.30
    assert section_named("Zuma/Point Dume").points[-1].name == "Point Dume"


def test_membership_is_not_derived_from_bounds():
    # "Palos Verdes" lies north of its own section's station prefilter box
    section = section_named("Redondo/Palos Verdes")
    point = [p for p in section.points if p.name == "Palos Verdes"][0]
    assert not section.bounds.contains(point.lat, point.lng)


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        SECTION_BIAS["New"] = NEUTRAL_BIAS


def test_slug():
    assert section_slug("Malibu Point/Surfrider") == "malibu-point-surfrider"
    assert section_slug("Hermosa/Redondo Beach") == "hermosa-redondo-beach"


def test_marina_exclusion_zone():
    assert is_excluded(CoastlinePoint(33.965, -118.455))
    assert not any(is_excluded(p) for p in COASTLINE_POINTS)


def test_geo_helpers():
    assert distance_squared(34.0, -118.0, 34.3, -118.4) == pytest.approx(0.25)
    assert distance(34.0, -118.0, 34.3, -118.4) == pytest.approx(0.5)
    box = Bounds(north=34.1, south=34.0, west=-118.5, east=-118.4)
    assert box.contains(34.05, -118.45)
    assert not box.contains(34.2, -118.45)
