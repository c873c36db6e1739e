import pytest

from coastal_surf import quality
from coastal_surf.quality import (
    calculate_wave_quality,
    get_wave_quality_level,
    wave_height_score,
    wave_period_score,
    wind_direction_modifier,
    wind_score,
)


def reading(height=4.0, period=12.0, wind=5.0, wind_dir=None, wave_dir=None):
    return {
        "wave_height_ft": height,
        "wave_period_s": period,
        "wind_speed_kts": wind,
        "wind_direction": wind_dir,
        "wave_direction": wave_dir,
    }


def test_weights_sum_to_one():
    assert sum(quality.WEIGHTS.values()) == pytest.approx(1.0, abs=1e-9)
    assert 0 < quality.LOCATION_WEIGHT < 0.5


@pytest.mark.parametrize("height", [0.0, 0.5, 2.0, 4.5, 8.0, 12.0, 15.0, 30.0])
@pytest.mark.parametrize("wind", [0.0, 6.0, 25.0, 60.0])
@pytest.mark.parametrize("factor", [0.0, 0.6, 1.3])
def test_score_is_bounded_integer(height, wind, factor):
    score = calculate_wave_quality(reading(height, 14.0, wind, 70.0, 250.0), factor)
    assert isinstance(score, int)
    assert 0 <= score <= 100


def test_score_is_deterministic():
    r = reading(3.7, 13.0, 9.0, 120.0, 260.0)
    scores = {calculate_wave_quality(r, 1.05) for _ in range(20)}
    assert len(scores) == 1


def test_height_score_rises_toward_optimal_band():
    heights = [0.3, 0.9, 1.5, 2.0, 2.5, 2.8]
    scores = [wave_height_score(h) for h in heights]
    assert all(a < b for a, b in zip(scores, scores[1:]))


def test_height_score_declines_for_big_surf():
    heights = [8.0, 10.0, 12.0, 15.0, 18.0]
    scores = [wave_height_score(h) for h in heights]
    assert all(a > b for a, b in zip(scores, scores[1:]))
    assert scores[-1] > 0


def test_height_score_peaks_at_top_of_optimal_band():
    assert wave_height_score(7.0) == pytest.approx(1.0)
    assert wave_height_score(0.0) == 0.0


def test_period_curve_shape():
    assert wave_period_score(5.0) < 0.2
    assert wave_period_score(12.0) == pytest.approx(0.6)
    assert wave_period_score(17.0) == pytest.approx(1.0)
    # very long period is only mildly penalised
    assert 0.85 <= wave_period_score(22.0) < 1.0


def test_wind_speed_curve():
    assert wind_score(0.0) == pytest.approx(1.0)
    assert wind_score(3.0) > wind_score(8.0) > wind_score(15.0) > wind_score(25.0)
    assert wind_score(25.0) < 0.1
    assert wind_score(-1.0) == 0.0


def test_direction_modifier_bands():
    assert wind_direction_modifier(250.0, 250.0) == pytest.approx(0.25)
    assert wind_direction_modifier(70.0, 250.0) == pytest.approx(1.5)
    assert wind_direction_modifier(340.0, 250.0) == pytest.approx(1.08)
    halfway = wind_direction_modifier(250.0 + 67.5, 250.0)
    assert halfway == pytest.approx(0.25 + 0.5 * 0.83)


def test_direction_modifier_wraps_around_north():
    assert wind_direction_modifier(10.0, 350.0) == pytest.approx(0.25)
    assert wind_direction_modifier(-170.0, 10.0) == pytest.approx(1.5)
    assert wind_direction_modifier(190.0 + 360.0, 10.0) == pytest.approx(1.5)


def test_offshore_beats_onshore_at_same_speed():
    for speed in (2.0, 8.0, 14.0, 22.0):
        offshore = calculate_wave_quality(reading(4.0, 12.0, speed, 70.0, 250.0))
        onshore = calculate_wave_quality(reading(4.0, 12.0, speed, 250.0, 250.0))
        assert offshore > onshore


def test_direction_ignored_when_missing():
    assert wind_score(6.0, None, 250.0) == wind_score(6.0)


def test_good_offshore_example():
    r = reading(4.5, 14.0, 3.0, 70.0, 250.0)
    assert calculate_wave_quality(r, 1.2) >= 60


def test_blown_out_onshore_example():
    r = reading(4.5, 14.0, 25.0, 250.0, 250.0)
    score = calculate_wave_quality(r, 1.2)
    assert score < 35
    assert get_wave_quality_level(score) == "poor"


def test_location_factor_is_clamped():
    r = reading(3.0, 11.0, 10.0, 160.0, 250.0)
    assert calculate_wave_quality(r, 1.3) == calculate_wave_quality(r, 1.0)
    assert calculate_wave_quality(r, -2.0) == calculate_wave_quality(r, 0.0)
    assert calculate_wave_quality(r, 1.0) > calculate_wave_quality(r, 0.6)


@pytest.mark.parametrize(
    "score,level",
    [(100, "excellent"), (75, "excellent"), (74, "good"), (55, "good"),
     (54, "fair"), (35, "fair"), (34, "poor"), (0, "poor")],
)
def test_quality_levels(score, level):
    assert get_wave_quality_level(score) == level


def test_quality_colors():
    assert quality.get_quality_color(0) == "hsl(0, 80%, 50%)"
    assert quality.get_quality_color(100) == "hsl(120, 80%, 50%)"
    assert quality.get_quality_color_rgb(0) == "rgb(255, 0, 0)"
    assert quality.get_quality_color_rgb(50) == "rgb(255, 255, 0)"
    assert quality.get_quality_color_rgb(100) == "rgb(0, 255, 0)"
