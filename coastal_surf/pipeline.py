"""
Pipeline orchestration: stations -> interpolation -> bias -> score -> records.

Records are emitted in section order, then point order within each section.
Ids are ``<section-slug>-<index>`` so consumers can group by prefix.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from . import config
from .bias import adjust_reading
from .interpolation import interpolate_point
from .models import DEFAULT_TIDE, StationReading, TideReading, WaveDataPoint
from .quality import calculate_wave_quality, get_quality_color, get_wave_quality_level
from .sections import (
    DEFAULT_TIDE_STATION,
    SECTIONS,
    CoastlinePoint,
    Section,
    get_location_factor,
    get_section_bias,
    is_excluded,
)
from .sources import SourceData, fetch_all

logger = logging.getLogger(__name__)


def stations_for_section(section: Section, stations: Sequence[StationReading]) -> Sequence[StationReading]:
    """Stations inside the section's box, or the whole pool if none are."""
    inside = [s for s in stations if section.bounds.contains(s.lat, s.lng)]
    return inside or stations


def resolve_tide(section: Section, tides: Mapping[str, TideReading]) -> TideReading:
    """Section station, then the default station, then any station, then a fixed default."""
    for name in (section.tide_station, DEFAULT_TIDE_STATION):
        if name in tides:
            return tides[name]
    for reading in tides.values():
        return reading
    return DEFAULT_TIDE


def build_point(
    section: Section,
    index: int,
    point: CoastlinePoint,
    wave_stations: Sequence[StationReading],
    wind_stations: Sequence[StationReading],
    tide: TideReading,
    now: datetime,
) -> WaveDataPoint:
    raw = interpolate_point(point, wave_stations, wind_stations)
    adjusted = adjust_reading(raw, get_section_bias(section.name))
    score = calculate_wave_quality(
        {
            "wave_height_ft": adjusted.wave_height_ft,
            "wave_period_s": adjusted.wave_period_s,
            "wind_speed_kts": adjusted.wind_speed_kts,
            "wind_direction": adjusted.wind_direction_deg,
            "wave_direction": adjusted.wave_direction_deg,
        },
        get_location_factor(section.name),
    )
    return WaveDataPoint(
        id=f"{section.slug}-{index}",
        lat=point.lat,
        lng=point.lng,
        name=point.name,
        section=section.name,
        wave_height=round(adjusted.wave_height_ft, 1),
        wave_period=round(adjusted.wave_period_s, 1),
        wave_direction=round(adjusted.wave_direction_deg),
        swell_height=round(adjusted.swell_height_ft, 1),
        swell_period=round(adjusted.swell_period_s, 1),
        wind_speed=round(adjusted.wind_speed_kts, 1),
        wind_direction=round(adjusted.wind_direction_deg),
        water_temp=round(adjusted.water_temp_f, 1),
        air_temp=round(adjusted.air_temp_f, 1),
        tide_height=round(tide.height_ft, 1),
        tide_trend=tide.trend,
        quality_score=score,
        quality_level=get_wave_quality_level(score),
        timestamp=now,
        measurement_time=raw.measurement_time,
        fallback=raw.fallback,
    )


def build_wave_data(
    wave_stations: Sequence[StationReading],
    wind_stations: Sequence[StationReading],
    tides: Mapping[str, TideReading],
    sections: Sequence[Section] = SECTIONS,
    now: Optional[datetime] = None,
    workers: int = 1,
) -> List[WaveDataPoint]:
    """Score every coastline point of ``sections``.

    Points inside the marina exclusion zone are skipped; every other point
    yields exactly one record, even when no station has data for it.
    """
    now = now or datetime.now(timezone.utc)
    tasks: List[Tuple] = []
    for section in sections:
        section_waves = stations_for_section(section, wave_stations)
        section_winds = stations_for_section(section, wind_stations)
        tide = resolve_tide(section, tides)
        for index, point in enumerate(section.points):
            if is_excluded(point):
                logger.debug("Skipping %s: inside marina exclusion zone", point.name)
                continue
            tasks.append((section, index, point, section_waves, section_winds, tide, now))

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            records = list(pool.map(lambda args: build_point(*args), tasks))
    else:
        records = [build_point(*args) for args in tasks]

    fallbacks = sum(1 for r in records if r.fallback)
    if fallbacks:
        logger.warning("%d of %d points used fallback readings", fallbacks, len(records))
    logger.info("Built %d wave data points across %d sections", len(records), len(sections))
    return records


def run_pipeline(workers: int = config.WORKERS, source: Optional[SourceData] = None) -> List[WaveDataPoint]:
    """Fetch upstream data (unless given) and build the full point list.

    Raises:
        DataSourceError: the wave or wind provider is unavailable.
    """
    source = source or fetch_all()
    return build_wave_data(
        source.wave_stations,
        source.wind_stations,
        source.tides,
        workers=workers,
    )


def summarize_sections(records: Sequence[Mapping]) -> pd.DataFrame:
    """Per-section averages of serialized records (``WaveDataPoint.as_dict``), in emission order."""
    columns = ["section", "points", "waveHeight", "wavePeriod", "windSpeed", "qualityScore", "qualityLevel", "color"]
    if not records:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(list(records))
    summary = (
        df.groupby("section", sort=False)
        .agg(
            points=("id", "count"),
            waveHeight=("waveHeight", "mean"),
            wavePeriod=("wavePeriod", "mean"),
            windSpeed=("windSpeed", "mean"),
            qualityScore=("qualityScore", "mean"),
        )
        .round(1)
        .reset_index()
    )
    summary["qualityLevel"] = summary["qualityScore"].apply(get_wave_quality_level)
    summary["color"] = summary["qualityScore"].apply(get_quality_color)
    return summary[columns]
