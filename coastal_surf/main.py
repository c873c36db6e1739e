"""
FastAPI application for the coastal surf map.

Serves the scored coastline points as JSON for the map front end, a
per-section summary, and a PNG chart of section quality.  Results are cached
on disk for ``SURF_CACHE_TTL`` seconds; when the upstream providers fail, the
last cached result is served and marked stale.
"""

from __future__ import annotations

import io
import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse, StreamingResponse

import matplotlib

# Use a non‑interactive backend for server
matplotlib.use("Agg")  # noqa: E402
import matplotlib.pyplot as plt
import pandas as pd

from . import config, pipeline
from .quality import get_quality_color_rgb
from .sources import DataSourceError

config.configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Coastal Surf Map")

CACHE_FILE_NAME = "wave_data.json"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _cache_path() -> Path:
    return config.CACHE_DIR / CACHE_FILE_NAME


def _read_cache(allow_stale: bool = False) -> Optional[List[Dict[str, Any]]]:
    p = _cache_path()
    if not p.exists():
        return None
    try:
        obj = json.loads(p.read_text())
    except (OSError, ValueError):
        return None
    exp = obj.get("_expires")
    if not exp:
        return None
    if not allow_stale and _now() >= datetime.fromisoformat(exp):
        return None
    data = obj.get("data")
    return data if isinstance(data, list) else None


def _write_cache(data: List[Dict[str, Any]]) -> None:
    try:
        config.CACHE_DIR.mkdir(parents=True, exist_ok=True)
        expires_at = _now() + timedelta(seconds=config.CACHE_TTL_SECONDS)
        payload = {"_expires": expires_at.isoformat(), "data": data}
        _cache_path().write_text(json.dumps(payload))
    except OSError as e:
        logger.warning("Could not write wave data cache: %s", e)


def load_wave_data() -> Dict[str, Any]:
    """Return the API payload, regenerating it when the cache has expired.

    Raises:
        DataSourceError: providers failed and nothing is cached.
    """
    cached = _read_cache()
    if cached is not None:
        return {"data": cached, "cached": True, "timestamp": _now().isoformat()}
    try:
        points = pipeline.run_pipeline()
    except DataSourceError as e:
        stale = _read_cache(allow_stale=True)
        if stale is None:
            raise
        logger.warning("Serving stale wave data: %s", e)
        return {
            "data": stale,
            "cached": True,
            "stale": True,
            "error": "Using cached data due to API error",
            "timestamp": _now().isoformat(),
        }
    data = [p.as_dict() for p in points]
    _write_cache(data)
    return {"data": data, "cached": False, "timestamp": _now().isoformat()}


@app.get("/api/wave-data")
async def wave_data():
    try:
        return load_wave_data()
    except DataSourceError:
        return JSONResponse({"error": "Failed to fetch wave data"}, status_code=500)


@app.get("/api/sections")
async def sections():
    """Per-section averages of the current wave data."""
    try:
        payload = load_wave_data()
    except DataSourceError:
        return JSONResponse({"error": "Failed to fetch wave data"}, status_code=500)
    df = pipeline.summarize_sections(payload["data"])
    return {"sections": json.loads(df.to_json(orient="records")), "timestamp": payload["timestamp"]}


@app.get("/chart", response_class=StreamingResponse)
async def chart():
    """Return a PNG bar chart of mean quality per section."""
    try:
        df = pipeline.summarize_sections(load_wave_data()["data"])
    except DataSourceError:
        df = pd.DataFrame()
    fig, ax = plt.subplots(figsize=(8, 4))
    if df.empty:
        ax.text(0.5, 0.5, "No data", ha="center", va="center")
    else:
        # Quality color is an rgb() string; matplotlib wants 0-1 tuples
        colors = [
            tuple(int(c) / 255 for c in get_quality_color_rgb(s)[4:-1].split(","))
            for s in df["qualityScore"]
        ]
        ax.barh(df["section"], df["qualityScore"], color=colors)
        ax.invert_yaxis()
        ax.set_xlim(0, 100)
        ax.set_xlabel("Quality (0-100)")
        ax.set_title("Surf quality by coastline section")
    buf = io.BytesIO()
    fig.savefig(buf, format="png", bbox_inches="tight")
    plt.close(fig)
    buf.seek(0)
    return StreamingResponse(buf, media_type="image/png")
