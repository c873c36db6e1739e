"""
Runtime configuration for the coastal surf map.

Settings come from the process environment, optionally seeded from a
``.env`` file at the project root.  Provider endpoints are fixed constants.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent


def _load_env_from_dotenv() -> None:
    """Lightweight .env loader.

    Loads KEY=VALUE pairs from a .env file at the project root, only setting
    variables that are not already present in the process environment. Lines
    starting with '#' are ignored. Quotes around values are stripped.
    """
    dotenv_path = ROOT_DIR / ".env"
    if not dotenv_path.exists():
        return
    try:
        lines = dotenv_path.read_text().splitlines()
    except OSError:
        return
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip().strip("\"'")
        if key and key not in os.environ:
            os.environ[key] = val


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, float(default)))


_load_env_from_dotenv()

# Upstream providers (no API keys required)
OPEN_METEO_MARINE_URL = "https://marine-api.open-meteo.com/v1/marine"
OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
COOPS_DATAGETTER_URL = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
USER_AGENT = "coastal-surf-map/1.0"

REQUEST_TIMEOUT = _env_float("SURF_REQUEST_TIMEOUT", 15.0)
CACHE_TTL_SECONDS = _env_int("SURF_CACHE_TTL", 1200)
WORKERS = max(1, _env_int("SURF_WORKERS", 4))
LOG_LEVEL = os.getenv("SURF_LOG_LEVEL", "INFO").upper()
CACHE_DIR = Path(os.getenv("SURF_CACHE_DIR") or (ROOT_DIR / ".cache"))

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_logging_configured = False


def configure_logging(level: str | None = None) -> None:
    """Attach a stdout handler to the package logger once."""
    global _logging_configured
    logger = logging.getLogger("coastal_surf")
    logger.setLevel(level or LOG_LEVEL)
    if _logging_configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    _logging_configured = True
