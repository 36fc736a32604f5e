"""Runtime settings read from the environment (optionally via a .env file)."""

import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path

from pytz import UnknownTimeZoneError, timezone
from timezonefinder import TimezoneFinder

from moonfeasts.errors import InvalidInput

_ROOT = Path(__file__).parent.parent.parent

JERUSALEM_LAT = 31.7683
JERUSALEM_LON = 35.2137


@dataclass(frozen=True)
class Settings:
    """Resolved configuration. Built once by ``load_settings``."""

    data_dir: Path  # skyfield Loader directory holding ephemeris files
    ephemeris: str  # Ephemeris file name ("de421.bsp")
    store_path: Path  # JSON file backing the calendar store
    latitude: float  # Observer latitude (decimal degrees)
    longitude: float  # Observer longitude (decimal degrees)
    tz: tzinfo  # Local civil timezone (pytz)
    log_level: str  # logging level name


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise InvalidInput(f"{name} must be a number, got {raw!r}") from exc


def resolve_timezone(name: str | None, lat: float, lng: float) -> tzinfo:
    """Return the pytz timezone ``name``, or the one containing (lat, lng).

    Raises:
        InvalidInput: If the name is unknown or no timezone covers the point.
    """
    if not name:
        name = TimezoneFinder().timezone_at(lat=lat, lng=lng)
        if name is None:
            raise InvalidInput(f"Timezone not found: lat={lat}, lng={lng}")
    try:
        return timezone(name)
    except UnknownTimeZoneError as exc:
        raise InvalidInput(f"Unknown timezone: {name}") from exc


def load_settings() -> Settings:
    """Build Settings from ``MOONFEASTS_*`` environment variables."""
    latitude = _float_env("MOONFEASTS_LATITUDE", JERUSALEM_LAT)
    longitude = _float_env("MOONFEASTS_LONGITUDE", JERUSALEM_LON)
    if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
        raise InvalidInput(f"Observer out of range: lat={latitude}, lng={longitude}")

    log_level = (os.environ.get("MOONFEASTS_LOG_LEVEL") or "WARNING").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise InvalidInput(f"Unknown log level: {log_level}")

    store_default = Path.home() / ".moonfeasts" / "calendar.json"
    return Settings(
        data_dir=Path(os.environ.get("MOONFEASTS_DATA_DIR") or _ROOT / "resources"),
        ephemeris=os.environ.get("MOONFEASTS_EPHEMERIS") or "de421.bsp",
        store_path=Path(os.environ.get("MOONFEASTS_STORE_PATH") or store_default).expanduser(),
        latitude=latitude,
        longitude=longitude,
        tz=resolve_timezone(os.environ.get("MOONFEASTS_TIMEZONE"), latitude, longitude),
        log_level=log_level,
    )
