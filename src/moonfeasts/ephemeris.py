"""Ephemeris oracle — Moon phase and Sun longitude from skyfield."""

import logging
import math
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from pytz import utc
from skyfield import almanac
from skyfield.api import Loader, wgs84

from moonfeasts.config import load_settings
from moonfeasts.models import MoonPhase

logger = logging.getLogger(__name__)


class EphemerisOracle(Protocol):
    """Anything that can answer the two questions the calendar core asks."""

    def phase_and_fraction(self, instant: datetime) -> MoonPhase: ...

    def solar_ecliptic_longitude(
        self, instant: datetime, lat: float, lon: float
    ) -> float: ...


class SkyfieldOracle:
    """EphemerisOracle backed by a JPL ephemeris loaded through skyfield."""

    def __init__(self, data_dir: Path, ephemeris: str = "de421.bsp") -> None:
        self._loader = Loader(str(data_dir))
        self._eph = self._loader(ephemeris)
        self._ts = self._loader.timescale()
        self._earth = self._eph["earth"]
        self._sun = self._eph["sun"]
        logger.info("Loaded ephemeris %s from %s", ephemeris, data_dir)

    def _time(self, instant: datetime):
        if instant.tzinfo is None:
            instant = utc.localize(instant)
        return self._ts.from_datetime(instant.astimezone(utc))

    def phase_and_fraction(self, instant: datetime) -> MoonPhase:
        """Synodic phase (0 = new) and illuminated fraction at ``instant``."""
        t = self._time(instant)
        phase_deg = almanac.moon_phase(self._eph, t).degrees % 360.0
        fraction = almanac.fraction_illuminated(self._eph, "moon", t)
        return MoonPhase(phase=phase_deg / 360.0, illuminated_fraction=float(fraction))

    def solar_ecliptic_longitude(self, instant: datetime, lat: float, lon: float) -> float:
        """Apparent ecliptic longitude of the Sun, in radians [0, 2π), seen from (lat, lon)."""
        t = self._time(instant)
        ground = self._earth + wgs84.latlon(latitude_degrees=lat, longitude_degrees=lon)
        apparent = ground.at(t).observe(self._sun).apparent()  # type: ignore[union-attr]
        _, lon_angle, _ = apparent.ecliptic_latlon(epoch="date")
        return lon_angle.radians % (2 * math.pi)


@lru_cache(maxsize=1)
def default_oracle() -> SkyfieldOracle:
    """Process-wide SkyfieldOracle built from the configured data directory."""
    settings = load_settings()
    return SkyfieldOracle(settings.data_dir, settings.ephemeris)
