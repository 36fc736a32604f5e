"""Current Moon phase name and the Sun's zodiac sign."""

import math
from datetime import datetime

from moonfeasts.config import load_settings
from moonfeasts.ephemeris import EphemerisOracle, default_oracle
from moonfeasts.models import SkyStatus

# (upper bound on phase, name)
_PHASE_NAMES: tuple[tuple[float, str], ...] = (
    (0.03, "New Moon"),
    (0.22, "Waxing Crescent"),
    (0.28, "First Quarter"),
    (0.47, "Waxing Gibbous"),
    (0.53, "Full Moon"),
    (0.72, "Waning Gibbous"),
    (0.78, "Third Quarter"),
)

# Sign boundaries in ecliptic degrees, ascending
_ZODIAC: tuple[tuple[str, float], ...] = (
    ("Aries", 21),
    ("Taurus", 51),
    ("Gemini", 81),
    ("Cancer", 111),
    ("Leo", 141),
    ("Virgo", 174),
    ("Libra", 204),
    ("Scorpio", 234),
    ("Sagittarius", 266),
    ("Capricorn", 296),
    ("Aquarius", 326),
    ("Pisces", 355),
)


def phase_name(phase: float) -> str:
    """Name the lunar phase for a synodic phase in [0, 1)."""
    if phase > 0.97:
        return "New Moon"
    for bound, name in _PHASE_NAMES:
        if phase < bound:
            return name
    return "Waning Crescent"


def zodiac_sign(longitude: float) -> str:
    """Zodiac sign for an ecliptic longitude in radians."""
    degrees = math.degrees(longitude) % 360.0
    sign = "Pisces"  # below Aries' start
    for name, start in _ZODIAC:
        if degrees < start:
            break
        sign = name
    return sign


def describe_sky(
    instant: datetime,
    oracle: EphemerisOracle | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
) -> SkyStatus:
    """Summarize the Moon phase and Sun sign at ``instant``.

    Observer coordinates default to the configured location.
    """
    if oracle is None:
        oracle = default_oracle()
    if latitude is None or longitude is None:
        settings = load_settings()
        latitude = settings.latitude if latitude is None else latitude
        longitude = settings.longitude if longitude is None else longitude

    moon = oracle.phase_and_fraction(instant)
    sun_longitude = oracle.solar_ecliptic_longitude(instant, latitude, longitude)
    return SkyStatus(
        phase_name=phase_name(moon.phase),
        illuminated_percent=round(moon.illuminated_fraction * 100, 1),
        sun_sign=zodiac_sign(sun_longitude),
    )
