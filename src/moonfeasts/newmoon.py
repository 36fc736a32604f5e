"""New-moon prediction by hourly sampling of the Moon's synodic phase."""

import logging
from collections.abc import Iterator
from datetime import datetime, timedelta, tzinfo

from pytz import utc

from moonfeasts.config import load_settings
from moonfeasts.ephemeris import EphemerisOracle, default_oracle
from moonfeasts.errors import InvalidInput
from moonfeasts.models import NewMoonEstimate

logger = logging.getLogger(__name__)

LUNAR_CYCLE_DAYS = 29.530588861  # Mean synodic month
FIRST_SCAN_DAYS = 35  # Longer than one synodic month
REFINE_HALF_WINDOW = timedelta(hours=12)
REFINEMENTS = 12
_STEP = timedelta(hours=1)


def _hourly(start: datetime, count: int) -> Iterator[datetime]:
    for i in range(count):
        yield start + i * _STEP


def _min_phase_instant(oracle: EphemerisOracle, samples: Iterator[datetime]) -> datetime:
    """Return the sampled instant with the lowest phase; earliest wins ties."""
    best: datetime | None = None
    best_phase = float("inf")
    for instant in samples:
        phase = oracle.phase_and_fraction(instant).phase
        if phase < best_phase:
            best_phase = phase
            best = instant
    if best is None:
        raise ValueError("No samples to scan")
    return best


def locate_new_moons(
    year: int,
    oracle: EphemerisOracle | None = None,
    tz: tzinfo | None = None,
) -> tuple[NewMoonEstimate, ...]:
    """Predict the astronomical new moons falling in ``year``.

    The first conjunction is the minimum-phase hour among the first 35 days of
    the year. Each following one is refined within ±12 hours of the previous
    estimate plus one mean synodic month, twelve times over. Estimates outside
    ``year`` still anchor the next projection but are not returned.

    Args:
        year: Civil year in the local timezone.
        oracle: Phase source. Defaults to the skyfield ephemeris.
        tz: pytz timezone defining local civil time. Defaults to the configured one.

    Returns:
        Estimates ordered by time, indexed from 1.

    Raises:
        InvalidInput: If ``year`` is outside 2..9998.
    """
    if not isinstance(year, int) or isinstance(year, bool) or not 2 <= year <= 9998:
        raise InvalidInput(f"Year must be an integer in 2..9998, got {year!r}")
    if oracle is None:
        oracle = default_oracle()
    if tz is None:
        tz = load_settings().tz

    def local(instant: datetime) -> datetime:
        return instant.astimezone(tz)

    start = tz.localize(datetime(year, 1, 1)).astimezone(utc)  # type: ignore[attr-defined]
    first = _min_phase_instant(oracle, _hourly(start, FIRST_SCAN_DAYS * 24))
    found = [local(first)]

    previous = first
    window = int(2 * REFINE_HALF_WINDOW / _STEP) + 1
    for _ in range(REFINEMENTS):
        projected = previous + timedelta(days=LUNAR_CYCLE_DAYS)
        refined = _min_phase_instant(oracle, _hourly(projected - REFINE_HALF_WINDOW, window))
        if local(refined).year == year:
            found.append(local(refined))
        previous = refined

    estimates = tuple(
        NewMoonEstimate(instant=instant, index=i) for i, instant in enumerate(found, start=1)
    )
    for estimate in estimates:
        logger.debug("New moon %d: %s", estimate.index, estimate.instant.isoformat())
    logger.info("Found %d expected new moons for %d", len(estimates), year)
    return estimates
