"""Feast derivation — resolve a month's feast days from its confirmed Day 1."""

import logging
from collections.abc import Sequence
from datetime import date, datetime, timedelta, tzinfo

from moonfeasts.catalog import FEASTS
from moonfeasts.errors import InternalConsistency, InvalidInput, MissingAnchor
from moonfeasts.models import (
    FeastDefinition,
    FeastOccurrence,
    FiftyDaysFromWaveSheaf,
    FixedDay,
    MonthFeasts,
    MorrowAfterWeeklySabbath,
)

logger = logging.getLogger(__name__)

FIRST_MONTH = 1
WEEKS_MONTH = 3
MAX_MONTH = 13
_SUNDAY = 6  # date.weekday()
_UNLEAVENED_BREAD_OFFSET = 14  # Day 15 of month 1
_OMER_OFFSET = 49  # Wave Sheaf counts as day 1 of 50


def validate_month(month_number: object) -> int:
    """Return ``month_number`` if it is an int in 1..13, else raise InvalidInput."""
    if (
        not isinstance(month_number, int)
        or isinstance(month_number, bool)
        or not 1 <= month_number <= MAX_MONTH
    ):
        raise InvalidInput(f"Month number must be 1-{MAX_MONTH}, got {month_number!r}")
    return month_number


def parse_day(value: object, tz: tzinfo | None = None) -> date:
    """Coerce a date, datetime, or ISO 8601 string to a civil date.

    Timezone-aware datetimes are converted to ``tz`` first, so a stored UTC
    timestamp of local midnight maps back to the local day.

    Raises:
        InvalidInput: If the value is of another type or cannot be parsed.
    """
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            instant = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidInput(f"Unparsable date: {value!r}") from exc
        return parse_day(instant, tz)
    raise InvalidInput(f"Expected a date, got {type(value).__name__}")


def wave_sheaf_date(day_one: date) -> date:
    """First Sunday within the seven days of Unleavened Bread (month 1, day 15).

    Raises:
        InternalConsistency: If none of the seven days is a Sunday.
    """
    start = day_one + timedelta(days=_UNLEAVENED_BREAD_OFFSET)
    for offset in range(7):
        candidate = start + timedelta(days=offset)
        if candidate.weekday() == _SUNDAY:
            return candidate
    raise InternalConsistency(f"No Sunday in the 7 days starting {start.isoformat()}")


def derive_feasts(
    day_one: date,
    month_number: int,
    wave_sheaf_anchor: date | None = None,
    catalog: Sequence[FeastDefinition] = FEASTS,
) -> MonthFeasts:
    """Compute every catalog feast of ``month_number``.

    Args:
        day_one: Confirmed first day of the month.
        month_number: Biblical month, 1..13.
        wave_sheaf_anchor: Wave Sheaf date from month 1; needed for month 3.
        catalog: Feast definitions to resolve.

    Returns:
        MonthFeasts with occurrences ascending by date (catalog order on ties).
        For month 1 it also carries the Wave Sheaf date, which the caller persists.

    Raises:
        InvalidInput: Bad month number or day.
        MissingAnchor: Month 3 holds a fifty-days rule but no ``wave_sheaf_anchor``
            was given; ``.resolved`` holds the fixed-day feasts of the month.
        InternalConsistency: The Wave Sheaf search found no Sunday.
    """
    month_number = validate_month(month_number)
    day_one = parse_day(day_one)
    if wave_sheaf_anchor is not None:
        wave_sheaf_anchor = parse_day(wave_sheaf_anchor)

    morrow: date | None = None
    if month_number == FIRST_MONTH:
        morrow = wave_sheaf_date(day_one)

    resolved: list[FeastOccurrence] = []
    anchor_needed = False
    for feast in (f for f in catalog if f.month == month_number):
        match feast.rule:
            case FixedDay(day=day):
                resolved.append(FeastOccurrence(feast, day_one + timedelta(days=day - 1)))
            case MorrowAfterWeeklySabbath():
                if morrow is not None:
                    resolved.append(FeastOccurrence(feast, morrow))
            case FiftyDaysFromWaveSheaf():
                if month_number != WEEKS_MONTH:
                    continue
                if wave_sheaf_anchor is None:
                    anchor_needed = True
                    continue
                resolved.append(
                    FeastOccurrence(feast, wave_sheaf_anchor + timedelta(days=_OMER_OFFSET))
                )
            case _:
                raise InternalConsistency(f"Unknown day rule {feast.rule!r} for {feast.name}")

    occurrences = tuple(sorted(resolved, key=lambda o: o.date))
    if anchor_needed:
        raise MissingAnchor(resolved=occurrences)

    logger.debug(
        "Derived %d feasts for month %d from %s", len(occurrences), month_number, day_one
    )
    return MonthFeasts(
        month_number=month_number,
        occurrences=occurrences,
        wave_sheaf_anchor=morrow,
    )
