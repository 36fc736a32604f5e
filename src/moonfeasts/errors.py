"""Exceptions raised by the calendar core."""

from moonfeasts.models import FeastOccurrence


class CalendarError(Exception):
    """Base class for every error the calendar core reports."""


class InvalidInput(CalendarError, ValueError):
    """Month number out of range, unparsable date, or bad configuration value."""


class MissingAnchor(CalendarError):
    """Month 3 requested before month 1 produced a Wave Sheaf anchor.

    ``resolved`` holds the fixed-day occurrences that could still be computed.
    """

    def __init__(
        self,
        message: str = (
            "Cannot calculate Shavuot (month 3): confirm month 1 first "
            "so the Wave Sheaf date is known"
        ),
        resolved: tuple[FeastOccurrence, ...] = (),
    ) -> None:
        super().__init__(message)
        self.resolved = resolved


class InternalConsistency(CalendarError):
    """A calendar invariant was broken (e.g. no Sunday in seven days)."""


class PersistenceCorrupt(CalendarError):
    """Stored calendar data could not be parsed."""

