"""Data model definitions — explicit boundaries between prediction, derivation, and storage."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from types import MappingProxyType


@dataclass(frozen=True)
class MoonPhase:
    """A single ephemeris reading for the Moon."""

    phase: float  # Synodic phase in [0, 1); 0 = new, 0.5 = full
    illuminated_fraction: float  # Lit fraction of the disc in [0, 1]


@dataclass(frozen=True)
class NewMoonEstimate:
    """Predicted moment of conjunction for one lunar cycle of a civil year."""

    instant: datetime  # Local civil time (tz-aware), hourly resolution
    index: int  # Ordinal within the year, 1..13

    @property
    def suggested_day_one(self) -> date:
        """The civil day after the conjunction, offered as a Day 1 candidate."""
        return self.instant.date() + timedelta(days=1)


@dataclass(frozen=True)
class FixedDay:
    """Literal day of the month (1-indexed)."""

    day: int


@dataclass(frozen=True)
class MorrowAfterWeeklySabbath:
    """The Sunday falling within the seven days of Unleavened Bread."""


@dataclass(frozen=True)
class FiftyDaysFromWaveSheaf:
    """The 50th day counting the Wave Sheaf day as day 1."""


DayRule = FixedDay | MorrowAfterWeeklySabbath | FiftyDaysFromWaveSheaf


@dataclass(frozen=True)
class FeastDefinition:
    """One entry of the static feast catalog."""

    name: str
    month: int  # Biblical month number, 1..13
    rule: DayRule
    description: str
    duration: int | None = None  # Length in days for multi-day feasts


@dataclass(frozen=True)
class FeastOccurrence:
    """A feast resolved to a concrete civil date."""

    feast: FeastDefinition
    date: date

    @property
    def end_date(self) -> date:
        if not self.feast.duration:
            return self.date
        return self.date + timedelta(days=self.feast.duration - 1)


@dataclass(frozen=True)
class MonthFeasts:
    """Every feast of one biblical month, ascending by date."""

    month_number: int
    occurrences: tuple[FeastOccurrence, ...]
    wave_sheaf_anchor: date | None = None  # Only set when deriving month 1
    anchor_missing: bool = False  # Month 3 replayed without an anchor


@dataclass(frozen=True)
class CalendarState:
    """Confirmed Day-1 dates per month plus the derived Wave Sheaf anchor.

    Immutable: ``with_confirmation`` and ``with_anchor`` return new states.
    """

    confirmed: Mapping[int, date] = field(default_factory=dict)
    wave_sheaf_anchor: date | None = None

    def __post_init__(self) -> None:
        ordered = dict(sorted(self.confirmed.items()))
        object.__setattr__(self, "confirmed", MappingProxyType(ordered))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CalendarState):
            return NotImplemented
        return (
            dict(self.confirmed) == dict(other.confirmed)
            and self.wave_sheaf_anchor == other.wave_sheaf_anchor
        )

    def __hash__(self) -> int:
        return hash((tuple(self.confirmed.items()), self.wave_sheaf_anchor))

    @property
    def is_empty(self) -> bool:
        return not self.confirmed and self.wave_sheaf_anchor is None

    def with_confirmation(self, month_number: int, day_one: date) -> "CalendarState":
        confirmed = dict(self.confirmed)
        confirmed[month_number] = day_one
        return CalendarState(confirmed=confirmed, wave_sheaf_anchor=self.wave_sheaf_anchor)

    def with_anchor(self, anchor: date) -> "CalendarState":
        return CalendarState(confirmed=dict(self.confirmed), wave_sheaf_anchor=anchor)


@dataclass(frozen=True)
class SkyStatus:
    """Human-readable summary of the current Moon phase and Sun position."""

    phase_name: str  # "New Moon", "Waxing Crescent", ...
    illuminated_percent: float  # Rounded to one decimal
    sun_sign: str  # Tropical-ish zodiac sign name ("Aries", ...)
