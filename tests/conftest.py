import math
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from pytz import utc

from moonfeasts.models import MoonPhase
from moonfeasts.newmoon import LUNAR_CYCLE_DAYS
from moonfeasts.store import CalendarStore, JsonFileStorage

# Mean new moon of 2000-01-06 18:14 UTC
REFERENCE_NEW_MOON = datetime(2000, 1, 6, 18, 14, tzinfo=utc)


class MeanMotionOracle:
    """Moon advancing uniformly from a reference new moon; Sun fixed."""

    def __init__(self, sun_longitude: float = 0.0) -> None:
        self.sun_longitude = sun_longitude
        self.calls = 0

    def phase_at(self, instant: datetime) -> float:
        days = (instant - REFERENCE_NEW_MOON) / timedelta(days=1)
        return (days / LUNAR_CYCLE_DAYS) % 1.0

    def phase_and_fraction(self, instant: datetime) -> MoonPhase:
        self.calls += 1
        phase = self.phase_at(instant)
        return MoonPhase(phase=phase, illuminated_fraction=0.5 * (1 - math.cos(2 * math.pi * phase)))

    def solar_ecliptic_longitude(self, instant: datetime, lat: float, lon: float) -> float:
        return self.sun_longitude


class ConstantOracle:
    """Degenerate oracle: the same reading at every instant."""

    def __init__(self, phase: float = 0.5, fraction: float = 1.0, sun_longitude: float = 0.0) -> None:
        self.reading = MoonPhase(phase=phase, illuminated_fraction=fraction)
        self.sun_longitude = sun_longitude

    def phase_and_fraction(self, instant: datetime) -> MoonPhase:
        return self.reading

    def solar_ecliptic_longitude(self, instant: datetime, lat: float, lon: float) -> float:
        return self.sun_longitude


class MemoryStorage:
    """In-memory KeyValueStorage that counts writes."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(initial or {})
        self.puts = 0

    def get(self, key: str) -> Any | None:
        return self.data.get(key)

    def put(self, key: str, value: Any) -> None:
        self.puts += 1
        self.data[key] = value


@pytest.fixture
def oracle() -> MeanMotionOracle:
    return MeanMotionOracle()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "calendar.json"


@pytest.fixture
def file_store(store_path: Path) -> CalendarStore:
    return CalendarStore(JsonFileStorage(store_path))
