"""Calendar persistence — confirmed months and the Wave Sheaf anchor."""

import json
import logging
import os
import tempfile
import threading
from collections.abc import Sequence
from datetime import date, tzinfo
from pathlib import Path
from typing import Any, Protocol

from moonfeasts.catalog import FEASTS
from moonfeasts.errors import MissingAnchor, PersistenceCorrupt
from moonfeasts.feasts import (
    FIRST_MONTH,
    derive_feasts,
    parse_day,
    validate_month,
    wave_sheaf_date,
)
from moonfeasts.models import CalendarState, FeastDefinition, MonthFeasts

logger = logging.getLogger(__name__)

STORAGE_KEY = "karaiteCalendar"
ANCHOR_FIELD = "waveSheafDate"


class KeyValueStorage(Protocol):
    """A medium holding JSON-serializable blobs under string keys."""

    def get(self, key: str) -> Any | None: ...

    def put(self, key: str, value: Any) -> None: ...


class JsonFileStorage:
    """KeyValueStorage backed by a single JSON object on disk.

    Writes go to a sibling temporary file that then replaces the original,
    so readers never see a half-written file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise PersistenceCorrupt(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceCorrupt(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Any | None:
        return self._read_all().get(key)

    def put(self, key: str, value: Any) -> None:
        try:
            data = self._read_all()
        except PersistenceCorrupt:
            logger.warning("Overwriting unreadable storage file %s", self.path)
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def state_to_blob(state: CalendarState) -> dict[str, str]:
    """Serialize to ``{"1": "YYYY-MM-DD", ..., "waveSheafDate": "YYYY-MM-DD"}``."""
    blob = {str(month): day.isoformat() for month, day in state.confirmed.items()}
    if state.wave_sheaf_anchor is not None:
        blob[ANCHOR_FIELD] = state.wave_sheaf_anchor.isoformat()
    return blob


def state_from_blob(blob: Any, tz: tzinfo | None = None) -> CalendarState:
    """Parse a stored blob. Accepts full ISO datetimes as well as dates.

    Timestamps with an offset are read as days in ``tz``.

    Raises:
        PersistenceCorrupt: On any structural or value error.
    """
    if not isinstance(blob, dict):
        raise PersistenceCorrupt(f"Calendar blob must be an object, got {type(blob).__name__}")
    confirmed: dict[int, date] = {}
    anchor: date | None = None
    try:
        for key, value in blob.items():
            if key == ANCHOR_FIELD:
                anchor = parse_day(value, tz) if value is not None else None
                continue
            month = validate_month(int(key))
            confirmed[month] = parse_day(value, tz)
    except (TypeError, ValueError) as exc:
        raise PersistenceCorrupt(f"Corrupt calendar entry: {exc}") from exc
    return CalendarState(confirmed=confirmed, wave_sheaf_anchor=anchor)


class CalendarStore:
    """Holds the CalendarState and persists it under a fixed storage key.

    ``tz`` is the civil timezone used to read stored timestamps back as days.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = STORAGE_KEY,
        catalog: Sequence[FeastDefinition] = FEASTS,
        tz: tzinfo | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._catalog = catalog
        self._tz = tz
        self._lock = threading.RLock()
        self._state = CalendarState()

    @property
    def state(self) -> CalendarState:
        return self._state

    @property
    def catalog(self) -> Sequence[FeastDefinition]:
        return self._catalog

    def load(self, recover: bool = False) -> CalendarState:
        """Restore the persisted state; an empty state if nothing is stored.

        Args:
            recover: On corrupt data, log the error and fall back to an empty
                state instead of raising.

        Raises:
            PersistenceCorrupt: Stored data cannot be parsed and ``recover`` is False.
        """
        with self._lock:
            try:
                blob = self._storage.get(self._key)
                state = CalendarState() if blob is None else state_from_blob(blob, self._tz)
            except PersistenceCorrupt:
                if not recover:
                    raise
                logger.exception("Stored calendar is corrupt; starting from an empty calendar")
                state = CalendarState()
            self._state = state
            logger.info(
                "Loaded calendar: months %s, wave sheaf %s",
                list(state.confirmed), state.wave_sheaf_anchor,
            )
            return state

    def record_confirmation(self, month_number: int, day_one: date) -> CalendarState:
        """Upsert month ``month_number`` and persist.

        Month 1 also replaces the Wave Sheaf anchor with the one derived from
        ``day_one``, so the anchor always follows the stored month 1.

        Raises:
            InvalidInput: Before anything is changed, on a bad month or date.
            InternalConsistency: Before anything is changed, if the Wave Sheaf
                search fails.
        """
        month_number = validate_month(month_number)
        day_one = parse_day(day_one)
        anchor = wave_sheaf_date(day_one) if month_number == FIRST_MONTH else None

        with self._lock:
            state = self._state.with_confirmation(month_number, day_one)
            if anchor is not None:
                state = state.with_anchor(anchor)
            self._storage.put(self._key, state_to_blob(state))
            self._state = state
        logger.info("Saved month %d Day 1 = %s", month_number, day_one.isoformat())
        return state

    def replay(self) -> tuple[MonthFeasts, ...]:
        """Re-derive every confirmed month, ascending, from the current state.

        A month-3 entry without an anchor keeps its fixed-day feasts and is
        flagged ``anchor_missing``.
        """
        state = self._state
        results: list[MonthFeasts] = []
        for month_number, day_one in sorted(state.confirmed.items()):
            try:
                results.append(
                    derive_feasts(day_one, month_number, state.wave_sheaf_anchor, self._catalog)
                )
            except MissingAnchor as exc:
                logger.warning("Month %d stored without a Wave Sheaf date: %s", month_number, exc)
                results.append(
                    MonthFeasts(
                        month_number=month_number,
                        occurrences=exc.resolved,
                        anchor_missing=True,
                    )
                )
        return tuple(results)
