"""Confirm a month's Day 1: derive its feasts and persist the result."""

import logging
from datetime import date

from moonfeasts.feasts import derive_feasts, parse_day, validate_month
from moonfeasts.models import MonthFeasts
from moonfeasts.store import CalendarStore

logger = logging.getLogger(__name__)


def confirm_month(store: CalendarStore, month_number: int, day_one: date | str) -> MonthFeasts:
    """Record ``day_one`` as the first day of ``month_number`` and derive its feasts.

    Month 1 also stores the newly derived Wave Sheaf date, replacing any earlier
    one. A month-3 confirmation is saved even when month 1 is still unknown, and
    MissingAnchor is raised afterwards.

    The feasts are derived from the state the store saved, so the anchor used
    is the one persisted with this confirmation.

    Raises:
        InvalidInput: Bad month number or date; nothing is saved.
        MissingAnchor: Month 3 confirmed before month 1.
    """
    month_number = validate_month(month_number)
    day_one = parse_day(day_one)

    state = store.record_confirmation(month_number, day_one)
    result = derive_feasts(day_one, month_number, state.wave_sheaf_anchor, store.catalog)
    if result.wave_sheaf_anchor is not None:
        logger.info("Wave Sheaf date set to %s", result.wave_sheaf_anchor.isoformat())
    return result
