from datetime import date, datetime, timedelta

import pytest
from pytz import timezone, utc

from moonfeasts import feasts as feasts_module
from moonfeasts.catalog import FEASTS
from moonfeasts.errors import InternalConsistency, InvalidInput, MissingAnchor
from moonfeasts.feasts import derive_feasts, parse_day, wave_sheaf_date
from moonfeasts.models import (
    FeastDefinition,
    FiftyDaysFromWaveSheaf,
    FixedDay,
    MorrowAfterWeeklySabbath,
)

DAY_ONE_2025 = date(2025, 3, 30)


def _by_name(result):
    return {o.feast.name: o.date for o in result.occurrences}


def test_month_one_2025():
    result = derive_feasts(DAY_ONE_2025, 1)
    dates = _by_name(result)

    assert dates["Passover (Pesach)"] == date(2025, 4, 12)
    assert dates["Feast of Unleavened Bread (Hag HaMatzot) - Day 1"] == date(2025, 4, 13)
    assert dates["Feast of Unleavened Bread (Hag HaMatzot) - Day 7"] == date(2025, 4, 19)
    assert dates["Wave Sheaf Offering (Yom HaNef)"] == date(2025, 4, 13)
    assert dates["Messiah's Resurrection (Firstfruits)"] == date(2025, 4, 13)
    assert result.wave_sheaf_anchor == date(2025, 4, 13)


def test_month_one_sorted_with_catalog_order_on_ties():
    names = [o.feast.name for o in derive_feasts(DAY_ONE_2025, 1).occurrences]

    assert names == [
        "Passover (Pesach)",
        "Feast of Unleavened Bread (Hag HaMatzot) - Day 1",
        "Wave Sheaf Offering (Yom HaNef)",
        "Messiah's Resurrection (Firstfruits)",
        "Feast of Unleavened Bread (Hag HaMatzot) - Day 7",
    ]


@pytest.mark.parametrize("offset", range(14))
def test_wave_sheaf_is_sunday_inside_unleavened_bread(offset):
    day_one = DAY_ONE_2025 + timedelta(days=offset)
    result = derive_feasts(day_one, 1)
    wave_sheaf = _by_name(result)["Wave Sheaf Offering (Yom HaNef)"]

    assert wave_sheaf.weekday() == 6
    assert day_one + timedelta(days=14) <= wave_sheaf <= day_one + timedelta(days=20)
    assert result.wave_sheaf_anchor == wave_sheaf


def test_wave_sheaf_when_day_fifteen_is_a_tuesday():
    # 2024-04-09 + 14 = 2024-04-23 (Tuesday); first Sunday is the 28th
    assert wave_sheaf_date(date(2024, 4, 9)) == date(2024, 4, 28)


def test_shavuot_is_fifty_days_from_wave_sheaf():
    result = derive_feasts(date(2025, 5, 28), 3, date(2025, 4, 13))

    assert [o.feast.name for o in result.occurrences] == ["Feast of Weeks (Shavuot / Pentecost)"]
    assert result.occurrences[0].date == date(2025, 6, 1)
    assert result.wave_sheaf_anchor is None


def test_month_three_without_anchor_is_refused():
    with pytest.raises(MissingAnchor) as info:
        derive_feasts(date(2025, 5, 28), 3)

    assert info.value.resolved == ()


def test_missing_anchor_keeps_fixed_month_three_feasts():
    extra = FeastDefinition(name="Test Day", month=3, rule=FixedDay(5), description="")
    with pytest.raises(MissingAnchor) as info:
        derive_feasts(date(2025, 5, 28), 3, catalog=FEASTS + (extra,))

    assert [(o.feast.name, o.date) for o in info.value.resolved] == [
        ("Test Day", date(2025, 6, 1))
    ]


def test_month_three_without_a_fifty_days_rule_needs_no_anchor():
    fixed_only = (FeastDefinition(name="Test Day", month=3, rule=FixedDay(5), description=""),)

    result = derive_feasts(date(2025, 5, 28), 3, catalog=fixed_only)

    assert [(o.feast.name, o.date) for o in result.occurrences] == [
        ("Test Day", date(2025, 6, 1))
    ]
    assert result.wave_sheaf_anchor is None


def test_month_seven_fixed_days():
    result = derive_feasts(date(2025, 9, 23), 7)

    assert [(o.feast.name, o.date) for o in result.occurrences] == [
        ("Day of Trumpets (Yom Teruah)", date(2025, 9, 23)),
        ("Day of Atonement (Yom Kippur)", date(2025, 10, 2)),
        ("Feast of Tabernacles (Sukkot) - Day 1", date(2025, 10, 7)),
        ("The Eighth Day (Shemini Atzeret)", date(2025, 10, 14)),
    ]
    assert result.occurrences[2].end_date == date(2025, 10, 13)
    assert result.occurrences[0].end_date == date(2025, 9, 23)


@pytest.mark.parametrize("month", [2, 4, 12, 13])
def test_months_without_feasts(month):
    result = derive_feasts(DAY_ONE_2025, month)

    assert result.occurrences == ()
    assert result.month_number == month


@pytest.mark.parametrize("month", [0, 14, -1, True, 1.0, "1", None])
def test_rejects_bad_month(month):
    with pytest.raises(InvalidInput):
        derive_feasts(DAY_ONE_2025, month)


def test_bad_month_is_rejected_before_anchor_check():
    with pytest.raises(InvalidInput):
        derive_feasts(DAY_ONE_2025, 14, None)


def test_accepts_datetime_and_iso_string():
    expected = derive_feasts(DAY_ONE_2025, 1)

    assert derive_feasts(datetime(2025, 3, 30, 0, 0), 1) == expected
    assert derive_feasts("2025-03-30", 1) == expected


@pytest.mark.parametrize("value", ["2025-13-01", "yesterday", "", 20250330])
def test_rejects_bad_day_one(value):
    with pytest.raises(InvalidInput):
        derive_feasts(value, 1)


def test_parse_day_accepts_utc_timestamps():
    assert parse_day("2025-03-30T00:00:00.000Z") == date(2025, 3, 30)


def test_parse_day_reads_aware_timestamps_in_the_given_timezone():
    jerusalem = timezone("Asia/Jerusalem")

    assert parse_day("2025-03-29T21:00:00.000Z", jerusalem) == date(2025, 3, 30)
    assert parse_day(datetime(2025, 3, 29, 21, tzinfo=utc), jerusalem) == date(2025, 3, 30)
    assert parse_day("2025-03-29T21:00:00", jerusalem) == date(2025, 3, 29)
    assert parse_day(date(2025, 3, 29), jerusalem) == date(2025, 3, 29)


def test_no_sunday_is_an_internal_consistency_error(monkeypatch):
    monkeypatch.setattr(feasts_module, "_SUNDAY", 7)

    with pytest.raises(InternalConsistency):
        derive_feasts(DAY_ONE_2025, 1)


def test_unknown_rule_is_an_internal_consistency_error():
    odd = FeastDefinition(name="Odd", month=2, rule="day_after_tomorrow", description="")  # type: ignore[arg-type]

    with pytest.raises(InternalConsistency):
        derive_feasts(DAY_ONE_2025, 2, catalog=(odd,))


def test_relative_rules_outside_their_months_are_skipped():
    catalog = (
        FeastDefinition(name="Morrow", month=2, rule=MorrowAfterWeeklySabbath(), description=""),
        FeastDefinition(name="Fifty", month=2, rule=FiftyDaysFromWaveSheaf(), description=""),
    )

    assert derive_feasts(DAY_ONE_2025, 2, date(2025, 4, 13), catalog=catalog).occurrences == ()
