"""Biblical feast days in Karaite reckoning (Leviticus 23)."""

from moonfeasts.models import (
    FeastDefinition,
    FiftyDaysFromWaveSheaf,
    FixedDay,
    MorrowAfterWeeklySabbath,
)

FEASTS: tuple[FeastDefinition, ...] = (
    # 1st month (the month of the Aviv)
    FeastDefinition(
        name="Passover (Pesach)",
        month=1,
        rule=FixedDay(14),
        description="The Lord's Passover. (Leviticus 23:5)",
    ),
    FeastDefinition(
        name="Feast of Unleavened Bread (Hag HaMatzot) - Day 1",
        month=1,
        rule=FixedDay(15),
        duration=7,
        description="High Sabbath. (Leviticus 23:6-7)",
    ),
    FeastDefinition(
        name="Feast of Unleavened Bread (Hag HaMatzot) - Day 7",
        month=1,
        rule=FixedDay(21),
        description="High Sabbath. (Leviticus 23:8)",
    ),
    FeastDefinition(
        name="Wave Sheaf Offering (Yom HaNef)",
        month=1,
        rule=MorrowAfterWeeklySabbath(),
        description="Start of the 50-day omer count. (Leviticus 23:10-11, 15)",
    ),
    FeastDefinition(
        name="Messiah's Resurrection (Firstfruits)",
        month=1,
        rule=MorrowAfterWeeklySabbath(),
        description="The day Yeshua rose, fulfilling the Wave Sheaf. (1 Corinthians 15:20)",
    ),
    # 3rd month
    FeastDefinition(
        name="Feast of Weeks (Shavuot / Pentecost)",
        month=3,
        rule=FiftyDaysFromWaveSheaf(),
        description=(
            "High Sabbath. 50th day (morrow after the 7th Sabbath). "
            "(Leviticus 23:15-16, 21)"
        ),
    ),
    # 7th month
    FeastDefinition(
        name="Day of Trumpets (Yom Teruah)",
        month=7,
        rule=FixedDay(1),
        description="High Sabbath. (Leviticus 23:24-25)",
    ),
    FeastDefinition(
        name="Day of Atonement (Yom Kippur)",
        month=7,
        rule=FixedDay(10),
        description="High Sabbath. (Leviticus 23:27-32)",
    ),
    FeastDefinition(
        name="Feast of Tabernacles (Sukkot) - Day 1",
        month=7,
        rule=FixedDay(15),
        duration=7,
        description="High Sabbath. (Leviticus 23:34-35)",
    ),
    FeastDefinition(
        name="The Eighth Day (Shemini Atzeret)",
        month=7,
        rule=FixedDay(22),
        description="High Sabbath. (Leviticus 23:36)",
    ),
)
