"""CLI entry point for new-moon predictions and feast calculation.

    uv run moonfeasts moons 2025
    uv run moonfeasts confirm 1 2025-03-30
    uv run moonfeasts replay
    uv run moonfeasts now
"""

import argparse
import logging
import sys
from datetime import datetime

from dotenv import load_dotenv

load_dotenv()

from moonfeasts.config import Settings, load_settings  # noqa: E402
from moonfeasts.errors import CalendarError, InvalidInput, MissingAnchor  # noqa: E402
from moonfeasts.models import MonthFeasts  # noqa: E402
from moonfeasts.newmoon import locate_new_moons  # noqa: E402
from moonfeasts.service import confirm_month  # noqa: E402
from moonfeasts.sky import describe_sky  # noqa: E402
from moonfeasts.store import CalendarStore, JsonFileStorage  # noqa: E402


def _print_month(result: MonthFeasts) -> None:
    print(f"Calculated Feasts for Month {result.month_number}")
    if result.anchor_missing:
        print("  (Shavuot needs month 1 to be confirmed first)")
    if not result.occurrences:
        print("  No fixed feasts found for this month.")
    for occ in result.occurrences:
        print(f"  {occ.date.isoformat()}  {occ.feast.name} ({occ.feast.description})")


def _open_store(settings: Settings) -> CalendarStore:
    store = CalendarStore(JsonFileStorage(settings.store_path), tz=settings.tz)
    store.load(recover=True)
    return store


def _cmd_moons(args: argparse.Namespace, settings: Settings) -> None:
    for estimate in locate_new_moons(args.year, tz=settings.tz):
        print(
            f"Prediction {estimate.index:2d}: "
            f"new moon {estimate.instant:%Y-%m-%d %H:%M %Z}, "
            f"suggested Day 1 {estimate.suggested_day_one.isoformat()}"
        )


def _cmd_confirm(args: argparse.Namespace, settings: Settings) -> None:
    store = _open_store(settings)
    _print_month(confirm_month(store, args.month, args.day_one))


def _cmd_replay(args: argparse.Namespace, settings: Settings) -> None:
    store = _open_store(settings)
    results = store.replay()
    if not results:
        print("No confirmed months saved.")
    for result in results:
        _print_month(result)


def _cmd_now(args: argparse.Namespace, settings: Settings) -> None:
    status = describe_sky(
        datetime.now(settings.tz), latitude=settings.latitude, longitude=settings.longitude
    )
    print(f"Current Phase: {status.phase_name} ({status.illuminated_percent:.1f}%)")
    print(f"Sun's Position: {status.sun_sign}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="moonfeasts", description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command", required=True)

    moons = sub.add_parser("moons", help="predict the astronomical new moons of a year")
    moons.add_argument("year", type=int)
    moons.set_defaults(func=_cmd_moons)

    confirm = sub.add_parser("confirm", help="confirm a month's Day 1 and calculate its feasts")
    confirm.add_argument("month", type=int, help="biblical month number (1-13)")
    confirm.add_argument("day_one", help="confirmed Day 1, YYYY-MM-DD")
    confirm.set_defaults(func=_cmd_confirm)

    replay = sub.add_parser("replay", help="recalculate feasts for every saved month")
    replay.set_defaults(func=_cmd_replay)

    now = sub.add_parser("now", help="current Moon phase and Sun sign")
    now.set_defaults(func=_cmd_now)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        args.func(args, settings)
    except InvalidInput as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return 2
    except MissingAnchor as exc:
        print(f"Saved, but: {exc}", file=sys.stderr)
        return 1
    except CalendarError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
