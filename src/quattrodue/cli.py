from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from typing import Any, Dict, List

from quattrodue.errors import QuattroDueError
from quattrodue.models.config import ScheduleConfig
from quattrodue.models.day import Day
from quattrodue.models.validated import ValidatedScheduleConfig, load_config
from quattrodue.services.work_schedule import WorkScheduleService, build_service
from quattrodue.utils.logging_setup import setup_logging
from quattrodue.utils.structured_logging import configure_structlog


def _parse_month(value: str) -> date:
    return date.fromisoformat(f"{value}-01") if len(value) == 7 else date.fromisoformat(value)


def _build_cfg(args: argparse.Namespace) -> ScheduleConfig:
    cfg = load_config(args.config) if args.config else ScheduleConfig()
    changes: Dict[str, Any] = {}
    if args.start_date:
        changes["reference_start_date"] = args.start_date
    if args.no_stops:
        changes["show_stops"] = False
    if changes:
        merged = {**cfg.to_dict(), **changes}
        cfg = ValidatedScheduleConfig.model_validate(merged).to_dataclass()
    return cfg


def _day_dict(day: Day) -> Dict[str, Any]:
    return {
        "date": day.date.isoformat(),
        "shifts": [
            {"shift": s.name, "teams": s.teams_as_string, "stop": s.stop}
            for s in day.shifts
        ],
        "off_work": day.off_work_as_string,
    }


def _print_days(days: List[Day], as_json: bool) -> None:
    if as_json:
        print(json.dumps([_day_dict(d) for d in days], ensure_ascii=False, indent=2))
        return
    for d in days:
        print(d)


def _run(service: WorkScheduleService, args: argparse.Namespace) -> int:
    if args.command == "day":
        day = service.get_schedule_for_date(args.date)
        if day is None:
            print("No schedule available")
            return 1
        _print_days([day], args.json_out)
        if not args.json_out:
            cycle_length = service.get_schedule_configuration()["cycle_length"]
            print(f"Cycle day: {service.get_day_in_cycle(args.date) + 1}/{cycle_length}")
        return 0

    if args.command == "month":
        days = service.get_schedule_for_month(args.month)
        if args.json_out:
            _print_days(days, True)
        else:
            matrix = service.get_schedule_range(days[0].date, days[-1].date).to_matrix() if days else None
            print(matrix.to_string() if matrix is not None else "No schedule available")
        return 0 if days else 1

    if args.command == "team":
        working = service.is_working_day_for_team(args.date, args.team)
        shift = service.get_team_shift(args.date, args.team)
        result = {
            "team": args.team.upper(),
            "date": args.date.isoformat(),
            "working": working,
            "shift": shift.name if shift else None,
        }
        if args.json_out:
            print(json.dumps(result, ensure_ascii=False, indent=2))
        else:
            print(f"{result['team']} {result['date']}: {result['shift'] or 'rest'}")
        return 0

    finder = service.find_next_working_day if args.command == "next" else service.find_previous_working_day
    found = finder(args.team, args.date, args.max_days)
    if args.json_out:
        print(json.dumps({"team": args.team.upper(), "date": found.isoformat() if found else None}))
    else:
        print(found.isoformat() if found else f"Not found within {args.max_days or service.config.max_scan_days} days")
    return 0 if found else 1


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="QuattroDue shift calendar")
    p.add_argument("--config", help="JSON configuration file")
    p.add_argument("--start-date", type=date.fromisoformat, help="Reference start date (cycle day 1)")
    p.add_argument("--no-stops", action="store_true", help="Ignore plant full-stop overrides")
    p.add_argument("--json", dest="json_out", action="store_true", help="JSON output")
    p.add_argument("-v", "--verbose", action="count", default=0)
    sub = p.add_subparsers(dest="command", required=True)

    day_p = sub.add_parser("day", help="Shifts on a date")
    day_p.add_argument("date", type=date.fromisoformat)

    month_p = sub.add_parser("month", help="Team × day matrix for a month (YYYY-MM)")
    month_p.add_argument("month", type=_parse_month)

    team_p = sub.add_parser("team", help="Is a team working on a date")
    team_p.add_argument("team")
    team_p.add_argument("date", type=date.fromisoformat, nargs="?", default=date.today())

    for name, help_text in (("next", "Next working day"), ("previous", "Previous working day")):
        scan_p = sub.add_parser(name, help=help_text)
        scan_p.add_argument("team")
        scan_p.add_argument("--from", dest="date", type=date.fromisoformat, default=date.today())
        scan_p.add_argument("--max-days", type=int, default=None)

    args = p.parse_args(argv)

    level = "DEBUG" if args.verbose > 1 else "INFO" if args.verbose else "WARNING"
    setup_logging(level=level, log_file=None)
    configure_structlog(level=level)

    service = build_service(_build_cfg(args))
    try:
        return _run(service, args)
    except QuattroDueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
