import argparse
import datetime
import json
import logging
from typing import Optional

from pydantic import TypeAdapter

from config import APP_VERSION, YamlConfig
from algorithms import SetExtractor
from history_parser import HistoryParser
from models import LogRecord, ParseResult
from stats_service import StatisticsService

logger = logging.getLogger(__name__)


def format_warnings(warnings: list[str] | tuple[str, ...], limit: int) -> list[str]:
    """Return at most ``limit`` warnings plus a line counting the rest."""
    shown = list(warnings[:limit])
    hidden = len(warnings) - len(shown)
    if hidden > 0:
        shown.append(f"...and {hidden} more")
    return shown


def preview_lines(result: ParseResult, warning_limit: int = 5) -> list[str]:
    lines: list[str] = []
    for entry in result.entries:
        sets = ", ".join(
            f"{s.reps}{'' if s.variation is None else ' ' + s.variation}"
            for s in entry.sets
        )
        lines.append(f"{entry.date:%Y-%m-%d}  {entry.total:>5}  {sets}")
    if not result.entries:
        lines.append("Nothing to import")
    else:
        start, end = result.date_range
        lines.append(
            f"{result.total_sets} sets, {result.total_reps} reps across "
            f"{len(result.entries)} days ({start:%Y-%m-%d} to {end:%Y-%m-%d})"
        )
    if result.warnings:
        lines.append(f"{len(result.warnings)} warning(s):")
        lines.extend(f"  {w}" for w in format_warnings(result.warnings, warning_limit))
    return lines


def parse_history_file(
    path: str,
    cfg: YamlConfig,
    as_json: bool = False,
    now: Optional[datetime.datetime] = None,
) -> list[str]:
    settings = cfg.settings()
    parser = HistoryParser(SetExtractor(max_reps=settings.max_reps_per_set))
    with open(path, "r", encoding="utf-8") as f:
        result = parser.parse(f.read(), now=now)
    if as_json:
        payloads = HistoryParser.to_log_payloads(result)
        return [json.dumps([p.model_dump(mode="json") for p in payloads], indent=2)]
    return preview_lines(result, settings.warning_display_limit)


def load_logs(path: str) -> list[LogRecord]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return TypeAdapter(list[LogRecord]).validate_python(data)


def stats_report(
    path: str,
    cfg: YamlConfig,
    goal: Optional[int] = None,
    days: int = 7,
    service: Optional[StatisticsService] = None,
) -> list[str]:
    settings = cfg.settings()
    goal = goal if goal is not None else settings.daily_goal
    service = service or StatisticsService.for_timezone(settings.timezone)
    logs = load_logs(path)
    today = service.today_summary(logs, goal)
    records = service.personal_records(logs, goal)
    lines = [
        f"Today: {today.total}/{goal} in {today.sets} sets ({today.progress:.0f}%)",
        f"Current streak: {service.current_streak(logs, goal)} days",
        f"Lifetime total: {service.lifetime_total(logs)}",
        f"Best set: {records.best_set}",
        f"Most in a day: {records.most_in_day}",
        f"Longest streak: {records.longest_streak} days",
        "Variations:",
    ]
    for stat in service.variation_stats(logs):
        lines.append(
            f"  {stat.variation:<9} {stat.total_reps:>6} reps  "
            f"best {stat.best_set}  sets {stat.set_count}"
        )
    lines.append(f"Last {days} days:")
    for bucket in service.chart_data(logs, days, goal):
        mark = "*" if bucket.total >= bucket.goal else " "
        lines.append(f"  {bucket.full_label:<7} {bucket.total:>5} {mark}")
    return lines


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Rep history utilities")
    parser.add_argument("--settings", default="settings.yaml")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=APP_VERSION)
    sub = parser.add_subparsers(dest="cmd", required=True)

    prs = sub.add_parser("parse")
    prs.add_argument("file")
    prs.add_argument("--json", action="store_true")

    sts = sub.add_parser("stats")
    sts.add_argument("file")
    sts.add_argument("--goal", type=int)
    sts.add_argument("--days", type=int, choices=[7, 30], default=7)

    gl = sub.add_parser("goal")
    gl.add_argument("--set", dest="value", type=int)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    cfg = YamlConfig(args.settings)

    if args.cmd == "parse":
        lines = parse_history_file(args.file, cfg, as_json=args.json)
    elif args.cmd == "stats":
        lines = stats_report(args.file, cfg, goal=args.goal, days=args.days)
    else:
        if args.value is not None:
            cfg.set_daily_goal(args.value)
            logger.info("daily goal set to %d", args.value)
        lines = [f"Daily goal: {cfg.daily_goal()}"]
    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
