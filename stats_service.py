from __future__ import annotations

import datetime
from typing import Callable, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from models import (
    DAILY_GOAL,
    STANDARD,
    ChartBucket,
    LogPayload,
    Records,
    TodaySummary,
    VariationStat,
)


class StatisticsService:
    """Compute progress statistics from a list of logged sets.

    Nothing is cached between calls: every method reads the logs it is
    given and returns fresh values. ``clock`` supplies the current time so
    results near midnight can be reproduced.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime.datetime]] = None,
        tz: Optional[datetime.tzinfo] = None,
    ) -> None:
        self.tz = tz
        self.clock = clock or self._system_clock

    @classmethod
    def for_timezone(
        cls,
        name: str,
        clock: Optional[Callable[[], datetime.datetime]] = None,
    ) -> "StatisticsService":
        """Build a service for an IANA zone name or ``"local"``."""
        tz = None if name == "local" else ZoneInfo(name)
        return cls(clock=clock, tz=tz)

    def _system_clock(self) -> datetime.datetime:
        return datetime.datetime.now(self.tz)

    @staticmethod
    def _check_goal(goal: int) -> None:
        if goal <= 0:
            raise ValueError("goal must be positive")

    def local_date(self, ts: datetime.datetime) -> datetime.date:
        """Return the calendar day ``ts`` falls on for the user."""
        if ts.tzinfo is None:
            return ts.date()
        if self.tz is None:
            return ts.astimezone().date()
        return ts.astimezone(self.tz).date()

    def today(self) -> datetime.date:
        return self.local_date(self.clock())

    def daily_totals(self, logs: Iterable[LogPayload]) -> Dict[datetime.date, int]:
        """Return total reps per calendar day."""
        totals: Dict[datetime.date, int] = {}
        for log in logs:
            day = self.local_date(log.logged_at)
            totals[day] = totals.get(day, 0) + log.reps
        return totals

    def lifetime_total(self, logs: Iterable[LogPayload]) -> int:
        return sum(log.reps for log in logs)

    def logs_for_day(
        self, logs: Iterable[LogPayload], day: datetime.date
    ) -> List[LogPayload]:
        return [log for log in logs if self.local_date(log.logged_at) == day]

    def current_streak(
        self, logs: Iterable[LogPayload], goal: int = DAILY_GOAL
    ) -> int:
        """Return consecutive completed days ending today or yesterday.

        An unfinished today does not break the streak; counting then
        starts from yesterday.
        """
        self._check_goal(goal)
        totals = self.daily_totals(logs)
        day = self.today()
        if totals.get(day, 0) < goal:
            day -= datetime.timedelta(days=1)
        streak = 0
        while totals.get(day, 0) >= goal:
            streak += 1
            day -= datetime.timedelta(days=1)
        return streak

    def personal_records(
        self, logs: Iterable[LogPayload], goal: int = DAILY_GOAL
    ) -> Records:
        """Return best set, most reps in a day and longest streak."""
        self._check_goal(goal)
        logs = list(logs)
        if not logs:
            return Records()
        best_set = max(log.reps for log in logs)
        totals = self.daily_totals(logs)
        most_in_day = max(totals.values())
        completed = sorted(d for d, total in totals.items() if total >= goal)
        longest = 0
        current = 0
        prev: Optional[datetime.date] = None
        for day in completed:
            if prev is not None and (day - prev).days == 1:
                current += 1
            else:
                current = 1
            longest = max(longest, current)
            prev = day
        return Records(
            best_set=best_set, longest_streak=longest, most_in_day=most_in_day
        )

    def variation_stats(self, logs: Iterable[LogPayload]) -> List[VariationStat]:
        """Return totals per variation, largest total first."""
        by_variation: Dict[str, Dict[str, int]] = {}
        for log in logs:
            name = log.variation or STANDARD
            entry = by_variation.setdefault(
                name, {"total_reps": 0, "best_set": 0, "set_count": 0}
            )
            entry["total_reps"] += log.reps
            entry["best_set"] = max(entry["best_set"], log.reps)
            entry["set_count"] += 1
        stats = [VariationStat(variation=name, **data) for name, data in by_variation.items()]
        return sorted(stats, key=lambda s: s.total_reps, reverse=True)

    def chart_data(
        self, logs: Iterable[LogPayload], days: int, goal: int = DAILY_GOAL
    ) -> List[ChartBucket]:
        """Return one bucket per day for the trailing ``days`` days.

        Buckets run oldest first and end today. Days without logs are
        included with a total of zero.
        """
        if days <= 0:
            raise ValueError("days must be positive")
        self._check_goal(goal)
        totals = self.daily_totals(logs)
        today = self.today()
        buckets: List[ChartBucket] = []
        for offset in range(days - 1, -1, -1):
            day = today - datetime.timedelta(days=offset)
            label = day.strftime("%a") if days <= 7 else str(day.day)
            buckets.append(
                ChartBucket(
                    date=day,
                    label=label,
                    full_label=f"{day.strftime('%b')} {day.day}",
                    total=totals.get(day, 0),
                    goal=goal,
                )
            )
        return buckets

    def today_summary(
        self, logs: Iterable[LogPayload], goal: int = DAILY_GOAL
    ) -> TodaySummary:
        self._check_goal(goal)
        todays = self.logs_for_day(logs, self.today())
        total = sum(log.reps for log in todays)
        return TodaySummary(
            total=total,
            sets=len(todays),
            goal=goal,
            remaining=max(0, goal - total),
            progress=round(min(total / goal * 100, 100.0), 2),
            complete=total >= goal,
        )

    def day_statuses(
        self, logs: Iterable[LogPayload], goal: int = DAILY_GOAL
    ) -> Dict[datetime.date, str]:
        """Mark each logged day as ``"goal"`` or ``"active"``."""
        self._check_goal(goal)
        statuses: Dict[datetime.date, str] = {}
        for day, total in sorted(self.daily_totals(logs).items()):
            if total >= goal:
                statuses[day] = "goal"
            elif total > 0:
                statuses[day] = "active"
        return statuses
