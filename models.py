import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

STANDARD = "Standard"
WEIGHTED = "Weighted"
DECLINE = "Decline"
INCLINE = "Incline"
WIDE = "Wide"
DIAMOND = "Diamond"

VARIATIONS = (STANDARD, WEIGHTED, DECLINE, INCLINE, WIDE, DIAMOND)

DAILY_GOAL = 100


class SetEntry(BaseModel):
    """A single set extracted from pasted text."""

    model_config = ConfigDict(frozen=True)

    reps: int = Field(gt=0)
    variation: Optional[str] = None


class LogPayload(BaseModel):
    """A logged set that has not been stored yet."""

    model_config = ConfigDict(frozen=True)

    reps: int = Field(gt=0)
    logged_at: datetime.datetime
    variation: Optional[str] = None


class LogRecord(LogPayload):
    """A stored set. ``id`` is assigned by the storage layer."""

    id: str


class ParsedEntry(BaseModel):
    """All sets attributed to one resolved date."""

    model_config = ConfigDict(frozen=True)

    date: datetime.datetime
    sets: tuple[SetEntry, ...] = Field(min_length=1)
    raw_line: str

    @property
    def total(self) -> int:
        return sum(s.reps for s in self.sets)

    @property
    def reps(self) -> list[int]:
        return [s.reps for s in self.sets]


class ParseResult(BaseModel):
    """Outcome of parsing one block of pasted history."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[ParsedEntry, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def total_sets(self) -> int:
        return sum(len(e.sets) for e in self.entries)

    @property
    def total_reps(self) -> int:
        return sum(e.total for e in self.entries)

    @property
    def date_range(
        self,
    ) -> Optional[tuple[datetime.datetime, datetime.datetime]]:
        """Return ``(first, last)`` entry dates or ``None`` when empty."""
        if not self.entries:
            return None
        return self.entries[0].date, self.entries[-1].date


class Records(BaseModel):
    model_config = ConfigDict(frozen=True)

    best_set: int = 0
    longest_streak: int = 0
    most_in_day: int = 0


class VariationStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    variation: str
    total_reps: int
    best_set: int
    set_count: int


class ChartBucket(BaseModel):
    """One day of a trailing chart window."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    label: str
    full_label: str
    total: int
    goal: int


class TodaySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int
    sets: int
    goal: int
    remaining: int
    progress: float
    complete: bool
