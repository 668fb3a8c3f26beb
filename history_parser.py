from __future__ import annotations

import datetime
import functools
import logging
import re
from typing import NamedTuple, Optional

from algorithms import DateResolver, SetExtractor
from models import LogPayload, ParsedEntry, ParseResult, SetEntry

logger = logging.getLogger(__name__)

DATE_TOKEN = (
    r"(?:\d{1,2}/\d{1,2}(?:/\d{2,4})?(?![\d/])"
    r"|[A-Za-z]{3,9}\.?\s+\d{1,2}(?:st|nd|rd|th)?(?!\d))"
)


class ParseState(NamedTuple):
    """Accumulator threaded through the line scan."""

    current_date: Optional[datetime.datetime] = None
    date_line: Optional[str] = None
    open_entry: Optional[ParsedEntry] = None
    entries: tuple[ParsedEntry, ...] = ()
    warnings: tuple[str, ...] = ()

    def warn(self, message: str) -> "ParseState":
        logger.debug("parse warning: %s", message)
        return self._replace(warnings=self.warnings + (message,))

    def close_entry(self) -> "ParseState":
        if self.open_entry is None:
            return self
        return self._replace(
            open_entry=None, entries=self.entries + (self.open_entry,)
        )


class HistoryParser:
    """Turn pasted workout notes into dated entries.

    Lines are read top to bottom. A line holding only a date starts a new
    "current date" that later lines of bare rep counts attach to, while a
    line holding a date followed by reps is recorded for that date
    directly. Problems are reported as warnings and never abort the parse.
    """

    _LEADING_DATE = re.compile(
        rf"^(?P<date>{DATE_TOKEN})(?:\s*[:|,\-]\s*|\s+|$)(?P<rest>.*)$"
    )
    _ANY_SLASH_DATE = re.compile(r"\d{1,2}/\d{1,2}")
    _ANY_MONTH_DATE = re.compile(
        r"\b([A-Za-z]{3,9})\.?\s+\d{1,2}(?:st|nd|rd|th)?(?!\d)"
    )

    def __init__(
        self,
        extractor: Optional[SetExtractor] = None,
        resolver: type[DateResolver] = DateResolver,
    ) -> None:
        self.extractor = extractor or SetExtractor()
        self.resolver = resolver

    def parse(
        self, text: str, now: Optional[datetime.datetime] = None
    ) -> ParseResult:
        """Parse ``text`` into a :class:`ParseResult` sorted by date."""
        now = now or datetime.datetime.now()
        lines = [line.strip() for line in (text or "").splitlines()]
        state = functools.reduce(
            lambda acc, line: self._step(acc, line, now),
            (line for line in lines if line),
            ParseState(),
        ).close_entry()
        entries = tuple(sorted(state.entries, key=lambda e: e.date))
        result = ParseResult(entries=entries, warnings=state.warnings)
        logger.info(
            "parsed %d entries (%d sets, %d reps) with %d warnings",
            len(result.entries),
            result.total_sets,
            result.total_reps,
            len(result.warnings),
        )
        return result

    def _step(
        self, state: ParseState, line: str, now: datetime.datetime
    ) -> ParseState:
        leading = self._LEADING_DATE.match(line)
        if leading is None:
            sets = self.extractor.extract(line)
            if self._has_date(line):
                return state.warn(f'Could not parse line: "{line}"')
            if sets:
                return self._add_carried_sets(state, line, sets)
            if self.extractor.integers(line):
                # implausible counts only, e.g. "600w"
                return state
            return state.warn(f'Could not parse line: "{line}"')

        token = leading.group("date")
        date = self.resolver.resolve(token, now)
        if date is None:
            return state.warn(f'Could not parse date: "{token}" from line: "{line}"')

        sets = self.extractor.extract(leading.group("rest"))
        if not sets:
            return state.close_entry()._replace(current_date=date, date_line=line)

        entry = ParsedEntry(date=date, sets=tuple(sets), raw_line=line)
        return state.close_entry()._replace(entries=state.entries + (entry,))

    def _has_date(self, line: str) -> bool:
        """Return True if a date appears anywhere in ``line``."""
        if self._ANY_SLASH_DATE.search(line):
            return True
        months = {**self.resolver.MONTH_ABBREVIATIONS, **self.resolver.MONTH_NAMES}
        return any(
            m.group(1).lower() in months
            for m in self._ANY_MONTH_DATE.finditer(line)
        )

    def _add_carried_sets(
        self, state: ParseState, line: str, sets: list[SetEntry]
    ) -> ParseState:
        if state.current_date is None:
            return state.warn(f'No date found for sets: "{line}"')
        if state.open_entry is not None:
            merged = state.open_entry.model_copy(
                update={
                    "sets": state.open_entry.sets + tuple(sets),
                    "raw_line": f"{state.open_entry.raw_line}\n{line}",
                }
            )
            return state._replace(open_entry=merged)
        raw = f"{state.date_line}\n{line}" if state.date_line else line
        entry = ParsedEntry(date=state.current_date, sets=tuple(sets), raw_line=raw)
        return state._replace(open_entry=entry)

    @staticmethod
    def to_log_payloads(
        result: ParseResult,
        spacing: datetime.timedelta = datetime.timedelta(minutes=1),
    ) -> list[LogPayload]:
        """Expand parsed entries into one log payload per set.

        Sets of an entry are staggered by ``spacing`` from the entry date so
        they keep their order once stored.
        """
        payloads: list[LogPayload] = []
        for entry in result.entries:
            for index, s in enumerate(entry.sets):
                payloads.append(
                    LogPayload(
                        reps=s.reps,
                        variation=s.variation,
                        logged_at=entry.date + index * spacing,
                    )
                )
        return payloads
