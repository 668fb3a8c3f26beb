import calendar
import datetime
import re
from typing import Callable, Optional


class DateResolver:
    """Resolve loosely formatted date tokens such as ``10/1`` or ``Oct 3``."""

    NEUTRAL_HOUR: int = 12

    MONTH_ABBREVIATIONS = {
        "jan": 1,
        "feb": 2,
        "mar": 3,
        "apr": 4,
        "may": 5,
        "jun": 6,
        "jul": 7,
        "aug": 8,
        "sep": 9,
        "sept": 9,
        "oct": 10,
        "nov": 11,
        "dec": 12,
    }
    MONTH_NAMES = {
        name.lower(): num
        for num, name in enumerate(calendar.month_name)
        if name
    }

    _SLASH_SHORT_YEAR = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{2})")
    _SLASH_FULL_YEAR = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
    _SLASH_NO_YEAR = re.compile(r"(\d{1,2})/(\d{1,2})")
    _ABBREVIATED = re.compile(
        r"([a-z]{3,4})\.?\s+(\d{1,2})(?:st|nd|rd|th)?", re.IGNORECASE
    )
    _FULL_NAME = re.compile(r"([a-z]+)\s+(\d{1,2})(?:st|nd|rd|th)?", re.IGNORECASE)

    @classmethod
    def resolve(
        cls, token: str, now: Optional[datetime.datetime] = None
    ) -> Optional[datetime.datetime]:
        """Return ``token`` as a date at noon or ``None`` when unparseable.

        Matchers are tried in a fixed order and the first valid calendar
        date wins. Tokens without a year get the year of ``now``, or the
        year before when that date would lie in the future.
        """
        now = now or datetime.datetime.now()
        text = token.strip()
        matchers: tuple[Callable[[str, datetime.datetime], Optional[datetime.date]], ...] = (
            cls._match_slash_short_year,
            cls._match_slash_full_year,
            cls._match_slash_no_year,
            cls._match_abbreviated_month,
            cls._match_full_month,
        )
        for matcher in matchers:
            day = matcher(text, now)
            if day is not None:
                return datetime.datetime(
                    day.year, day.month, day.day, cls.NEUTRAL_HOUR
                )
        return None

    @staticmethod
    def _build(year: int, month: int, day: int) -> Optional[datetime.date]:
        if not 1 <= month <= 12 or year < datetime.MINYEAR:
            return None
        if not 1 <= day <= calendar.monthrange(year, month)[1]:
            return None
        return datetime.date(year, month, day)

    @classmethod
    def _infer_year(
        cls, month: int, day: int, now: datetime.datetime
    ) -> Optional[datetime.date]:
        candidate = cls._build(now.year, month, day)
        if candidate is None or candidate > now.date():
            return cls._build(now.year - 1, month, day)
        return candidate

    @classmethod
    def _match_slash_short_year(
        cls, text: str, now: datetime.datetime
    ) -> Optional[datetime.date]:
        m = cls._SLASH_SHORT_YEAR.fullmatch(text)
        if not m:
            return None
        return cls._build(2000 + int(m.group(3)), int(m.group(1)), int(m.group(2)))

    @classmethod
    def _match_slash_full_year(
        cls, text: str, now: datetime.datetime
    ) -> Optional[datetime.date]:
        m = cls._SLASH_FULL_YEAR.fullmatch(text)
        if not m:
            return None
        return cls._build(int(m.group(3)), int(m.group(1)), int(m.group(2)))

    @classmethod
    def _match_slash_no_year(
        cls, text: str, now: datetime.datetime
    ) -> Optional[datetime.date]:
        m = cls._SLASH_NO_YEAR.fullmatch(text)
        if not m:
            return None
        return cls._infer_year(int(m.group(1)), int(m.group(2)), now)

    @classmethod
    def _match_abbreviated_month(
        cls, text: str, now: datetime.datetime
    ) -> Optional[datetime.date]:
        m = cls._ABBREVIATED.fullmatch(text)
        if not m:
            return None
        month = cls.MONTH_ABBREVIATIONS.get(m.group(1).lower())
        if month is None:
            return None
        return cls._infer_year(month, int(m.group(2)), now)

    @classmethod
    def _match_full_month(
        cls, text: str, now: datetime.datetime
    ) -> Optional[datetime.date]:
        m = cls._FULL_NAME.fullmatch(text)
        if not m:
            return None
        month = cls.MONTH_NAMES.get(m.group(1).lower())
        if month is None:
            return None
        return cls._infer_year(month, int(m.group(2)), now)
