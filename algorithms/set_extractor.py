import re
from typing import Optional

from models import DECLINE, DIAMOND, INCLINE, WEIGHTED, WIDE, SetEntry


class SetExtractor:
    """Pull rep counts with optional variation suffixes out of free text."""

    MIN_REPS: int = 1
    MAX_REPS: int = 500
    SUFFIXES: dict[str, str] = {
        "w": WEIGHTED,
        "d": DECLINE,
        "i": INCLINE,
        "x": WIDE,
        "m": DIAMOND,
    }

    _TOKEN = re.compile(r"(\d+)(?:([a-z])(?![a-z]))?", re.IGNORECASE)

    def __init__(self, max_reps: Optional[int] = None) -> None:
        if max_reps is not None and max_reps < self.MIN_REPS:
            raise ValueError("max_reps must be positive")
        self.max_reps = max_reps if max_reps is not None else self.MAX_REPS

    def extract(self, fragment: str) -> list[SetEntry]:
        """Return the sets found in ``fragment`` in reading order.

        Values outside ``MIN_REPS``..``max_reps`` are skipped without
        complaint. A suffix outside ``SUFFIXES`` counts as a standard set.
        """
        sets: list[SetEntry] = []
        for match in self._TOKEN.finditer(fragment or ""):
            reps = int(match.group(1))
            if not self.MIN_REPS <= reps <= self.max_reps:
                continue
            suffix = (match.group(2) or "").lower()
            sets.append(SetEntry(reps=reps, variation=self.SUFFIXES.get(suffix)))
        return sets

    def has_sets(self, fragment: str) -> bool:
        return bool(self.extract(fragment))

    def integers(self, fragment: str) -> list[int]:
        """Return every integer in ``fragment``, plausible or not."""
        return [int(m.group(1)) for m in self._TOKEN.finditer(fragment or "")]
