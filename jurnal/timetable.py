"""
Weekly timetable adapter.

The class timetable is authored as a list of rows (one per lesson period), each
row holding the subject taught on every weekday. The journal needs the opposite
view: for one weekday, the ordered list of periods and their subject.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple


# Keys used by the timetable editor, Monday first
WEEKDAY_KEYS = ("senin", "selasa", "rabu", "kamis", "jumat", "sabtu")

BREAK_NAMES = frozenset({"istirahat", "break"})


def is_break(subject: str) -> bool:
    return subject.strip().lower() in BREAK_NAMES


def weekday_key(d: date) -> Optional[str]:
    """
    Return the timetable key of a date's weekday, or None for Sunday.
    """
    idx = d.weekday()
    return WEEKDAY_KEYS[idx] if idx < len(WEEKDAY_KEYS) else None


@dataclass(frozen=True)
class LessonSlot:
    period: str
    time_range: str = ""
    subjects: Dict[str, str] = field(default_factory=dict)

    @property
    def period_number(self) -> Optional[int]:
        p = self.period.strip()
        return int(p) if p.isdigit() else None

    def subject_on(self, key: str) -> str:
        return (self.subjects.get(key) or "").strip()


@dataclass(frozen=True)
class DayPeriod:
    """
    One period of one weekday. subject is "" for an empty cell.
    """

    period: str
    time_range: str
    subject: str

    @property
    def is_break(self) -> bool:
        return is_break(self.subject)


def _ordered(slots: Sequence[LessonSlot]) -> List[LessonSlot]:
    # Rows without a numeric period (e.g. an unnumbered break row) stay right
    # after the numbered row they were authored under.
    keyed: List[Tuple[int, int, LessonSlot]] = []
    last = 0
    for pos, slot in enumerate(slots):
        num = slot.period_number
        if num is not None:
            last = num
        keyed.append((last, pos, slot))
    keyed.sort(key=lambda t: (t[0], t[1]))
    return [slot for _, _, slot in keyed]


class WeeklyTimetable:
    """
    Read-only view over the timetable rows of one class.
    """

    def __init__(self, slots: Sequence[LessonSlot] = ()) -> None:
        self._slots: Tuple[LessonSlot, ...] = tuple(_ordered(slots))

    @property
    def slots(self) -> Tuple[LessonSlot, ...]:
        return self._slots

    def periods_for(self, key: str) -> List[DayPeriod]:
        """
        All periods of one weekday in period order, including breaks and empty cells.
        """
        return [DayPeriod(s.period.strip(), s.time_range.strip(), s.subject_on(key)) for s in self._slots]

    def periods_on(self, d: date) -> List[DayPeriod]:
        key = weekday_key(d)
        if key is None:
            return []
        return self.periods_for(key)
