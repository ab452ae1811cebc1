"""
Semester clock.

Maps a calendar date to its position inside the semester plan:

    semester     Ganjil (Jul-Dec) or Genap (Jan-Jun), always from the date's month
    month_index  1..6, the month's ordinal inside that semester
    week_index   1..5, ceil(day / 7) with the 29th-31st folded into week 5
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Tuple

from jurnal.model import GANJIL, GENAP


_YEAR_LABEL = re.compile(r"^\s*(\d{4})\s*/\s*(\d{4})\s*$")


@dataclass(frozen=True)
class SemesterPosition:
    semester: str
    month_index: int
    week_index: int

    @property
    def bucket(self) -> Tuple[int, int]:
        return (self.month_index, self.week_index)


def semester_of(d: date) -> str:
    return GANJIL if d.month >= 7 else GENAP


def semester_position(d: date) -> SemesterPosition:
    """
    Return the (semester, month_index, week_index) position of a date.

    Total for every date; there is no academic year bound check here.
    """
    semester = semester_of(d)
    first_month = 7 if semester == GANJIL else 1
    month_index = d.month - first_month + 1

    week_index = (d.day - 1) // 7 + 1
    week_index = max(1, min(week_index, 5))

    return SemesterPosition(semester=semester, month_index=month_index, week_index=week_index)


@dataclass(frozen=True)
class AcademicYear:
    """
    An academic year such as "2025/2026".

    Ganjil runs Jul 1 - Dec 31 of the start year, Genap Jan 1 - Jun 30 of the end year.
    """

    start_year: int

    @classmethod
    def parse(cls, label: str) -> "AcademicYear":
        m = _YEAR_LABEL.match(label or "")
        if not m:
            raise ValueError(f"Invalid academic year: {label!r} (expected 'YYYY/YYYY')")
        start, end = int(m.group(1)), int(m.group(2))
        if end != start + 1:
            raise ValueError(f"Invalid academic year: {label!r} (years must be consecutive)")
        return cls(start_year=start)

    @classmethod
    def containing(cls, d: date) -> "AcademicYear":
        return cls(start_year=d.year if d.month >= 7 else d.year - 1)

    @property
    def label(self) -> str:
        return f"{self.start_year}/{self.start_year + 1}"

    @property
    def slug(self) -> str:
        return f"{self.start_year}-{self.start_year + 1}"

    def semester_span(self, semester: str) -> Tuple[date, date]:
        """
        Return the first and last calendar day of a semester of this year.
        """
        if semester == GANJIL:
            year, first_month, last_month = self.start_year, 7, 12
        elif semester == GENAP:
            year, first_month, last_month = self.start_year + 1, 1, 6
        else:
            raise ValueError(f"Unknown semester: {semester!r}")

        last_day = calendar.monthrange(year, last_month)[1]
        return date(year, first_month, 1), date(year, last_month, last_day)

    def contains(self, d: date) -> bool:
        start, _ = self.semester_span(GANJIL)
        _, end = self.semester_span(GENAP)
        return start <= d <= end
