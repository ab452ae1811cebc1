"""
Academic calendar lookup.

Holidays and school events are keyed by date. An event on a date overrides the
timetable for that day; a "Libur Semester ..." event additionally removes the
date from every printed batch.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, Optional

from jurnal.model import CalendarEvent


logger = logging.getLogger(__name__)

SEMESTER_BREAK_MARKER = "libur semester"

# Monday first, matching date.weekday()
WEEKDAY_NAMES = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")

MONTH_NAMES = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)


def weekday_name(d: date) -> str:
    return WEEKDAY_NAMES[d.weekday()]


def format_date_id(d: date) -> str:
    """
    Format a date the way the journal header prints it, e.g. 'Senin, 14 Juli 2025'.
    """
    return f"{weekday_name(d)}, {d.day} {MONTH_NAMES[d.month - 1]} {d.year}"


class CalendarIndex:
    """
    Date -> CalendarEvent index for one academic year.

    At most one event is kept per date; when the upstream list holds several,
    the first one wins.
    """

    def __init__(self, events: Iterable[CalendarEvent] = ()) -> None:
        self._by_date: Dict[date, CalendarEvent] = {}
        for ev in events:
            if ev.date in self._by_date:
                logger.warning(
                    "Duplicate calendar event on %s ignored: %r (keeping %r)",
                    ev.date.isoformat(),
                    ev.description,
                    self._by_date[ev.date].description,
                )
                continue
            self._by_date[ev.date] = ev

    def __len__(self) -> int:
        return len(self._by_date)

    def lookup(self, d: date) -> Optional[CalendarEvent]:
        return self._by_date.get(d)

    def is_semester_break(self, d: date) -> bool:
        ev = self._by_date.get(d)
        if ev is None:
            return False
        return SEMESTER_BREAK_MARKER in ev.description.lower()
