"""
Upstream data access.

The journal reads four things that other editors own: the class's subjects,
its weekly timetable, each subject's semester plan and the academic calendar.
A JournalSource provides them; gather_year_inputs() fetches everything a batch
needs exactly once, before any date is resolved. Any failure there aborts the
whole batch with one DataUnavailable error.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Protocol

from jurnal.calendar_index import CalendarIndex
from jurnal.curriculum import CurriculumPlan, row_from_dict
from jurnal.errors import DataUnavailable
from jurnal.model import AutomationToggles, CalendarEvent, CurriculumRow, Subject
from jurnal.resolver import JournalInputs, plan_key
from jurnal.semester import AcademicYear, semester_of
from jurnal.timetable import LessonSlot, WeeklyTimetable


logger = logging.getLogger(__name__)


class JournalSource(Protocol):
    def get_subjects(self, year: AcademicYear, class_name: str) -> List[Subject]: ...

    def get_weekly_timetable(self, year: AcademicYear, class_name: str) -> WeeklyTimetable: ...

    def get_curriculum_plan(
        self, year: AcademicYear, class_name: str, subject_key: str, semester: str
    ) -> List[CurriculumRow]: ...

    def get_calendar_events(self, year: AcademicYear) -> List[CalendarEvent]: ...


def class_slug(class_name: str) -> str:
    return "-".join(class_name.strip().lower().split())


# ---------------------------------------------------------------------------
# Raw JSON -> model
# ---------------------------------------------------------------------------


def subjects_from_json(raw: Any) -> List[Subject]:
    if not isinstance(raw, list):
        raise ValueError("subjects: expected a list")
    out: List[Subject] = []
    for s in raw:
        name = str(s.get("name", "") or "").strip()
        if name:
            out.append(Subject(code=str(s.get("code", "") or "").strip(), name=name))
    return out


def timetable_from_json(raw: Any) -> WeeklyTimetable:
    """
    Accepts {"timeSlots": [...]} as stored by the timetable editor, or the bare list.
    """
    rows = raw.get("timeSlots", []) if isinstance(raw, dict) else raw
    if not isinstance(rows, list):
        raise ValueError("timetable: expected a list of time slots")
    slots = [
        LessonSlot(
            period=str(r.get("lessonNumber", r.get("period", "")) or ""),
            time_range=str(r.get("timeRange", r.get("time_range", "")) or ""),
            subjects={str(k).lower(): str(v or "") for k, v in (r.get("subjects") or {}).items()},
        )
        for r in rows
    ]
    return WeeklyTimetable(slots)


def events_from_json(raw: Any) -> List[CalendarEvent]:
    """
    Accepts {"events": [...]} or the bare list. Records without a valid date are skipped.
    """
    rows = raw.get("events", []) if isinstance(raw, dict) else raw
    if not isinstance(rows, list):
        raise ValueError("calendar: expected a list of events")
    out: List[CalendarEvent] = []
    for r in rows:
        try:
            d = date.fromisoformat(str(r.get("date", "")).strip())
        except ValueError:
            logger.warning("Calendar event without a valid date skipped: %r", r)
            continue
        out.append(
            CalendarEvent(
                date=d,
                type=str(r.get("type", "event") or "event").strip().lower(),
                description=str(r.get("description", "") or "").strip(),
            )
        )
    return out


def plan_rows_from_json(raw: Any) -> List[CurriculumRow]:
    """
    Accepts {"rows": [...]} as stored by the plan editor, or the bare list.
    """
    rows = raw.get("rows", []) if isinstance(raw, dict) else raw
    if not isinstance(rows, list):
        raise ValueError("curriculum plan: expected a list of rows")
    return [row_from_dict(r) for r in rows]


# ---------------------------------------------------------------------------
# Single up-front fetch
# ---------------------------------------------------------------------------


def gather_inputs(
    source: JournalSource,
    year: AcademicYear,
    class_name: str,
    semesters: Iterable[str],
    toggles: AutomationToggles = AutomationToggles(),
    strict: bool = False,
) -> JournalInputs:
    """
    Fetch everything needed to resolve dates of the given semesters.

    Raises DataUnavailable if any fetch fails; nothing is resolved in that case.
    """
    try:
        subjects = source.get_subjects(year, class_name)
        timetable = source.get_weekly_timetable(year, class_name)
        events = source.get_calendar_events(year)

        plans: Dict[Any, CurriculumPlan] = {}
        for semester in sorted(set(semesters)):
            for subject in subjects:
                rows = source.get_curriculum_plan(year, class_name, subject.curriculum_key, semester)
                plans[plan_key(subject.name, semester)] = CurriculumPlan(rows, strict=strict)
    except DataUnavailable:
        raise
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        raise DataUnavailable(f"Could not load journal data for {class_name} {year.label}: {exc}") from exc

    logger.info(
        "Loaded %d subject(s), %d slot(s), %d calendar event(s) for %s %s",
        len(subjects),
        len(timetable.slots),
        len(events),
        class_name,
        year.label,
    )
    return JournalInputs(timetable=timetable, calendar=CalendarIndex(events), plans=plans, toggles=toggles)


def gather_year_inputs(
    source: JournalSource,
    class_name: str,
    dates: Iterable[date],
    toggles: AutomationToggles = AutomationToggles(),
    strict: bool = False,
) -> Dict[AcademicYear, JournalInputs]:
    """
    Fetch the inputs of every academic year the dates fall in, keyed by year.

    A week around Jul 1 touches two years: the June days need the old year's
    calendar and Genap plans, the July days the new year's. Every year is
    loaded before anything is resolved.
    """
    semesters_by_year: Dict[AcademicYear, set] = {}
    for d in dates:
        semesters_by_year.setdefault(AcademicYear.containing(d), set()).add(semester_of(d))

    return {
        year: gather_inputs(source, year, class_name, semesters, toggles=toggles, strict=strict)
        for year, semesters in sorted(semesters_by_year.items(), key=lambda item: item[0].start_year)
    }
