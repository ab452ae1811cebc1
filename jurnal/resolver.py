"""
Daily journal resolution.

Given one date and the (already fetched) class inputs, decide what the journal
page for that date contains:

    Sunday             -> non-instructional, no rows
    calendar event     -> one placeholder row carrying the event description
    no lessons         -> non-instructional, no rows
    otherwise          -> one row per run of consecutive same-subject periods,
                          content looked up in the subject's semester plan

Resolution is pure: the same date and inputs always give the same result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

from jurnal.calendar_index import CalendarIndex, format_date_id, weekday_name
from jurnal.curriculum import CurriculumPlan
from jurnal.model import AutomationToggles, DayResolution, JournalEntry
from jurnal.semester import semester_position
from jurnal.timetable import DayPeriod, WeeklyTimetable


REASON_SUNDAY = "Sunday"
REASON_NO_SCHEDULE = "no schedule"

NOTE_MANUAL = "filled by subject teacher"

CEREMONY_NAMES = frozenset({"upacara", "upacara bendera"})

PLACEHOLDER = "-"


def plan_key(subject_name: str, semester: str) -> Tuple[str, str]:
    return (subject_name.strip().lower(), semester)


@dataclass(frozen=True)
class JournalInputs:
    """
    Everything the resolver reads for one class and academic year.

    plans maps plan_key(subject name, semester) to that subject's plan.
    """

    timetable: WeeklyTimetable
    calendar: CalendarIndex
    plans: Dict[Tuple[str, str], CurriculumPlan] = field(default_factory=dict)
    toggles: AutomationToggles = AutomationToggles()

    def plan_for(self, subject_name: str, semester: str) -> Optional[CurriculumPlan]:
        return self.plans.get(plan_key(subject_name, semester))


@dataclass
class _Run:
    subject: str
    first: str
    last: str

    @property
    def period_range(self) -> str:
        return self.first if self.first == self.last else f"{self.first}-{self.last}"


def group_runs(periods: List[DayPeriod]) -> List[_Run]:
    """
    Collapse consecutive periods of the same subject into runs.

    Breaks and empty periods end the current run, so a subject that comes back
    after a break starts a new run.
    """
    runs: List[_Run] = []
    current: Optional[_Run] = None
    for p in periods:
        if not p.subject or p.is_break:
            current = None
            continue
        if current is not None and current.subject == p.subject:
            current.last = p.period
            continue
        current = _Run(subject=p.subject, first=p.period, last=p.period)
        runs.append(current)
    return runs


def _content_for(subject: str, d: date, inputs: JournalInputs) -> Tuple[str, str, str]:
    """
    Return (objective, material, note) for one run.
    """
    if subject.strip().lower() in CEREMONY_NAMES:
        return PLACEHOLDER, PLACEHOLDER, ""

    if not inputs.toggles.is_enabled(subject):
        return PLACEHOLDER, PLACEHOLDER, NOTE_MANUAL

    position = semester_position(d)
    plan = inputs.plan_for(subject, position.semester)
    if plan is None:
        return "", "", ""

    row = plan.match(d, position)
    if row is None:
        return "", "", ""
    return row.objective, row.material, ""


def resolve_day(d: date, inputs: JournalInputs) -> DayResolution:
    """
    Resolve the journal content of one date.
    """
    name = weekday_name(d)
    label = format_date_id(d)

    if d.weekday() == 6:
        return DayResolution(
            date=d,
            weekday_name=name,
            date_label=label,
            entries=(),
            is_non_instructional=True,
            reason=REASON_SUNDAY,
        )

    event = inputs.calendar.lookup(d)
    if event is not None:
        placeholder = JournalEntry(
            sequence=None,
            period_range=PLACEHOLDER,
            subject_name=PLACEHOLDER,
            objective=PLACEHOLDER,
            material=PLACEHOLDER,
            note=event.description,
        )
        return DayResolution(
            date=d,
            weekday_name=name,
            date_label=label,
            entries=(placeholder,),
            is_non_instructional=event.is_holiday,
            reason=event.description,
            event=event,
        )

    runs = group_runs(inputs.timetable.periods_on(d))
    if not runs:
        return DayResolution(
            date=d,
            weekday_name=name,
            date_label=label,
            entries=(),
            is_non_instructional=True,
            reason=REASON_NO_SCHEDULE,
        )

    entries: List[JournalEntry] = []
    for seq, run in enumerate(runs, start=1):
        objective, material, note = _content_for(run.subject, d, inputs)
        entries.append(
            JournalEntry(
                sequence=seq,
                period_range=run.period_range,
                subject_name=run.subject,
                objective=objective,
                material=material,
                note=note,
            )
        )

    return DayResolution(
        date=d,
        weekday_name=name,
        date_label=label,
        entries=tuple(entries),
        is_non_instructional=False,
    )
