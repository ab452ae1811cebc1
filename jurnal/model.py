"""
Central data model definitions used across the project.

This module defines the canonical structure of the journal objects so that:
- the data sources, the resolver and the batcher share the same field names
- derived values (entries, day resolutions, pages) stay immutable
- renderers only ever see plain, predictable attributes
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Iterable, List, Optional, Tuple


GANJIL = "Ganjil"
GENAP = "Genap"

HOLIDAY = "holiday"
EVENT = "event"
ASSESSMENT = "assessment"


@dataclass(frozen=True)
class CalendarEvent:
    """
    One record of the academic calendar (holiday, school event or assessment day).
    """

    date: date
    type: str
    description: str

    @property
    def is_holiday(self) -> bool:
        return self.type == HOLIDAY


@dataclass(frozen=True)
class Subject:
    """
    A subject taught in one class, as listed by the subject editor.
    """

    code: str
    name: str

    @property
    def curriculum_key(self) -> str:
        """
        Key under which the subject's semester plan is stored.

        Arts subjects share one code ("SB"), so they are keyed by their slugged
        name instead ("Seni Musik" -> "seni-musik").
        """
        name = self.name.strip().lower()
        if name.startswith("seni "):
            return "-".join(name.split())
        return self.code.strip().lower()


@dataclass(frozen=True)
class CurriculumRow:
    """
    One planned learning unit of a subject's semester plan.

    week_buckets holds (month_index, week_index) pairs, both 1-based.
    """

    week_buckets: FrozenSet[Tuple[int, int]]
    objective: str
    material: str
    date_override: Optional[date] = None


@dataclass(frozen=True)
class AutomationToggles:
    """
    Subjects whose journal content is NOT filled automatically.

    An empty toggle set means every subject is automated.
    """

    disabled: FrozenSet[str] = frozenset()

    @classmethod
    def disabling(cls, names: Iterable[str]) -> "AutomationToggles":
        return cls(frozenset(n.strip().lower() for n in names if n.strip()))

    def is_enabled(self, subject_name: str) -> bool:
        return subject_name.strip().lower() not in self.disabled


@dataclass(frozen=True)
class JournalEntry:
    """
    One row of the daily journal table: a run of periods teaching one subject.

    sequence is None for the placeholder row of a holiday/event day.
    Empty objective/material means the content is not planned yet.
    """

    sequence: Optional[int]
    period_range: str
    subject_name: str
    objective: str
    material: str
    note: str = ""

    @property
    def is_unplanned(self) -> bool:
        return not self.objective and not self.material


@dataclass(frozen=True)
class DayResolution:
    """
    The resolved journal content of one calendar date.
    """

    date: date
    weekday_name: str
    date_label: str
    entries: Tuple[JournalEntry, ...]
    is_non_instructional: bool
    reason: Optional[str] = None
    event: Optional[CalendarEvent] = None
    is_error: bool = False


@dataclass
class Block:
    """
    A printable block (one day) placed on a page.
    """

    day: DayResolution
    top: float
    height: float
    reserves_signature: bool


@dataclass
class Page:
    number: int
    blocks: List[Block] = field(default_factory=list)


@dataclass
class BatchResult:
    """
    The paginated output of one batch request.
    """

    mode: str
    class_name: str
    dates: List[date]
    pages: List[Page]
    export_name: str

    @property
    def blocks(self) -> List[Block]:
        return [b for p in self.pages for b in p.blocks]
