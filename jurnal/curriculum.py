"""
Semester curriculum plan (Prosem) lookup.

Each subject's plan is a list of rows. A row is active in one or more week
buckets (month-of-semester, week-of-month), or bound to one explicit date
written in its remark field. For a given date:

    1. a row pinned to exactly that date wins
    2. otherwise the first row active in the date's week bucket
    3. otherwise nothing is planned
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from jurnal.errors import AmbiguousCurriculumMatch
from jurnal.model import CurriculumRow
from jurnal.semester import SemesterPosition


logger = logging.getLogger(__name__)

# Upstream flags look like "b3_m2": month 3, week 2
_BUCKET_KEY = re.compile(r"^b([1-6])_m([1-5])$")

# Pinpoint dates are written as DD-MM-YYYY inside the remark text
_PINPOINT = re.compile(r"\b(\d{2})-(\d{2})-(\d{4})\b")

# Leading numbering / bullets of a learning-goal line ("1.2 - ", "• ")
_LEADING_NUMBERING = re.compile(r"^[0-9.\-\s•]+")


def first_line(text: str) -> str:
    """
    Return the first non-empty line of a text block without its numbering prefix.
    """
    for line in (text or "").splitlines():
        line = line.strip()
        if line:
            return _LEADING_NUMBERING.sub("", line).strip()
    return ""


def parse_week_buckets(flags: Dict[str, Any]) -> FrozenSet[Tuple[int, int]]:
    out = set()
    for key, value in (flags or {}).items():
        m = _BUCKET_KEY.match(str(key).strip())
        if m and value is True:
            out.add((int(m.group(1)), int(m.group(2))))
    return frozenset(out)


def parse_pinpoint(remark: str) -> Optional[date]:
    """
    Extract the first valid DD-MM-YYYY date from a remark, if any.
    """
    for m in _PINPOINT.finditer(remark or ""):
        try:
            return datetime.strptime(m.group(0), "%d-%m-%Y").date()
        except ValueError:
            continue
    return None


def row_from_dict(raw: Dict[str, Any]) -> CurriculumRow:
    """
    Build a CurriculumRow from one stored plan row.

    Accepts the editor's field names (atp, lingkupMateri, pekan, keterangan)
    as well as the plain ones (objective, material, week_buckets, date_override).
    """
    if "week_buckets" in raw:
        buckets = frozenset((int(m), int(w)) for m, w in raw.get("week_buckets") or [])
    else:
        buckets = parse_week_buckets(raw.get("pekan") or {})

    if "objective" in raw:
        objective = str(raw.get("objective") or "").strip()
    else:
        objective = first_line(str(raw.get("atp") or ""))

    material = str(raw.get("material", raw.get("lingkupMateri")) or "").strip()

    override: Optional[date] = None
    if raw.get("date_override"):
        override = date.fromisoformat(str(raw["date_override"]).strip())
    else:
        override = parse_pinpoint(str(raw.get("keterangan") or ""))

    return CurriculumRow(week_buckets=buckets, objective=objective, material=material, date_override=override)


class CurriculumPlan:
    """
    One subject's plan rows for one semester.

    With strict=True, two rows active in the same bucket raise
    AmbiguousCurriculumMatch instead of silently taking the first.
    """

    def __init__(self, rows: Sequence[CurriculumRow] = (), strict: bool = False) -> None:
        self.rows: Tuple[CurriculumRow, ...] = tuple(rows)
        self.strict = strict

    def __len__(self) -> int:
        return len(self.rows)

    def match(self, d: date, position: SemesterPosition) -> Optional[CurriculumRow]:
        for row in self.rows:
            if row.date_override == d:
                return row

        candidates: List[CurriculumRow] = [r for r in self.rows if position.bucket in r.week_buckets]
        if not candidates:
            return None
        if len(candidates) > 1:
            msg = (
                f"{len(candidates)} plan rows active in month {position.month_index} "
                f"week {position.week_index} ({d.isoformat()})"
            )
            if self.strict:
                raise AmbiguousCurriculumMatch(msg)
            logger.debug("%s; using the first one", msg)
        return candidates[0]
