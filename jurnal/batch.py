"""
Batch generation and pagination.

A batch request (mode + anchor date) expands into a list of dates, each date is
resolved into one printable block, and the blocks are laid out on pages:

- Sundays and "Libur Semester" dates never produce a block
- holidays, events and days without lessons still do
- a block is never split: if it does not fit the remaining space, a new page starts
"""

from __future__ import annotations

import calendar
import logging
import math
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional, Union

from jurnal.calendar_index import format_date_id, weekday_name
from jurnal.errors import BatchCancelled, DataUnavailable
from jurnal.model import BatchResult, Block, DayResolution, Page
from jurnal.resolver import JournalInputs, resolve_day
from jurnal.semester import AcademicYear, semester_of


logger = logging.getLogger(__name__)

MODES = ("day", "week", "month", "semester", "range")


@dataclass(frozen=True)
class PageLayout:
    """
    Page geometry (millimetres) and the block height heuristic.

    Defaults match an F4 portrait sheet (215 x 330 mm).
    """

    page_height: float = 330.0
    margin_top: float = 10.0
    margin_bottom: float = 10.0
    header_height: float = 24.0
    row_height: float = 6.5
    empty_table_height: float = 8.0
    signature_height: float = 50.0
    block_gap: float = 10.0
    wrap_chars: int = 55
    wrap_chars_special: int = 30

    @property
    def bottom(self) -> float:
        return self.page_height - self.margin_bottom


# ---------------------------------------------------------------------------
# Date expansion
# ---------------------------------------------------------------------------


def expand_dates(mode: str, anchor: date, end: Optional[date] = None) -> List[date]:
    """
    Return the candidate dates of a request, in calendar order.

    'week' yields Monday..Saturday of the anchor's week, so Sunday is never a
    candidate. 'semester' spans the semester the anchor itself falls in.
    'range' needs an explicit end date.
    """
    if mode == "day":
        return [anchor]

    if mode == "week":
        monday = anchor - timedelta(days=anchor.weekday())
        return [monday + timedelta(days=i) for i in range(6)]

    if mode == "month":
        days = calendar.monthrange(anchor.year, anchor.month)[1]
        return [date(anchor.year, anchor.month, i) for i in range(1, days + 1)]

    if mode == "semester":
        first, last = AcademicYear.containing(anchor).semester_span(semester_of(anchor))
        return _span(first, last)

    if mode == "range":
        if end is None:
            raise ValueError("Range mode needs an end date.")
        if anchor > end:
            raise ValueError("Start date must not be after end date.")
        return _span(anchor, end)

    raise ValueError(f"Unknown batch mode: {mode!r} (expected one of {', '.join(MODES)})")


def _span(first: date, last: date) -> List[date]:
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def reserves_signature(day: DayResolution) -> bool:
    return len(day.entries) > 0


def estimate_block_height(day: DayResolution, layout: PageLayout) -> float:
    """
    Estimate the printed height of one day block.

    Each row takes as many lines as its longest text column needs at a fixed
    characters-per-line width (narrower on holiday/event days, where the
    remark column is wide).
    """
    if day.entries:
        wrap = layout.wrap_chars_special if day.event is not None else layout.wrap_chars
        table = 0.0
        for e in day.entries:
            longest = max(len(e.objective), len(e.material))
            lines = max(1, math.ceil(longest / wrap))
            table += lines * layout.row_height
    else:
        table = layout.empty_table_height

    height = layout.header_height + table + layout.block_gap
    if reserves_signature(day):
        height += layout.signature_height
    return height


def paginate(days: List[DayResolution], layout: PageLayout) -> List[Page]:
    """
    Place day blocks on pages without ever splitting a block.

    A block taller than a whole page still goes on its own page rather than
    looping on page breaks.
    """
    pages: List[Page] = []
    if not days:
        return pages

    page = Page(number=1)
    pages.append(page)
    y = layout.margin_top

    for day in days:
        height = estimate_block_height(day, layout)
        if y + height > layout.bottom and page.blocks:
            page = Page(number=page.number + 1)
            pages.append(page)
            y = layout.margin_top

        page.blocks.append(Block(day=day, top=y, height=height, reserves_signature=reserves_signature(day)))
        y += height

    return pages


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


def export_name(class_name: str, mode: str) -> str:
    slug = re.sub(r"\s+", "_", class_name.strip())
    return f"Jurnal-Pembelajaran-{slug}-{mode}"


def _error_day(d: date, message: str) -> DayResolution:
    return DayResolution(
        date=d,
        weekday_name=weekday_name(d),
        date_label=format_date_id(d),
        entries=(),
        is_non_instructional=True,
        reason=message,
        is_error=True,
    )


def _inputs_by_year(inputs, candidates: List[date]) -> Dict[AcademicYear, JournalInputs]:
    if isinstance(inputs, JournalInputs):
        return {AcademicYear.containing(d): inputs for d in candidates}

    missing = sorted({AcademicYear.containing(d).label for d in candidates} - {y.label for y in inputs})
    if missing:
        raise DataUnavailable(f"No journal data loaded for academic year(s) {', '.join(missing)}")
    return dict(inputs)


def build_batch(
    mode: str,
    anchor: date,
    inputs: Union[JournalInputs, Mapping[AcademicYear, JournalInputs]],
    class_name: str,
    end: Optional[date] = None,
    layout: Optional[PageLayout] = None,
    cancel: Optional[Any] = None,
) -> BatchResult:
    """
    Resolve every printable date of a request and paginate the blocks.

    inputs is either one JournalInputs used for every date, or the inputs of
    each academic year the request touches (see gather_year_inputs). A date is
    resolved with the calendar and plans of its own year, but a semester break
    in any loaded calendar drops it: the old year's "Libur Semester Genap"
    usually runs into the first days of July.

    cancel may be any object with an is_set() method (e.g. threading.Event);
    once set, BatchCancelled is raised and nothing is returned.
    """
    layout = layout or PageLayout()
    candidates = expand_dates(mode, anchor, end=end)
    by_year = _inputs_by_year(inputs, candidates)
    calendars = [i.calendar for i in by_year.values()]

    printed: List[date] = []
    days: List[DayResolution] = []
    for d in candidates:
        if cancel is not None and cancel.is_set():
            raise BatchCancelled(f"Batch '{mode}' cancelled at {d.isoformat()}")

        if d.weekday() == 6:
            continue
        if any(c.is_semester_break(d) for c in calendars):
            logger.debug("Skipping semester break %s", d.isoformat())
            continue

        try:
            day = resolve_day(d, by_year[AcademicYear.containing(d)])
        except Exception as exc:
            logger.exception("Could not resolve journal for %s", d.isoformat())
            day = _error_day(d, f"error: {exc}")

        printed.append(d)
        days.append(day)

    pages = paginate(days, layout)
    logger.info("Batch %s from %s: %d day(s) on %d page(s)", mode, anchor.isoformat(), len(days), len(pages))

    return BatchResult(
        mode=mode,
        class_name=class_name,
        dates=printed,
        pages=pages,
        export_name=export_name(class_name, mode),
    )
