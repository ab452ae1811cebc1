"""
Local JSON storage.

Reads the class data exported by the editors from a data directory:

    <data_dir>/<year>/calendar.json
    <data_dir>/<year>/<class>/subjects.json
    <data_dir>/<year>/<class>/timetable.json
    <data_dir>/<year>/<class>/prosem/<subject_key>_<semester>.json
    <data_dir>/toggles/<class>.json

<year> is the slugged academic year ("2025-2026"), <class> the slugged class
name ("kelas-4a"), <semester> "ganjil" or "genap". The automation toggles
belong to the class, not to an academic year, so they live outside the year
folders.

The subject list and the timetable are required; a missing calendar or plan
file simply means "no events" / "nothing planned yet".
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List

from jurnal.errors import DataUnavailable
from jurnal.model import AutomationToggles, CalendarEvent, CurriculumRow, Subject
from jurnal.semester import AcademicYear
from jurnal.sources import (
    class_slug,
    events_from_json,
    plan_rows_from_json,
    subjects_from_json,
    timetable_from_json,
)
from jurnal.timetable import WeeklyTimetable


logger = logging.getLogger(__name__)


def default_data_dir() -> Path:
    """
    Return the default data directory inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can pass their own directory.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data"


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise DataUnavailable(f"Missing data file: {path}") from exc
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DataUnavailable(f"Unreadable data file {path}: {exc}") from exc


class JsonFileSource:
    def __init__(self, data_dir: str | Path | None = None) -> None:
        self.data_dir = Path(data_dir) if data_dir is not None else default_data_dir()

    def year_dir(self, year: AcademicYear) -> Path:
        return self.data_dir / year.slug

    def class_dir(self, year: AcademicYear, class_name: str) -> Path:
        return self.year_dir(year) / class_slug(class_name)

    def toggles_path(self, class_name: str) -> Path:
        return self.data_dir / "toggles" / f"{class_slug(class_name)}.json"

    def get_subjects(self, year: AcademicYear, class_name: str) -> List[Subject]:
        return subjects_from_json(_read_json(self.class_dir(year, class_name) / "subjects.json"))

    def get_weekly_timetable(self, year: AcademicYear, class_name: str) -> WeeklyTimetable:
        return timetable_from_json(_read_json(self.class_dir(year, class_name) / "timetable.json"))

    def get_curriculum_plan(
        self, year: AcademicYear, class_name: str, subject_key: str, semester: str
    ) -> List[CurriculumRow]:
        path = self.class_dir(year, class_name) / "prosem" / f"{subject_key}_{semester.lower()}.json"
        if not path.exists():
            logger.debug("No plan file %s", path)
            return []
        return plan_rows_from_json(_read_json(path))

    def get_calendar_events(self, year: AcademicYear) -> List[CalendarEvent]:
        path = self.year_dir(year) / "calendar.json"
        if not path.exists():
            logger.info("No calendar file for %s, assuming no events", year.label)
            return []
        return events_from_json(_read_json(path))


# ---------------------------------------------------------------------------
# Automation toggles
# ---------------------------------------------------------------------------


def load_toggles(path: str | Path) -> AutomationToggles:
    """
    Load the automation toggles from toggles.json.

    Returns "all enabled" if the file does not exist or is invalid.
    """
    toggles_path = Path(path)

    # First run: file does not exist yet -> every subject automated
    if not toggles_path.exists():
        return AutomationToggles()

    try:
        data = json.loads(toggles_path.read_text(encoding="utf-8"))
        names = data.get("disabled_subjects", [])
        if not isinstance(names, list):
            return AutomationToggles()
        return AutomationToggles.disabling(x for x in names if isinstance(x, str))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        logger.warning("Ignoring unreadable toggles file %s", toggles_path)
        return AutomationToggles()


def save_toggles(disabled: Iterable[str], path: str | Path) -> None:
    """
    Save the disabled subject names to toggles.json (normalized, sorted).
    """
    toggles_path = Path(path)
    toggles_path.parent.mkdir(parents=True, exist_ok=True)

    norm = sorted({str(x).strip().lower() for x in disabled if str(x).strip()})
    payload = {"disabled_subjects": norm}

    toggles_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
