from __future__ import annotations

import logging
from typing import Any, List, Optional
from urllib.parse import quote

import requests

from jurnal.errors import DataUnavailable
from jurnal.model import CalendarEvent, CurriculumRow, Subject
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

TIMEOUT_SECONDS = 30


# ---------------------------------------------------------------------------
# HTTP source
# ---------------------------------------------------------------------------


class HttpSource:
    """
    Read the class data from a JSON API laid out like the local data directory:

        GET <base>/<year>/calendar
        GET <base>/<year>/<class>/subjects
        GET <base>/<year>/<class>/timetable
        GET <base>/<year>/<class>/prosem/<subject_key>_<semester>

    A 404 on a plan means "nothing planned yet"; every other failure is DataUnavailable.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url] + [quote(p, safe="") for p in parts])

    def _get_json(self, url: str, missing_ok: bool = False) -> Any:
        logger.debug("GET %s", url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
            if missing_ok and resp.status_code == 404:
                return None
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as exc:
            raise DataUnavailable(f"Request failed: {url}: {exc}") from exc
        except ValueError as exc:
            raise DataUnavailable(f"Invalid JSON from {url}") from exc

    def get_subjects(self, year: AcademicYear, class_name: str) -> List[Subject]:
        return subjects_from_json(self._get_json(self._url(year.slug, class_slug(class_name), "subjects")))

    def get_weekly_timetable(self, year: AcademicYear, class_name: str) -> WeeklyTimetable:
        return timetable_from_json(self._get_json(self._url(year.slug, class_slug(class_name), "timetable")))

    def get_curriculum_plan(
        self, year: AcademicYear, class_name: str, subject_key: str, semester: str
    ) -> List[CurriculumRow]:
        url = self._url(year.slug, class_slug(class_name), "prosem", f"{subject_key}_{semester.lower()}")
        raw = self._get_json(url, missing_ok=True)
        if raw is None:
            return []
        return plan_rows_from_json(raw)

    def get_calendar_events(self, year: AcademicYear) -> List[CalendarEvent]:
        return events_from_json(self._get_json(self._url(year.slug, "calendar")))
