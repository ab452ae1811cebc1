"""
Unit tests for the semester clock.

Rules:
- Jul-Dec -> Ganjil (month index 1..6), Jan-Jun -> Genap (month index 1..6)
- week index = ceil(day / 7), days 29-31 fold into week 5
"""

import unittest
from datetime import date, timedelta

from jurnal.model import GANJIL, GENAP
from jurnal.semester import AcademicYear, semester_position


class TestSemesterPosition(unittest.TestCase):
    def test_first_week_of_ganjil(self) -> None:
        pos = semester_position(date(2025, 7, 1))
        self.assertEqual(pos.semester, GANJIL)
        self.assertEqual(pos.month_index, 1)
        self.assertEqual(pos.week_index, 1)

    def test_day_boundaries_of_weeks(self) -> None:
        self.assertEqual(semester_position(date(2025, 7, 7)).week_index, 1)
        self.assertEqual(semester_position(date(2025, 7, 8)).week_index, 2)
        self.assertEqual(semester_position(date(2025, 7, 14)).week_index, 2)
        self.assertEqual(semester_position(date(2025, 7, 28)).week_index, 4)

    def test_end_of_month_folds_into_week_five(self) -> None:
        self.assertEqual(semester_position(date(2025, 7, 29)).week_index, 5)
        self.assertEqual(semester_position(date(2025, 7, 31)).week_index, 5)

    def test_december_is_last_ganjil_month(self) -> None:
        pos = semester_position(date(2025, 12, 25))
        self.assertEqual((pos.semester, pos.month_index, pos.week_index), (GANJIL, 6, 4))

    def test_genap_months(self) -> None:
        pos = semester_position(date(2026, 1, 5))
        self.assertEqual((pos.semester, pos.month_index, pos.week_index), (GENAP, 1, 1))
        pos = semester_position(date(2026, 6, 30))
        self.assertEqual((pos.semester, pos.month_index, pos.week_index), (GENAP, 6, 5))

    def test_indexes_always_in_range(self) -> None:
        # every day of a leap year and its neighbours
        d = date(2023, 12, 1)
        while d <= date(2025, 1, 31):
            pos = semester_position(d)
            self.assertTrue(1 <= pos.week_index <= 5, d)
            self.assertTrue(1 <= pos.month_index <= 6, d)
            d += timedelta(days=1)


class TestAcademicYear(unittest.TestCase):
    def test_parse_label(self) -> None:
        year = AcademicYear.parse("2025/2026")
        self.assertEqual(year.start_year, 2025)
        self.assertEqual(year.label, "2025/2026")
        self.assertEqual(year.slug, "2025-2026")

    def test_invalid_labels(self) -> None:
        for label in ("", "2025", "2025/2027", "abcd/efgh"):
            with self.assertRaises(ValueError):
                AcademicYear.parse(label)

    def test_semester_spans(self) -> None:
        year = AcademicYear.parse("2025/2026")
        self.assertEqual(year.semester_span(GANJIL), (date(2025, 7, 1), date(2025, 12, 31)))
        self.assertEqual(year.semester_span(GENAP), (date(2026, 1, 1), date(2026, 6, 30)))

    def test_containing(self) -> None:
        self.assertEqual(AcademicYear.containing(date(2025, 7, 1)).label, "2025/2026")
        self.assertEqual(AcademicYear.containing(date(2026, 6, 30)).label, "2025/2026")
        self.assertTrue(AcademicYear.parse("2025/2026").contains(date(2026, 2, 1)))
        self.assertFalse(AcademicYear.parse("2025/2026").contains(date(2026, 7, 1)))


if __name__ == "__main__":
    unittest.main()
