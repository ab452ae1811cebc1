"""
Tests for CLI entry points.

These tests focus on:
- argument validation
- one full day/batch/export run against a temporary data directory
- persistence of automation toggles in a temporary directory, per class
  and independent of the academic year
- a week around Jul 1 resolved against both academic years
"""

import json
import tempfile
import unittest
from pathlib import Path

from jurnal.cli import main
from jurnal.storage import load_toggles


def _write(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def _seed(root: Path, year: str = "2025-2026") -> None:
    class_dir = root / year / "kelas-4a"
    _write(class_dir / "subjects.json", [{"code": "MTK", "name": "Matematika"}])
    _write(
        class_dir / "timetable.json",
        {"timeSlots": [{"lessonNumber": "1", "timeRange": "07.00", "subjects": {"senin": "Matematika"}}]},
    )


class TestCLI(unittest.TestCase):
    def _run(self, argv) -> int:
        with self.assertRaises(SystemExit) as ctx:
            main(argv)
        return ctx.exception.code

    def test_class_is_required(self) -> None:
        self.assertNotEqual(self._run(["day", "2025-07-14"]), 0)

    def test_invalid_date(self) -> None:
        self.assertNotEqual(self._run(["day", "14.07.2025", "--class", "Kelas 4A"]), 0)

    def test_missing_data_is_one_error(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            code = self._run(["batch", "week", "2025-07-14", "--class", "Kelas 4A", "--data-dir", d])
            self.assertEqual(code, 1)

    def test_day_and_batch(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            _seed(Path(d))
            common = ["--class", "Kelas 4A", "--data-dir", d]
            self.assertEqual(self._run(["day", "2025-07-14"] + common), 0)
            self.assertEqual(self._run(["batch", "month", "2025-07-14"] + common), 0)
            self.assertEqual(self._run(["range", "2025-07-14", "2025-07-30"] + common), 0)

    def test_export(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            _seed(Path(d))
            out = Path(d) / "out"
            code = self._run(
                ["export", "week", "2025-07-14", "--class", "Kelas 4A", "--data-dir", d, "--out", str(out)]
            )
            self.assertEqual(code, 0)
            self.assertTrue((out / "Jurnal-Pembelajaran-Kelas_4A-week.json").exists())

    def test_range_export_needs_end(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            _seed(Path(d))
            code = self._run(["export", "range", "2025-07-14", "--class", "Kelas 4A", "--data-dir", d])
            self.assertEqual(code, 1)

    def test_disable_and_enable(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            common = ["--class", "Kelas 4A", "--data-dir", d]
            toggles_path = Path(d) / "toggles" / "kelas-4a.json"

            self.assertEqual(self._run(["disable", "Pendidikan Agama"] + common), 0)
            self.assertFalse(load_toggles(toggles_path).is_enabled("Pendidikan Agama"))

            self.assertEqual(self._run(["enable", "Pendidikan Agama"] + common), 0)
            self.assertTrue(load_toggles(toggles_path).is_enabled("Pendidikan Agama"))

    def test_disabled_subject_applies_in_every_year(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            _seed(Path(d), "2024-2025")
            _seed(Path(d), "2025-2026")
            common = ["--class", "Kelas 4A", "--data-dir", d]
            self.assertEqual(self._run(["disable", "Matematika"] + common), 0)

            for anchor in ("2024-07-15", "2025-07-14"):
                out = Path(d) / "out" / anchor
                self.assertEqual(self._run(["export", "day", anchor, "--out", str(out)] + common), 0)
                data = json.loads((out / "Jurnal-Pembelajaran-Kelas_4A-day.json").read_text(encoding="utf-8"))
                entry = data["pages"][0]["blocks"][0]["entries"][0]
                self.assertEqual(entry["note"], "filled by subject teacher")

    def test_export_week_across_academic_years(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            _seed(root, "2025-2026")
            _seed(root, "2026-2027")
            breaks = ["2026-06-30", "2026-07-01", "2026-07-02", "2026-07-03", "2026-07-04"]
            _write(
                root / "2025-2026" / "calendar.json",
                {"events": [{"date": x, "type": "holiday", "description": "Libur Semester Genap"} for x in breaks]},
            )
            for year, text in (("2025-2026", "GENAP-2025"), ("2026-2027", "GENAP-2026")):
                _write(
                    root / year / "kelas-4a" / "prosem" / "mtk_genap.json",
                    {"rows": [{"atp": text, "lingkupMateri": text, "pekan": {"b6_m5": True}}]},
                )

            out = root / "out"
            common = ["--class", "Kelas 4A", "--data-dir", d, "--out", str(out)]
            self.assertEqual(self._run(["export", "week", "2026-07-01"] + common), 0)

            data = json.loads((out / "Jurnal-Pembelajaran-Kelas_4A-week.json").read_text(encoding="utf-8"))
            blocks = [b for p in data["pages"] for b in p["blocks"]]
            self.assertEqual([b["date"] for b in blocks], ["2026-06-29"])
            self.assertEqual(blocks[0]["entries"][0]["objective"], "GENAP-2025")

    def test_year_flag_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            code = self._run(["disable", "PJOK", "--class", "Kelas 4A", "--data-dir", d, "--year", "2025/2026"])
            self.assertNotEqual(code, 0)


if __name__ == "__main__":
    unittest.main()
