"""
CLI (Command Line Interface).

Quick terminal commands for previewing and exporting the daily journal, e.g.:

    jurnal day 2025-07-14 --class "Kelas 4A"
    jurnal batch week 2025-07-16 --class "Kelas 4A"
    jurnal range 2025-07-14 2025-08-02 --class "Kelas 4A"
    jurnal export semester 2025-07-14 --class "Kelas 4A" --out out/
    jurnal disable "Pendidikan Agama" --class "Kelas 4A"
    jurnal enable "Pendidikan Agama" --class "Kelas 4A"

Data comes from --data-dir (local JSON files, the default) or --source-url
(the JSON API). All data is loaded once before anything is resolved. Each
date is resolved against the academic year it falls in, so a request around
Jul 1 reads both years' calendars and plans.
"""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from jurnal.batch import MODES, build_batch, expand_dates
from jurnal.errors import JournalError
from jurnal.export_json import UNPLANNED_LABEL, display_text, export_batch_json
from jurnal.fetch import HttpSource
from jurnal.model import BatchResult, DayResolution
from jurnal.resolver import JournalInputs, resolve_day
from jurnal.semester import AcademicYear
from jurnal.sources import JournalSource, gather_year_inputs
from jurnal.storage import JsonFileSource, load_toggles, save_toggles


console = Console()


def _iso_date(text: str) -> date:
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {text!r} (expected YYYY-MM-DD)")


def _source(args: argparse.Namespace) -> JournalSource:
    if args.source_url:
        return HttpSource(args.source_url)
    return JsonFileSource(args.data_dir)


def _toggles_path(args: argparse.Namespace) -> Path:
    return JsonFileSource(args.data_dir).toggles_path(args.class_name)


def _load_inputs(args: argparse.Namespace, dates: Iterable[date]) -> Dict[AcademicYear, JournalInputs]:
    toggles = load_toggles(_toggles_path(args))
    return gather_year_inputs(_source(args), args.class_name, dates, toggles=toggles, strict=args.strict)


def _print_day(day: DayResolution) -> None:
    title = day.date_label
    if day.reason:
        title = f"{title}  ({day.reason})"

    if not day.entries:
        console.print(f"[bold]{title}[/bold]")
        console.print("  - no lessons -")
        return

    table = Table(title=title, box=box.SIMPLE_HEAVY, show_lines=False)
    table.add_column("No", justify="center")
    table.add_column("Jam Ke-", justify="center")
    table.add_column("Mata Pelajaran")
    table.add_column("Tujuan Pembelajaran")
    table.add_column("Materi")
    table.add_column("Ket")

    for e in day.entries:
        table.add_row(
            "-" if e.sequence is None else str(e.sequence),
            e.period_range,
            e.subject_name,
            display_text(e.objective),
            display_text(e.material),
            e.note,
        )
    console.print(table)


def _print_batch(result: BatchResult) -> None:
    print(f"{result.export_name}: {len(result.dates)} day(s) on {len(result.pages)} page(s)")
    for page in result.pages:
        print(f"Page {page.number}")
        for b in page.blocks:
            day = b.day
            if day.is_error:
                status = f"ERROR {day.reason}"
            elif day.event is not None:
                status = f"{day.event.type}: {day.reason}"
            elif not day.entries:
                status = day.reason or ""
            else:
                unplanned = sum(1 for e in day.entries if e.is_unplanned)
                status = f"{len(day.entries)} entr{'y' if len(day.entries) == 1 else 'ies'}"
                if unplanned:
                    status += f", {unplanned} {UNPLANNED_LABEL}"
            print(f"  {day.date.isoformat()} {day.weekday_name:<7} {status}")


def _cmd_day(args: argparse.Namespace) -> int:
    """
    Resolve one date and print its journal table.
    """
    inputs = _load_inputs(args, [args.date])
    _print_day(resolve_day(args.date, inputs[AcademicYear.containing(args.date)]))
    return 0


def _run_batch(args: argparse.Namespace, mode: str, anchor: date, end: Optional[date]) -> BatchResult:
    inputs = _load_inputs(args, expand_dates(mode, anchor, end=end))
    return build_batch(mode, anchor, inputs, args.class_name, end=end)


def _cmd_batch(args: argparse.Namespace) -> int:
    result = _run_batch(args, args.mode, args.date, None)
    _print_batch(result)
    return 0


def _cmd_range(args: argparse.Namespace) -> int:
    result = _run_batch(args, "range", args.start, args.end)
    _print_batch(result)
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    """
    Export a batch as JSON for the document renderer.
    """
    if args.mode == "range" and args.end is None:
        print("Range export needs --end.")
        return 1

    result = _run_batch(args, args.mode, args.date, args.end)
    if not result.pages:
        print("Nothing to export.")
        return 0

    path = export_batch_json(result, args.out)
    print(f"Exported {len(result.dates)} day(s) on {len(result.pages)} page(s) to: {path}")
    return 0


def _cmd_toggle(args: argparse.Namespace, enable: bool) -> int:
    """
    Enable/disable automatic journal content for one subject.
    """
    subject = (args.subject or "").strip()
    if not subject:
        print("Please provide a subject name.")
        return 1

    path = _toggles_path(args)
    disabled = set(load_toggles(path).disabled)
    key = subject.lower()

    if enable:
        if key not in disabled:
            print(f"Already automated: {subject}")
            return 0
        disabled.remove(key)
    else:
        if key in disabled:
            print(f"Already filled manually: {subject}")
            return 0
        disabled.add(key)

    save_toggles(disabled, path)
    print(f"{'Enabled' if enable else 'Disabled'}: {subject} (manual subjects: {len(disabled)})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--class", dest="class_name", required=True, help="Class name (e.g. 'Kelas 4A')")
    common.add_argument("--data-dir", type=Path, default=None, help="Local data directory")
    common.add_argument("--source-url", type=str, default=None, help="Base URL of the JSON data API")
    common.add_argument("--strict", action="store_true", help="Fail on overlapping plan rows")
    common.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    parser = argparse.ArgumentParser(prog="jurnal", description="Daily learning journal generator")
    sub = parser.add_subparsers(dest="command", required=True)

    p_day = sub.add_parser("day", parents=[common], help="Show the journal of one date")
    p_day.add_argument("date", type=_iso_date, help="Date (YYYY-MM-DD)")

    p_batch = sub.add_parser("batch", parents=[common], help="Paginate a day/week/month/semester")
    p_batch.add_argument("mode", choices=[m for m in MODES if m != "range"])
    p_batch.add_argument("date", type=_iso_date, help="Anchor date (YYYY-MM-DD)")

    p_range = sub.add_parser("range", parents=[common], help="Paginate a custom date range")
    p_range.add_argument("start", type=_iso_date)
    p_range.add_argument("end", type=_iso_date)

    p_export = sub.add_parser("export", parents=[common], help="Export a batch as JSON")
    p_export.add_argument("mode", choices=list(MODES))
    p_export.add_argument("date", type=_iso_date, help="Anchor (or start) date")
    p_export.add_argument("--end", type=_iso_date, default=None, help="End date for range mode")
    p_export.add_argument("--out", type=Path, default=Path("."), help="Output directory")

    p_enable = sub.add_parser("enable", parents=[common], help="Fill a subject automatically")
    p_enable.add_argument("subject", type=str)

    p_disable = sub.add_parser("disable", parents=[common], help="Leave a subject to its teacher")
    p_disable.add_argument("subject", type=str)

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "day": _cmd_day,
        "batch": _cmd_batch,
        "range": _cmd_range,
        "export": _cmd_export,
        "enable": lambda a: _cmd_toggle(a, enable=True),
        "disable": lambda a: _cmd_toggle(a, enable=False),
    }

    try:
        raise SystemExit(handlers[args.command](args))
    except (JournalError, ValueError) as exc:
        print(f"Error: {exc}")
        raise SystemExit(1)
