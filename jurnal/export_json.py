"""
JSON export of a paginated batch.

The document renderer consumes this file: pages of day blocks, each block with
its header label, table rows and whether the signature area is printed.
Unplanned content is written as the visible "not yet planned" label, never as
an empty cell.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from jurnal.model import BatchResult, Block, JournalEntry


UNPLANNED_LABEL = "not yet planned"


def display_text(text: str) -> str:
    return text if text else UNPLANNED_LABEL


def _entry_dict(e: JournalEntry) -> dict[str, Any]:
    return {
        "no": "-" if e.sequence is None else e.sequence,
        "period": e.period_range,
        "subject": e.subject_name,
        "objective": display_text(e.objective),
        "material": display_text(e.material),
        "note": e.note,
        "unplanned": e.is_unplanned,
    }


def _block_dict(b: Block) -> dict[str, Any]:
    day = b.day
    return {
        "date": day.date.isoformat(),
        "label": day.date_label,
        "weekday": day.weekday_name,
        "non_instructional": day.is_non_instructional,
        "reason": day.reason,
        "event_type": day.event.type if day.event is not None else None,
        "error": day.is_error,
        "top": round(b.top, 2),
        "height": round(b.height, 2),
        "signature": b.reserves_signature,
        "entries": [_entry_dict(e) for e in day.entries],
    }


def batch_to_dict(result: BatchResult) -> dict[str, Any]:
    return {
        "name": result.export_name,
        "class": result.class_name,
        "mode": result.mode,
        "pages": [{"number": p.number, "blocks": [_block_dict(b) for b in p.blocks]} for p in result.pages],
    }


def export_batch_json(result: BatchResult, out_dir: str | Path) -> Path:
    """
    Write <export_name>.json into out_dir and return its path.

    The file is written to a temporary name first and renamed into place, so a
    failed export never leaves a partial file behind.
    """
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    target = out / f"{result.export_name}.json"

    payload = json.dumps(batch_to_dict(result), indent=2, ensure_ascii=False)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{result.export_name}.", suffix=".tmp", dir=out)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    return target
