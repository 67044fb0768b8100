"""Writes one markdown log per person, derived from the summary report."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from itertools import groupby
from pathlib import Path
from typing import AbstractSet, List, Optional

from loguru import logger

from .schemas import InteractionRecord, PersonSummary, SummaryReport


UNSAFE_FILENAME_RE = re.compile(r"[%\\/\x00]")


class ExportStatus(str, Enum):
    WRITTEN = "written"
    FAILED_TO_WRITE = "failed_to_write"
    DELETED = "deleted"
    NOTHING_TO_DELETE = "nothing_to_delete"
    FAILED_TO_DELETE = "failed_to_delete"


@dataclass(frozen=True)
class ExportOutcome:
    person: str
    path: Path
    status: ExportStatus
    reason: Optional[str] = None


def person_log_path(out_dir: Path, person: str) -> Path:
    """Percent-escape characters a filename cannot hold; distinct names never collide."""
    safe = UNSAFE_FILENAME_RE.sub(lambda m: f"%{ord(m.group(0)):02X}", person)
    return out_dir / f"{safe}.md"


def _entry_text(record: InteractionRecord) -> str:
    if record.note.startswith("- "):
        return record.note
    if record.note:
        return f"- {record.note}"
    return f"- #{record.person}"


def format_person_log(summary: PersonSummary) -> str:
    """Render a person's records as `# YYYY-MM-DD` sections in log order."""
    days = []
    for day, records in groupby(summary.records, key=lambda r: r.date):
        entries = "\n".join(_entry_text(record) for record in records)
        days.append(f"# {day.isoformat()}\n\n{entries}")
    return "\n\n".join(days) + "\n"


def write_person_logs(
    report: SummaryReport,
    ignore: AbstractSet[str],
    out_dir: str,
) -> List[ExportOutcome]:
    """Write `<person>.md` for every summary and drop files of ignored people."""
    target = Path(out_dir)
    target.mkdir(parents=True, exist_ok=True)
    outcomes: List[ExportOutcome] = []
    written = set()

    for person in sorted(report):
        path = person_log_path(target, person)
        try:
            path.write_text(format_person_log(report[person]), encoding="utf-8")
        except OSError as exc:
            logger.debug("Failed to write {}: {!r}", path, exc)
            outcomes.append(ExportOutcome(person, path, ExportStatus.FAILED_TO_WRITE, str(exc)))
            continue
        written.add(path)
        outcomes.append(ExportOutcome(person, path, ExportStatus.WRITTEN))

    for person in sorted(ignore):
        path = person_log_path(target, person)
        if path in written:
            continue
        if not path.exists():
            outcomes.append(ExportOutcome(person, path, ExportStatus.NOTHING_TO_DELETE))
            continue
        try:
            path.unlink()
        except OSError as exc:
            logger.debug("Failed to delete {}: {!r}", path, exc)
            outcomes.append(ExportOutcome(person, path, ExportStatus.FAILED_TO_DELETE, str(exc)))
            continue
        outcomes.append(ExportOutcome(person, path, ExportStatus.DELETED))

    logger.info("Exported {} per-person logs to {}", len(report), target)
    return outcomes
