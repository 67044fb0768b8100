"""Terminal rendering of summaries, per-person views and parse warnings."""

from __future__ import annotations

from datetime import date
from io import StringIO
from itertools import groupby
from typing import Iterable, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from .aggregation import sorted_summaries
from .reminders import Reminder
from .schemas import ParseWarning, PersonSummary, SummaryReport


SPACER_BOUNDARIES = (7, 14, 28)
RENDER_WIDTH = 120


class Spacer:
    """Decides where to break the summary table into days-ago bands.

    Each boundary produces at most one break, the first time a row reaches it.
    """

    def __init__(self, boundaries: Sequence[int] = SPACER_BOUNDARIES):
        self.boundaries = list(boundaries)
        self.offset = 0

    def should_show_space(self, days_ago: int) -> bool:
        if self.offset >= len(self.boundaries):
            return False
        if days_ago >= self.boundaries[self.offset]:
            self.offset += 1
            return True
        return False


def _to_text(renderable, width: int = RENDER_WIDTH) -> str:
    buffer = StringIO()
    console = Console(file=buffer, force_terminal=False, color_system=None, width=width)
    console.print(renderable)
    return buffer.getvalue()


def render_summary(report: SummaryReport, today: date, sort_key: str = "last") -> str:
    """Table of every person with days since the last interaction."""
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Days ago", justify="right")
    table.add_column("PERSON")
    table.add_column("LAST")
    table.add_column("COUNT", justify="right")

    # bands only make sense when rows are ordered by recency
    spacer: Optional[Spacer] = Spacer() if sort_key == "last" else None
    for summary in sorted_summaries(report, sort_key):
        ago = summary.days_since(today)
        if spacer is not None and spacer.should_show_space(ago):
            table.add_row("", "", "", "")
        table.add_row(
            str(ago),
            summary.person,
            summary.last_date.isoformat(),
            str(summary.interaction_count),
        )
    return _to_text(table)


def render_person(summary: PersonSummary) -> str:
    """Per-person grouped view: header line, then notes grouped by date."""
    lines: List[str] = [
        f"{summary.person}: {summary.interaction_count} interactions "
        f"({summary.first_date.isoformat()} .. {summary.last_date.isoformat()})",
    ]
    for day, records in groupby(summary.records, key=lambda r: r.date):
        lines.append("")
        lines.append(f"# {day.isoformat()}")
        for record in records:
            lines.append("")
            lines.append(record.note or "(no note)")
            if record.mentions:
                lines.append(f"  with: {', '.join(record.mentions)}")
    return "\n".join(lines) + "\n"


def render_reminders(reminders: Iterable[Reminder]) -> str:
    table = Table(show_header=True, header_style="bold", box=None, title="Reminders")
    table.add_column("PERSON")
    table.add_column("LAST")
    table.add_column("DUE")
    for reminder in reminders:
        table.add_row(
            reminder.person,
            reminder.last_date.isoformat() if reminder.last_date else "never",
            reminder.due_date.isoformat() if reminder.due_date else "now",
        )
    return _to_text(table)


def render_warnings(warnings: Sequence[ParseWarning]) -> str:
    if not warnings:
        return "No malformed entries.\n"
    lines = [f"{len(warnings)} malformed entries skipped:"]
    for warning in warnings:
        location = f"{warning.source}:{warning.line_number}" if warning.source else f"line {warning.line_number}"
        first_line = warning.raw_text.split("\n", 1)[0]
        lines.append(f"  {location}: {warning.reason}: {first_line}")
    return "\n".join(lines) + "\n"
