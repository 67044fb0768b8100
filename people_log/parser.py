"""Line-oriented parser for the hand-written interaction log.

Two entry forms are accepted and may be mixed in one file::

    2024-01-01 Alice met for coffee
      continuation lines are indented and join the note

    # 2024-01-02

    - #JohnDoe :
      - stuff: blah #Bleh
    - #JaneDoe, #Abu : lunch

Flat entries carry their own date; bullet entries take the date of the
closest ``# YYYY-MM-DD`` heading above them. Any other unindented line
under a heading that carries a ``#Name`` tag (``#JohnDoe: stuff``,
``* #JohnDoe``) is read as an entry too. Unindented lines starting with
``//`` are comments; indented ones are comments too unless they continue
an open entry, in which case they belong to its note. Malformed entries
never abort the parse: they are skipped and reported as ``ParseWarning``
values.
"""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from loguru import logger

from .schemas import InteractionRecord, ParseResult, ParseWarning


DATE_FORMAT = "%Y-%m-%d"
COMMENT_MARKER = "//"
HEADING_MARKER = "# "
BULLET_MARKER = "- "
TAB = "\t"
BOM = "\ufeff"
TWO_SPACES = "  "

DATE_TOKEN_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TAG_RE = re.compile(r"#([^\W\d_]+)")


def parse_date(token: str) -> Optional[date]:
    """Parse a `YYYY-MM-DD` token, returning None when it is not a valid date."""
    token = token.strip()
    if not DATE_TOKEN_RE.match(token):
        return None
    try:
        return datetime.strptime(token, DATE_FORMAT).date()
    except ValueError:
        return None


def find_tags(text: str) -> List[str]:
    """Return `#Name` tags in order of first appearance, without duplicates."""
    seen = set()
    out: List[str] = []
    for name in TAG_RE.findall(text):
        if name in seen:
            continue
        seen.add(name)
        out.append(name)
    return out


def _indentation(line: str) -> int:
    return len(line) - len(line.lstrip())


@dataclass
class _PendingEntry:
    """Lines buffered for one entry until the next top-level line."""

    line_number: int
    lines: List[str]
    kind: str
    entry_date: Optional[date] = None
    error: Optional[str] = None
    people: List[str] = field(default_factory=list)

    @property
    def raw_text(self) -> str:
        return "\n".join(self.lines)


class LogParser:
    """Converts raw log text into ordered interaction records."""

    def __init__(self) -> None:
        self._records: List[InteractionRecord] = []
        self._warnings: List[ParseWarning] = []
        self._current_date: Optional[date] = None
        self._pending: Optional[_PendingEntry] = None
        self._source = ""

    def parse(self, raw_text: str, source: str = "") -> ParseResult:
        self._source = source
        self._records = []
        self._warnings = []
        self._current_date = None
        self._pending = None

        text = raw_text.lstrip(BOM).replace("\r\n", "\n").replace("\r", "\n")
        for line_number, raw_line in enumerate(text.split("\n"), start=1):
            self._consume_line(line_number, raw_line.replace(TAB, TWO_SPACES).rstrip())
        self._flush()

        logger.debug(
            "Parsed {} records with {} warnings", len(self._records), len(self._warnings)
        )
        return ParseResult(records=tuple(self._records), warnings=tuple(self._warnings))

    def _consume_line(self, line_number: int, line: str) -> None:
        stripped = line.strip()
        if not stripped:
            return
        if _indentation(line) > 0:
            if self._pending is None and stripped.startswith(COMMENT_MARKER):
                return
            if self._pending is None:
                self._warn(line_number, line, "continuation line without an entry")
                return
            self._pending.lines.append(line)
            return

        if stripped.startswith(COMMENT_MARKER):
            return

        self._flush()

        if stripped.startswith(HEADING_MARKER) or stripped == "#":
            self._start_day(line_number, stripped)
        elif stripped.startswith(BULLET_MARKER) or stripped == "-":
            self._start_bullet(line_number, stripped)
        elif self._is_tagged_day_line(stripped):
            self._start_bullet(line_number, stripped)
        else:
            self._start_flat(line_number, stripped)

    def _is_tagged_day_line(self, line: str) -> bool:
        # `#JohnDoe: stuff` or `* #JohnDoe` under a heading, but never a dated line
        if self._current_date is None or DATE_TOKEN_RE.match(line.split(None, 1)[0]):
            return False
        return bool(find_tags(line))

    def _start_day(self, line_number: int, line: str) -> None:
        heading_date = parse_date(line[1:])
        if heading_date is None:
            self._current_date = None
            self._warn(line_number, line, "invalid date heading")
            return
        self._current_date = heading_date

    def _start_bullet(self, line_number: int, line: str) -> None:
        entry = _PendingEntry(line_number=line_number, lines=[line], kind="bullet")
        if self._current_date is None:
            entry.error = "bullet entry without a date heading"
        else:
            entry.entry_date = self._current_date
            entry.people = find_tags(line)
            if not entry.people:
                entry.error = "missing person tag"
        self._pending = entry

    def _start_flat(self, line_number: int, line: str) -> None:
        entry = _PendingEntry(line_number=line_number, lines=[line], kind="flat")
        tokens = line.split(None, 2)
        entry.entry_date = parse_date(tokens[0])
        if entry.entry_date is None:
            entry.error = f"unparseable date {tokens[0]!r}"
        elif len(tokens) < 2:
            entry.error = "missing person"
        else:
            entry.people = [tokens[1]]
        self._pending = entry

    def _flush(self) -> None:
        entry, self._pending = self._pending, None
        if entry is None:
            return
        if entry.error is not None:
            self._warn(entry.line_number, entry.raw_text, entry.error)
            return

        note = self._note_for(entry)
        entry_tags = find_tags(entry.raw_text)
        for person in entry.people:
            self._records.append(
                InteractionRecord(
                    date=entry.entry_date,
                    person=person,
                    note=note,
                    line_number=entry.line_number,
                    mentions=tuple(tag for tag in entry_tags if tag != person),
                    source=self._source,
                )
            )

    @staticmethod
    def _note_for(entry: _PendingEntry) -> str:
        if entry.kind == "bullet":
            return textwrap.dedent(entry.raw_text).strip()
        first = entry.lines[0].split(None, 2)
        head = first[2].strip() if len(first) > 2 else ""
        rest = [line.strip() for line in entry.lines[1:]]
        return "\n".join(part for part in [head, *rest] if part)

    def _warn(self, line_number: int, raw_text: str, reason: str) -> None:
        logger.debug("Skipping line {}: {}", line_number, reason)
        self._warnings.append(
            ParseWarning(
                line_number=line_number, raw_text=raw_text, reason=reason, source=self._source
            )
        )


def parse(raw_text: str, source: str = "") -> ParseResult:
    """Parse raw log text into `(records, warnings)`."""
    return LogParser().parse(raw_text, source=source)
