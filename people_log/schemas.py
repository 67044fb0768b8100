"""Core data structures shared across modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping, NamedTuple, Tuple


class PeopleLogError(Exception):
    """Base class for fatal errors surfaced to the command line."""


@dataclass(frozen=True)
class InteractionRecord:
    """One logged interaction with one person."""

    date: date
    person: str
    note: str = ""
    line_number: int = 0
    mentions: Tuple[str, ...] = ()
    source: str = ""

    def __post_init__(self) -> None:
        person = self.person.strip()
        if not person:
            raise ValueError("person must not be empty")
        object.__setattr__(self, "person", person)


@dataclass(frozen=True)
class ParseWarning:
    """A log entry that was skipped, kept for diagnosis."""

    line_number: int
    raw_text: str
    reason: str
    source: str = ""


class ParseResult(NamedTuple):
    records: Tuple[InteractionRecord, ...]
    warnings: Tuple[ParseWarning, ...]


@dataclass(frozen=True)
class PersonSummary:
    """Aggregated view of every interaction with one person."""

    person: str
    interaction_count: int
    first_date: date
    last_date: date
    records: Tuple[InteractionRecord, ...] = field(default_factory=tuple)

    def days_since(self, reference: date) -> int:
        """Return whole days between the last interaction and `reference`."""
        return (reference - self.last_date).days


SummaryReport = Mapping[str, PersonSummary]


def freeze_report(summaries: Mapping[str, PersonSummary]) -> SummaryReport:
    return MappingProxyType(dict(summaries))
