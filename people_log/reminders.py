"""Contact reminders driven by the `remind_after` setting of each person."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from .config import ConfigError, PersonProfile
from .schemas import SummaryReport


DURATION_RE = re.compile(r"^\s*(\d+)\s*(day|week|month|year)s?\s*$", re.IGNORECASE)


def parse_duration(raw: str) -> relativedelta:
    """Turn strings like ``"3 months"`` or ``"1 week"`` into a relativedelta."""
    match = DURATION_RE.match(raw or "")
    if not match:
        raise ConfigError(f"invalid remind_after {raw!r}, expected e.g. '3 months'")
    amount = int(match.group(1))
    if amount <= 0:
        raise ConfigError(f"remind_after must be positive, got {raw!r}")
    unit = match.group(2).lower()
    return relativedelta(**{f"{unit}s": amount})


@dataclass(frozen=True)
class Reminder:
    person: str
    last_date: Optional[date]
    due_date: Optional[date]


def due_reminders(
    report: SummaryReport,
    people: Iterable[PersonProfile],
    today: date,
    ignore: AbstractSet[str] = frozenset(),
) -> List[Reminder]:
    """List people whose `remind_after` period has elapsed by `today`.

    A person never seen in the log is always due.
    """
    due: List[Reminder] = []
    for profile in people:
        if profile.remind_after is None or profile.name in ignore:
            continue
        period = parse_duration(profile.remind_after)
        summary = report.get(profile.name)
        if summary is None:
            due.append(Reminder(person=profile.name, last_date=None, due_date=None))
            continue
        due_date = summary.last_date + period
        if due_date <= today:
            due.append(Reminder(person=profile.name, last_date=summary.last_date, due_date=due_date))

    due.sort(key=lambda r: (r.due_date is not None, r.due_date or date.min, r.person))
    return due
