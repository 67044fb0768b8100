"""Folds interaction records into per-person summaries."""

from __future__ import annotations

from typing import AbstractSet, Dict, Iterable, List

from loguru import logger

from .schemas import InteractionRecord, PersonSummary, SummaryReport, freeze_report


SORT_KEYS = ("last", "count", "person")


def aggregate(records: Iterable[InteractionRecord], ignore: AbstractSet[str]) -> SummaryReport:
    """Build a read-only `person -> PersonSummary` mapping in one pass.

    Records of ignored persons are discarded by exact match. Each summary keeps
    its records in log order; first/last dates follow calendar order.
    """
    grouped: Dict[str, List[InteractionRecord]] = {}
    bounds: Dict[str, List] = {}
    skipped = 0

    for record in records:
        if record.person in ignore:
            skipped += 1
            continue
        if record.person not in grouped:
            grouped[record.person] = [record]
            bounds[record.person] = [record.date, record.date]
            continue
        grouped[record.person].append(record)
        first, last = bounds[record.person]
        bounds[record.person] = [min(first, record.date), max(last, record.date)]

    summaries = {
        person: PersonSummary(
            person=person,
            interaction_count=len(person_records),
            first_date=bounds[person][0],
            last_date=bounds[person][1],
            records=tuple(person_records),
        )
        for person, person_records in grouped.items()
    }
    logger.debug("Aggregated {} people, {} ignored records", len(summaries), skipped)
    return freeze_report(summaries)


def sorted_summaries(report: SummaryReport, key: str = "last") -> List[PersonSummary]:
    """Order summaries for display.

    ``last`` puts the most recent interaction first, ``count`` the most
    frequent person first, ``person`` sorts alphabetically. Ties break on name.
    """
    summaries = list(report.values())
    if key == "last":
        summaries.sort(key=lambda s: s.person)
        summaries.sort(key=lambda s: s.last_date, reverse=True)
    elif key == "count":
        summaries.sort(key=lambda s: (-s.interaction_count, s.person))
    elif key == "person":
        summaries.sort(key=lambda s: s.person)
    else:
        raise ValueError(f"unknown sort key {key!r}, expected one of {', '.join(SORT_KEYS)}")
    return summaries
