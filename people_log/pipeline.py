"""Orchestration layer: read -> parse -> aggregate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

from loguru import logger

from .aggregation import aggregate
from .config import AppConfig
from .parser import LogParser
from .reader import LogReader
from .reminders import Reminder, due_reminders
from .schemas import InteractionRecord, ParseWarning, SummaryReport


@dataclass(frozen=True)
class PipelineResult:
    """Everything one invocation derives from the log."""

    records: Tuple[InteractionRecord, ...]
    warnings: Tuple[ParseWarning, ...]
    report: SummaryReport


class PeopleLogPipeline:
    """High-level pipeline composed of the reader, parser and aggregator."""

    def __init__(self, config: AppConfig):
        self.config = config
        self.reader = LogReader(config.people_dir)
        self.parser = LogParser()

    def run(self) -> PipelineResult:
        """Parse every log file in filename order and summarize the result."""
        records: List[InteractionRecord] = []
        warnings: List[ParseWarning] = []
        for path, text in self.reader.read_sources():
            result = self.parser.parse(text, source=str(path))
            records.extend(result.records)
            warnings.extend(result.warnings)

        if warnings:
            logger.warning("{} malformed log entries were skipped", len(warnings))
        else:
            logger.info("0 malformed log entries were skipped")
        logger.info("Parsed {} interaction records", len(records))

        return PipelineResult(
            records=tuple(records),
            warnings=tuple(warnings),
            report=aggregate(records, self.config.ignore),
        )

    def reminders(self, report: SummaryReport, today: date) -> List[Reminder]:
        return due_reminders(report, self.config.people, today, ignore=self.config.ignore)
