"""Command-line entrypoints: `people-summary` and `people-per-person`."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from typing import List, Optional, Tuple

from loguru import logger

from .aggregation import SORT_KEYS
from .config import AppConfig, load_config
from .export import ExportStatus, write_person_logs
from .logging_setup import setup_logging
from .pipeline import PeopleLogPipeline, PipelineResult
from .presenters import render_person, render_reminders, render_summary, render_warnings
from .schemas import PeopleLogError


def _common_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML config (default: ~/.config/people/config.yaml).",
    )
    parser.add_argument(
        "--show-warnings",
        action="store_true",
        help="List the log entries that could not be parsed.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR).",
    )
    return parser


def parse_summary_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = _common_parser("Show the last interaction with every person.")
    parser.add_argument(
        "--sort",
        choices=SORT_KEYS,
        default="last",
        help="Row order (default: most recent first).",
    )
    parser.add_argument(
        "--reminders",
        action="store_true",
        help="Also list people whose remind_after period has elapsed.",
    )
    return parser.parse_args(argv)


def parse_per_person_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = _common_parser("Show or export every interaction grouped per person.")
    parser.add_argument(
        "--person",
        action="append",
        default=None,
        help="Only this person (repeatable).",
    )
    parser.add_argument(
        "--output-dir",
        nargs="?",
        const="",
        default=None,
        help="Write one markdown file per person (default dir: <people_dir>/per-person-logs).",
    )
    return parser.parse_args(argv)


def _exit_with_error(message: str) -> int:
    print(f"ERROR: {message}", file=sys.stderr)
    return 1


def _load(args: argparse.Namespace) -> Tuple[AppConfig, PeopleLogPipeline, PipelineResult]:
    setup_logging(args.log_level)
    logger.info("Loading config...")
    config = load_config(args.config)
    pipeline = PeopleLogPipeline(config)
    return config, pipeline, pipeline.run()


def summary_main(argv: Optional[List[str]] = None, today: Optional[date] = None) -> int:
    args = parse_summary_args(argv)
    today = today or date.today()
    try:
        _, pipeline, result = _load(args)
        reminders = pipeline.reminders(result.report, today) if args.reminders else []
    except PeopleLogError as exc:
        return _exit_with_error(str(exc))

    if args.show_warnings:
        print(render_warnings(result.warnings), end="", file=sys.stderr)
    print(render_summary(result.report, today, sort_key=args.sort), end="")
    if args.reminders:
        print(render_reminders(reminders), end="")
    return 0


def per_person_main(argv: Optional[List[str]] = None) -> int:
    args = parse_per_person_args(argv)
    try:
        config, _, result = _load(args)
    except PeopleLogError as exc:
        return _exit_with_error(str(exc))

    if args.show_warnings:
        print(render_warnings(result.warnings), end="", file=sys.stderr)

    report = result.report
    if args.person:
        missing = [name for name in args.person if name not in report]
        for name in missing:
            print(f"No interactions with {name}", file=sys.stderr)
        report = {name: report[name] for name in args.person if name in report}

    if args.output_dir is None:
        views = [render_person(report[person]) for person in sorted(report)]
        print("\n".join(views), end="")
        return 0

    out_dir = args.output_dir or config.per_person_dir
    for outcome in write_person_logs(report, config.ignore, out_dir):
        if outcome.status is ExportStatus.WRITTEN:
            print(f"Report written to {outcome.path}", file=sys.stderr)
        elif outcome.status is ExportStatus.DELETED:
            print(f"Report deleted: {outcome.path}", file=sys.stderr)
        elif outcome.status is ExportStatus.NOTHING_TO_DELETE:
            logger.debug("Nothing to delete: {}", outcome.path)
        else:
            print(f"ERROR: {outcome.status.value} {outcome.path} -- reason: {outcome.reason}", file=sys.stderr)
    return 0


def run_summary() -> None:
    sys.exit(summary_main())


def run_per_person() -> None:
    sys.exit(per_person_main())
