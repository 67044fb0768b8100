"""Locates and loads interaction log files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Tuple

from loguru import logger

from .schemas import PeopleLogError


LOG_SUBDIR = "log"
LOG_GLOB = "*people.md"


class UnreadableSource(PeopleLogError):
    """The log directory or one of its files cannot be read."""


class LogReader:
    """Reads every log file under a people directory in filename order."""

    def __init__(self, people_dir: str):
        self.people_dir = Path(people_dir)

    def find_log_files(self) -> List[Path]:
        if not self.people_dir.is_dir():
            raise UnreadableSource(f"people directory {self.people_dir} does not exist")

        log_dir = self.people_dir / LOG_SUBDIR
        search_dir = log_dir if log_dir.is_dir() else self.people_dir
        files = sorted(path for path in search_dir.glob(LOG_GLOB) if path.is_file())
        if not files:
            raise UnreadableSource(f"no log files matching {LOG_GLOB!r} in {search_dir}")
        return files

    def read_sources(self) -> Iterator[Tuple[Path, str]]:
        """Yield `(path, text)` for each log file, in lexicographic order."""
        for path in self.find_log_files():
            try:
                text = path.read_text(encoding="utf-8-sig")
            except (OSError, UnicodeDecodeError) as exc:
                raise UnreadableSource(f"cannot read {path}: {exc}") from exc
            logger.debug("Read {} ({} chars)", path, len(text))
            yield path, text

    def read(self) -> str:
        """Return all log files concatenated into one text."""
        return "\n".join(text for _, text in self.read_sources())
