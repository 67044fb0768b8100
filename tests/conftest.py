"""Shared fixtures for people-log tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable

import pytest
from loguru import logger


def d(value: str) -> date:
    return date.fromisoformat(value)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop sinks bound to captured streams once a test is done."""
    yield
    logger.remove()


@pytest.fixture()
def people_dir(tmp_path: Path) -> Path:
    """Empty `<people_dir>/log` layout."""
    (tmp_path / "people" / "log").mkdir(parents=True)
    return tmp_path / "people"


@pytest.fixture()
def write_log(people_dir: Path) -> Callable[[str, str], Path]:
    """Write a log file under `<people_dir>/log` and return its path."""

    def _write(name: str, content: str) -> Path:
        path = people_dir / "log" / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def config_file(tmp_path: Path, people_dir: Path) -> Callable[[str], Path]:
    """Write a YAML config pointing at `people_dir`; extra YAML is appended."""

    def _write(extra: str = "") -> Path:
        path = tmp_path / "config.yaml"
        path.write_text(f"people_dir: {people_dir}\n{extra}", encoding="utf-8")
        return path

    return _write
