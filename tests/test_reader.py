"""Tests for log file discovery and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from people_log.parser import parse
from people_log.reader import LogReader, UnreadableSource


class TestLogReader:
    def test_files_are_read_in_filename_order(self, people_dir: Path, write_log) -> None:
        write_log("2024-people.md", "2024-01-01 B")
        write_log("2023-people.md", "2023-01-01 A")

        reader = LogReader(str(people_dir))
        assert [p.name for p in reader.find_log_files()] == ["2023-people.md", "2024-people.md"]
        assert reader.read() == "2023-01-01 A\n2024-01-01 B"

    def test_only_matching_files(self, people_dir: Path, write_log) -> None:
        write_log("people.md", "x")
        write_log("notes.md", "y")
        write_log("people.txt", "z")
        assert [p.name for p in LogReader(str(people_dir)).find_log_files()] == ["people.md"]

    def test_falls_back_to_people_dir(self, tmp_path: Path) -> None:
        (tmp_path / "people.md").write_text("2024-01-01 A", encoding="utf-8")
        assert LogReader(str(tmp_path)).read() == "2024-01-01 A"

    def test_read_sources_pairs(self, people_dir: Path, write_log) -> None:
        path = write_log("people.md", "2024-01-01 A")
        assert list(LogReader(str(people_dir)).read_sources()) == [(path, "2024-01-01 A")]

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(UnreadableSource, match="does not exist"):
            LogReader(str(tmp_path / "nope")).read()

    def test_no_log_files(self, people_dir: Path) -> None:
        with pytest.raises(UnreadableSource, match="no log files"):
            LogReader(str(people_dir)).read()

    def test_invalid_utf8(self, people_dir: Path) -> None:
        (people_dir / "log" / "people.md").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(UnreadableSource, match="cannot read"):
            LogReader(str(people_dir)).read()

    def test_byte_order_mark_is_dropped(self, people_dir: Path) -> None:
        (people_dir / "log" / "people.md").write_text(
            "# 2024-01-01\n- #Alice coffee\n2024-01-02 Bob x\n", encoding="utf-8-sig"
        )
        records, warnings = parse(LogReader(str(people_dir)).read())
        assert [r.person for r in records] == ["Alice", "Bob"]
        assert warnings == ()
