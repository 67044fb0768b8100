"""Tests for terminal rendering and the per-person markdown export."""

from __future__ import annotations

from pathlib import Path

import pytest

from people_log.aggregation import aggregate
from people_log.export import ExportStatus, format_person_log, person_log_path, write_person_logs
from people_log.parser import parse
from people_log.presenters import Spacer, render_person, render_reminders, render_summary, render_warnings
from people_log.reminders import Reminder
from people_log.schemas import ParseWarning

from .conftest import d


@pytest.fixture()
def report():
    records, _ = parse(
        "# 2000-01-01\n"
        "\n"
        "- #JohnDoe :\n"
        "  - stuff: blah\n"
        "\n"
        "# 2000-01-02\n"
        "\n"
        "- #JohnDoe :\n"
        "  - other: bleh #Bleh\n"
        "- #JaneDoe, #Abu :\n"
        "  - meet at foo\n"
        "2000-01-02 JohnDoe quick call\n"
    )
    return aggregate(records, set())


# ---------------------------------------------------------------------------
# Spacer
# ---------------------------------------------------------------------------


class TestSpacer:
    def test_one_break_per_boundary(self) -> None:
        spacer = Spacer([7, 14, 28])
        shown = [ago for ago in [0, 3, 7, 8, 20, 30, 40] if spacer.should_show_space(ago)]
        assert shown == [7, 20, 30]

    def test_large_jump_advances_one_boundary_at_a_time(self) -> None:
        spacer = Spacer([7, 14, 28])
        assert spacer.should_show_space(100) is True
        assert spacer.should_show_space(100) is True
        assert spacer.should_show_space(100) is True
        assert spacer.should_show_space(100) is False

    def test_no_boundaries(self) -> None:
        assert Spacer([]).should_show_space(1000) is False


# ---------------------------------------------------------------------------
# Summary table
# ---------------------------------------------------------------------------


class TestRenderSummary:
    def test_rows_most_recent_first(self) -> None:
        records, _ = parse("2024-01-01 Old\n2024-01-09 Mid\n2024-01-10 New\n")
        text = render_summary(aggregate(records, set()), today=d("2024-01-10"))
        lines = [line for line in text.splitlines() if line.strip()]
        assert "Days ago" in lines[0] and "PERSON" in lines[0] and "LAST" in lines[0]
        assert [line.split()[1] for line in lines[1:]] == ["New", "Mid", "Old"]

    def test_spacer_row_between_bands(self) -> None:
        records, _ = parse("2024-01-10 New\n2024-01-01 Old\n")
        text = render_summary(aggregate(records, set()), today=d("2024-01-10"))
        lines = text.splitlines()
        new_index = next(i for i, line in enumerate(lines) if "New" in line)
        assert lines[new_index + 1].strip() == ""
        assert "Old" in lines[new_index + 2]

    def test_empty_report(self) -> None:
        text = render_summary({}, today=d("2024-01-10"))
        assert "PERSON" in text


class TestRenderPerson:
    def test_grouped_by_date(self, report) -> None:
        text = render_person(report["JohnDoe"])
        assert text.startswith("JohnDoe: 3 interactions (2000-01-01 .. 2000-01-02)")
        assert text.count("# 2000-01-02") == 1
        assert "quick call" in text
        assert "with: Bleh" in text


def test_render_reminders() -> None:
    text = render_reminders(
        [
            Reminder(person="Dave", last_date=None, due_date=None),
            Reminder(person="Alice", last_date=d("2024-01-01"), due_date=d("2024-02-01")),
        ]
    )
    assert "never" in text
    assert "2024-02-01" in text


class TestRenderWarnings:
    def test_no_warnings(self) -> None:
        assert render_warnings([]) == "No malformed entries.\n"

    def test_lists_location_and_reason(self) -> None:
        text = render_warnings(
            [
                ParseWarning(line_number=3, raw_text="bad line\n  more", reason="oops"),
                ParseWarning(line_number=9, raw_text="x", reason="nope", source="log/people.md"),
            ]
        )
        assert text.splitlines() == [
            "2 malformed entries skipped:",
            "  line 3: oops: bad line",
            "  log/people.md:9: nope: x",
        ]


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


class TestExport:
    def test_format_person_log(self, report) -> None:
        assert format_person_log(report["JohnDoe"]) == (
            "# 2000-01-01\n"
            "\n"
            "- #JohnDoe :\n"
            "  - stuff: blah\n"
            "\n"
            "# 2000-01-02\n"
            "\n"
            "- #JohnDoe :\n"
            "  - other: bleh #Bleh\n"
            "- quick call\n"
        )

    def test_unsafe_characters_in_filename(self, tmp_path: Path) -> None:
        assert person_log_path(tmp_path, "a/b").name == "a%2Fb.md"
        assert person_log_path(tmp_path, "a%2Fb").name == "a%252Fb.md"
        assert person_log_path(tmp_path, "Lucía").name == "Lucía.md"

    def test_ignored_name_never_deletes_a_reported_file(self, tmp_path: Path) -> None:
        records, _ = parse("2024-01-01 a_b hi\n2024-01-02 a%2Fb hey\n")
        report = aggregate(records, set())

        outcomes = write_person_logs(report, {"a/b"}, str(tmp_path))

        assert {(o.person, o.status) for o in outcomes} == {
            ("a_b", ExportStatus.WRITTEN),
            ("a%2Fb", ExportStatus.WRITTEN),
            ("a/b", ExportStatus.NOTHING_TO_DELETE),
        }
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a%252Fb.md", "a_b.md"]

    def test_write_failure_is_reported(self, report, tmp_path: Path) -> None:
        (tmp_path / "Abu.md").mkdir()

        outcomes = {o.person: o for o in write_person_logs(report, set(), str(tmp_path))}

        assert outcomes["Abu"].status is ExportStatus.FAILED_TO_WRITE
        assert outcomes["Abu"].reason
        assert outcomes["JohnDoe"].status is ExportStatus.WRITTEN

    def test_delete_failure_is_reported(self, report, tmp_path: Path) -> None:
        (tmp_path / "Secret.md").mkdir()
        (tmp_path / "Secret.md" / "keep.txt").write_text("x", encoding="utf-8")

        outcomes = {o.person: o for o in write_person_logs(report, {"Secret"}, str(tmp_path))}

        assert outcomes["Secret"].status is ExportStatus.FAILED_TO_DELETE
        assert outcomes["Secret"].reason
        assert (tmp_path / "Secret.md").is_dir()

    def test_write_and_delete(self, report, tmp_path: Path) -> None:
        out_dir = tmp_path / "per-person-logs"
        out_dir.mkdir()
        (out_dir / "Secret.md").write_text("old", encoding="utf-8")

        outcomes = write_person_logs(report, {"Secret", "Ghost"}, str(out_dir))

        statuses = {(o.person, o.status) for o in outcomes}
        assert statuses == {
            ("Abu", ExportStatus.WRITTEN),
            ("JaneDoe", ExportStatus.WRITTEN),
            ("JohnDoe", ExportStatus.WRITTEN),
            ("Ghost", ExportStatus.NOTHING_TO_DELETE),
            ("Secret", ExportStatus.DELETED),
        }
        assert not (out_dir / "Secret.md").exists()
        assert (out_dir / "Abu.md").read_text(encoding="utf-8").startswith("# 2000-01-02")

    def test_creates_output_dir(self, report, tmp_path: Path) -> None:
        out_dir = tmp_path / "a" / "b"
        write_person_logs(report, set(), str(out_dir))
        assert sorted(p.name for p in out_dir.iterdir()) == ["Abu.md", "JaneDoe.md", "JohnDoe.md"]
