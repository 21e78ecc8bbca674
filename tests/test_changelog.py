"""Tests for bmalph.transition.changelog module."""

from bmalph.transition.changelog import (
    diff_specs,
    first_diff_line,
    format_changelog,
    snapshot_specs,
)
from bmalph.transition.models import SpecsChange


class TestDiffSpecs:
    """Test diff_specs function."""

    def test_added_modified_unchanged(self):
        changes = diff_specs({"a": "x", "b": "y"}, {"a": "x", "b": "z", "c": "w"})

        assert [(c.file, c.status) for c in changes] == [("b", "modified"), ("c", "added")]

    def test_removed(self):
        changes = diff_specs({"old.md": "x"}, {})
        assert changes == [SpecsChange(file="old.md", status="removed")]

    def test_identical_snapshots_have_no_changes(self):
        snapshot = {"prd.md": "# PRD", "arch.md": "# Arch"}
        assert diff_specs(snapshot, dict(snapshot)) == []

    def test_sorted_by_path(self):
        changes = diff_specs({"z.md": "1", "m.md": "1"}, {"a.md": "1", "m.md": "2"})
        assert [c.file for c in changes] == ["a.md", "m.md", "z.md"]

    def test_modified_summary_is_first_changed_line(self):
        changes = diff_specs(
            {"prd.md": "# PRD\nold goal\n"},
            {"prd.md": "# PRD\n  new goal  \n"},
        )
        assert changes[0].summary == "new goal"

    def test_added_has_no_summary(self):
        assert diff_specs({}, {"a": "x"})[0].summary is None


class TestFirstDiffLine:
    """Test first_diff_line function."""

    def test_truncates_long_lines(self):
        assert first_diff_line("a", "b" * 80) == "b" * 50

    def test_removed_line_reports_placeholder(self):
        assert first_diff_line("same\nextra", "same") == "(line changed)"


class TestSnapshotSpecs:
    """Test snapshot_specs function."""

    def test_reads_nested_files(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "prd.md").write_text("# PRD")
        (tmp_path / "sub" / "notes.md").write_text("notes")

        assert snapshot_specs(tmp_path) == {"prd.md": b"# PRD", "sub/notes.md": b"notes"}

    def test_missing_directory_is_empty(self, tmp_path):
        assert snapshot_specs(tmp_path / "nope") == {}

    def test_modified_binary_file_is_detected(self, tmp_path):
        old_dir = tmp_path / "old"
        new_dir = tmp_path / "new"
        old_dir.mkdir()
        new_dir.mkdir()
        (old_dir / "diagram.png").write_bytes(b"\x89PNG\xff\x01")
        (new_dir / "diagram.png").write_bytes(b"\x89PNG\xfe\x01")

        changes = diff_specs(snapshot_specs(old_dir), snapshot_specs(new_dir))

        assert changes == [SpecsChange(file="diagram.png", status="modified", summary="(line changed)")]

    def test_unchanged_binary_file_is_omitted(self, tmp_path):
        (tmp_path / "diagram.png").write_bytes(b"\x89PNG\xff\x01")
        assert diff_specs(snapshot_specs(tmp_path), snapshot_specs(tmp_path)) == []

    def test_text_summary_from_bytes(self):
        changes = diff_specs({"prd.md": b"# PRD\nold\n"}, {"prd.md": b"# PRD\nnew\n"})
        assert changes[0].summary == "new"


class TestFormatChangelog:
    """Test format_changelog function."""

    def test_groups_by_status(self):
        changes = [
            SpecsChange(file="b.md", status="modified", summary="new line"),
            SpecsChange(file="c.md", status="added"),
            SpecsChange(file="d.md", status="removed"),
        ]
        md = format_changelog(changes, "2026-01-01T00:00:00Z")

        assert md.startswith("# Specs Changelog\n\nLast updated: 2026-01-01T00:00:00Z\n")
        assert "## Added\n- c.md\n" in md
        assert "## Modified\n- b.md (new line)\n" in md
        assert "## Removed\n- d.md\n" in md

    def test_empty_sections_omitted(self):
        md = format_changelog([SpecsChange(file="c.md", status="added")], "now")
        assert "## Added" in md
        assert "## Modified" not in md
        assert "## Removed" not in md

    def test_no_changes(self):
        assert format_changelog([], "now") == "# Specs Changelog\n\nNo changes detected.\n"
