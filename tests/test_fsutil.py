"""Tests for bmalph.lib.fsutil module."""

from bmalph.lib.fsutil import atomic_write, list_files, replace_dir_with_copy


class TestAtomicWrite:
    """Test atomic_write function."""

    def test_creates_parents_and_writes(self, tmp_path):
        target = tmp_path / ".ralph" / "PROMPT.md"
        atomic_write(target, "hello\n")

        assert target.read_text() == "hello\n"
        assert list(target.parent.iterdir()) == [target]

    def test_overwrites(self, tmp_path):
        target = tmp_path / "f.md"
        target.write_text("old")
        atomic_write(target, "new")
        assert target.read_text() == "new"


class TestListFiles:
    """Test list_files function."""

    def test_recursive_posix_paths(self, tmp_path):
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "c.md").write_text("")
        (tmp_path / "a.md").write_text("")
        assert list_files(tmp_path) == ["a.md", "b/c.md"]

    def test_missing_dir(self, tmp_path):
        assert list_files(tmp_path / "missing") == []


class TestReplaceDirWithCopy:
    """Test replace_dir_with_copy function."""

    def test_replaces_existing_contents(self, tmp_path):
        source = tmp_path / "src"
        source.mkdir()
        (source / "new.md").write_text("new")
        dest = tmp_path / "dest"
        dest.mkdir()
        (dest / "stale.md").write_text("stale")

        replace_dir_with_copy(source, dest)

        assert list_files(dest) == ["new.md"]
        assert not (tmp_path / "dest.new").exists()

    def test_cleans_leftover_staging_dir(self, tmp_path):
        source = tmp_path / "src"
        source.mkdir()
        (source / "a.md").write_text("a")
        leftover = tmp_path / "dest.new"
        leftover.mkdir()
        (leftover / "junk.md").write_text("junk")

        replace_dir_with_copy(source, tmp_path / "dest")

        assert list_files(tmp_path / "dest") == ["a.md"]
