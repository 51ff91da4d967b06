"""
Tests for the Navigator.
"""

import pytest
import tempfile
import os
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import (
    AccessError,
    NotFoundError,
    CreateError,
    RemoveError,
    CopyError,
    MoveError,
)
from core.logger import AuditLogger, ActionStatus
from modules.explorer.navigator import Navigator, SearchMatch


posix_only = pytest.mark.skipif(os.name != "posix", reason="needs POSIX symlinks")


@pytest.fixture
def temp_dir():
    """Create a temporary directory (canonical path)."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp).resolve()


@pytest.fixture
def temp_log():
    """Create a temporary log file."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.jsonl', delete=False) as f:
        yield f.name
    os.unlink(f.name)


@pytest.fixture
def navigator(temp_dir):
    """Navigator positioned in a small tree."""
    (temp_dir / "docs").mkdir()
    (temp_dir / "docs" / "notes.txt").write_text("notes")
    (temp_dir / "a.txt").write_text("alpha")
    return Navigator(start_path=temp_dir)


def names(navigator):
    return [e.name for e in navigator.listing]


class TestNavigatorInit:
    """Test Navigator construction."""

    def test_starts_in_working_directory(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)

        nav = Navigator()

        assert nav.current_path == temp_dir

    def test_initial_listing(self, navigator):
        assert names(navigator) == ["docs", "a.txt"]

    def test_unlistable_start_raises(self, temp_dir):
        with pytest.raises(AccessError):
            Navigator(start_path=temp_dir / "missing")


class TestChangeDirectory:
    """Test change_directory."""

    def test_enter_subdirectory(self, navigator, temp_dir):
        navigator.change_directory("docs")

        assert navigator.current_path == temp_dir / "docs"
        assert names(navigator) == ["notes.txt"]

    def test_idempotent(self, navigator):
        target = str(navigator.current_path / "docs")

        navigator.change_directory(target)
        first = navigator.current_path
        navigator.change_directory(target)

        assert navigator.current_path == first

    def test_parent_round_trip(self, navigator):
        navigator.change_directory("docs")
        start = navigator.current_path

        navigator.change_directory("..")
        navigator.change_directory("docs")

        assert navigator.current_path == start

    def test_path_is_canonical(self, navigator, temp_dir):
        navigator.change_directory("docs/../docs/.")

        assert navigator.current_path == temp_dir / "docs"

    def test_absolute_path(self, navigator, temp_dir):
        navigator.change_directory("docs")
        navigator.change_directory(str(temp_dir))

        assert navigator.current_path == temp_dir

    @posix_only
    def test_symlink_is_resolved(self, navigator, temp_dir):
        (temp_dir / "shortcut").symlink_to(temp_dir / "docs")

        navigator.change_directory("shortcut")

        assert navigator.current_path == temp_dir / "docs"

    def test_missing_target(self, navigator, temp_dir):
        with pytest.raises(NotFoundError):
            navigator.change_directory("nowhere")

        assert navigator.current_path == temp_dir
        assert names(navigator) == ["docs", "a.txt"]

    def test_file_target(self, navigator, temp_dir):
        with pytest.raises(NotFoundError):
            navigator.change_directory("a.txt")

        assert navigator.current_path == temp_dir


class TestCreateDirectory:
    """Test create_directory."""

    def test_creates_and_refreshes(self, navigator, temp_dir):
        navigator.create_directory("new")

        assert (temp_dir / "new").is_dir()
        assert names(navigator) == ["docs", "new", "a.txt"]

    def test_create_then_remove_restores_listing(self, navigator):
        before = list(navigator.listing)

        navigator.create_directory("x")
        navigator.remove("x")

        assert navigator.listing == before

    def test_existing_name_fails(self, navigator):
        before = list(navigator.listing)

        with pytest.raises(CreateError) as excinfo:
            navigator.create_directory("docs")

        assert isinstance(excinfo.value.reason, FileExistsError)
        assert navigator.listing == before

    def test_missing_parent_fails(self, navigator):
        with pytest.raises(CreateError):
            navigator.create_directory("no/such/parent")

    def test_nul_in_name_fails(self, navigator):
        before = list(navigator.listing)

        with pytest.raises(CreateError) as excinfo:
            navigator.create_directory("a\x00b")

        assert isinstance(excinfo.value.reason, ValueError)
        assert navigator.listing == before


class TestRemove:
    """Test remove."""

    def test_remove_file(self, navigator, temp_dir):
        navigator.remove("a.txt")

        assert not (temp_dir / "a.txt").exists()
        assert names(navigator) == ["docs"]

    def test_remove_directory_tree(self, navigator, temp_dir):
        (temp_dir / "docs" / "inner").mkdir()
        (temp_dir / "docs" / "inner" / "deep.txt").write_text("deep")

        navigator.remove("docs")

        assert not (temp_dir / "docs").exists()
        assert names(navigator) == ["a.txt"]

    def test_missing_target(self, navigator):
        before = list(navigator.listing)

        with pytest.raises(RemoveError):
            navigator.remove("ghost")

        assert navigator.listing == before

    def test_refuses_current_directory(self, navigator, temp_dir):
        with pytest.raises(RemoveError):
            navigator.remove(".")

        with pytest.raises(RemoveError):
            navigator.remove("..")

        assert temp_dir.exists()
        assert (temp_dir / "a.txt").exists()

    @posix_only
    def test_symlink_removed_without_target(self, navigator, temp_dir):
        (temp_dir / "link").symlink_to(temp_dir / "docs")

        navigator.remove("link")

        assert not os.path.lexists(temp_dir / "link")
        assert (temp_dir / "docs" / "notes.txt").exists()


class TestCopy:
    """Test copy."""

    def test_copy_file(self, navigator, temp_dir):
        navigator.copy("a.txt", "b.txt")

        assert (temp_dir / "b.txt").read_bytes() == (temp_dir / "a.txt").read_bytes()
        assert (temp_dir / "a.txt").read_text() == "alpha"
        assert "b.txt" in names(navigator)

    def test_copy_overwrites_existing_file(self, navigator, temp_dir):
        (temp_dir / "b.txt").write_text("old contents")

        navigator.copy("a.txt", "b.txt")

        assert (temp_dir / "b.txt").read_text() == "alpha"

    def test_copy_directory_tree(self, navigator, temp_dir):
        navigator.copy("docs", "backup/docs")

        assert (temp_dir / "backup" / "docs" / "notes.txt").read_text() == "notes"
        assert (temp_dir / "docs" / "notes.txt").exists()

    def test_copy_into_existing_directory_merges(self, navigator, temp_dir):
        (temp_dir / "target").mkdir()
        (temp_dir / "target" / "keep.txt").write_text("keep")

        navigator.copy("docs", "target")

        assert (temp_dir / "target" / "keep.txt").exists()
        assert (temp_dir / "target" / "notes.txt").exists()

    def test_absolute_paths(self, navigator, temp_dir):
        with tempfile.TemporaryDirectory() as other:
            dest = Path(other) / "copied.txt"

            navigator.copy(str(temp_dir / "a.txt"), str(dest))

            assert dest.read_text() == "alpha"

    def test_missing_source(self, navigator):
        before = list(navigator.listing)

        with pytest.raises(CopyError):
            navigator.copy("ghost.txt", "b.txt")

        assert navigator.listing == before

    def test_invalid_destination(self, navigator):
        with pytest.raises(CopyError):
            navigator.copy("a.txt", "no/such/dir/b.txt")

    def test_nul_in_destination_fails(self, navigator):
        with pytest.raises(CopyError):
            navigator.copy("a.txt", "b\x00.txt")

    def test_directory_into_itself(self, navigator, temp_dir):
        with pytest.raises(CopyError):
            navigator.copy("docs", "docs/again")

        assert not (temp_dir / "docs" / "again").exists()


class TestMove:
    """Test move."""

    def test_rename_file(self, navigator, temp_dir):
        navigator.move("a.txt", "renamed.txt")

        assert not (temp_dir / "a.txt").exists()
        assert (temp_dir / "renamed.txt").read_text() == "alpha"
        assert names(navigator) == ["docs", "renamed.txt"]

    def test_move_into_existing_directory(self, navigator, temp_dir):
        target = navigator.move("a.txt", "docs")

        assert target == temp_dir / "docs" / "a.txt"
        assert (temp_dir / "docs" / "a.txt").read_text() == "alpha"

    def test_existing_file_destination_fails(self, navigator, temp_dir):
        (temp_dir / "b.txt").write_text("bravo")
        before = list(navigator.listing)

        with pytest.raises(MoveError):
            navigator.move("a.txt", "b.txt")

        assert (temp_dir / "a.txt").read_text() == "alpha"
        assert (temp_dir / "b.txt").read_text() == "bravo"
        assert navigator.listing == before

    def test_missing_source(self, navigator):
        with pytest.raises(MoveError):
            navigator.move("ghost.txt", "b.txt")

    def test_refuses_current_directory(self, navigator, temp_dir):
        navigator.change_directory("docs")

        with pytest.raises(MoveError):
            navigator.move(str(temp_dir / "docs"), str(temp_dir / "elsewhere"))

        assert navigator.current_path == temp_dir / "docs"
        assert navigator.current_path.exists()

    def test_nul_in_destination_fails(self, navigator, temp_dir):
        with pytest.raises(MoveError):
            navigator.move("a.txt", "b\x00.txt")

        assert (temp_dir / "a.txt").exists()


class TestSearch:
    """Test search."""

    @pytest.fixture
    def tree(self, temp_dir):
        (temp_dir / "foo.txt").write_text("")
        (temp_dir / "barfoo").write_text("")
        (temp_dir / "baz.txt").write_text("")
        return Navigator(start_path=temp_dir)

    def test_substring_matches(self, tree, temp_dir):
        matches = list(tree.search("foo"))

        assert sorted(m.path for m in matches) == [temp_dir / "barfoo", temp_dir / "foo.txt"]

    def test_case_sensitive(self, tree):
        assert list(tree.search("FOO")) == []

    def test_recursive_and_includes_directories(self, navigator, temp_dir):
        (temp_dir / "docs" / "inner").mkdir()
        (temp_dir / "docs" / "inner" / "notes-2.md").write_text("")

        matches = list(navigator.search("notes"))

        assert sorted(m.path for m in matches) == [
            temp_dir / "docs" / "inner" / "notes-2.md",
            temp_dir / "docs" / "notes.txt",
        ]
        assert list(navigator.search("doc")) == [SearchMatch(path=temp_dir / "docs", is_dir=True)]

    def test_parent_reported_before_children(self, navigator, temp_dir):
        (temp_dir / "docs" / "docs-old").mkdir()

        matches = [m.path for m in navigator.search("docs")]

        assert matches.index(temp_dir / "docs") < matches.index(temp_dir / "docs" / "docs-old")

    def test_is_lazy_and_restartable(self, tree):
        results = tree.search("foo")

        assert not isinstance(results, list)
        assert len(list(results)) == 2
        assert len(list(tree.search("foo"))) == 2

    def test_does_not_change_state(self, tree, temp_dir):
        before = list(tree.listing)

        list(tree.search("foo"))

        assert tree.current_path == temp_dir
        assert tree.listing == before

    @posix_only
    def test_symlinked_directory_not_descended(self, navigator, temp_dir):
        (temp_dir / "loop").symlink_to(temp_dir)

        matches = [m.path for m in navigator.search("notes")]

        assert matches == [temp_dir / "docs" / "notes.txt"]

    def test_unreadable_root_raises_access_error(self, navigator, temp_dir):
        navigator.change_directory("docs")
        (temp_dir / "docs" / "notes.txt").unlink()
        (temp_dir / "docs").rmdir()

        with pytest.raises(AccessError):
            list(navigator.search("x"))

    def test_tree_deeper_than_recursion_limit(self, temp_dir):
        depth = sys.getrecursionlimit() + 100
        deepest = temp_dir
        for _ in range(depth):
            deepest = deepest / "a"
            deepest.mkdir()

        try:
            matches = list(Navigator(start_path=temp_dir).search("a"))

            assert len(matches) == depth
            assert matches[0].path == temp_dir / "a"
            assert matches[-1].path == deepest
        finally:
            # Unwind by hand; recursive tree removal hits the same limit.
            while deepest != temp_dir:
                deepest.rmdir()
                deepest = deepest.parent


class TestAuditTrail:
    """Test that commands are recorded in the audit log."""

    def test_success_and_failure_recorded(self, temp_dir, temp_log):
        logger = AuditLogger(log_path=temp_log)
        nav = Navigator(start_path=temp_dir, logger=logger)

        nav.create_directory("made")
        with pytest.raises(RemoveError):
            nav.remove("ghost")

        entries = logger.get_recent()
        assert entries[0].status == ActionStatus.FAILED.value
        assert entries[0].action_type == "remove"
        assert entries[1].status == ActionStatus.EXECUTED.value
        assert entries[1].action_type == "create"

    def test_search_recorded_with_count(self, temp_dir, temp_log):
        (temp_dir / "foo").write_text("")
        logger = AuditLogger(log_path=temp_log)
        nav = Navigator(start_path=temp_dir, logger=logger)

        list(nav.search("foo"))

        assert logger.get_recent(limit=1)[0].result == "1 matches"

    def test_lost_audit_log_does_not_stop_commands(self, temp_dir):
        (temp_dir / "keep").mkdir()
        logger = AuditLogger(log_path=str(temp_dir / "state" / "audit.jsonl"))
        nav = Navigator(start_path=temp_dir, logger=logger)

        nav.remove("state")

        assert not (temp_dir / "state").exists()
        assert nav.logger is None
        assert nav.audit_failure.startswith("Audit log disabled:")

        nav.change_directory("keep")

        assert nav.current_path == temp_dir / "keep"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
