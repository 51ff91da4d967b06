"""
Tests for directory listing.
"""

import pytest
import tempfile
import os
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import AccessError
from modules.explorer.listing import DirectoryEntry, list_directory


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


class TestListDirectory:
    """Test list_directory."""

    def test_empty_directory(self, temp_dir):
        assert list_directory(temp_dir) == []

    def test_directories_before_files_then_by_name(self, temp_dir):
        for name in ["b.txt", "A.txt", "a.txt"]:
            (temp_dir / name).write_text("x")
        for name in ["zeta", "Beta", "alpha"]:
            (temp_dir / name).mkdir()

        names = [e.name for e in list_directory(temp_dir)]

        assert names == ["Beta", "alpha", "zeta", "A.txt", "a.txt", "b.txt"]

    def test_sorted_invariant(self, temp_dir):
        for i in range(10):
            (temp_dir / f"file{9 - i}").write_text("x")
            (temp_dir / f"dir{i % 4}{i}").mkdir()

        entries = list_directory(temp_dir)
        kinds = [e.is_dir for e in entries]
        dirs = [e.name for e in entries if e.is_dir]
        files = [e.name for e in entries if not e.is_dir]

        assert kinds == sorted(kinds, reverse=True)
        assert dirs == sorted(dirs)
        assert files == sorted(files)

    def test_lists_only_immediate_children(self, temp_dir):
        (temp_dir / "sub").mkdir()
        (temp_dir / "sub" / "deep.txt").write_text("x")

        assert list_directory(temp_dir) == [DirectoryEntry(path=temp_dir / "sub", is_dir=True)]

    @pytest.mark.skipif(not hasattr(os, "symlink") or os.name != "posix", reason="needs symlinks")
    def test_broken_symlink_listed_as_file(self, temp_dir):
        (temp_dir / "dangling").symlink_to(temp_dir / "nowhere")

        entries = list_directory(temp_dir)

        assert len(entries) == 1
        assert not entries[0].is_dir

    def test_missing_directory_raises_access_error(self, temp_dir):
        with pytest.raises(AccessError):
            list_directory(temp_dir / "missing")

    def test_file_raises_access_error(self, temp_dir):
        target = temp_dir / "file.txt"
        target.write_text("x")

        with pytest.raises(AccessError) as excinfo:
            list_directory(target)

        assert isinstance(excinfo.value.reason, OSError)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
