"""
Directory listing for the explorer.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from core.errors import AccessError


@dataclass(frozen=True)
class DirectoryEntry:
    """A child of the current directory."""
    path: Path
    is_dir: bool

    @property
    def name(self) -> str:
        return self.path.name


def sort_key(entry: DirectoryEntry):
    """Directories first, then case-sensitive by name."""
    return (0 if entry.is_dir else 1, entry.name)


def list_directory(path: Path) -> List[DirectoryEntry]:
    """
    List the immediate children of a directory.

    Args:
        path: Directory to list

    Returns:
        Sorted list of DirectoryEntry objects (empty for an empty directory)

    Raises:
        AccessError: If the directory cannot be opened
    """
    entries = []
    try:
        with os.scandir(path) as it:
            for item in it:
                try:
                    is_dir = item.is_dir()
                except OSError:
                    is_dir = False
                entries.append(DirectoryEntry(path=Path(item.path), is_dir=is_dir))
    except OSError as e:
        raise AccessError(f"Cannot list {path}: {e.strerror or e}", reason=e) from e

    entries.sort(key=sort_key)
    return entries
