"""
Navigation and file operations for the explorer.

The Navigator owns the current directory and its cached listing. Every
operation either succeeds and rebuilds the listing, or raises an
ExplorerError and leaves both untouched.
"""

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Union

from core.errors import (
    AccessError,
    NotFoundError,
    CreateError,
    RemoveError,
    CopyError,
    MoveError,
    ExplorerError,
)
from core.logger import AuditLogger, ActionType, ActionStatus

from .listing import DirectoryEntry, list_directory


PathArg = Union[str, Path]


@dataclass(frozen=True)
class SearchMatch:
    """An entry whose name contains the search pattern."""
    path: Path
    is_dir: bool


def _reason(error: Exception) -> str:
    return getattr(error, "strerror", None) or str(error)


def _is_dir(item: os.DirEntry, follow_symlinks: bool = True) -> bool:
    try:
        return item.is_dir(follow_symlinks=follow_symlinks)
    except OSError:
        return False


def _is_within(path: Path, ancestor: Path) -> bool:
    """True if ``path`` is ``ancestor`` or lies below it."""
    path, ancestor = path.resolve(), ancestor.resolve()
    return path == ancestor or ancestor in path.parents


class Navigator:
    """Current directory, its listing, and the commands that change them."""

    def __init__(self, start_path: Optional[PathArg] = None, logger: Optional[AuditLogger] = None):
        """
        Initialize the Navigator.

        Args:
            start_path: Directory to start in (default: the working directory)
            logger: Audit logger; when omitted nothing is recorded, and a
                failed write turns it off for the rest of the session

        Raises:
            AccessError: If the starting directory cannot be listed
        """
        self.logger = logger
        self.audit_failure: Optional[str] = None
        self.current_path = Path(start_path if start_path is not None else Path.cwd()).resolve()
        self.listing: List[DirectoryEntry] = list_directory(self.current_path)

    def _record(
        self,
        action_type: ActionType,
        description: str,
        status: ActionStatus = ActionStatus.EXECUTED,
        result: Optional[str] = None,
    ) -> None:
        if self.logger is None:
            return
        try:
            self.logger.log_action(
                action_type=action_type,
                description=description,
                status=status,
                result=result,
                metadata={"cwd": str(self.current_path)},
            )
        except OSError as e:
            # The command already happened; only the record of it is lost.
            self.logger = None
            self.audit_failure = f"Audit log disabled: {_reason(e)}"

    def _fail(self, action_type: ActionType, description: str, error: ExplorerError) -> ExplorerError:
        """Record a failed command and hand back the error to raise."""
        self._record(action_type, description, ActionStatus.FAILED, f"Error: {error.message}")
        return error

    def _resolve(self, path: PathArg) -> Path:
        """Absolute paths are used as-is, anything else is taken relative to the current directory."""
        path = Path(path)
        return path if path.is_absolute() else self.current_path / path

    def refresh(self) -> List[DirectoryEntry]:
        """
        Rebuild the listing for the current directory.

        Raises:
            AccessError: If the directory can no longer be listed
        """
        self.listing = list_directory(self.current_path)
        return self.listing

    def change_directory(self, path: PathArg) -> Path:
        """
        Change the current directory.

        Args:
            path: Relative or absolute directory

        Returns:
            The new (canonical) current directory

        Raises:
            NotFoundError: If the target does not exist or is not a directory
            AccessError: If the target cannot be listed
        """
        description = f"Change directory: {path}"
        target = self._resolve(path)

        if not os.path.isdir(target):
            raise self._fail(ActionType.NAVIGATE, description, NotFoundError(f"Directory not found: {path}"))

        resolved = target.resolve()
        try:
            listing = list_directory(resolved)
        except AccessError as e:
            raise self._fail(ActionType.NAVIGATE, description, e)

        self.current_path, self.listing = resolved, listing
        self._record(ActionType.NAVIGATE, description, result=str(resolved))
        return resolved

    def create_directory(self, name: PathArg) -> Path:
        """
        Create a single directory under the current directory.

        Raises:
            CreateError: If the name exists or the directory cannot be created
        """
        description = f"Create directory: {name}"
        target = self._resolve(name)

        try:
            target.mkdir()
        except (OSError, ValueError) as e:
            raise self._fail(
                ActionType.CREATE, description,
                CreateError(f"Error creating directory {name}: {_reason(e)}", reason=e),
            ) from e

        self.refresh()
        self._record(ActionType.CREATE, description, result=str(target))
        return target

    def remove(self, name: PathArg) -> None:
        """
        Remove a file, or a directory and everything below it.

        Symlinks are removed without touching what they point to.

        Raises:
            RemoveError: If the target is missing, protected, or cannot be removed
        """
        description = f"Remove: {name}"
        target = self._resolve(name)

        if not os.path.lexists(target):
            raise self._fail(ActionType.REMOVE, description, RemoveError(f"No such file or directory: {name}"))

        is_link = target.is_symlink()
        if not is_link and _is_within(self.current_path, target):
            raise self._fail(
                ActionType.REMOVE, description,
                RemoveError(f"Refusing to remove the current directory or a parent: {name}"),
            )

        try:
            if os.path.isdir(target) and not is_link:
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as e:
            raise self._fail(
                ActionType.REMOVE, description,
                RemoveError(f"Error removing {name}: {_reason(e)}", reason=e),
            ) from e

        self.refresh()
        self._record(ActionType.REMOVE, description, result=str(target))

    def copy(self, src: PathArg, dest: PathArg) -> Path:
        """
        Copy a file or directory tree.

        A directory source is copied recursively into ``dest``, which is
        created with any missing parents. A file source overwrites an
        existing file at ``dest``.

        Raises:
            CopyError: If the source is missing or the copy fails
        """
        description = f"Copy {src} to {dest}"
        source, destination = self._resolve(src), self._resolve(dest)

        if not os.path.exists(source):
            raise self._fail(ActionType.COPY, description, CopyError(f"Source not found: {src}"))

        try:
            if os.path.isdir(source):
                if _is_within(destination, source):
                    raise self._fail(
                        ActionType.COPY, description,
                        CopyError(f"Cannot copy a directory into itself: {src} -> {dest}"),
                    )
                destination.mkdir(parents=True, exist_ok=True)
                shutil.copytree(source, destination, dirs_exist_ok=True)
            else:
                shutil.copy2(source, destination)
        except (OSError, ValueError) as e:
            raise self._fail(
                ActionType.COPY, description,
                CopyError(f"Error copying {src} to {dest}: {_reason(e)}", reason=e),
            ) from e

        self.refresh()
        self._record(ActionType.COPY, description, result=str(destination))
        return destination

    def move(self, src: PathArg, dest: PathArg) -> Path:
        """
        Move or rename an entry.

        Renames in place where the filesystem allows it and falls back to
        copy-and-delete across volumes. An existing directory at ``dest``
        receives the source under its own name; any other existing entry
        at the final target makes the move fail.

        Returns:
            The path the source now lives at

        Raises:
            MoveError: If the source is missing, the target exists, or the move fails
        """
        description = f"Move {src} to {dest}"
        source, destination = self._resolve(src), self._resolve(dest)

        if not os.path.lexists(source):
            raise self._fail(ActionType.MOVE, description, MoveError(f"Source not found: {src}"))

        if not source.is_symlink() and _is_within(self.current_path, source):
            raise self._fail(
                ActionType.MOVE, description,
                MoveError(f"Cannot move the current directory or a parent: {src}"),
            )

        target = destination / source.name if os.path.isdir(destination) else destination
        if os.path.lexists(target):
            raise self._fail(ActionType.MOVE, description, MoveError(f"Destination already exists: {dest}"))

        try:
            shutil.move(str(source), str(target))
        except (OSError, ValueError) as e:
            raise self._fail(
                ActionType.MOVE, description,
                MoveError(f"Error moving {src} to {dest}: {_reason(e)}", reason=e),
            ) from e

        self.refresh()
        self._record(ActionType.MOVE, description, result=str(target))
        return target

    def search(self, pattern: str) -> Iterator[SearchMatch]:
        """
        Find entries below the current directory whose name contains ``pattern``.

        Matches are yielded as the walk finds them, depth first. Symlinked
        directories are not descended and unreadable subdirectories are
        skipped. Each call starts a fresh walk.

        Raises:
            AccessError: If the current directory cannot be read
        """
        root = self.current_path
        description = f"Search: {pattern} in {root}"

        try:
            children = self._scan(root)
        except OSError as e:
            raise self._fail(
                ActionType.SEARCH, description,
                AccessError(f"Cannot search {root}: {_reason(e)}", reason=e),
            ) from e

        count = 0
        for match in self._walk(children, pattern):
            count += 1
            yield match

        self._record(ActionType.SEARCH, description, result=f"{count} matches")

    @staticmethod
    def _scan(directory: Union[str, Path]) -> List[os.DirEntry]:
        with os.scandir(directory) as it:
            return list(it)

    @classmethod
    def _walk(cls, children: List[os.DirEntry], pattern: str) -> Iterator[SearchMatch]:
        # One iterator per open directory; the top of the stack is the deepest.
        stack = [iter(children)]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                continue

            if pattern in child.name:
                yield SearchMatch(path=Path(child.path), is_dir=_is_dir(child))

            if _is_dir(child, follow_symlinks=False):
                try:
                    stack.append(iter(cls._scan(child.path)))
                except OSError:
                    continue
