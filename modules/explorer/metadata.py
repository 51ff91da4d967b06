"""
Metadata reader for the explorer.

Provides the permission bits, owner, group and size shown for each entry.
Reading metadata never raises: anything that cannot be read is reported
with a safe default so a listing always renders.
"""

import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from .listing import DirectoryEntry


@dataclass(frozen=True)
class PermissionTriple:
    """Read/write/execute bits for one class of user."""
    read: bool = False
    write: bool = False
    execute: bool = False

    def __str__(self) -> str:
        return (
            ("r" if self.read else "-")
            + ("w" if self.write else "-")
            + ("x" if self.execute else "-")
        )


@dataclass(frozen=True)
class PermissionBits:
    """User, group and other permission triples."""
    user: PermissionTriple = field(default_factory=PermissionTriple)
    group: PermissionTriple = field(default_factory=PermissionTriple)
    other: PermissionTriple = field(default_factory=PermissionTriple)

    @classmethod
    def from_mode(cls, mode: int) -> "PermissionBits":
        """Build permission bits from a ``st_mode`` value."""
        return cls(
            user=PermissionTriple(
                bool(mode & stat.S_IRUSR), bool(mode & stat.S_IWUSR), bool(mode & stat.S_IXUSR)
            ),
            group=PermissionTriple(
                bool(mode & stat.S_IRGRP), bool(mode & stat.S_IWGRP), bool(mode & stat.S_IXGRP)
            ),
            other=PermissionTriple(
                bool(mode & stat.S_IROTH), bool(mode & stat.S_IWOTH), bool(mode & stat.S_IXOTH)
            ),
        )

    @classmethod
    def all_granted(cls) -> "PermissionBits":
        granted = PermissionTriple(True, True, True)
        return cls(user=granted, group=granted, other=granted)

    def __str__(self) -> str:
        return f"{self.user}{self.group}{self.other}"


@dataclass(frozen=True)
class EntryMetadata:
    """Displayable metadata for one entry."""
    is_dir: bool
    permissions: PermissionBits
    owner: str
    group: str
    size: int

    @property
    def mode_string(self) -> str:
        """Type flag plus permissions, e.g. ``drwxr-xr-x``."""
        return ("d" if self.is_dir else "-") + str(self.permissions)


class MetadataProvider(ABC):
    """Reads metadata for directory entries."""

    @abstractmethod
    def describe(self, entry: DirectoryEntry) -> EntryMetadata:
        """Return metadata for ``entry``. Must not raise."""

    @staticmethod
    def _stat(entry: DirectoryEntry) -> Optional[os.stat_result]:
        # Follow symlinks like ``ls -L``; a broken link falls back to the link itself.
        for follow in (True, False):
            try:
                return os.stat(entry.path, follow_symlinks=follow)
            except OSError:
                continue
        return None

    @staticmethod
    def _size(entry: DirectoryEntry, st: Optional[os.stat_result]) -> int:
        # A link stat here means the link is broken.
        if entry.is_dir or st is None or stat.S_ISDIR(st.st_mode) or stat.S_ISLNK(st.st_mode):
            return 0
        return st.st_size


class PosixMetadataProvider(MetadataProvider):
    """Metadata from ``stat`` plus the password and group databases."""

    def describe(self, entry: DirectoryEntry) -> EntryMetadata:
        st = self._stat(entry)
        if st is None:
            return EntryMetadata(
                is_dir=entry.is_dir,
                permissions=PermissionBits(),
                owner="",
                group="",
                size=0,
            )

        return EntryMetadata(
            is_dir=entry.is_dir,
            permissions=PermissionBits.from_mode(st.st_mode),
            owner=self._owner_name(st.st_uid),
            group=self._group_name(st.st_gid),
            size=self._size(entry, st),
        )

    @staticmethod
    def _owner_name(uid: int) -> str:
        import pwd

        try:
            return pwd.getpwuid(uid).pw_name
        except KeyError:
            return ""

    @staticmethod
    def _group_name(gid: int) -> str:
        import grp

        try:
            return grp.getgrgid(gid).gr_name
        except KeyError:
            return ""


class FallbackMetadataProvider(MetadataProvider):
    """
    Metadata for platforms without POSIX permissions.

    Every permission bit is reported as granted and owner/group are
    fixed placeholders; only the size is read from the filesystem.
    """

    OWNER = "user"
    GROUP = "group"

    def describe(self, entry: DirectoryEntry) -> EntryMetadata:
        return EntryMetadata(
            is_dir=entry.is_dir,
            permissions=PermissionBits.all_granted(),
            owner=self.OWNER,
            group=self.GROUP,
            size=self._size(entry, self._stat(entry)),
        )


def select_metadata_provider() -> MetadataProvider:
    """Pick the metadata provider for the running platform."""
    if os.name == "posix":
        return PosixMetadataProvider()
    return FallbackMetadataProvider()
