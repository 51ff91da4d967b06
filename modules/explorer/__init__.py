"""
Explorer module for Pathfinder.

Provides the directory listing, metadata reader, navigator, renderer and
command loop behind the interactive file browser.
"""

from .listing import DirectoryEntry, list_directory
from .metadata import (
    EntryMetadata,
    PermissionBits,
    PermissionTriple,
    MetadataProvider,
    PosixMetadataProvider,
    FallbackMetadataProvider,
    select_metadata_provider,
)
from .navigator import Navigator, SearchMatch
from .renderer import Renderer
from .commands import Command, CommandDispatcher, parse_command

__all__ = [
    'DirectoryEntry', 'list_directory',
    'EntryMetadata', 'PermissionBits', 'PermissionTriple',
    'MetadataProvider', 'PosixMetadataProvider', 'FallbackMetadataProvider',
    'select_metadata_provider',
    'Navigator', 'SearchMatch',
    'Renderer',
    'Command', 'CommandDispatcher', 'parse_command',
]
