"""
Screen rendering for the explorer.

All terminal output goes through rich consoles owned by the Renderer, so
tests can hand in consoles that write to memory instead of a terminal.
"""

from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from rich.console import Console
from rich.text import Text

from .listing import DirectoryEntry
from .metadata import EntryMetadata, MetadataProvider, select_metadata_provider
from .navigator import SearchMatch


HELP_LINE = (
    "Commands: cd <dir>, mkdir <name>, rm <name>, cp <src> <dest>, "
    "mv <src> <dest>, search <name>, exit"
)
PROMPT = "> "


def format_row(metadata: EntryMetadata, name: str, directory_style: str = "bold blue") -> Text:
    """
    Format one listing row.

    ``<mode> <owner> <group> <size> <name>`` with owner and group padded
    to eight columns and the size right-aligned in eight.
    """
    row = Text(
        f"{metadata.mode_string} {metadata.owner:<8} {metadata.group:<8} {metadata.size:>8} "
    )
    row.append(name, style=directory_style if metadata.is_dir else None)
    return row


class Renderer:
    """Draws the listing and reports messages to the user."""

    def __init__(
        self,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
        metadata_provider: Optional[MetadataProvider] = None,
        directory_style: str = "bold blue",
        clear_screen: bool = True,
        input_stream: Optional[TextIO] = None,
    ):
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)
        self.input_stream = input_stream
        self.metadata = metadata_provider or select_metadata_provider()
        self.directory_style = directory_style
        self.clear_screen = clear_screen
        self._pending_errors: List[str] = []

    def clear(self) -> None:
        if self.clear_screen:
            self.console.clear()

    def render(self, path: Path, entries: Iterable[DirectoryEntry]) -> None:
        """Redraw the screen for ``path`` and its listing."""
        self.clear()
        self.console.print(Text(f"Current directory: {path}"))
        self.console.print()

        for entry in entries:
            self.console.print(format_row(self.metadata.describe(entry), entry.name, self.directory_style))

        self.console.print()
        self.console.print(Text(HELP_LINE))
        self.flush_errors()

    def report_error(self, message: str) -> None:
        """
        Queue an error for display.

        Errors are shown beneath the next screen so the clear that starts
        every redraw does not wipe them.
        """
        self._pending_errors.append(message)

    def flush_errors(self) -> None:
        for message in self._pending_errors:
            self.error_console.print(Text(message, style="red"))
        self._pending_errors.clear()

    def _read(self, prompt: str) -> str:
        if self.input_stream is None:
            return self.console.input(prompt)

        line = self.console.input(prompt, stream=self.input_stream)
        if not line:
            raise EOFError
        return line.rstrip("\n")

    def prompt(self) -> str:
        """
        Read one command line.

        Raises:
            EOFError: At end of input
        """
        return self._read("\n" + PROMPT)

    def show_search_header(self, pattern: str, path: Path) -> None:
        self.console.print(Text(f"Searching for: {pattern} in {path}"))

    def show_search_match(self, match: SearchMatch) -> None:
        self.console.print(Text(str(match.path), style=self.directory_style if match.is_dir else None))

    def show_search_summary(self, count: int) -> None:
        self.console.print()
        self.console.print(Text(f"Found {count} matches."))

    def pause(self) -> None:
        """Wait for Enter. End of input or Ctrl-C also carry on."""
        try:
            self._read("Press Enter to continue...")
        except (EOFError, KeyboardInterrupt):
            pass
