"""
Command parsing and dispatch for the explorer.

One line of input is one command: a verb followed by its arguments,
split with shell-like quoting so paths containing spaces can be quoted.
"""

import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from core.errors import ExplorerError, UsageError

from .navigator import Navigator
from .renderer import Renderer


# verb -> (argument count, usage)
COMMANDS: Dict[str, Tuple[int, str]] = {
    "exit": (0, "exit"),
    "cd": (1, "cd <dir>"),
    "mkdir": (1, "mkdir <name>"),
    "rm": (1, "rm <name>"),
    "cp": (2, "cp <src> <dest>"),
    "mv": (2, "mv <src> <dest>"),
    "search": (1, "search <pattern>"),
}


@dataclass
class Command:
    """A parsed command line."""
    verb: str
    args: List[str] = field(default_factory=list)


def parse_command(line: str) -> Optional[Command]:
    """
    Parse one input line.

    Args:
        line: Raw input line

    Returns:
        The parsed Command, or None for blank lines and unknown verbs

    Raises:
        UsageError: If a known verb has the wrong number of arguments
            or the quoting is unbalanced or an argument contains NUL
    """
    try:
        tokens = shlex.split(line)
    except ValueError as e:
        raise UsageError(f"Cannot parse command: {e}", reason=e) from e

    if any("\0" in token for token in tokens):
        raise UsageError("Cannot parse command: paths may not contain NUL characters")

    if not tokens:
        return None

    verb, args = tokens[0], tokens[1:]
    if verb not in COMMANDS:
        return None

    arity, usage = COMMANDS[verb]
    if len(args) != arity:
        raise UsageError(f"usage: {usage}")

    return Command(verb=verb, args=args)


class CommandDispatcher:
    """Runs the read/dispatch/redraw loop against a Navigator."""

    def __init__(self, navigator: Navigator, renderer: Renderer, pause_after_search: bool = True):
        self.navigator = navigator
        self.renderer = renderer
        self.pause_after_search = pause_after_search

    def execute(self, line: str) -> bool:
        """
        Parse and run one input line, reporting any error.

        Returns:
            False when the session should end, True otherwise
        """
        try:
            command = parse_command(line)
            if command is None:
                return True
            return self.dispatch(command)
        except ExplorerError as e:
            self.renderer.report_error(e.message)
            return True
        finally:
            if self.navigator.audit_failure:
                self.renderer.report_error(self.navigator.audit_failure)
                self.navigator.audit_failure = None

    def dispatch(self, command: Command) -> bool:
        """
        Run a parsed command.

        Returns:
            False for ``exit``, True otherwise

        Raises:
            ExplorerError: If the underlying operation fails
        """
        nav = self.navigator
        verb, args = command.verb, command.args

        if verb == "exit":
            return False
        elif verb == "cd":
            nav.change_directory(args[0])
        elif verb == "mkdir":
            nav.create_directory(args[0])
        elif verb == "rm":
            nav.remove(args[0])
        elif verb == "cp":
            nav.copy(args[0], args[1])
        elif verb == "mv":
            nav.move(args[0], args[1])
        elif verb == "search":
            self._search(args[0])

        return True

    def _search(self, pattern: str) -> None:
        self.renderer.show_search_header(pattern, self.navigator.current_path)

        count = 0
        try:
            for match in self.navigator.search(pattern):
                self.renderer.show_search_match(match)
                count += 1
        except KeyboardInterrupt:
            self.renderer.report_error(f"Search interrupted after {count} matches.")
            return

        self.renderer.show_search_summary(count)
        if self.pause_after_search:
            self.renderer.pause()

    def run(self) -> None:
        """Loop until ``exit`` or end of input."""
        while True:
            self.renderer.render(self.navigator.current_path, self.navigator.listing)

            try:
                line = self.renderer.prompt().strip()
            except (EOFError, KeyboardInterrupt):
                break

            if not self.execute(line):
                break
