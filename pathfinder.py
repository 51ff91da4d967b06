#!/usr/bin/env python3
"""
Pathfinder - Terminal File Explorer

Main entry point for the Pathfinder CLI application.
"""

import sys
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core import Settings, AuditLogger, ActionType, AccessError, __version__
from modules.explorer import Navigator, Renderer, CommandDispatcher, select_metadata_provider


console = Console()


def get_audit_logger(settings: Settings) -> Optional[AuditLogger]:
    """Get the audit logger, or None when auditing is disabled or unavailable."""
    if not settings.audit_enabled:
        return None
    try:
        return AuditLogger(log_path=settings.audit_log_path)
    except OSError as e:
        console.print(f"[yellow]Warning:[/yellow] audit log disabled: {escape(e.strerror or str(e))}")
        return None


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="Pathfinder")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Path to a YAML configuration file.")
@click.pass_context
def pathfinder(ctx, config_path: Optional[str]):
    """
    Pathfinder - Terminal File Explorer

    Browse a directory, move around it and copy, move, remove or search
    for files with a handful of one-line commands.
    """
    ctx.obj = Settings(config_path)
    if ctx.invoked_subcommand is None:
        ctx.invoke(browse)


@pathfinder.command()
@click.argument("path", required=False, type=click.Path(file_okay=False))
@click.pass_obj
def browse(settings: Settings, path: Optional[str] = None):
    """Start the interactive explorer (in PATH or the working directory)."""
    try:
        navigator = Navigator(start_path=path, logger=get_audit_logger(settings))
    except AccessError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        sys.exit(1)

    renderer = Renderer(
        metadata_provider=select_metadata_provider(),
        directory_style=settings.directory_style,
        clear_screen=settings.clear_screen,
    )
    CommandDispatcher(navigator, renderer, pause_after_search=settings.pause_after_search).run()


@pathfinder.command()
@click.option("--limit", default=20, show_default=True, help="Number of entries to show.")
@click.option("--failed", is_flag=True, help="Only show failed commands.")
@click.option("--type", "action_type", type=click.Choice([t.value for t in ActionType]),
              default=None, help="Only show one kind of command.")
@click.option("--export", "export_format", type=click.Choice(["json", "csv"]), default=None,
              help="Print entries in an export format instead of a table.")
@click.pass_obj
def audit(settings: Settings, limit: int, failed: bool, action_type: Optional[str],
          export_format: Optional[str]):
    """View the audit log."""
    try:
        logger = AuditLogger(log_path=settings.audit_log_path)
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot open audit log: {escape(e.strerror or str(e))}")
        sys.exit(1)

    if failed:
        entries = logger.get_failed_actions(limit=sys.maxsize)
        if action_type:
            entries = [e for e in entries if e.action_type == action_type]
        entries = entries[:limit]
    elif action_type:
        entries = logger.get_by_action_type(ActionType(action_type), limit=limit)
    else:
        entries = logger.get_recent(limit=limit)

    if export_format:
        click.echo(logger.export(export_format, entries=entries), nl=False)
        return

    if not entries:
        console.print("[dim]No audit entries found.[/dim]")
        return

    table = Table(title="Recent Audit Log")
    table.add_column("Time", style="dim")
    table.add_column("Action")
    table.add_column("Description")
    table.add_column("Status")
    table.add_column("Result")

    for entry in entries:
        time_str = entry.timestamp.split("T")[1].split(".")[0] if "T" in entry.timestamp else entry.timestamp

        status_str = entry.status
        if entry.status == "executed":
            status_str = f"[green]{entry.status}[/green]"
        elif entry.status == "failed":
            status_str = f"[red]{entry.status}[/red]"

        description = entry.action_description
        table.add_row(
            time_str,
            entry.action_type,
            escape(description[:50] + "..." if len(description) > 50 else description),
            status_str,
            escape(entry.result or "—"),
        )

    console.print(table)


@pathfinder.group()
def config():
    """Inspect or create the configuration file."""
    pass


@config.command("show")
@click.pass_obj
def config_show(settings: Settings):
    """Show the settings in effect."""
    state = "found" if settings.config_path.exists() else "not found, using defaults"
    console.print(f"[bold]Config file:[/bold] {escape(str(settings.config_path))} ({state})")
    click.echo(yaml.dump({"pathfinder": settings.config}, default_flow_style=False), nl=False)


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
@click.pass_obj
def config_init(settings: Settings, force: bool):
    """Write a configuration file holding the defaults."""
    path = escape(str(settings.config_path))
    if settings.config_path.exists() and not force:
        console.print(f"[yellow]Config already exists:[/yellow] {path} (use --force to overwrite)")
        sys.exit(1)

    settings.reset()
    try:
        settings.save()
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot write {path}: {escape(e.strerror or str(e))}")
        sys.exit(1)
    console.print(f"[green]Wrote default configuration:[/green] {path}")


def main():
    pathfinder()


if __name__ == "__main__":
    main()
