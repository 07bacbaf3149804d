"""CLI entry point for marknote.

    marknote [--root PATH] [-c CONFIG.toml] [-v] [--version]

Loads the notes and tasks under the config root, starts the external-change
watcher and hands the terminal to the curses UI until the user quits.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO

import click
from rich.console import Console
from rich.logging import RichHandler

from marknote import __version__

console = Console(stderr=True)


def _setup_logging(log_file: IO[str], verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    file_console = Console(file=log_file, width=120, no_color=True)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=file_console, rich_tracebacks=True)],
        force=True,
    )


@click.command()
@click.version_option(__version__)
@click.option("--root", type=click.Path(file_okay=False, path_type=Path), help="Config root directory")
@click.option("-c", "--config", type=click.Path(exists=True, dir_okay=False), help="Config file path")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(root: Path | None, config: str | None, verbose: bool) -> None:
    """marknote — keyboard-driven notes, daily journal and tasks."""
    from marknote.app.state import AppState
    from marknote.config import load_settings
    from marknote.errors import IoFailure
    from marknote.notes.watcher import NoteWatcher
    from marknote.tui.terminal import EventQueue, run

    settings = load_settings(Path(config) if config else None, root=root)
    try:
        settings.ensure_layout()
    except IoFailure as e:
        console.print(f"[red]✗[/red] Cannot create {settings.root}: {e.cause.strerror or e.cause}")
        sys.exit(1)

    with open(settings.log_path, "a", encoding="utf-8") as log_file:
        _setup_logging(log_file, verbose)
        logger = logging.getLogger("marknote")
        logger.info("Starting marknote %s with root %s", __version__, settings.root)

        state = AppState.from_settings(settings)
        state.load()

        events = EventQueue()
        watcher = NoteWatcher(settings.notes_dir, settings.watch, events.disk_changed)
        watcher.start()
        try:
            run(state, events, settings.ui)
        finally:
            watcher.stop()
            logger.info("marknote stopped")

    if state.dirty:
        console.print("[yellow]![/yellow] Quit with unsaved changes discarded.")
    sys.exit(0)


if __name__ == "__main__":
    main()
