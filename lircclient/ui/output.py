"""
Console output for the command line front end.
"""

from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lircclient.daemon.protocol import BroadcastEvent
from lircclient.remotes import Remote


class UIManager:
    """Colour-coded terminal output."""

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def error(self, message: str) -> None:
        """Print error message in red (stderr)."""
        self.err_console.print(f"[bold red]{escape(message)}[/bold red]")

    def remotes(self, remotes: Iterable[Remote]) -> None:
        for remote in remotes:
            self.console.print(remote.name, markup=False)

    def commands(self, remote: Remote) -> None:
        """Print a remote's commands as a table."""
        table = Table(title=remote.name, show_header=True)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Command", style="cyan")
        for index, command in enumerate(remote.commands, start=1):
            table.add_row(str(index), escape(command.name))
        self.console.print(table)

    def event(self, event: BroadcastEvent) -> None:
        self.console.print(event.line, markup=False)
