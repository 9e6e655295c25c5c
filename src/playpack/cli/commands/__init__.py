"""Command registration utilities for the Playpack CLI."""

from __future__ import annotations

import typer
from rich.console import Console

from playpack import __version__
from playpack.cli.commands import playlist


def register_commands(app: typer.Typer, console: Console) -> None:
    """Attach command groups to the provided Typer application."""

    playlist.register(app, console)

    @app.callback(invoke_without_command=True)
    def main_callback(
        ctx: typer.Context,
        version: bool = typer.Option(False, "--version", help="Show the Playpack version and exit"),
    ) -> None:
        """Pack YouTube playlists into 12-hour master playlists."""

        if version:
            console.print(f"playpack {__version__}")
            raise typer.Exit()
        if ctx.invoked_subcommand is None:
            console.print("[bold green]Playpack CLI ready for commands.[/bold green] Try --help.")


__all__ = ["register_commands"]
