"""Command-line interface package for Playpack."""

from playpack.cli.main import CLIApplication, create_app

__all__ = ["CLIApplication", "create_app"]
