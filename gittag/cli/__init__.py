"""CLI entry point for gittag.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from gittag.cli.config import config_app
from gittag.cli.hook import hook_app
from gittag.cli.main import main_command

# Main application
app = typer.Typer(
    name="gittag",
    help="gittag: add ticket prefixes to the commits on your branch",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(hook_app, name="hook")
app.add_typer(config_app, name="config")

# Set the main callback for default behavior (includes --version flag)
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "hook_app",
    "config_app",
    "main_command",
]
