"""CLI commands for configuration management."""

from pathlib import Path

import typer

from gittag import config as gittag_config
from gittag.exceptions import GitTagError
from gittag.git import GitRepo
from gittag.cli.utils import error

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage gittag configuration (~/.gittag/ and <repo>/.gittag/)",
    add_completion=False,
)


def _describe(path: Path) -> str:
    return f"{path}" if path.exists() else f"{path} (not found)"


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration and where it was loaded from."""
    try:
        repo = GitRepo.discover()
        config = gittag_config.load_config(repo.root)
    except GitTagError as e:
        error(f"Error: {e}")
        raise typer.Exit(1)

    typer.echo("Configuration layers (later wins):")
    typer.echo("  defaults")
    typer.echo(f"  {_describe(gittag_config.get_global_config_file())}")
    typer.echo(f"  {_describe(gittag_config.get_repo_config_file(repo.root))}")
    typer.echo()
    typer.echo(f"  Ticket pattern: {config.ticket_pattern}")
    typer.echo(f"  Branch pattern: {config.branch_pattern}")
    typer.echo(f"  Ticket format: {config.ticket_format}")
    typer.echo(f"  Message format: {config.message_format}")
    typer.echo(f"  Base branches: {', '.join(config.base_branches)}")


@config_app.command("init")
def config_init(
    global_: bool = typer.Option(
        False,
        "--global",
        help="Write ~/.gittag/config.yaml instead of the repository config",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Write the default configuration to a config file."""
    try:
        if global_:
            config_file = gittag_config.get_global_config_file()
        else:
            config_file = gittag_config.get_repo_config_file(GitRepo.discover().root)

        if config_file.exists() and not force:
            typer.echo(f"Config already exists at {config_file}. Use --force to overwrite.", err=True)
            raise typer.Exit(1)

        gittag_config.save_config_file(config_file, gittag_config.DEFAULT_CONFIG)
    except GitTagError as e:
        error(f"Error: {e}")
        raise typer.Exit(1)

    typer.echo(f"✓ Wrote default configuration to {config_file}")
