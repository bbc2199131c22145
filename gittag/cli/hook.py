"""CLI commands run by (and for installing) the git hooks."""

import sys
from pathlib import Path
from typing import Optional

import typer

from gittag.config import load_config
from gittag.exceptions import GitTagError
from gittag.git import GitRepo, get_current_branch
from gittag.hooks import (
    check_commit_message,
    find_unprefixed_commits,
    install_hooks,
    parse_push_refs,
    prepare_commit_message,
    uninstall_hooks,
)
from gittag.cli.utils import displayable, error

# Subcommand group for hook entry points
hook_app = typer.Typer(
    name="hook",
    help="Git hook entry points (commit-msg, prepare-commit-msg, pre-push)",
    add_completion=False,
)


@hook_app.command("commit-msg")
def hook_commit_msg(
    message_file: Path = typer.Argument(..., help="Path to the commit message file"),
) -> None:
    """Reject commit messages without a ticket."""
    try:
        repo = GitRepo.discover()
        config = load_config(repo.root)
        message = message_file.read_text(encoding="utf-8")
    except (GitTagError, OSError) as e:
        error(f"Error: {e}")
        raise typer.Exit(1)

    if not check_commit_message(message, config):
        error(
            "Commit message must contain a ticket (e.g. JIRA-123)",
            f"Pattern: {config.ticket_pattern}",
        )
        raise typer.Exit(1)


@hook_app.command("prepare-commit-msg")
def hook_prepare_commit_msg(
    message_file: Path = typer.Argument(..., help="Path to the commit message file"),
    source: Optional[str] = typer.Argument(None, help="Source of the message (message, template, merge, squash, commit)"),
    sha: Optional[str] = typer.Argument(None, help="Commit being amended, if any"),
) -> None:
    """Insert the branch ticket into the commit message."""
    try:
        repo = GitRepo.discover()
        config = load_config(repo.root)
        branch = get_current_branch(repo)
    except GitTagError:
        # Detached HEAD during rebase and similar: leave the message alone
        return

    try:
        message = message_file.read_text(encoding="utf-8")
        new_message = prepare_commit_message(message, branch, config, source=source)
        if new_message is not None:
            message_file.write_text(new_message, encoding="utf-8")
    except (GitTagError, OSError) as e:
        error(f"Error: {e}")
        raise typer.Exit(1)


@hook_app.command("pre-push")
def hook_pre_push(
    remote: str = typer.Argument(..., help="Name of the remote"),
    url: Optional[str] = typer.Argument(None, help="URL of the remote"),
) -> None:
    """Reject pushes containing commits without a ticket. Ref lines are read from stdin."""
    try:
        repo = GitRepo.discover()
        config = load_config(repo.root)
        offending = []
        for ref in parse_push_refs(sys.stdin.read()):
            offending.extend(find_unprefixed_commits(repo, ref, config))
    except GitTagError as e:
        error(f"Error: {e}")
        raise typer.Exit(1)

    if offending:
        error(f"{len(offending)} commit(s) without a ticket would be pushed to {remote}:")
        for commit in offending:
            typer.secho(f"  {commit.short_hash} {displayable(commit.message)}", fg=typer.colors.YELLOW, err=True)
        typer.secho("\nRun 'gittag' to add the ticket prefix, then push again.", fg=typer.colors.CYAN, err=True)
        raise typer.Exit(1)


@hook_app.command("install")
def hook_install(
    force: bool = typer.Option(False, "--force", help="Overwrite existing hooks not installed by gittag"),
) -> None:
    """Install the gittag hooks into this repository."""
    try:
        repo = GitRepo.discover()
        results = install_hooks(repo, force=force)
    except (GitTagError, OSError) as e:
        error(f"Error: {e}")
        raise typer.Exit(1)

    for name, outcome in results.items():
        if outcome == "skipped":
            typer.secho(f"  - {name}: existing hook kept (use --force to overwrite)", fg=typer.colors.YELLOW)
        else:
            typer.secho(f"  ✓ {name}: {outcome}", fg=typer.colors.GREEN)


@hook_app.command("uninstall")
def hook_uninstall() -> None:
    """Remove the gittag hooks from this repository."""
    try:
        repo = GitRepo.discover()
        removed = uninstall_hooks(repo)
    except (GitTagError, OSError) as e:
        error(f"Error: {e}")
        raise typer.Exit(1)

    if not removed:
        typer.echo("No gittag hooks installed.")
        return
    for name in removed:
        typer.echo(f"  ✓ removed {name}")
