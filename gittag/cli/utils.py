"""Shared display helpers for CLI commands."""

from typing import Optional

import typer

from gittag.config import TagConfig
from gittag.planner import PlannedRewrite, RewriteAction, RewritePlan
from gittag.tickets import has_prefix


def info(label: str, value: Optional[str] = None, value_color: str = typer.colors.YELLOW) -> None:
    """Print a ``⚙ label value`` status line."""
    line = typer.style(f"⚙ {label}", fg=typer.colors.BLUE)
    if value is not None:
        line += " " + typer.style(value, fg=value_color)
    typer.echo(line)


def error(message: str, hint: Optional[str] = None) -> None:
    """Print an error (and optional dimmed hint) to stderr."""
    typer.secho(f"✗ {message}", fg=typer.colors.RED, err=True)
    if hint:
        typer.secho(hint, fg=typer.colors.BRIGHT_BLACK, err=True)


def displayable(text: str) -> str:
    """Show bytes git could not decode as U+FFFD instead of failing to print them."""
    return text.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


def render_entry(entry: PlannedRewrite, config: TagConfig) -> list[str]:
    """Render one plan entry the way ``git rebase -i`` users expect.

    - ``- old`` / ``+ new`` when a prefix is added
    - ``~ old`` / ``→ new`` when an existing ticket is replaced
    - ``✓ subject (...)`` for skipped commits
    """
    message = displayable(entry.commit.message)
    new_message = displayable(entry.new_message)
    if entry.action is RewriteAction.SKIP:
        reason = "merge commit, skipped" if entry.commit.is_merge else "already has prefix, skipped"
        return [typer.style(f"  ✓ {message} ({reason})", fg=typer.colors.BLUE)]

    if entry.action is RewriteAction.REPLACE_PREFIX and has_prefix(entry.commit.message, config):
        return [
            typer.style(f"  ~ {message}", fg=typer.colors.YELLOW),
            typer.style(f"  → {new_message}", fg=typer.colors.GREEN),
        ]

    return [
        typer.style(f"  - {message}", fg=typer.colors.RED),
        typer.style(f"  + {new_message}", fg=typer.colors.GREEN),
    ]


def display_plan(plan: RewritePlan, config: TagConfig) -> None:
    """Print every commit of the plan, oldest first."""
    typer.secho("Commits to be rewritten:\n", bold=True)
    total = len(plan.entries)
    for number, entry in enumerate(plan.entries, 1):
        typer.secho(
            f"Commit {number} of {total} ({entry.commit.short_hash})",
            fg=typer.colors.BRIGHT_BLACK,
        )
        for line in render_entry(entry, config):
            typer.echo(line)
        typer.echo("")


def display_recovery_hint(has_remote_branch: bool) -> None:
    typer.secho("\nUse git log to verify the changes", fg=typer.colors.BRIGHT_BLACK)
    if has_remote_branch:
        typer.secho("\n⚠️  Remember to force-push:", fg=typer.colors.YELLOW)
        typer.secho("  git push --force-with-lease\n", fg=typer.colors.CYAN)
    typer.secho("To undo: git reflog and git reset --hard <commit>", fg=typer.colors.BRIGHT_BLACK)
