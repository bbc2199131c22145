"""Main CLI command for prefixing branch commits with a ticket."""

from typing import Optional

import typer

from gittag import __version__
from gittag.config import load_config, setup_logging
from gittag.exceptions import GitTagError, RemoteBranchSafetyError
from gittag.git import GitRepo, RewriteError, ensure_clean, get_current_branch, has_remote
from gittag.planner import plan_rewrite
from gittag.rewrite import cleanup_backup_refs, rewrite_history
from gittag.workflow import check_remote_gate, resolve_prefix, resolve_range
from gittag.cli.utils import display_plan, display_recovery_hint, error, info


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gittag {__version__}")
        raise typer.Exit()


def main_command(
    ctx: typer.Context,
    ticket: Optional[str] = typer.Option(
        None,
        "--ticket",
        "-t",
        help="Manually specify ticket number (e.g., JIRA-123)",
    ),
    prefix: Optional[str] = typer.Option(
        None,
        "--prefix",
        "-p",
        help="Use custom prefix instead of ticket number",
    ),
    replace: bool = typer.Option(
        False,
        "--replace",
        help="Replace existing ticket prefixes instead of skipping them",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Allow rewriting commits that have been pushed to remote",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would be changed without modifying commits",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Bypass confirmation prompt and rewrite immediately",
    ),
    base: Optional[str] = typer.Option(
        None,
        "--base",
        help="Base branch to compare against (default: main, then master)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log git commands to stderr",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Add ticket prefixes to git commits on the current branch."""
    # If a subcommand is invoked, don't run the default behavior
    if ctx.invoked_subcommand is not None:
        return

    setup_logging(verbose)

    if ticket and prefix:
        error("--ticket and --prefix cannot be used together")
        raise typer.Exit(2)

    try:
        repo = GitRepo.discover()
        config = load_config(repo.root)

        # Step 1: Work out the prefix
        branch = get_current_branch(repo)
        info("Current branch:", branch)

        choice = resolve_prefix(branch, config, ticket=ticket, prefix=prefix)
        if choice is None:
            error(
                "Unable to determine ticket number from branch name",
                f"Branch name: {branch}\n"
                "Expected format: feat/JIRA-123-description or JIRA-123-feature",
            )
            typer.secho("\nUsage:", fg=typer.colors.BRIGHT_BLACK, err=True)
            typer.secho("  gittag --ticket=JIRA-123", fg=typer.colors.CYAN, err=True)
            typer.secho("  gittag --prefix=CUSTOM_PREFIX", fg=typer.colors.CYAN, err=True)
            raise typer.Exit(1)

        labels = {
            "prefix": "Using custom prefix:",
            "ticket": "Using ticket:",
            "branch": "Detected ticket from branch:",
        }
        info(labels[choice.source], choice.prefix, typer.colors.GREEN)

        # Step 2: Safety checks, before anything is read or written
        ensure_clean(repo)
        has_remote_branch = has_remote(repo)
        check_remote_gate(has_remote_branch, force, dry_run)

        # Step 3: Resolve the commit range
        typer.echo("")
        info("Fetching commits on current branch...")
        branch_range = resolve_range(repo, config, base)
        commits = branch_range.commits

        if not commits:
            typer.secho("⚠ No commits found on current branch", fg=typer.colors.YELLOW)
            raise typer.Exit(0)

        # Step 4: Plan
        plan = plan_rewrite(commits, choice.prefix, replace, config)

        typer.secho(f"Found {len(commits)} commit(s)", fg=typer.colors.BLUE)
        if plan.merge_count:
            typer.secho(
                f"({plan.merge_count} merge commit(s) automatically skipped)",
                fg=typer.colors.BRIGHT_BLACK,
            )
        typer.echo("")

        to_update = plan.to_update
        if not to_update:
            typer.secho("✓ All commits already have ticket prefix!", fg=typer.colors.GREEN)
            raise typer.Exit(0)

        if replace:
            typer.secho(f"🔄 Replace mode: Will update {len(to_update)} commit(s)\n", fg=typer.colors.YELLOW)
        else:
            typer.secho(f"{len(to_update)} commit(s) need prefix:\n", fg=typer.colors.YELLOW)

        display_plan(plan, config)

        if dry_run:
            typer.secho("🔍 Dry run - no changes made", fg=typer.colors.BLUE)
            raise typer.Exit(0)

        # Step 5: Confirm
        if not yes:
            action = "Replace/add prefix for" if replace else "Rewrite"
            confirmed = typer.confirm(
                f'{action} {len(to_update)} commit(s) with prefix "{choice.prefix}"?',
                default=False,
            )
            if not confirmed:
                typer.secho("Aborted", fg=typer.colors.BRIGHT_BLACK)
                raise typer.Exit(0)

        # Step 6: Rewrite and clean up
        typer.echo("")
        info("Rewriting commits...")
        rewrite_history(repo, plan, branch_range.merge_base)

        info("Cleaning up backup refs...")
        removed = cleanup_backup_refs(repo)
        if removed:
            typer.secho(f"  Removed {len(removed)} backup ref(s)", fg=typer.colors.BRIGHT_BLACK)
        elif plan.message_map():
            typer.secho(
                "⚠ Backup refs under refs/original/ were left in place\n"
                "  Remove them with: git update-ref -d <ref>",
                fg=typer.colors.YELLOW,
                err=True,
            )

        typer.secho(f"\n✓ Successfully rewrote {len(to_update)} commit(s)!", fg=typer.colors.GREEN)
        display_recovery_hint(has_remote_branch)

    except RemoteBranchSafetyError:
        error("This branch has been pushed to remote")
        typer.secho("\n⚠️  Rewriting history will require force-push!", fg=typer.colors.YELLOW, err=True)
        typer.secho(
            "\nThis will:\n"
            "  • Change all commit hashes\n"
            "  • Break the branch for anyone who has pulled it\n"
            "  • Require: git push --force-with-lease\n",
            fg=typer.colors.BRIGHT_BLACK,
            err=True,
        )
        typer.secho("To proceed anyway, use: --force", fg=typer.colors.CYAN, err=True)
        raise typer.Exit(1)
    except RewriteError as e:
        error(f"Error: {e}")
        typer.secho(
            "The branch may be partially rewritten. To undo: git reflog and git reset --hard <commit>",
            fg=typer.colors.BRIGHT_BLACK,
            err=True,
        )
        raise typer.Exit(1)
    except GitTagError as e:
        error(f"Error: {e}")
        raise typer.Exit(1)
