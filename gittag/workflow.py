"""Pre-rewrite decisions shared by the CLI.

Contains:
- resolve_prefix: Pick the prefix from --prefix, --ticket or the branch name
- check_remote_gate: Refuse to rewrite pushed branches without --force
- resolve_range: Base branch, merge-base and commits for the current branch
"""

from dataclasses import dataclass, field
from typing import Optional

from gittag.config import TagConfig
from gittag.exceptions import InvalidTicketFormatError, RemoteBranchSafetyError
from gittag.git import (
    Commit,
    GitRepo,
    find_base_branch,
    get_merge_base,
    list_commits,
    verify_base_branch,
)
from gittag.tickets import extract_ticket, is_valid_ticket


@dataclass(frozen=True)
class PrefixChoice:
    """The prefix to apply and where it came from (prefix, ticket or branch)."""

    prefix: str
    source: str


@dataclass(frozen=True)
class BranchRange:
    base_branch: str
    merge_base: str
    commits: list[Commit] = field(default_factory=list)


def resolve_prefix(
    branch: str,
    config: TagConfig,
    ticket: Optional[str] = None,
    prefix: Optional[str] = None,
) -> Optional[PrefixChoice]:
    """Decide which prefix to use.

    A custom --prefix wins, then a --ticket (validated against the ticket
    format), then a ticket found in the branch name.

    Returns:
        The chosen prefix, or None if nothing usable was found.

    Raises:
        InvalidTicketFormatError: If --ticket is malformed.
    """
    if prefix:
        return PrefixChoice(prefix=prefix, source="prefix")
    if ticket:
        if not is_valid_ticket(ticket, config):
            raise InvalidTicketFormatError(
                f"Invalid ticket format: {ticket}\n"
                "Expected format: ABC-123 (2-10 uppercase letters, dash, 2-10 numbers)"
            )
        return PrefixChoice(prefix=ticket, source="ticket")

    detected = extract_ticket(branch, config)
    if detected:
        return PrefixChoice(prefix=detected, source="branch")
    return None


def check_remote_gate(has_remote_branch: bool, force: bool, dry_run: bool) -> None:
    """Refuse to rewrite a branch that exists on a remote unless forced.

    Raises:
        RemoteBranchSafetyError: If the branch is tracked and --force is absent.
    """
    if has_remote_branch and not force and not dry_run:
        raise RemoteBranchSafetyError(
            "This branch has been pushed to remote. "
            "Rewriting history will require a force-push; use --force to proceed anyway."
        )


def resolve_range(repo: GitRepo, config: TagConfig, base: Optional[str] = None) -> BranchRange:
    """Resolve the base branch, merge-base and branch commits (oldest first)."""
    base_branch = verify_base_branch(repo, base) if base else find_base_branch(repo, config)
    merge_base = get_merge_base(repo, base_branch)
    commits = list_commits(repo, merge_base)
    return BranchRange(base_branch=base_branch, merge_base=merge_base, commits=commits)
