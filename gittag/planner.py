"""Rewrite planning for gittag.

Contains:
- RewriteAction: What happens to a single commit
- PlannedRewrite: One commit with its action and new subject
- RewritePlan: The full, ordered plan for a branch
- plan_rewrite: Build a plan from the branch commits
"""

from dataclasses import dataclass, field
from enum import Enum

from gittag.config import TagConfig
from gittag.git.commits import Commit
from gittag.tickets import format_commit_message, has_prefix, replace_prefix


class RewriteAction(str, Enum):
    """Per-commit rewrite action."""

    SKIP = "skip"
    ADD_PREFIX = "add-prefix"
    REPLACE_PREFIX = "replace-prefix"


@dataclass(frozen=True)
class PlannedRewrite:
    """A single commit in the rewrite plan.

    Subjects may carry surrogate-escaped bytes from undecodable commit messages.
    """

    commit: Commit
    action: RewriteAction
    new_message: str

    @property
    def changes(self) -> bool:
        return self.action is not RewriteAction.SKIP and self.new_message != self.commit.message


@dataclass(frozen=True)
class RewritePlan:
    """Ordered (oldest first) rewrite plan for the branch."""

    prefix: str
    replace_existing: bool = False
    entries: list[PlannedRewrite] = field(default_factory=list)

    @property
    def to_update(self) -> list[PlannedRewrite]:
        return [entry for entry in self.entries if entry.action is not RewriteAction.SKIP]

    @property
    def skipped(self) -> list[PlannedRewrite]:
        return [entry for entry in self.entries if entry.action is RewriteAction.SKIP]

    @property
    def merge_count(self) -> int:
        return sum(1 for entry in self.entries if entry.commit.is_merge)

    def message_map(self) -> dict[str, str]:
        """Map full commit hash to new subject for every commit that changes."""
        return {entry.commit.hash: entry.new_message for entry in self.entries if entry.changes}


def plan_commit(
    commit: Commit, prefix: str, replace_existing: bool, config: TagConfig
) -> PlannedRewrite:
    """Decide what happens to one commit.

    Merge commits are always skipped. In replace mode every other commit is
    re-prefixed; otherwise only commits without a ticket get the prefix.
    """
    if commit.is_merge:
        return PlannedRewrite(commit=commit, action=RewriteAction.SKIP, new_message=commit.message)

    if replace_existing:
        return PlannedRewrite(
            commit=commit,
            action=RewriteAction.REPLACE_PREFIX,
            new_message=replace_prefix(commit.message, prefix, config),
        )

    if has_prefix(commit.message, config):
        return PlannedRewrite(commit=commit, action=RewriteAction.SKIP, new_message=commit.message)

    return PlannedRewrite(
        commit=commit,
        action=RewriteAction.ADD_PREFIX,
        new_message=format_commit_message(prefix, commit.message, config),
    )


def plan_rewrite(
    commits: list[Commit],
    prefix: str,
    replace_existing: bool,
    config: TagConfig,
) -> RewritePlan:
    """Build the rewrite plan for ``commits``.

    Args:
        commits: Branch commits, oldest first.
        prefix: Ticket or custom prefix to apply.
        replace_existing: Replace tickets already present instead of skipping.
        config: Active configuration.

    Returns:
        A plan with exactly one entry per commit, in the same order.

    Raises:
        ConfigTemplateError: If message_format cannot be applied.
    """
    entries = [plan_commit(commit, prefix, replace_existing, config) for commit in commits]
    return RewritePlan(prefix=prefix, replace_existing=replace_existing, entries=entries)
