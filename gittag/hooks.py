"""Git hook logic for gittag.

The hooks use the same TagConfig as the rewrite so that a message the hooks
accept is a message the rewrite would skip.

Contains:
- check_commit_message: commit-msg validation
- prepare_commit_message: prepare-commit-msg ticket insertion
- parse_push_refs / find_unprefixed_commits: pre-push validation
- install_hooks / uninstall_hooks: manage the hook shims
"""

import logging
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gittag.config import TagConfig
from gittag.git import Commit, GitRepo, log_commits
from gittag.tickets import apply_prefix, extract_ticket, has_prefix

logger = logging.getLogger(__name__)

HOOK_NAMES = ("commit-msg", "prepare-commit-msg", "pre-push")

HOOK_MARKER = "# installed by gittag"

ZERO_SHA = "0" * 40

# Subjects git generates itself; these never need a ticket
EXEMPT_SUBJECT_PREFIXES = ("Merge ", "Revert ", "fixup! ", "squash! ", "amend! ")

# prepare-commit-msg sources where the message must not be touched
SKIPPED_MESSAGE_SOURCES = {"merge", "squash", "commit"}


def strip_comments(message: str) -> str:
    """Drop git's ``#`` comment lines and surrounding blank lines."""
    lines = [line for line in message.splitlines() if not line.startswith("#")]
    return "\n".join(lines).strip()


def is_exempt(subject: str) -> bool:
    return subject.startswith(EXEMPT_SUBJECT_PREFIXES)


def check_commit_message(message: str, config: TagConfig) -> bool:
    """Return True if the commit message may be committed.

    Empty messages are left for git to reject.
    """
    content = strip_comments(message)
    if not content:
        return True
    subject = content.split("\n", 1)[0]
    if is_exempt(subject):
        return True
    return has_prefix(subject, config)


def prepare_commit_message(
    message: str,
    branch: str,
    config: TagConfig,
    source: Optional[str] = None,
) -> Optional[str]:
    """Prefix the message with the ticket from the branch name.

    Args:
        message: Current content of the commit message file.
        branch: Current branch name.
        config: Active configuration.
        source: Second argument git passes to prepare-commit-msg.

    Returns:
        The new message, or None if it should be left alone.
    """
    if source in SKIPPED_MESSAGE_SOURCES:
        return None

    ticket = extract_ticket(branch, config)
    if not ticket:
        return None

    subject, sep, rest = message.partition("\n")
    if subject.startswith("#") or is_exempt(subject):
        # Editor template: the subject line has not been written yet
        return None
    if has_prefix(subject, config):
        return None
    return apply_prefix(subject, ticket, config) + sep + rest


@dataclass(frozen=True)
class PushedRef:
    """One line of pre-push stdin."""

    local_ref: str
    local_sha: str
    remote_ref: str
    remote_sha: str

    @property
    def is_delete(self) -> bool:
        return self.local_sha == ZERO_SHA

    @property
    def is_new(self) -> bool:
        return self.remote_sha == ZERO_SHA


def parse_push_refs(text: str) -> list[PushedRef]:
    """Parse ``<local ref> <local sha> <remote ref> <remote sha>`` lines."""
    refs = []
    for line in text.splitlines():
        parts = line.split()
        if len(parts) != 4:
            continue
        refs.append(PushedRef(*parts))
    return refs


def find_unprefixed_commits(repo: GitRepo, ref: PushedRef, config: TagConfig) -> list[Commit]:
    """Return the non-merge commits of a push whose subject has no ticket."""
    if ref.is_delete:
        return []
    if ref.is_new:
        revisions = [ref.local_sha, "--not", "--remotes"]
    else:
        revisions = [f"{ref.remote_sha}..{ref.local_sha}"]

    return [
        commit
        for commit in log_commits(repo, revisions)
        if not commit.is_merge and not is_exempt(commit.message) and not has_prefix(commit.message, config)
    ]


# ============================================================
# INSTALLATION
# ============================================================


def get_hooks_dir(repo: GitRepo) -> Path:
    """Get the hooks directory, honouring core.hooksPath."""
    hooks_dir = Path(repo.run(["rev-parse", "--git-path", "hooks"]))
    if not hooks_dir.is_absolute():
        hooks_dir = repo.root / hooks_dir
    return hooks_dir


def render_hook_script(name: str) -> str:
    return f'#!/bin/sh\n{HOOK_MARKER}\nexec gittag hook {name} "$@"\n'


def is_gittag_hook(path: Path) -> bool:
    try:
        return HOOK_MARKER in path.read_text()
    except (OSError, UnicodeDecodeError):
        return False


def install_hooks(repo: GitRepo, names: tuple[str, ...] = HOOK_NAMES, force: bool = False) -> dict[str, str]:
    """Write the hook shims.

    Returns:
        Mapping of hook name to outcome ("installed", "updated" or "skipped").
    """
    hooks_dir = get_hooks_dir(repo)
    hooks_dir.mkdir(parents=True, exist_ok=True)

    results = {}
    for name in names:
        path = hooks_dir / name
        if path.exists() and not is_gittag_hook(path) and not force:
            logger.debug("Keeping existing %s hook at %s", name, path)
            results[name] = "skipped"
            continue
        outcome = "updated" if path.exists() else "installed"
        path.write_text(render_hook_script(name))
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        results[name] = outcome
    return results


def uninstall_hooks(repo: GitRepo, names: tuple[str, ...] = HOOK_NAMES) -> list[str]:
    """Remove gittag's hook shims, leaving any other hooks alone.

    Returns:
        Names of the hooks that were removed.
    """
    hooks_dir = get_hooks_dir(repo)
    removed = []
    for name in names:
        path = hooks_dir / name
        if path.exists() and is_gittag_hook(path):
            path.unlink()
            removed.append(name)
    return removed
