"""Commit range resolution.

Contains:
- Commit: Snapshot of a single commit on the branch
- get_merge_base: Find where HEAD diverged from the base branch
- get_branch_commits: List the branch commits, oldest first
"""

from dataclasses import dataclass

from gittag.git.exceptions import GitError, RangeResolutionError
from gittag.git.runner import GitRepo

# Unit and record separators, never present in hashes and vanishingly rare in messages.
# %B, not %s: Commit.message must be the first physical line, the one the message filter replaces.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = "%H%x1f%P%x1f%B%x1e"


@dataclass(frozen=True)
class Commit:
    """A commit as seen when the range was resolved.

    Stale as soon as the branch moves.
    """

    hash: str
    message: str
    parent_count: int = 1

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def is_merge(self) -> bool:
        return self.parent_count > 1


def _parse_log_record(record: str) -> Commit:
    commit_hash, parents, body = record.split(_FIELD_SEP, 2)
    return Commit(
        hash=commit_hash,
        message=body.split("\n", 1)[0],
        parent_count=len(parents.split()),
    )


def get_merge_base(repo: GitRepo, base: str) -> str:
    """Get the most recent common ancestor of HEAD and ``base``.

    Raises:
        RangeResolutionError: If git cannot compute a merge-base.
    """
    try:
        merge_base = repo.run(["merge-base", "HEAD", base])
    except GitError as e:
        raise RangeResolutionError(f"Could not find commits on branch (base: {base})\n{e}")
    if not merge_base:
        raise RangeResolutionError(f"Could not find commits on branch (base: {base})")
    return merge_base


def get_branch_commits(repo: GitRepo, base: str) -> list[Commit]:
    """Get the commits on the current branch since it diverged from ``base``.

    Equivalent to ``git log --reverse $(git merge-base HEAD base)..HEAD``.

    Args:
        repo: Repository to query.
        base: Base branch name or any commit-ish.

    Returns:
        Commits in ``(merge_base, HEAD]``, oldest first.

    Raises:
        RangeResolutionError: If the range cannot be resolved.
    """
    return list_commits(repo, get_merge_base(repo, base))


def list_commits(repo: GitRepo, merge_base: str) -> list[Commit]:
    """List commits in ``(merge_base, HEAD]``, oldest first.

    Raises:
        RangeResolutionError: If git log fails.
    """
    try:
        return log_commits(repo, [f"{merge_base}..HEAD"])
    except GitError as e:
        raise RangeResolutionError(f"Could not list commits after {merge_base[:7]}\n{e}")


def log_commits(repo: GitRepo, revisions: list[str]) -> list[Commit]:
    """Run git log over ``revisions`` and parse the result, oldest first."""
    output = repo.run(["log", "--reverse", f"--pretty=format:{_LOG_FORMAT}"] + revisions)
    if not output:
        return []
    records = (record.lstrip("\n") for record in output.split(_RECORD_SEP))
    return [_parse_log_record(record) for record in records if record]
