"""Git branch utilities.

Contains:
- get_current_branch: Get the current branch name
- find_base_branch: Probe the configured base branch candidates
- verify_base_branch: Check an explicitly requested base branch
- has_remote: Check whether the current branch tracks an upstream
"""

from gittag.config import TagConfig
from gittag.git.exceptions import GitError, NoBaseBranchError
from gittag.git.runner import GitRepo


def get_current_branch(repo: GitRepo) -> str:
    """Get the current branch name.

    Returns:
        The short name of the checked out branch.

    Raises:
        GitError: If not in a repository or HEAD is detached.
    """
    branch = repo.run(["rev-parse", "--abbrev-ref", "HEAD"])
    if not branch or branch == "HEAD":
        raise GitError("HEAD is detached. Check out a branch first.")
    return branch


def _ref_exists(repo: GitRepo, name: str) -> bool:
    try:
        repo.run(["rev-parse", "--verify", "--quiet", f"{name}^{{commit}}"])
        return True
    except GitError:
        return False


def find_base_branch(repo: GitRepo, config: TagConfig) -> str:
    """Find the branch the current branch diverged from.

    Candidates from ``config.base_branches`` are tried in order
    (``main`` then ``master`` by default).

    Raises:
        NoBaseBranchError: If no candidate resolves.
    """
    for candidate in config.base_branches:
        if _ref_exists(repo, candidate):
            return candidate
    names = " or ".join(config.base_branches)
    raise NoBaseBranchError(f"Could not find base branch ({names})")


def verify_base_branch(repo: GitRepo, name: str) -> str:
    """Return ``name`` if it resolves to a commit, else raise NoBaseBranchError."""
    if not _ref_exists(repo, name):
        raise NoBaseBranchError(f"Base branch not found: {name}")
    return name


def has_remote(repo: GitRepo) -> bool:
    """Check whether the current branch has an upstream tracking ref."""
    try:
        upstream = repo.run(["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"])
    except GitError:
        return False
    return bool(upstream)
