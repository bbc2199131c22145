"""Git working tree status utilities.

Contains:
- is_clean: Check for staged or unstaged changes
- ensure_clean: Raise if the working tree is dirty
"""

from gittag.git.exceptions import DirtyWorkingTreeError
from gittag.git.runner import GitRepo


def is_clean(repo: GitRepo) -> bool:
    """Check that there are no staged or unstaged changes to tracked files.

    Untracked files do not count; filter-branch leaves them alone.
    """
    status = repo.run(["status", "--porcelain=v1", "--untracked-files=no"])
    return not status


def ensure_clean(repo: GitRepo) -> None:
    """Raise DirtyWorkingTreeError unless the working tree is clean."""
    if not is_clean(repo):
        raise DirtyWorkingTreeError(
            "Working directory has uncommitted changes. "
            "Please commit or stash your changes first."
        )
