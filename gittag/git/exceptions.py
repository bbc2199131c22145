"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- NoBaseBranchError: Raised when no base branch candidate exists
- RangeResolutionError: Raised when the branch commit range cannot be computed
- DirtyWorkingTreeError: Raised when the working tree has uncommitted changes
- RewriteError: Raised when the history rewrite fails
"""

from gittag.exceptions import GitTagError


class GitError(GitTagError):
    """Custom exception for git-related errors."""

    pass


class NoBaseBranchError(GitError):
    """Raised when none of the base branch candidates resolve."""

    pass


class RangeResolutionError(GitError):
    """Raised when the merge-base or commit range cannot be resolved."""

    pass


class DirtyWorkingTreeError(GitError):
    """Raised when there are staged or unstaged changes."""

    pass


class RewriteError(GitError):
    """Raised when git filter-branch fails."""

    pass
