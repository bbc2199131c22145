"""Git access for gittag.

This package provides:
- exceptions: GitError, NoBaseBranchError, RangeResolutionError,
              DirtyWorkingTreeError, RewriteError
- runner: GitRepo, _run_git_command, get_repo_root, get_git_dir
- branch: get_current_branch, find_base_branch, verify_base_branch, has_remote
- status: is_clean, ensure_clean
- commits: Commit, get_merge_base, get_branch_commits,
           list_commits, log_commits
"""

# Exceptions
from gittag.git.exceptions import (
    DirtyWorkingTreeError,
    GitError,
    NoBaseBranchError,
    RangeResolutionError,
    RewriteError,
)

# Runner utilities
from gittag.git.runner import (
    GitRepo,
    _run_git_command,
    get_git_dir,
    get_repo_root,
)

# Branch utilities
from gittag.git.branch import (
    find_base_branch,
    get_current_branch,
    has_remote,
    verify_base_branch,
)

# Status utilities
from gittag.git.status import (
    ensure_clean,
    is_clean,
)

# Commit range
from gittag.git.commits import (
    Commit,
    get_branch_commits,
    get_merge_base,
    list_commits,
    log_commits,
)


__all__ = [
    # Exceptions
    "GitError",
    "NoBaseBranchError",
    "RangeResolutionError",
    "DirtyWorkingTreeError",
    "RewriteError",
    # Runner
    "GitRepo",
    "_run_git_command",
    "get_git_dir",
    "get_repo_root",
    # Branch
    "get_current_branch",
    "find_base_branch",
    "verify_base_branch",
    "has_remote",
    # Status
    "is_clean",
    "ensure_clean",
    # Commits
    "Commit",
    "get_merge_base",
    "get_branch_commits",
    "list_commits",
    "log_commits",
]
