"""Git command runner and repository utilities.

Contains:
- GitRepo: Repository context passed to every git operation
- _run_git_command: Run a git command and return its output
- get_repo_root: Get the root directory of the current git repository
- get_git_dir: Get the .git directory of a repository
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gittag.git.exceptions import GitError

logger = logging.getLogger(__name__)


def _run_git_command(
    args: list[str],
    cwd: Optional[Path] = None,
    env: Optional[dict[str, str]] = None,
) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in (defaults to the process cwd).
        env: Full environment for the child process (defaults to inherited).

    Returns:
        The stdout of the git command.

    Raises:
        GitError: If the command fails.
    """
    logger.debug("git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            check=True,
            cwd=cwd,
            env=env,
        )
        return result.stdout.strip()
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise GitError(f"Git command failed: git {' '.join(args)}\n{stderr}")
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")


@dataclass(frozen=True)
class GitRepo:
    """Handle on a working copy.

    Every git query and mutation goes through one of these instead of the
    process-wide cwd, so tests can point it anywhere.
    """

    root: Path

    def run(self, args: list[str], env: Optional[dict[str, str]] = None) -> str:
        """Run a git command inside this repository."""
        return _run_git_command(args, cwd=self.root, env=env)

    @classmethod
    def discover(cls, cwd: Optional[Path] = None) -> "GitRepo":
        """Build a repo handle for the repository containing ``cwd``."""
        return cls(root=get_repo_root(cwd))


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Get the root directory of the current git repository.

    Returns:
        Path to the repository root.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"], cwd=cwd)
        return Path(root)
    except GitError:
        raise GitError("Not in a git repository. Please run this command from within a git repo.")


def get_git_dir(repo: GitRepo) -> Path:
    """Get the absolute path of the repository's git directory."""
    git_dir = Path(repo.run(["rev-parse", "--git-dir"]))
    if not git_dir.is_absolute():
        git_dir = repo.root / git_dir
    return git_dir
