"""History rewriting with git filter-branch.

Contains:
- rewrite_history: Apply a RewritePlan to the branch history
- cleanup_backup_refs: Delete the refs/original/ backups filter-branch leaves
- build_msg_filter_command: Shell command filter-branch runs per commit
"""

import json
import logging
import os
import shlex
import sys
from pathlib import Path

import gittag
from gittag.git.exceptions import GitError, RewriteError
from gittag.git.runner import GitRepo, get_git_dir
from gittag.planner import RewritePlan
from gittag.rewrite.msg_filter import MESSAGE_MAP_ENV

logger = logging.getLogger(__name__)

BACKUP_REF_NAMESPACE = "refs/original/"


def build_msg_filter_command() -> str:
    """Build the --msg-filter command line.

    filter-branch evaluates it with sh, from inside its scratch directory.
    """
    return f"{shlex.quote(sys.executable)} -m gittag.rewrite.msg_filter"


def _filter_env(map_file: Path) -> dict[str, str]:
    env = os.environ.copy()
    env[MESSAGE_MAP_ENV] = str(map_file)
    env["FILTER_BRANCH_SQUELCH_WARNING"] = "1"
    # The filter runs in another process; make sure it imports this copy of gittag
    package_parent = str(Path(gittag.__file__).resolve().parent.parent)
    existing = env.get("PYTHONPATH")
    env["PYTHONPATH"] = package_parent + (os.pathsep + existing if existing else "")
    return env


def write_message_map(repo: GitRepo, plan: RewritePlan, pid: int) -> Path:
    """Write the plan's message map next to the repository's git data.

    Returns:
        Path to the JSON file.
    """
    map_file = get_git_dir(repo) / f"gittag_message_map_{pid}.json"
    map_file.write_text(json.dumps(plan.message_map()), encoding="utf-8")
    return map_file


def rewrite_history(repo: GitRepo, plan: RewritePlan, base_ref: str) -> None:
    """Rewrite the subjects of ``base_ref..HEAD`` according to ``plan``.

    Only commits the plan changes get a new subject; bodies, authorship,
    dates and trees are preserved by filter-branch. Merge and skipped
    commits keep their messages.

    Args:
        repo: Repository to rewrite.
        plan: The plan that was shown to the user.
        base_ref: Exclusive lower bound of the range (usually the merge-base).

    Raises:
        RewriteError: If filter-branch fails.
    """
    if not plan.message_map():
        logger.debug("Nothing to rewrite")
        return

    map_file = write_message_map(repo, plan, os.getpid())
    try:
        repo.run(
            [
                "filter-branch",
                "-f",
                "--msg-filter",
                build_msg_filter_command(),
                "--",
                f"{base_ref}..HEAD",
            ],
            env=_filter_env(map_file),
        )
    except GitError as e:
        raise RewriteError(f"Failed to rewrite commits: {e}")
    finally:
        try:
            map_file.unlink()
        except OSError:
            logger.warning("Could not remove message map %s", map_file)


def list_backup_refs(repo: GitRepo) -> list[str]:
    """List refs under refs/original/."""
    output = repo.run(["for-each-ref", "--format=%(refname)", BACKUP_REF_NAMESPACE])
    if not output:
        return []
    return output.split("\n")


def cleanup_backup_refs(repo: GitRepo) -> list[str]:
    """Delete the backup refs filter-branch leaves under refs/original/.

    Best effort: failures are logged, never raised.

    Returns:
        The refs that were deleted.
    """
    try:
        refs = list_backup_refs(repo)
    except GitError as e:
        logger.warning("Could not list backup refs: %s", e)
        return []

    if not refs:
        logger.debug("No backup refs to clean up")
        return []

    deleted = []
    for ref in refs:
        try:
            repo.run(["update-ref", "-d", ref])
            deleted.append(ref)
        except GitError as e:
            logger.warning("Could not delete backup ref %s: %s", ref, e)
    return deleted
