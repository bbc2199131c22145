"""Tests for gittag.cli module."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from gittag.cli import app
from gittag.config import TagConfig
from gittag.git import Commit, DirtyWorkingTreeError, GitError, RewriteError
from gittag.workflow import BranchRange


runner = CliRunner()


@pytest.fixture
def cli_env(mocker, sample_commits):
    """Patch every git touchpoint of the main command."""
    repo = MagicMock()
    repo.root = Path("/repo")
    git_repo = mocker.patch("gittag.cli.main.GitRepo")
    git_repo.discover.return_value = repo

    mocks = {
        "repo": repo,
        "load_config": mocker.patch("gittag.cli.main.load_config", return_value=TagConfig()),
        "get_current_branch": mocker.patch(
            "gittag.cli.main.get_current_branch", return_value="feat/JIRA-123-demo"
        ),
        "ensure_clean": mocker.patch("gittag.cli.main.ensure_clean"),
        "has_remote": mocker.patch("gittag.cli.main.has_remote", return_value=False),
        "resolve_range": mocker.patch(
            "gittag.cli.main.resolve_range",
            return_value=BranchRange(base_branch="main", merge_base="m" * 40, commits=sample_commits),
        ),
        "rewrite_history": mocker.patch("gittag.cli.main.rewrite_history"),
        "cleanup_backup_refs": mocker.patch(
            "gittag.cli.main.cleanup_backup_refs", return_value=["refs/original/refs/heads/feat"]
        ),
    }
    return mocks


class TestMainCommand:
    """Tests for the main gittag command."""

    def test_shows_help(self):
        """Test that help is displayed."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "--ticket" in result.output
        assert "--dry-run" in result.output
        assert "hook" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "gittag" in result.output

    def test_dry_run_shows_diffs_without_rewriting(self, cli_env):
        result = runner.invoke(app, ["--dry-run"])

        assert result.exit_code == 0
        assert "Detected ticket from branch: JIRA-123" in result.output
        assert "Found 3 commit(s)" in result.output
        assert result.output.count("  + JIRA-123 ") == 3
        assert "- Add login form" in result.output
        assert "Dry run - no changes made" in result.output
        cli_env["rewrite_history"].assert_not_called()
        cli_env["cleanup_backup_refs"].assert_not_called()

    def test_commits_listed_oldest_first(self, cli_env):
        result = runner.invoke(app, ["--dry-run"])

        output = result.output
        assert output.index("Add login form") < output.index("Validate password") < output.index("Fix typo")
        assert "Commit 1 of 3 (aaaaaaa)" in output

    def test_confirmed_rewrite(self, cli_env):
        result = runner.invoke(app, [], input="y\n")

        assert result.exit_code == 0
        cli_env["rewrite_history"].assert_called_once()
        repo, plan, base_ref = cli_env["rewrite_history"].call_args[0]
        assert base_ref == "m" * 40
        assert len(plan.to_update) == 3
        cli_env["cleanup_backup_refs"].assert_called_once_with(cli_env["repo"])
        assert "Successfully rewrote 3 commit(s)" in result.output
        assert "Removed 1 backup ref(s)" in result.output
        assert "git reflog" in result.output

    def test_backup_refs_left_behind_reported(self, cli_env):
        cli_env["cleanup_backup_refs"].return_value = []

        result = runner.invoke(app, ["--yes"])

        assert result.exit_code == 0
        assert "Backup refs under refs/original/ were left in place" in result.output
        assert "Successfully rewrote 3 commit(s)" in result.output

    def test_declined_rewrite(self, cli_env):
        result = runner.invoke(app, [], input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.output
        cli_env["rewrite_history"].assert_not_called()

    def test_yes_skips_prompt(self, cli_env):
        result = runner.invoke(app, ["--yes"])

        assert result.exit_code == 0
        assert "with prefix" not in result.output
        cli_env["rewrite_history"].assert_called_once()

    def test_remote_without_force_blocked(self, cli_env):
        """Test that a pushed branch is never rewritten without --force."""
        cli_env["has_remote"].return_value = True

        result = runner.invoke(app, ["--yes"])

        assert result.exit_code == 1
        assert "pushed to remote" in result.output
        assert "--force" in result.output
        cli_env["resolve_range"].assert_not_called()
        cli_env["rewrite_history"].assert_not_called()

    def test_remote_with_force(self, cli_env):
        cli_env["has_remote"].return_value = True

        result = runner.invoke(app, ["--yes", "--force"])

        assert result.exit_code == 0
        assert "git push --force-with-lease" in result.output
        cli_env["rewrite_history"].assert_called_once()

    def test_remote_dry_run_allowed(self, cli_env):
        cli_env["has_remote"].return_value = True

        result = runner.invoke(app, ["--dry-run"])

        assert result.exit_code == 0

    def test_dirty_tree(self, cli_env):
        cli_env["ensure_clean"].side_effect = DirtyWorkingTreeError("Working directory has uncommitted changes")

        result = runner.invoke(app, ["--yes"])

        assert result.exit_code == 1
        assert "uncommitted changes" in result.output
        cli_env["rewrite_history"].assert_not_called()

    def test_no_ticket_in_branch(self, cli_env):
        cli_env["get_current_branch"].return_value = "feature/cleanup"

        result = runner.invoke(app, ["--dry-run"])

        assert result.exit_code == 1
        assert "Unable to determine ticket number" in result.output
        assert "--ticket=JIRA-123" in result.output

    def test_invalid_ticket(self, cli_env):
        result = runner.invoke(app, ["--ticket", "jira-1", "--dry-run"])

        assert result.exit_code == 1
        assert "Invalid ticket format" in result.output

    def test_ticket_and_prefix_conflict(self, cli_env):
        result = runner.invoke(app, ["--ticket", "JIRA-1", "--prefix", "X"])

        assert result.exit_code == 2

    def test_custom_prefix(self, cli_env):
        result = runner.invoke(app, ["--prefix", "HOTFIX", "--dry-run"])

        assert result.exit_code == 0
        assert "Using custom prefix: HOTFIX" in result.output
        assert "+ HOTFIX Add login form" in result.output

    def test_all_prefixed(self, cli_env):
        cli_env["resolve_range"].return_value = BranchRange(
            base_branch="main",
            merge_base="m" * 40,
            commits=[Commit(hash="1" * 40, message="JIRA-123 done")],
        )

        result = runner.invoke(app, ["--yes"])

        assert result.exit_code == 0
        assert "All commits already have ticket prefix" in result.output
        cli_env["rewrite_history"].assert_not_called()

    def test_no_commits(self, cli_env):
        cli_env["resolve_range"].return_value = BranchRange(base_branch="main", merge_base="m" * 40)

        result = runner.invoke(app, ["--yes"])

        assert result.exit_code == 0
        assert "No commits found" in result.output

    def test_replace_mode_display(self, cli_env):
        cli_env["resolve_range"].return_value = BranchRange(
            base_branch="main",
            merge_base="m" * 40,
            commits=[
                Commit(hash="1" * 40, message="RELEASE_0.3.1 JIRA-123 some message"),
                Commit(hash="2" * 40, message="Merge branch 'main'", parent_count=2),
            ],
        )

        result = runner.invoke(app, ["--ticket", "JIRA-124", "--replace", "--dry-run"])

        assert result.exit_code == 0
        assert "Replace mode: Will update 1 commit(s)" in result.output
        assert "~ RELEASE_0.3.1 JIRA-123 some message" in result.output
        assert "→ JIRA-124 RELEASE_0.3.1 some message" in result.output
        assert "1 merge commit(s) automatically skipped" in result.output

    def test_rewrite_failure(self, cli_env):
        cli_env["rewrite_history"].side_effect = RewriteError("Failed to rewrite commits: boom")

        result = runner.invoke(app, ["--yes"])

        assert result.exit_code == 1
        assert "Failed to rewrite commits" in result.output
        cli_env["cleanup_backup_refs"].assert_not_called()

    def test_not_a_repo(self, cli_env):
        from gittag.cli import main as cli_main

        cli_main.GitRepo.discover.side_effect = GitError("Not in a git repository.")

        result = runner.invoke(app, ["--dry-run"])

        assert result.exit_code == 1
        assert "Not in a git repository" in result.output


class TestHookCommands:
    """Tests for gittag hook subcommands."""

    @pytest.fixture
    def hook_env(self, mocker):
        repo = MagicMock()
        repo.root = Path("/repo")
        git_repo = mocker.patch("gittag.cli.hook.GitRepo")
        git_repo.discover.return_value = repo
        mocker.patch("gittag.cli.hook.load_config", return_value=TagConfig())
        mocker.patch("gittag.cli.hook.get_current_branch", return_value="feat/JIRA-123-demo")
        return repo

    def test_commit_msg_accepts(self, hook_env, temp_dir):
        message_file = temp_dir / "COMMIT_EDITMSG"
        message_file.write_text("JIRA-123 fix\n")

        result = runner.invoke(app, ["hook", "commit-msg", str(message_file)])

        assert result.exit_code == 0

    def test_commit_msg_rejects(self, hook_env, temp_dir):
        message_file = temp_dir / "COMMIT_EDITMSG"
        message_file.write_text("fix\n")

        result = runner.invoke(app, ["hook", "commit-msg", str(message_file)])

        assert result.exit_code == 1
        assert "must contain a ticket" in result.output

    def test_prepare_commit_msg(self, hook_env, temp_dir):
        message_file = temp_dir / "COMMIT_EDITMSG"
        message_file.write_text("fix\n")

        result = runner.invoke(app, ["hook", "prepare-commit-msg", str(message_file), "message"])

        assert result.exit_code == 0
        assert message_file.read_text() == "JIRA-123 fix\n"

    def test_prepare_commit_msg_amend_untouched(self, hook_env, temp_dir):
        message_file = temp_dir / "COMMIT_EDITMSG"
        message_file.write_text("fix\n")

        result = runner.invoke(app, ["hook", "prepare-commit-msg", str(message_file), "commit", "HEAD"])

        assert result.exit_code == 0
        assert message_file.read_text() == "fix\n"

    def test_pre_push_rejects(self, hook_env, mocker):
        mocker.patch(
            "gittag.cli.hook.find_unprefixed_commits",
            return_value=[Commit(hash="4" * 40, message="missing ticket")],
        )
        stdin = "refs/heads/feat " + "5" * 40 + " refs/heads/feat " + "2" * 40 + "\n"

        result = runner.invoke(app, ["hook", "pre-push", "origin", "git@example.com:repo.git"], input=stdin)

        assert result.exit_code == 1
        assert "4444444 missing ticket" in result.output

    def test_pre_push_accepts(self, hook_env, mocker):
        mocker.patch("gittag.cli.hook.find_unprefixed_commits", return_value=[])
        stdin = "refs/heads/feat " + "5" * 40 + " refs/heads/feat " + "2" * 40 + "\n"

        result = runner.invoke(app, ["hook", "pre-push", "origin"], input=stdin)

        assert result.exit_code == 0

    def test_install(self, hook_env, mocker):
        mocker.patch(
            "gittag.cli.hook.install_hooks",
            return_value={"commit-msg": "installed", "pre-push": "skipped"},
        )

        result = runner.invoke(app, ["hook", "install"])

        assert result.exit_code == 0
        assert "commit-msg: installed" in result.output
        assert "existing hook kept" in result.output

    def test_uninstall_nothing(self, hook_env, mocker):
        mocker.patch("gittag.cli.hook.uninstall_hooks", return_value=[])

        result = runner.invoke(app, ["hook", "uninstall"])

        assert result.exit_code == 0
        assert "No gittag hooks installed" in result.output


class TestConfigCommands:
    """Tests for gittag config subcommands."""

    @pytest.fixture
    def config_env(self, mocker, temp_dir, fake_home):
        repo = MagicMock()
        repo.root = temp_dir
        git_repo = mocker.patch("gittag.cli.config.GitRepo")
        git_repo.discover.return_value = repo
        return temp_dir

    def test_show(self, config_env):
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "Message format: {prefix} {message}" in result.output
        assert "main, master" in result.output

    def test_init_repo(self, config_env):
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        assert (config_env / ".gittag" / "config.yaml").exists()

    def test_init_refuses_overwrite(self, config_env):
        runner.invoke(app, ["config", "init"])

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert "--force" in result.output

    def test_init_global(self, config_env, fake_home):
        result = runner.invoke(app, ["config", "init", "--global"])

        assert result.exit_code == 0
        assert (fake_home / ".gittag" / "config.yaml").exists()
