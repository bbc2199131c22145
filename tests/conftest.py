"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gittag.config import TagConfig
from gittag.git import Commit, GitRepo


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config():
    """Default configuration."""
    return TagConfig()


@pytest.fixture
def fake_home(temp_dir, monkeypatch):
    """Point Path.home() at an empty directory so no real ~/.gittag is read."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    return home


def make_repo(responses, root=Path("/repo")):
    """Build a mock GitRepo whose run() answers from ``responses``.

    ``responses`` maps a tuple prefix of git arguments to either a string
    (stdout) or an exception instance to raise. The longest matching prefix
    wins; unmatched commands return "".
    """
    repo = MagicMock(spec=GitRepo)
    repo.root = root

    def run(args, env=None):
        best = None
        for key in responses:
            if tuple(args[: len(key)]) == key and (best is None or len(key) > len(best)):
                best = key
        if best is None:
            return ""
        value = responses[best]
        if isinstance(value, Exception):
            raise value
        return value

    repo.run.side_effect = run
    return repo


@pytest.fixture
def repo_factory():
    """Factory for mock repositories, see make_repo."""
    return make_repo


@pytest.fixture
def sample_commits():
    """Three unprefixed commits, oldest first."""
    return [
        Commit(hash="a" * 40, message="Add login form"),
        Commit(hash="b" * 40, message="Validate password length"),
        Commit(hash="c" * 40, message="Fix typo in error text"),
    ]

