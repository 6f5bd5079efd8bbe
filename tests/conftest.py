"""
Shared fixtures: throwaway git repositories built with the real git binary.
"""

import os
import subprocess
from pathlib import Path

import pytest


class GitRepo:
    """A scratch repository with a deterministic commit clock."""

    def __init__(self, path: Path, clock: int = 1_700_000_000):
        self.path = path
        self._clock = clock

    @property
    def url(self) -> str:
        return self.path.as_uri()

    def git(self, *args: str, env: dict[str, str] | None = None) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            env=env,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def commit(self, message: str, filename: str | None = None, content: str | None = None) -> str:
        """Commit (optionally writing a file first) and return the commit id."""
        self._clock += 60
        if filename is not None:
            (self.path / filename).write_text(content if content is not None else message)
            self.git("add", filename)

        stamp = f"@{self._clock} +0000"
        env = {**os.environ, "GIT_AUTHOR_DATE": stamp, "GIT_COMMITTER_DATE": stamp}
        self.git(
            "commit", "--quiet", "--allow-empty", "--allow-empty-message", "-m", message,
            env=env,
        )
        return self.head()

    def head(self) -> str:
        return self.git("rev-parse", "HEAD")


@pytest.fixture(autouse=True)
def isolated_git(monkeypatch, tmp_path_factory):
    """Keep the user's git configuration out of the tests."""
    global_config = tmp_path_factory.mktemp("gitconfig") / "config"
    global_config.write_text("")

    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")


@pytest.fixture
def make_repo(tmp_path):
    """Factory creating an initialized repository on branch main."""

    def factory(name: str) -> GitRepo:
        path = tmp_path / "upstreams" / name
        path.mkdir(parents=True)
        repo = GitRepo(path)
        repo.git("init", "--quiet", "-b", "main")
        return repo

    return factory


@pytest.fixture
def upstream(make_repo) -> GitRepo:
    """An upstream plugin repository with one commit."""
    repo = make_repo("tmux-upstream")
    repo.commit("Initial commit", "plugin.tmux", "#!/bin/sh\n")
    return repo


@pytest.fixture
def plugins_root(tmp_path) -> Path:
    return tmp_path / "plugins"


@pytest.fixture
def open_repo():
    """Wrap an existing working tree (e.g. a plugin clone) as a GitRepo."""
    return GitRepo
