"""Shared fixtures: temporary git repositories and SQLite-backed stores."""

import json
import os
import subprocess
from pathlib import Path

import pytest

from datastore.commit_log_store import CommitLogStore
from datastore.db import DatabaseConfig, create_database
from extract.config import Configurator


class GitRepo:
    """A throwaway git repository driven through the git CLI."""

    def __init__(self, path: Path):
        self.path = path
        self.env = {
            **os.environ,
            "GIT_CONFIG_NOSYSTEM": "1",
            "GIT_AUTHOR_NAME": "Test User",
            "GIT_AUTHOR_EMAIL": "test@example.com",
            "GIT_COMMITTER_NAME": "Test User",
            "GIT_COMMITTER_EMAIL": "test@example.com",
        }

    def git(self, *args: str, env: dict | None = None) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            check=True,
            capture_output=True,
            text=True,
            env={**self.env, **(env or {})},
        )
        return result.stdout.strip()

    def write(self, rel_path: str, content: str | bytes) -> Path:
        file_path = self.path / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            file_path.write_bytes(content)
        else:
            file_path.write_text(content, encoding="utf-8")
        return file_path

    def commit(
        self,
        files: dict[str, str | bytes] | None = None,
        message: str = "Update files",
        author: tuple[str, str] | None = None,
        date: str | None = None,
    ) -> str:
        """Write files, commit everything and return the new commit id."""
        for rel_path, content in (files or {}).items():
            self.write(rel_path, content)
        self.git("add", "-A")

        env = {}
        if author:
            env["GIT_AUTHOR_NAME"], env["GIT_AUTHOR_EMAIL"] = author
        if date:
            env["GIT_AUTHOR_DATE"] = date
            env["GIT_COMMITTER_DATE"] = date

        self.git("commit", "--allow-empty", "-m", message, env=env)
        return self.head()

    def remove(self, rel_path: str, message: str = "Remove file") -> str:
        self.git("rm", "-q", rel_path)
        self.git("commit", "-m", message)
        return self.head()

    def head(self) -> str:
        return self.git("rev-parse", "HEAD")

    def checkout(self, *args: str) -> None:
        self.git("checkout", "-q", *args)


@pytest.fixture
def git_repo(tmp_path):
    """Empty repository whose initial branch is master."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    repo = GitRepo(repo_path)
    repo.git("init", "-q")
    repo.git("symbolic-ref", "HEAD", "refs/heads/master")
    repo.git("config", "user.name", "Test User")
    repo.git("config", "user.email", "test@example.com")
    repo.git("config", "commit.gpgsign", "false")
    return repo


@pytest.fixture
def config(git_repo):
    """Configuration with a 'demo' repo over git_repo, extracting JSON and Python files."""
    configurator = Configurator()
    repo_config = (
        configurator.add_repo("demo").set_path(git_repo.path).add_locales(["fr-FR", "de-DE"])
    )
    repo_config.add_extractor("json/key-value").set_conditions(
        lambda root: root.match_path("config/locales").and_(root.match_file_extension(".json"))
    )
    repo_config.add_extractor("python/gettext").set_conditions(
        lambda root: root.match_file_extension(".py")
    )
    return configurator


@pytest.fixture
def sqlite_adapter(tmp_path):
    """Connected SQLite adapter with the full schema and migrations applied."""
    adapter = create_database(DatabaseConfig(db_type="sqlite", db_path=tmp_path / "phrases.db"))
    adapter.connect()
    adapter.create_schema()
    adapter.run_migrations()
    yield adapter
    adapter.close()


@pytest.fixture
def store(sqlite_adapter):
    return CommitLogStore(sqlite_adapter)


@pytest.fixture
def phrases_env(git_repo, tmp_path, monkeypatch):
    """JSON configuration for 'demo' plus a SQLite database, both wired through the environment."""
    config_path = tmp_path / "phrases.json"
    config_path.write_text(
        json.dumps(
            {
                "repos": [
                    {
                        "name": "demo",
                        "path": str(git_repo.path),
                        "locales": ["fr-FR", "de-DE"],
                        "extractors": [
                            {
                                "type": "json/key-value",
                                "match": {
                                    "and": [{"path": "config/locales"}, {"extension": ".json"}]
                                },
                            }
                        ],
                    }
                ]
            }
        )
    )
    db_path = tmp_path / "env.db"

    monkeypatch.setenv("PHRASES_CONFIG", str(config_path))
    monkeypatch.setenv("DATABASE_TYPE", "sqlite")
    monkeypatch.setenv("DATABASE_PATH", str(db_path))
    return config_path, db_path
