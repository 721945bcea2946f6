"""Tests for the phrases-db command line."""

import sys

from datastore import cli
from datastore.db import get_adapter


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["phrases-db", "--log-level", "WARNING", *args])
    return cli.main()


class TestDbCli:
    """Schema management commands."""

    def test_init(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("DATABASE_TYPE", "sqlite")
        monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "cli.db"))

        assert run_cli(monkeypatch, "init") == 0

        assert "commit_logs" in capsys.readouterr().out
        with get_adapter() as adapter:
            assert "schema_version" in adapter.get_tables()

    def test_reset_requires_force(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "cli.db"))

        assert run_cli(monkeypatch, "reset") == 1
        assert "--force" in capsys.readouterr().out

    def test_reset_drops_data(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_TYPE", "sqlite")
        monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "cli.db"))
        run_cli(monkeypatch, "init")
        with get_adapter() as adapter:
            adapter.execute(
                "INSERT INTO commit_logs (repo_name, commit_id, status) VALUES (?, ?, ?)",
                ("demo", "abc", "PENDING"),
            )

        assert run_cli(monkeypatch, "reset", "--force") == 0

        with get_adapter() as adapter:
            assert adapter.fetchscalar("SELECT COUNT(*) FROM commit_logs") == 0
