"""Tests for environment configuration interface."""

from pathlib import Path

from common.env import Environment, env


class TestDatabaseSettings:
    """Tests for database selection and SQLite settings."""

    def test_database_type_default(self, monkeypatch):
        """SQLite is used unless DATABASE_TYPE says otherwise."""
        monkeypatch.delenv("DATABASE_TYPE", raising=False)
        assert Environment.database_type() == "sqlite"

    def test_database_type_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_TYPE", "postgresql")
        assert Environment.database_type() == "postgresql"

    def test_database_path_default(self, monkeypatch):
        monkeypatch.delenv("DATABASE_PATH", raising=False)
        assert Environment.database_path() == Path("data/phrases.db")

    def test_database_path_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_PATH", "/tmp/test.db")
        assert str(Environment.database_path()) == "/tmp/test.db"


class TestPostgresSettings:
    """Tests for PostgreSQL connection settings."""

    def test_defaults(self, monkeypatch):
        """Every PostgreSQL setting has a usable default."""
        for name in (
            "POSTGRES_HOST",
            "POSTGRES_PORT",
            "POSTGRES_DB",
            "POSTGRES_USER",
            "POSTGRES_PASSWORD",
            "POSTGRES_POOL_SIZE",
            "POSTGRES_POOL_MAX_OVERFLOW",
        ):
            monkeypatch.delenv(name, raising=False)

        assert Environment.postgres_host() == "localhost"
        assert Environment.postgres_port() == 5432
        assert Environment.postgres_database() == "git_phrases"
        assert Environment.postgres_user() == "git_phrases_user"
        assert Environment.postgres_password() == ""
        assert Environment.postgres_pool_size() == 5
        assert Environment.postgres_pool_max_overflow() == 10

    def test_port_from_env_is_int(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_PORT", "5433")
        assert Environment.postgres_port() == 5433

    def test_pool_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_POOL_SIZE", "2")
        monkeypatch.setenv("POSTGRES_POOL_MAX_OVERFLOW", "20")
        assert Environment.postgres_pool_size() == 2
        assert Environment.postgres_pool_max_overflow() == 20

    def test_credentials_from_env(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_HOST", "db.example.com")
        monkeypatch.setenv("POSTGRES_USER", "custom_user")
        monkeypatch.setenv("POSTGRES_PASSWORD", "secret")
        assert Environment.postgres_host() == "db.example.com"
        assert Environment.postgres_user() == "custom_user"
        assert Environment.postgres_password() == "secret"


class TestConfigPath:
    """Tests for the repository configuration file location."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("PHRASES_CONFIG", raising=False)
        assert Environment.config_path() == Path("phrases.json")

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PHRASES_CONFIG", str(tmp_path / "repos.json"))
        assert Environment.config_path() == tmp_path / "repos.json"


class TestApiSettings:
    """Tests for the API's allowed browser origins."""

    def test_cors_origins_default(self, monkeypatch):
        monkeypatch.delenv("API_CORS_ORIGINS", raising=False)
        assert Environment.api_cors_origins() == [
            "http://localhost:3000",
            "http://localhost:3001",
        ]

    def test_cors_origins_from_env(self, monkeypatch):
        monkeypatch.setenv("API_CORS_ORIGINS", "https://a.example.com, https://b.example.com,")
        assert Environment.api_cors_origins() == [
            "https://a.example.com",
            "https://b.example.com",
        ]


class TestEnvSingleton:
    """Tests for env singleton instance."""

    def test_env_is_environment_instance(self):
        assert isinstance(env, Environment)

    def test_env_singleton_methods_work(self, monkeypatch):
        monkeypatch.setenv("DATABASE_TYPE", "sqlite")
        assert env.database_type() == "sqlite"
