"""Environment configuration interface for git-phrases.

All environment variable access goes through this module. Values from a
local ``.env`` file are loaded on import.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from common.constants import DATABASE_PATH, DEFAULT_CONFIG_PATH

load_dotenv()


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def database_type() -> str:
        """Get the database type (sqlite or postgresql).

        Returns:
            Database type, defaults to 'sqlite'
        """
        return os.getenv("DATABASE_TYPE", "sqlite")

    @staticmethod
    def database_path() -> Path:
        """Get the SQLite database file path.

        Returns:
            Path to SQLite database file, defaults to ./data/phrases.db
        """
        return Path(os.getenv("DATABASE_PATH", str(DATABASE_PATH)))

    @staticmethod
    def postgres_host() -> str:
        """Get PostgreSQL host, defaults to 'localhost'."""
        return os.getenv("POSTGRES_HOST", "localhost")

    @staticmethod
    def postgres_port() -> int:
        """Get PostgreSQL port, defaults to 5432."""
        return int(os.getenv("POSTGRES_PORT", "5432"))

    @staticmethod
    def postgres_database() -> str:
        """Get PostgreSQL database name, defaults to 'git_phrases'."""
        return os.getenv("POSTGRES_DB", "git_phrases")

    @staticmethod
    def postgres_user() -> str:
        """Get PostgreSQL user, defaults to 'git_phrases_user'."""
        return os.getenv("POSTGRES_USER", "git_phrases_user")

    @staticmethod
    def postgres_password() -> str:
        """Get PostgreSQL password, defaults to empty string."""
        return os.getenv("POSTGRES_PASSWORD", "")

    @staticmethod
    def postgres_pool_size() -> int:
        """Get PostgreSQL connection pool size, defaults to 5."""
        return int(os.getenv("POSTGRES_POOL_SIZE", "5"))

    @staticmethod
    def postgres_pool_max_overflow() -> int:
        """Get PostgreSQL connection pool max overflow, defaults to 10."""
        return int(os.getenv("POSTGRES_POOL_MAX_OVERFLOW", "10"))

    @staticmethod
    def config_path() -> Path:
        """Get the repository configuration file path.

        The file lists the repositories to process, their locales and the
        extractors that apply to their files.

        Returns:
            Path to the JSON config file, defaults to ./phrases.json
        """
        return Path(os.getenv("PHRASES_CONFIG", str(DEFAULT_CONFIG_PATH)))

    @staticmethod
    def api_cors_origins() -> list[str]:
        """Get the browser origins allowed to call the API.

        Returns:
            Origins from the comma separated API_CORS_ORIGINS, defaults to
            the local dashboard dev servers
        """
        raw = os.getenv("API_CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
        return [origin.strip() for origin in raw.split(",") if origin.strip()]


# Singleton instance for convenient access
env = Environment()
