"""Create database adapters from explicit settings or from the environment."""

from dataclasses import dataclass
from pathlib import Path

from .interface import DatabaseAdapter
from .sqlite_adapter import SQLiteAdapter
from .types import DatabaseType


@dataclass
class DatabaseConfig:
    """Settings for one backend.

    Attributes:
        db_type: 'sqlite' or 'postgresql'
        db_path: Database file (SQLite only)
        host: Server host (PostgreSQL only)
        port: Server port, 5432 when omitted (PostgreSQL only)
        database: Database name (PostgreSQL only)
        user: Role to connect as (PostgreSQL only)
        password: Password of the role (PostgreSQL only)
        pool_size: Minimum pooled connections (PostgreSQL only)
        pool_max_overflow: Connections allowed beyond pool_size (PostgreSQL only)
    """

    db_type: DatabaseType | str
    db_path: Path | None = None
    host: str | None = None
    port: int | None = None
    database: str | None = None
    user: str | None = None
    password: str | None = None
    pool_size: int = 5
    pool_max_overflow: int = 10

    def __post_init__(self):
        if not isinstance(self.db_type, DatabaseType):
            self.db_type = DatabaseType.parse(self.db_type)

        if self.db_type == DatabaseType.SQLITE:
            if self.db_path is None:
                raise ValueError("db_path is required for SQLite")
            self.db_path = Path(self.db_path)

        elif self.db_type == DatabaseType.POSTGRESQL:
            if not all([self.host, self.database, self.user]):
                raise ValueError("host, database, and user are required for PostgreSQL")
            if self.port is None:
                self.port = 5432


def create_database(config: DatabaseConfig) -> DatabaseAdapter:
    """
    Build the adapter matching a configuration.

    Example:
        >>> adapter = create_database(DatabaseConfig(db_type="sqlite", db_path="data/phrases.db"))
    """
    if config.db_type == DatabaseType.SQLITE:
        return SQLiteAdapter(config.db_path)

    # psycopg is an optional extra, imported only when PostgreSQL is selected
    from .postgres_adapter import PostgreSQLAdapter

    return PostgreSQLAdapter(
        host=config.host,
        port=config.port,
        database=config.database,
        user=config.user,
        password=config.password,
        pool_size=config.pool_size,
        pool_max_overflow=config.pool_max_overflow,
    )


def config_from_env() -> DatabaseConfig:
    """Read DATABASE_TYPE and the matching backend settings from the environment."""
    from common.env import env

    if DatabaseType.parse(env.database_type()) == DatabaseType.POSTGRESQL:
        return DatabaseConfig(
            db_type=DatabaseType.POSTGRESQL,
            host=env.postgres_host(),
            port=env.postgres_port(),
            database=env.postgres_database(),
            user=env.postgres_user(),
            password=env.postgres_password(),
            pool_size=env.postgres_pool_size(),
            pool_max_overflow=env.postgres_pool_max_overflow(),
        )

    return DatabaseConfig(db_type=env.database_type(), db_path=env.database_path())


def get_adapter() -> DatabaseAdapter:
    """Adapter for the database configured in the environment (``.env`` included)."""
    return create_database(config_from_env())
