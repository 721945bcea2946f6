"""Database abstraction layer for git-phrases.

One interface over SQLite and PostgreSQL so the commit log store runs
unchanged on either backend.

Example:
    >>> from datastore.db import DatabaseConfig, create_database
    >>>
    >>> adapter = create_database(DatabaseConfig(db_type="sqlite", db_path="data/phrases.db"))
    >>> with adapter:
    ...     adapter.create_schema()
    ...     adapter.run_migrations()
"""

from .factory import DatabaseConfig, config_from_env, create_database, get_adapter
from .interface import DatabaseAdapter
from .types import (
    ConnectionError,
    DatabaseError,
    DatabaseType,
    IntegrityError,
    Row,
    SchemaError,
)

__all__ = [
    # Factory
    "DatabaseConfig",
    "config_from_env",
    "create_database",
    "get_adapter",
    # Interface
    "DatabaseAdapter",
    # Types and exceptions
    "DatabaseType",
    "DatabaseError",
    "ConnectionError",
    "IntegrityError",
    "SchemaError",
    "Row",
]
