"""Backend names and the errors the commit log store surfaces."""

from enum import Enum
from typing import Any


class DatabaseType(str, Enum):
    """Where commit logs and phrases are kept."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"

    @classmethod
    def parse(cls, name: str) -> "DatabaseType":
        """Resolve a DATABASE_TYPE style name, ignoring case.

        Raises:
            ValueError: If the name is not a known backend
        """
        try:
            return cls(name.lower())
        except ValueError as e:
            known = ", ".join(t.value for t in cls)
            raise ValueError(f"Unsupported database type: {name}. Must be one of: {known}") from e


class DatabaseError(Exception):
    """A commit log, locale count or phrase could not be read or written.

    Adapters wrap driver exceptions in this type (or a subclass), so callers
    never need to import sqlite3 or psycopg to handle store failures.
    """


class ConnectionError(DatabaseError):
    """The SQLite file could not be opened or the PostgreSQL pool not filled."""


class IntegrityError(DatabaseError):
    """A write collided with a unique index, e.g. two regular logs for one commit."""


class SchemaError(DatabaseError):
    """The commit_logs, commit_log_locales or phrases tables could not be set up or dropped."""


# Column name to value, as returned by fetchone/fetchall
Row = dict[str, Any]
