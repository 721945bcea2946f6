"""Abstract database adapter.

Both backends accept SQLite-style ``?`` placeholders so the commit log store
can share its SQL between them.
"""

from abc import ABC, abstractmethod
from typing import Any

from .types import Row


class DatabaseAdapter(ABC):
    """Common interface of the SQLite and PostgreSQL backends."""

    @abstractmethod
    def connect(self) -> None:
        """Open the connection.

        Raises:
            ConnectionError: If the database cannot be reached
        """
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass

    @abstractmethod
    def create_schema(self) -> None:
        """Create the commit log, locale and phrase tables.

        Follow with run_migrations() to bring the schema up to date.

        Raises:
            SchemaError: If the schema file is missing or fails to apply
        """
        pass

    def run_migrations(self) -> int:
        """Apply pending migrations and return how many ran."""
        from .migrations import MigrationRunner

        runner = MigrationRunner(self)
        return runner.run_migrations()

    @abstractmethod
    def get_tables(self) -> list[str]:
        pass

    @abstractmethod
    def get_table_schema(self, table_name: str) -> list[Row]:
        """Describe a table's columns.

        Returns:
            One dictionary per column with keys ``cid``, ``name``, ``type``,
            ``notnull``, ``default`` and ``pk``
        """
        pass

    @abstractmethod
    def execute(self, query: str, params: tuple | None = None) -> Any:
        """Execute a query and return the cursor.

        Raises:
            IntegrityError: If a constraint is violated
            DatabaseError: If execution fails for any other reason
        """
        pass

    @abstractmethod
    def fetchone(self, query: str, params: tuple | None = None) -> Row | None:
        pass

    @abstractmethod
    def fetchall(self, query: str, params: tuple | None = None) -> list[Row]:
        pass

    @abstractmethod
    def fetchscalar(self, query: str, params: tuple | None = None) -> Any:
        """Return the first column of the first row, e.g. for ``COUNT(*)``."""
        pass

    @abstractmethod
    def cursor(self) -> Any:
        pass

    @property
    @abstractmethod
    def placeholder(self) -> str:
        """Native parameter placeholder ('?' for SQLite, '%s' for PostgreSQL)."""
        pass

    @abstractmethod
    def exists(self) -> bool:
        """Whether the database exists (SQLite: the file; PostgreSQL: any table)."""
        pass

    @abstractmethod
    def delete(self) -> None:
        """Remove the database (SQLite: the file; PostgreSQL: every table)."""
        pass

    @abstractmethod
    def drop_schema(self) -> None:
        pass

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        self.close()
        return False
