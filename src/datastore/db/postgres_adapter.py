"""PostgreSQL backend over psycopg 3 with a connection pool."""

from pathlib import Path
from typing import Any

try:
    import psycopg
    from psycopg.rows import dict_row
    from psycopg_pool import ConnectionPool
except ImportError as e:
    raise ImportError(
        "PostgreSQL dependencies not installed. "
        'Install with: pip install -e ".[postgresql]"'
    ) from e

from common.logger import get_logger

from .interface import DatabaseAdapter
from .types import ConnectionError as DBConnectionError
from .types import DatabaseError, Row, SchemaError
from .types import IntegrityError as DBIntegrityError

logger = get_logger(__name__)


class PostgreSQLAdapter(DatabaseAdapter):
    """DatabaseAdapter holding one pooled psycopg connection.

    Queries are written with ``?`` placeholders and rewritten to ``%s``
    before execution.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "git_phrases",
        user: str = "postgres",
        password: str = "",
        pool_size: int = 5,
        pool_max_overflow: int = 10,
    ):
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.pool_size = pool_size
        self.pool_max_overflow = pool_max_overflow

        self._pool: ConnectionPool | None = None
        self._conn: Any = None  # psycopg.Connection
        self._schema_file = Path(__file__).parent / "schema_postgresql.sql"

    def connect(self) -> None:
        conninfo = (
            f"host={self.host} port={self.port} dbname={self.database} "
            f"user={self.user} password={self.password}"
        )
        try:
            self._pool = ConnectionPool(
                conninfo,
                min_size=self.pool_size,
                max_size=self.pool_size + self.pool_max_overflow,
                open=True,
            )
            self._conn = self._pool.getconn()
            self._conn.row_factory = dict_row
        except psycopg.Error as e:
            raise DBConnectionError(f"Failed to connect to PostgreSQL database: {e}") from e
        logger.debug(f"Connected to postgresql://{self.host}:{self.port}/{self.database}")

    def close(self) -> None:
        if self._conn and self._pool:
            self._pool.putconn(self._conn)
            self._conn = None

        if self._pool:
            self._pool.close()
            self._pool = None

    def commit(self) -> None:
        conn = self._require_connection()
        try:
            conn.commit()
        except psycopg.Error as e:
            raise DatabaseError(f"Failed to commit transaction: {e}") from e

    def rollback(self) -> None:
        conn = self._require_connection()
        try:
            conn.rollback()
        except psycopg.Error as e:
            raise DatabaseError(f"Failed to rollback transaction: {e}") from e

    def create_schema(self) -> None:
        conn = self._require_connection()

        if not self._schema_file.exists():
            raise SchemaError(f"Schema file not found: {self._schema_file}")

        try:
            with conn.cursor() as cursor:
                cursor.execute(self._schema_file.read_text())
            conn.commit()
        except psycopg.Error as e:
            conn.rollback()
            raise SchemaError(f"Failed to create schema: {e}") from e
        except OSError as e:
            raise SchemaError(f"Failed to read schema file: {e}") from e

    def get_tables(self) -> list[str]:
        conn = self._require_connection()
        query = """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = 'public'
            AND table_type = 'BASE TABLE'
            ORDER BY table_name
        """
        try:
            with conn.cursor() as cursor:
                cursor.execute(query)
                return [row["table_name"] for row in cursor.fetchall()]
        except psycopg.Error as e:
            raise DatabaseError(f"Failed to get table list: {e}") from e

    def get_table_schema(self, table_name: str) -> list[Row]:
        conn = self._require_connection()
        query = """
            SELECT
                ordinal_position - 1 AS cid,
                column_name AS name,
                data_type AS type,
                CASE WHEN is_nullable = 'NO' THEN 1 ELSE 0 END AS notnull,
                column_default AS "default",
                CASE WHEN column_name IN (
                    SELECT a.attname
                    FROM pg_index i
                    JOIN pg_attribute a ON a.attrelid = i.indrelid AND a.attnum = ANY(i.indkey)
                    WHERE i.indrelid = %s::regclass AND i.indisprimary
                ) THEN 1 ELSE 0 END AS pk
            FROM information_schema.columns
            WHERE table_schema = 'public' AND table_name = %s
            ORDER BY ordinal_position
        """
        try:
            with conn.cursor() as cursor:
                cursor.execute(query, (table_name, table_name))
                return cursor.fetchall()
        except psycopg.Error as e:
            raise DatabaseError(f"Failed to get table schema: {e}") from e

    def execute(self, query: str, params: tuple | None = None) -> Any:
        conn = self._require_connection()
        pg_query = query.replace("?", "%s")
        try:
            cursor = conn.cursor()
            if params:
                cursor.execute(pg_query, params)
            else:
                cursor.execute(pg_query)
            return cursor
        except psycopg.errors.IntegrityError as e:
            conn.rollback()
            raise DBIntegrityError(f"Integrity constraint violation: {e}") from e
        except psycopg.Error as e:
            conn.rollback()
            raise DatabaseError(f"Query execution failed: {e}") from e

    def fetchone(self, query: str, params: tuple | None = None) -> Row | None:
        row = self.execute(query, params).fetchone()
        return dict(row) if row is not None else None

    def fetchall(self, query: str, params: tuple | None = None) -> list[Row]:
        return [dict(row) for row in self.execute(query, params).fetchall()]

    def fetchscalar(self, query: str, params: tuple | None = None) -> Any:
        row = self.fetchone(query, params)
        if row is None:
            return None
        return next(iter(row.values()))

    def cursor(self) -> Any:
        return self._require_connection().cursor()

    @property
    def placeholder(self) -> str:
        return "%s"

    def exists(self) -> bool:
        try:
            if not self._conn:
                self.connect()
            return len(self.get_tables()) > 0
        except DatabaseError:
            return False

    def delete(self) -> None:
        self.drop_schema()

    def drop_schema(self) -> None:
        conn = self._require_connection()
        try:
            with conn.cursor() as cursor:
                for table in self.get_tables():
                    cursor.execute(f'DROP TABLE IF EXISTS "{table}" CASCADE')
            conn.commit()
        except psycopg.Error as e:
            conn.rollback()
            raise SchemaError(f"Failed to drop schema: {e}") from e

    def _require_connection(self) -> Any:
        if not self._conn:
            raise DatabaseError("No active connection")
        return self._conn

    def __repr__(self) -> str:
        status = "connected" if self._conn else "disconnected"
        return (
            f"PostgreSQLAdapter(host={self.host}, port={self.port}, "
            f"database={self.database}, status={status})"
        )
