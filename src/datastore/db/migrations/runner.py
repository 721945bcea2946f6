"""Apply numbered SQL migrations and record them in schema_version."""

from pathlib import Path
from typing import TYPE_CHECKING

from common.logger import get_logger

if TYPE_CHECKING:
    from datastore.db.interface import DatabaseAdapter

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "versions"


class MigrationRunner:
    """Applies ``NNN_name.sql`` files newer than the recorded schema version.

    Each file holds a single statement so it runs the same way on both
    backends.
    """

    def __init__(self, adapter: "DatabaseAdapter", migrations_dir: Path | None = None):
        self.adapter = adapter
        self.migrations_dir = migrations_dir or MIGRATIONS_DIR

    def ensure_migration_table(self) -> None:
        self.adapter.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        self.adapter.commit()

    def get_current_version(self) -> int:
        """Highest applied version, 0 when nothing has been applied."""
        self.ensure_migration_table()
        version = self.adapter.fetchscalar("SELECT MAX(version) FROM schema_version")
        return version if version is not None else 0

    def get_pending_migrations(self) -> list[tuple[int, str, Path]]:
        """
        List migrations newer than the current version.

        Returns:
            (version, name, path) tuples in version order
        """
        current_version = self.get_current_version()

        if not self.migrations_dir.exists():
            return []

        migrations = []
        for filepath in self.migrations_dir.glob("*.sql"):
            version_text, _, name = filepath.stem.partition("_")
            if not version_text.isdigit() or not name:
                logger.warning(f"Skipping invalid migration filename: {filepath.name}")
                continue

            version = int(version_text)
            if version > current_version:
                migrations.append((version, name, filepath))

        return sorted(migrations, key=lambda migration: migration[0])

    def apply_migration(self, version: int, name: str, filepath: Path) -> None:
        logger.info(f"Applying migration {version}: {name}")
        self.ensure_migration_table()

        try:
            self.adapter.execute(filepath.read_text())
            self.adapter.execute(
                "INSERT INTO schema_version (version, name) VALUES (?, ?)", (version, name)
            )
            self.adapter.commit()
        except Exception as e:
            self.adapter.rollback()
            logger.error(f"[red]✗[/red] Failed to apply migration {version}: {e}")
            raise

        logger.info(f"[green]✓[/green] Applied migration {version}: {name}")

    def run_migrations(self) -> int:
        """Apply every pending migration and return how many ran."""
        pending = self.get_pending_migrations()

        if not pending:
            logger.debug("No pending migrations")
            return 0

        logger.info(f"Found {len(pending)} pending migration(s)")
        for version, name, filepath in pending:
            self.apply_migration(version, name, filepath)

        return len(pending)
