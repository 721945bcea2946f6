"""CLI for managing the phrase database."""

import argparse
import sys

from common.logger import error, setup_logging, success, warning

from .db import DatabaseError, get_adapter


def cmd_init(args):
    """Create the schema (if missing) and apply pending migrations."""
    try:
        with get_adapter() as adapter:
            adapter.create_schema()
            applied = adapter.run_migrations()
            tables = adapter.get_tables()
    except DatabaseError as e:
        error(f"Failed to initialize database: {e}")
        return 1

    success(f"Database ready with tables: {', '.join(tables)} ({applied} migration(s) applied)")
    return 0


def cmd_reset(args):
    """Drop every table and recreate the schema."""
    if not args.force:
        warning("This drops all commit logs and phrases. Re-run with --force to confirm.")
        return 1

    try:
        with get_adapter() as adapter:
            adapter.drop_schema()
            adapter.create_schema()
            adapter.run_migrations()
    except DatabaseError as e:
        error(f"Failed to reset database: {e}")
        return 1

    success("Database reset")
    return 0


def main():
    """Main entry point for the phrases-db CLI."""
    parser = argparse.ArgumentParser(
        description=(
            "Manage the phrase database.\n\n"
            "The backend is controlled by DATABASE_TYPE (sqlite or postgresql);\n"
            "SQLite uses DATABASE_PATH, PostgreSQL the POSTGRES_* variables."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Create tables and apply migrations")
    init_parser.set_defaults(func=cmd_init)

    reset_parser = subparsers.add_parser("reset", help="Drop and recreate all tables")
    reset_parser.add_argument("--force", action="store_true", help="Confirm dropping all data")
    reset_parser.set_defaults(func=cmd_reset)

    args = parser.parse_args()
    setup_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
