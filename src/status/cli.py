"""CLI for querying the translation status of a ref."""

import argparse
import json
import sys
from pathlib import Path

from rich.table import Table

from common.env import env
from common.logger import console, error, setup_logging
from datastore.commit_log_store import open_store
from datastore.db import DatabaseError
from extract.config import load_config
from extract.errors import ConfigError
from extract.git_utils import GitError

from .models import RefStatus
from .status_command import StatusCommand


def render_status(ref: str, ref_status: RefStatus) -> Table:
    """Render a RefStatus as a per-locale table."""
    table = Table(
        title=(
            f"{ref} @ {ref_status.commit_id[:7]}: [bold]{ref_status.status.value}[/bold] "
            f"({ref_status.phrase_count} phrase(s))"
        )
    )
    table.add_column("Locale")
    table.add_column("Translated", justify="right")
    table.add_column("Percent", justify="right")

    for locale_status in ref_status.locales:
        table.add_row(
            locale_status.locale,
            str(locale_status.translated_count),
            f"{locale_status.percent_translated * 100:.2f}%",
        )
    return table


def main():
    """Main entry point for the phrases-status CLI."""
    parser = argparse.ArgumentParser(description="Show the translation status of a ref")
    parser.add_argument("repo", help="Configured repository name")
    parser.add_argument("ref", help="Branch, tag or commit id")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Repository configuration file (default: $PHRASES_CONFIG or ./phrases.json)",
    )
    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    args = parser.parse_args()
    setup_logging(args.log_level)

    try:
        config = load_config(args.config or env.config_path())
        with open_store() as store:
            ref_status = StatusCommand(config, store).execute(args.repo, args.ref)
    except (ConfigError, GitError, DatabaseError) as e:
        error(str(e))
        return 1

    if args.format == "json":
        print(json.dumps(ref_status.to_dict(), indent=2))
    else:
        console.print(render_status(args.ref, ref_status))
    return 0


if __name__ == "__main__":
    sys.exit(main())
