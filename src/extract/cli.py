#!/usr/bin/env python3
"""CLI interface for phrase extraction."""

import argparse
import sys
from pathlib import Path

from common.env import env
from common.logger import error, setup_logging, success, warning
from datastore.commit_log_store import open_store
from datastore.db import DatabaseError

from .config import load_config
from .error_reporter import BufferedErrorReporter, LoggingErrorReporter
from .errors import ConfigError
from .git_utils import GitError
from .main import extract_commit, extract_history, finalize_branch, mark_missing_commits


def cmd_commit(args, config, store):
    """Extract a single commit."""
    reporter = BufferedErrorReporter()
    commit_log = extract_commit(config, store, args.repo, args.ref, reporter)
    _report_skipped_files(reporter)
    success(f"{commit_log.commit_id[:7]}: {commit_log.phrase_count} phrase(s)")
    return 0


def cmd_history(args, config, store):
    """Extract a range of commits, or all of them."""
    extracted = extract_history(
        config,
        store,
        args.repo,
        start_ref=args.start,
        end_ref=args.end,
        force=args.force,
        error_reporter=LoggingErrorReporter(),
    )
    success(f"Extracted {extracted} commit(s)")
    return 0


def cmd_finalize(args, config, store):
    """Record that a branch finished a full extraction pass."""
    commit_log = finalize_branch(config, store, args.repo, args.ref)
    if commit_log is None:
        warning(f"{args.ref} is not on a single branch; nothing finalized")
        return 1
    success(f"Finalized {commit_log.branch_name}")
    return 0


def cmd_cleanup(args, config, store):
    """Mark commit logs of vanished commits as MISSING."""
    count = mark_missing_commits(config, store, args.repo)
    success(f"Marked {count} commit log(s) as missing")
    return 0


def _report_skipped_files(reporter: BufferedErrorReporter) -> None:
    for err in reporter.errors:
        warning(f"Skipped {err.file}: {err.message}")


def main():
    """Main entry point for the phrases-extract CLI."""
    parser = argparse.ArgumentParser(description="Extract translatable phrases from git history")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Repository configuration file (default: $PHRASES_CONFIG or ./phrases.json)",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    commit_parser = subparsers.add_parser("commit", help="Extract the phrases of one commit")
    commit_parser.add_argument("repo", help="Configured repository name")
    commit_parser.add_argument("ref", help="Ref or commit id")
    commit_parser.set_defaults(func=cmd_commit)

    history_parser = subparsers.add_parser(
        "history", help="Extract every commit of a range (default: the whole repository)"
    )
    history_parser.add_argument("repo", help="Configured repository name")
    history_parser.add_argument("--start", help="Newest commit of the range (inclusive)")
    history_parser.add_argument("--end", help="Oldest commit of the range (inclusive)")
    history_parser.add_argument(
        "--force", action="store_true", help="Re-extract commits that are already logged"
    )
    history_parser.set_defaults(func=cmd_history)

    finalize_parser = subparsers.add_parser(
        "finalize", help="Mark the branch of a ref as fully extracted"
    )
    finalize_parser.add_argument("repo", help="Configured repository name")
    finalize_parser.add_argument("ref", help="Ref on the branch to finalize")
    finalize_parser.set_defaults(func=cmd_finalize)

    cleanup_parser = subparsers.add_parser(
        "cleanup", help="Mark commit logs of commits that no longer exist as MISSING"
    )
    cleanup_parser.add_argument("repo", help="Configured repository name")
    cleanup_parser.set_defaults(func=cmd_cleanup)

    args = parser.parse_args()
    setup_logging(args.log_level)

    if (args.command == "history") and ((args.start is None) != (args.end is None)):
        parser.error("--start and --end must be given together")

    try:
        config = load_config(args.config or env.config_path())
        with open_store() as store:
            return args.func(args, config, store)
    except (ConfigError, GitError, DatabaseError) as e:
        error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
