"""
Extraction workflows: run the pipeline over commits and record the results.

Each commit's phrases are stored with its commit log, so later status
queries only need the store and the repository's refs.
"""

from common.logger import get_logger
from datastore.commit_log_store import CommitLogStore
from status.branch_utils import derive_branch_name
from status.models import CommitLog
from status.phrase_status import PhraseStatus

from .commit_processor import CommitProcessor
from .config import Configurator
from .error_reporter import ErrorReporter
from .git_utils import CommitNotFoundError, RefNotFoundError

logger = get_logger(__name__)


def extract_commit(
    config: Configurator,
    store: CommitLogStore,
    repo_name: str,
    commit_ref: str,
    error_reporter: ErrorReporter | None = None,
) -> CommitLog:
    """
    Extract a commit's phrases and record them with an UNTRANSLATED commit log.

    Re-running replaces the commit's stored phrases and refreshes its phrase
    count and branch; the commit log's status is reset to UNTRANSLATED.

    Args:
        config: Repository configuration
        store: Commit log store to write to
        repo_name: Name of a configured repository
        commit_ref: Ref or commit id to extract
        error_reporter: Receives files that failed to parse

    Returns:
        The stored commit log

    Raises:
        CommitNotFoundError: If commit_ref does not resolve
    """
    repo_config = config.get_repo(repo_name)
    repo = repo_config.repo
    commit = repo.get_commit(commit_ref)

    processor = CommitProcessor(config, error_reporter)
    phrases = processor.process_each_phrase(repo_name, commit.id)
    phrase_count = store.replace_phrases(repo_name, commit.id, phrases)

    commit_log = store.add_or_update_commit_log(
        repo_name,
        commit.id,
        status=PhraseStatus.UNTRANSLATED,
        phrase_count=phrase_count,
        branch_name=derive_branch_name(commit.id, repo, repo_config.main_branch),
        commit_datetime=commit.timestamp,
    )

    logger.info(
        f"{repo_name} {commit.short_id}: [bold]{phrase_count}[/bold] phrase(s)"
        f" on {commit_log.branch_name or 'no branch'}"
    )
    return commit_log


def extract_history(
    config: Configurator,
    store: CommitLogStore,
    repo_name: str,
    start_ref: str | None = None,
    end_ref: str | None = None,
    force: bool = False,
    error_reporter: ErrorReporter | None = None,
) -> int:
    """
    Extract every commit of a range, or of the whole repository.

    Args:
        config: Repository configuration
        store: Commit log store to write to
        repo_name: Name of a configured repository
        start_ref: Newest commit of the range (inclusive)
        end_ref: Oldest commit of the range (inclusive)
        force: Re-extract commits that already have a commit log
        error_reporter: Receives files that failed to parse

    Returns:
        Number of commits extracted

    Raises:
        ValueError: If only one end of the range is given
    """
    if (start_ref is None) != (end_ref is None):
        raise ValueError("start_ref and end_ref must be given together")

    repo = config.get_repo(repo_name).repo
    if start_ref is not None:
        commits = repo.each_commit_in_range(start_ref, end_ref)
        logger.info(f"Extracting {repo_name} from {end_ref} to {start_ref}...")
    else:
        commits = repo.each_commit()
        logger.info(f"Extracting {repo_name}: [bold]{repo.commit_count()}[/bold] commit(s)...")

    extracted = 0
    skipped = 0
    for commit in commits:
        if not force and store.lookup_commit_log(repo_name, commit.id) is not None:
            skipped += 1
            continue
        extract_commit(config, store, repo_name, commit.id, error_reporter)
        extracted += 1

    logger.info(
        f"[green]✓[/green] Extracted [bold]{extracted}[/bold] commit(s), "
        f"skipped {skipped} already logged"
    )
    return extracted


def finalize_branch(
    config: Configurator, store: CommitLogStore, repo_name: str, ref: str
) -> CommitLog | None:
    """
    Mark the branch of a ref as having completed a full extraction pass.

    Until a branch has a FINALIZED log its status is NOT_FOUND.

    Returns:
        The FINALIZED marker log, or None if the ref is on no branch

    Raises:
        RefNotFoundError: If the ref does not resolve
    """
    repo_config = config.get_repo(repo_name)
    repo = repo_config.repo

    try:
        commit = repo.get_commit(ref)
    except CommitNotFoundError as e:
        raise RefNotFoundError(f"Ref '{ref}' not found in repository '{repo_name}'") from e

    branch_name = derive_branch_name(commit.id, repo, repo_config.main_branch)
    if branch_name is None:
        logger.warning(f"{ref} is not on a single branch, nothing to finalize")
        return None

    commit_log = store.add_or_update_commit_log(
        repo_name,
        commit.id,
        status=PhraseStatus.FINALIZED,
        branch_name=branch_name,
        commit_datetime=commit.timestamp,
    )
    logger.info(f"[green]✓[/green] Finalized {branch_name} at {commit.short_id}")
    return commit_log


def mark_missing_commits(config: Configurator, store: CommitLogStore, repo_name: str) -> int:
    """
    Flag commit logs whose commits no longer exist (e.g. after a force push).

    Returns:
        Number of commit logs moved to MISSING
    """
    repo = config.get_repo(repo_name).repo

    missing = []
    for commit_log in store.each_commit_log_with_status(repo_name, PhraseStatus.statuses()):
        try:
            repo.get_commit(commit_log.commit_id)
        except CommitNotFoundError:
            missing.append(commit_log.commit_id)

    for commit_id in missing:
        store.update_commit_log_status(repo_name, commit_id, PhraseStatus.MISSING)
        logger.debug(f"Marked {commit_id[:7]} as missing")

    logger.info(f"Marked [bold]{len(missing)}[/bold] commit log(s) as missing")
    return len(missing)
