"""Compute the translation status of a ref from its branch's commit logs."""

from typing import TYPE_CHECKING

from common.logger import get_logger
from extract.config import Configurator
from extract.git_utils import CommitNotFoundError, RefNotFoundError

from .branch_utils import (
    derive_branch_name,
    derive_locale_statuses_from,
    derive_phrase_count_from,
    derive_status_from,
    fill_in_missing_locales,
)
from .models import RefStatus
from .phrase_status import PhraseStatus

if TYPE_CHECKING:
    from datastore.commit_log_store import CommitLogStore

logger = get_logger(__name__)


class StatusCommand:
    """Folds a branch's incomplete commit logs into a single RefStatus.

    Example:
        >>> command = StatusCommand(config, CommitLogStore(adapter))
        >>> command.execute("demo", "my_branch").status
        <PhraseStatus.PENDING: 'PENDING'>
    """

    def __init__(self, config: Configurator, datastore: "CommitLogStore"):
        self.config = config
        self.datastore = datastore

    def execute(self, repo_name: str, ref: str) -> RefStatus:
        """
        Compute the status of a ref.

        Args:
            repo_name: Name of a configured repository
            ref: Branch name, tag or commit id

        Returns:
            RefStatus with the merged status, phrase count and one entry per
            configured locale

        Raises:
            RefNotFoundError: If the ref does not resolve to a commit
            ConfigError: If the repository is not configured
            DatabaseError: If the store fails
        """
        repo_config = self.config.get_repo(repo_name)
        repo = repo_config.repo

        try:
            commit = repo.get_commit(ref)
        except CommitNotFoundError as e:
            raise RefNotFoundError(f"Ref '{ref}' not found in repository '{repo_name}'") from e

        branch_name = derive_branch_name(commit.id, repo, repo_config.main_branch)
        logger.debug(f"{ref} resolved to {commit.short_id} on {branch_name or 'detached head'}")

        commit_logs = list(
            self.datastore.each_commit_log_with_status(
                repo_name, PhraseStatus.incomplete(), branch_name
            )
        )

        status = self._status_for(repo_name, branch_name, commit_logs)
        phrase_count = derive_phrase_count_from(commit_logs)
        locale_statuses = derive_locale_statuses_from(commit_logs, phrase_count)

        return RefStatus(
            commit_id=commit.id,
            status=status,
            phrase_count=phrase_count,
            locales=fill_in_missing_locales(repo_config.locales, locale_statuses),
        )

    def _status_for(self, repo_name, branch_name, commit_logs) -> PhraseStatus:
        if branch_name is not None:
            finalized_count = self.datastore.commit_log_with_status_count(
                repo_name, [PhraseStatus.FINALIZED], branch_name
            )
            if finalized_count == 0:
                return PhraseStatus.NOT_FOUND

        return derive_status_from(commit_logs)
