"""Resolvers for translation status and phrase queries."""

import strawberry

from api.types import Phrase, RefStatus
from common.env import env
from datastore.commit_log_store import open_store
from extract.config import load_config
from extract.git_utils import CommitNotFoundError, RefNotFoundError
from status.status_command import StatusCommand


@strawberry.type
class Query:
    """GraphQL queries for the git-phrases API."""

    @strawberry.field
    def status(self, repo_name: str, ref: str) -> RefStatus:
        """
        Translation status of the branch a ref belongs to.

        Args:
            repo_name: Configured repository name
            ref: Branch, tag or commit id

        Returns:
            Merged status, phrase count and one entry per configured locale
        """
        config = load_config(env.config_path())
        with open_store() as store:
            ref_status = StatusCommand(config, store).execute(repo_name, ref)
        return RefStatus.from_model(ref_status)

    @strawberry.field
    def phrases(self, repo_name: str, ref: str) -> list[Phrase]:
        """Phrases extracted from the commit a ref points to, in extraction order."""
        config = load_config(env.config_path())
        repo = config.get_repo(repo_name).repo

        try:
            commit = repo.get_commit(ref)
        except CommitNotFoundError as e:
            raise RefNotFoundError(f"Ref '{ref}' not found in repository '{repo_name}'") from e

        with open_store() as store:
            phrases = store.phrases_for_commit(repo_name, commit.id)
        return [Phrase.from_model(phrase) for phrase in phrases]
