"""Persistence of commit logs, per-locale translation counts and phrases."""

from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager

from common.logger import get_logger
from extract.models import Phrase
from status.models import CommitLog
from status.phrase_status import PhraseStatus

from .db import DatabaseAdapter, get_adapter

logger = get_logger(__name__)

_COMMIT_LOG_COLUMNS = "id, commit_id, status, phrase_count, branch_name, commit_datetime"


class CommitLogStore:
    """Reads and writes commit logs through a connected DatabaseAdapter.

    A commit has one regular log per repository, whose branch follows the
    latest extraction. ``FINALIZED`` logs are markers kept apart from it, one
    per branch, so finalizing a branch never overwrites a commit's status.

    Example:
        >>> with get_adapter() as adapter:
        ...     store = CommitLogStore(adapter)
        ...     store.add_or_update_commit_log("demo", commit_id, phrase_count=3)
    """

    def __init__(self, adapter: DatabaseAdapter):
        self.adapter = adapter

    def each_commit_log_with_status(
        self,
        repo_name: str,
        statuses: Sequence[PhraseStatus | str],
        branch_name: str | None = None,
    ) -> Iterator[CommitLog]:
        """
        Yield the repository's commit logs in one of the given statuses.

        Args:
            repo_name: Repository name
            statuses: Statuses to include
            branch_name: Only logs recorded on this branch; None means any branch

        Yields:
            CommitLog objects, oldest commit first, with their locale counts
        """
        where, params = self._status_filter(repo_name, statuses, branch_name)
        rows = self.adapter.fetchall(
            f"SELECT {_COMMIT_LOG_COLUMNS} FROM commit_logs WHERE {where} "
            "ORDER BY commit_datetime, id",
            params,
        )
        if not rows:
            return

        # One query for the locale counts of every selected commit
        locale_rows = self.adapter.fetchall(
            "SELECT commit_id, locale, translated_count FROM commit_log_locales "
            "WHERE repo_name = ? AND commit_id IN "
            f"(SELECT commit_id FROM commit_logs WHERE {where}) "
            "ORDER BY locale",
            (repo_name, *params),
        )
        locales_by_commit: dict[str, dict[str, int]] = {}
        for locale_row in locale_rows:
            locales_by_commit.setdefault(locale_row["commit_id"], {})[
                locale_row["locale"]
            ] = locale_row["translated_count"]

        for row in rows:
            yield self._to_commit_log(row, locales_by_commit.get(row["commit_id"], {}))

    def commit_log_with_status_count(
        self,
        repo_name: str,
        statuses: Sequence[PhraseStatus | str],
        branch_name: str | None = None,
    ) -> int:
        where, params = self._status_filter(repo_name, statuses, branch_name)
        return self.adapter.fetchscalar(
            f"SELECT COUNT(*) FROM commit_logs WHERE {where}", params
        ) or 0

    def lookup_commit_log(self, repo_name: str, commit_id: str) -> CommitLog | None:
        """Return the commit's regular log, or None if it was never logged."""
        row = self._find_log_row(repo_name, commit_id, PhraseStatus.UNTRANSLATED, None)
        if row is None:
            return None
        return self._to_commit_log(row, self._locales_for(repo_name, commit_id))

    def add_or_update_commit_log(
        self,
        repo_name: str,
        commit_id: str,
        status: PhraseStatus | str = PhraseStatus.UNTRANSLATED,
        phrase_count: int | None = None,
        branch_name: str | None = None,
        commit_datetime: str | None = None,
    ) -> CommitLog:
        """
        Insert a commit log or update the existing one.

        A FINALIZED status writes the branch's marker log for the commit.
        Any other status updates the commit's regular log; phrase_count,
        branch_name and commit_datetime are only overwritten when given.

        Returns:
            The stored CommitLog
        """
        status = PhraseStatus(status)
        row = self._find_log_row(repo_name, commit_id, status, branch_name)

        if row is None:
            self.adapter.execute(
                "INSERT INTO commit_logs "
                "(repo_name, commit_id, status, phrase_count, branch_name, commit_datetime) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    repo_name,
                    commit_id,
                    status.value,
                    phrase_count or 0,
                    branch_name,
                    commit_datetime,
                ),
            )
        else:
            self.adapter.execute(
                "UPDATE commit_logs SET status = ?, "
                "phrase_count = COALESCE(?, phrase_count), "
                "branch_name = COALESCE(?, branch_name), "
                "commit_datetime = COALESCE(?, commit_datetime), "
                "updated_at = CURRENT_TIMESTAMP "
                "WHERE id = ?",
                (status.value, phrase_count, branch_name, commit_datetime, row["id"]),
            )
        self.adapter.commit()

        row = self._find_log_row(repo_name, commit_id, status, branch_name)
        return self._to_commit_log(row, self._locales_for(repo_name, commit_id))

    def update_commit_log_status(
        self, repo_name: str, commit_id: str, status: PhraseStatus | str
    ) -> bool:
        """
        Move a commit's regular log to a new status.

        Returns:
            True if a log was updated, False if the commit was never logged
        """
        status = PhraseStatus(status)
        cursor = self.adapter.execute(
            "UPDATE commit_logs SET status = ?, updated_at = CURRENT_TIMESTAMP "
            "WHERE repo_name = ? AND commit_id = ? AND status <> ?",
            (status.value, repo_name, commit_id, PhraseStatus.FINALIZED.value),
        )
        self.adapter.commit()
        return cursor.rowcount > 0

    def add_or_update_commit_log_locale(
        self, repo_name: str, commit_id: str, locale: str, translated_count: int
    ) -> None:
        self.adapter.execute(
            "INSERT INTO commit_log_locales (repo_name, commit_id, locale, translated_count) "
            "VALUES (?, ?, ?, ?) "
            "ON CONFLICT (repo_name, commit_id, locale) "
            "DO UPDATE SET translated_count = excluded.translated_count",
            (repo_name, commit_id, locale, translated_count),
        )
        self.adapter.commit()

    def replace_phrases(self, repo_name: str, commit_id: str, phrases: Iterable[Phrase]) -> int:
        """
        Store the phrases of a commit, replacing any stored earlier.

        Returns:
            Number of phrases stored
        """
        try:
            self.adapter.execute(
                "DELETE FROM phrases WHERE repo_name = ? AND commit_id = ?",
                (repo_name, commit_id),
            )
            count = 0
            for phrase in phrases:
                self.adapter.execute(
                    "INSERT INTO phrases (repo_name, commit_id, phrase_key, meta_key, "
                    "file_path, author_name, author_email, line_number) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        repo_name,
                        commit_id,
                        phrase.key,
                        phrase.meta_key,
                        phrase.file,
                        phrase.author_name,
                        phrase.author_email,
                        phrase.line_number,
                    ),
                )
                count += 1
            self.adapter.commit()
        except Exception:
            self.adapter.rollback()
            raise

        logger.debug(f"Stored {count} phrase(s) for {commit_id[:7]}")
        return count

    def phrases_for_commit(self, repo_name: str, commit_id: str) -> list[Phrase]:
        rows = self.adapter.fetchall(
            "SELECT phrase_key, meta_key, file_path, author_name, author_email, line_number "
            "FROM phrases WHERE repo_name = ? AND commit_id = ? ORDER BY id",
            (repo_name, commit_id),
        )
        return [
            Phrase(
                key=row["phrase_key"],
                meta_key=row["meta_key"],
                file=row["file_path"],
                commit_id=commit_id,
                author_name=row["author_name"],
                author_email=row["author_email"],
                line_number=row["line_number"],
            )
            for row in rows
        ]

    def _find_log_row(
        self, repo_name: str, commit_id: str, status: PhraseStatus, branch_name: str | None
    ) -> dict | None:
        if status == PhraseStatus.FINALIZED:
            branch_clause = "branch_name IS NULL" if branch_name is None else "branch_name = ?"
            params = (repo_name, commit_id, status.value)
            if branch_name is not None:
                params += (branch_name,)
            return self.adapter.fetchone(
                f"SELECT {_COMMIT_LOG_COLUMNS} FROM commit_logs "
                f"WHERE repo_name = ? AND commit_id = ? AND status = ? AND {branch_clause}",
                params,
            )

        return self.adapter.fetchone(
            f"SELECT {_COMMIT_LOG_COLUMNS} FROM commit_logs "
            "WHERE repo_name = ? AND commit_id = ? AND status <> ? ORDER BY id",
            (repo_name, commit_id, PhraseStatus.FINALIZED.value),
        )

    def _locales_for(self, repo_name: str, commit_id: str) -> dict[str, int]:
        locale_rows = self.adapter.fetchall(
            "SELECT locale, translated_count FROM commit_log_locales "
            "WHERE repo_name = ? AND commit_id = ? ORDER BY locale",
            (repo_name, commit_id),
        )
        return {r["locale"]: r["translated_count"] for r in locale_rows}

    @staticmethod
    def _to_commit_log(row: dict, locales: dict[str, int]) -> CommitLog:
        return CommitLog(
            commit_id=row["commit_id"],
            status=PhraseStatus(row["status"]),
            phrase_count=row["phrase_count"],
            locales=locales,
            branch_name=row["branch_name"],
            commit_datetime=row["commit_datetime"],
        )

    @staticmethod
    def _status_filter(
        repo_name: str, statuses: Sequence[PhraseStatus | str], branch_name: str | None
    ) -> tuple[str, tuple]:
        values = tuple(PhraseStatus(status).value for status in statuses)
        if not values:
            # IN () is not valid SQL
            return "1 = 0", ()

        where = f"repo_name = ? AND status IN ({', '.join('?' for _ in values)})"
        params: tuple = (repo_name, *values)
        if branch_name is not None:
            where += " AND branch_name = ?"
            params += (branch_name,)
        return where, params


@contextmanager
def open_store(adapter: DatabaseAdapter | None = None) -> Iterator[CommitLogStore]:
    """
    Connect to the database, bring its schema up to date and yield a store.

    The transaction is committed on success and rolled back on error.

    Args:
        adapter: Adapter to use, defaults to the one configured in the environment
    """
    adapter = adapter or get_adapter()
    with adapter:
        adapter.create_schema()
        adapter.run_migrations()
        yield CommitLogStore(adapter)
