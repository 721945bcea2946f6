"""Extract phrases from the changes a commit introduces."""

from collections.abc import Callable, Iterator

from common.logger import get_logger
from common.lazy import RestartableSequence

from .config import Configurator, RepoConfig
from .error_reporter import ErrorReporter, NilErrorReporter
from .errors import ExtractionSyntaxError, ExtractorSyntaxError
from .git_utils import AuthorIdentity, Commit, DiffEntry
from .models import ExtractorConfig, Phrase

logger = get_logger(__name__)


class CommitProcessor:
    """Extracts translatable phrases from a git commit.

    A processor keeps no state between calls, so one instance can process
    several commits concurrently.

    Example:
        >>> processor = CommitProcessor(config, LoggingErrorReporter())
        >>> for phrase in processor.process_each_phrase("my_repo", "master"):
        ...     print(phrase.key)
    """

    def __init__(self, config: Configurator, error_reporter: ErrorReporter | None = None):
        self.config = config
        self.error_reporter = error_reporter or NilErrorReporter()

    def process_each_phrase(
        self,
        repo_name: str,
        commit_ref: str,
        handler: Callable[[Phrase], object] | None = None,
    ) -> RestartableSequence | None:
        """
        Extract the phrases a commit adds or changes relative to its parents.

        Args:
            repo_name: Name of a configured repository
            commit_ref: Git ref or commit id
            handler: Optional callable receiving each phrase

        Returns:
            None if a handler was given, otherwise a lazy sequence of phrases
            that re-runs the extraction each time it is iterated

        Raises:
            CommitNotFoundError: If commit_ref does not resolve (on iteration
                when no handler is given)
            GitError: If reading from the repository fails
        """
        phrases = RestartableSequence(self._each_phrase, repo_name, commit_ref)
        if handler is None:
            return phrases
        phrases.each(handler)
        return None

    def _each_phrase(self, repo_name: str, commit_ref: str) -> Iterator[Phrase]:
        repo_config = self.config.get_repo(repo_name)
        commit = repo_config.repo.get_commit(commit_ref)
        logger.debug(f"Processing commit {commit.short_id} of {repo_name}")

        # A path at the same blob can show up once per parent of a merge commit
        seen: set[tuple[str, str]] = set()

        for diff_entries in repo_config.repo.diff_with_parents(commit).values():
            for diff_entry in diff_entries:
                if diff_entry.is_deletion or not diff_entry.is_regular_file:
                    continue
                if (diff_entry.new_path, diff_entry.new_id) in seen:
                    continue
                seen.add((diff_entry.new_path, diff_entry.new_id))
                yield from self._process_diff_entry(diff_entry, repo_config, commit)

    def _process_diff_entry(
        self, diff_entry: DiffEntry, repo_config: RepoConfig, commit: Commit
    ) -> Iterator[Phrase]:
        path = diff_entry.new_path
        extractor_configs = repo_config.get_extractor_configs(path)
        if not extractor_configs:
            return

        logger.debug(f"{path}: {len(extractor_configs)} matching extractor(s)")

        source_bytes = repo_config.repo.read_object_bytes(diff_entry.new_id)

        line_authors: dict[int, AuthorIdentity] = {}
        if any(config.extractor.supports_line_numbers() for config in extractor_configs):
            line_authors = repo_config.repo.blame(path, commit.id)

        for extractor_config in extractor_configs:
            yield from self._extract(extractor_config, source_bytes, line_authors, path, commit)

    def _extract(
        self,
        extractor_config: ExtractorConfig,
        source_bytes: bytes,
        line_authors: dict[int, AuthorIdentity],
        path: str,
        commit: Commit,
    ) -> Iterator[Phrase]:
        extractor = extractor_config.extractor
        supports_line_numbers = extractor.supports_line_numbers()

        try:
            source_code = _decode(source_bytes, extractor_config.encoding, extractor.language)

            for phrase, line_number in extractor.extract_each_from(source_code):
                phrase.file = path
                phrase.commit_id = commit.id

                if supports_line_numbers and line_number is not None:
                    author = line_authors.get(line_number)
                    if author is not None:
                        phrase.author_name = author.name
                        phrase.author_email = author.email
                        phrase.line_number = line_number

                yield phrase

        except ExtractorSyntaxError as e:
            self.error_reporter.report_error(
                ExtractionSyntaxError(
                    e.message, e.original_exception, e.language, path, commit.id
                )
            )


def _decode(source_bytes: bytes, encoding: str, language: str) -> str:
    try:
        return source_bytes.decode(encoding)
    except UnicodeDecodeError as e:
        raise ExtractorSyntaxError(
            f"Could not decode file as {encoding}: {e.reason}",
            original_exception=e,
            language=language,
        ) from e
