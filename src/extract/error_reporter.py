"""Collaborators that receive extraction errors instead of raising them."""

from abc import ABC, abstractmethod

from common.logger import get_logger

from .errors import ExtractionSyntaxError

logger = get_logger(__name__)


class ErrorReporter(ABC):
    """Receives errors the extraction pipeline isolated and kept going after."""

    @abstractmethod
    def report_error(self, error: ExtractionSyntaxError) -> None:
        pass


class NilErrorReporter(ErrorReporter):
    """Discards every error. Default reporter of the pipeline."""

    def report_error(self, error: ExtractionSyntaxError) -> None:
        pass


class BufferedErrorReporter(ErrorReporter):
    """Keeps reported errors in memory, in the order they were reported."""

    def __init__(self):
        self.errors: list[ExtractionSyntaxError] = []

    def report_error(self, error: ExtractionSyntaxError) -> None:
        self.errors.append(error)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def reset(self) -> None:
        self.errors.clear()


class LoggingErrorReporter(ErrorReporter):
    """Logs each error as a warning."""

    def report_error(self, error: ExtractionSyntaxError) -> None:
        logger.warning(f"Skipped {error.file} at {error.commit_id[:7]}: {error.message}")
