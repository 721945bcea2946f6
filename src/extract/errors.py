"""Exceptions raised while extracting phrases."""


class ExtractionError(Exception):
    """Base exception for extraction errors."""

    pass


class ExtractorSyntaxError(ExtractionError):
    """Raised by an extractor when its input cannot be parsed.

    Attributes:
        message: Human readable description of the problem
        original_exception: The parser error that triggered this one, if any
        language: Language or format the extractor handles (e.g. "json")
    """

    def __init__(
        self,
        message: str,
        original_exception: BaseException | None = None,
        language: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception
        self.language = language


class ExtractionSyntaxError(ExtractorSyntaxError):
    """An extractor syntax error tied to the file and commit it came from.

    Handed to the error reporter instead of being raised, so that one
    malformed file never stops the rest of a commit from being extracted.
    """

    def __init__(
        self,
        message: str,
        original_exception: BaseException | None,
        language: str | None,
        file: str,
        commit_id: str,
    ):
        super().__init__(message, original_exception, language)
        self.file = file
        self.commit_id = commit_id

    def __str__(self) -> str:
        return f"{self.message} ({self.language or 'unknown'}: {self.file} @ {self.commit_id[:7]})"


class ConfigError(ValueError):
    """Raised when the repository configuration is invalid."""

    pass
