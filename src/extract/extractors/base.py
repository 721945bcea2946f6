"""Base class for extractor plugins."""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from ..models import Phrase


class Extractor(ABC):
    """Contract for extractors that find phrases in the text of one file.

    Implementations raise ``ExtractorSyntaxError`` when the text is not
    valid for their language; they never let parser exceptions escape.
    """

    # Language or format tag reported with syntax errors
    language: str = "unknown"

    @abstractmethod
    def extract_each_from(self, text: str) -> Iterator[tuple[Phrase, int | None]]:
        """Yield ``(phrase, line_number)`` pairs found in ``text``.

        ``line_number`` is 1-based, or None when the extractor does not
        track positions.
        """

    def supports_line_numbers(self) -> bool:
        """Return True when ``extract_each_from`` reports line numbers."""
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
