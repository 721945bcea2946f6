"""Extractor for JSON translation files."""

import json
from collections.abc import Iterator
from typing import Any

from ..errors import ExtractorSyntaxError
from ..models import Phrase
from .base import Extractor


class JsonKeyValueExtractor(Extractor):
    """Extracts every string value of a (possibly nested) JSON document.

    The string itself becomes the phrase key and its dotted path the meta
    key, so ``{"nav": {"home": "Home"}}`` yields ``Phrase("Home", "nav.home")``.
    List items are addressed by index (``items.0``).
    """

    language = "json"

    def extract_each_from(self, text: str) -> Iterator[tuple[Phrase, int | None]]:
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise ExtractorSyntaxError(
                f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}",
                original_exception=e,
                language=self.language,
            ) from e
        except RecursionError as e:
            raise ExtractorSyntaxError(
                "JSON document is nested too deeply to parse",
                original_exception=e,
                language=self.language,
            ) from e

        try:
            pairs = list(_walk(document, []))
        except RecursionError as e:
            raise ExtractorSyntaxError(
                "JSON document is nested too deeply to walk",
                original_exception=e,
                language=self.language,
            ) from e

        for path, value in pairs:
            yield Phrase(key=value, meta_key=".".join(path) or None), None


def _walk(value: Any, path: list[str]) -> Iterator[tuple[list[str], str]]:
    if isinstance(value, dict):
        for key, child in value.items():
            yield from _walk(child, path + [str(key)])
    elif isinstance(value, list):
        for index, child in enumerate(value):
            yield from _walk(child, path + [str(index)])
    elif isinstance(value, str):
        yield path, value
