"""Translation states of the phrases introduced by a commit."""

from enum import Enum


class PhraseStatus(str, Enum):
    """Where a commit's phrases are in the translation pipeline.

    The first five members are ordered; a branch is only as far along as its
    least advanced commit. ``MISSING``, ``NOT_FOUND`` and ``FINALIZED`` are
    markers without an ordinal.
    """

    # Phrases were imported but not submitted for translation
    UNTRANSLATED = "UNTRANSLATED"

    # Phrases were submitted for translation
    PENDING = "PENDING"

    # Translations were pulled at least once, but not all were included
    PULLING = "PULLING"

    # All translations were downloaded and catalogued
    PULLED = "PULLED"

    # Phrases are translated into every supported locale
    TRANSLATED = "TRANSLATED"

    # The commit no longer exists (deleted branch or force push)
    MISSING = "MISSING"

    # The ref never entered the pipeline
    NOT_FOUND = "NOT_FOUND"

    # The branch completed at least one full extraction pass
    FINALIZED = "FINALIZED"

    @classmethod
    def statuses(cls) -> list["PhraseStatus"]:
        """The ordered states, least advanced first."""
        return [cls.UNTRANSLATED, cls.PENDING, cls.PULLING, cls.PULLED, cls.TRANSLATED]

    @classmethod
    def incomplete(cls) -> list["PhraseStatus"]:
        """Every ordered state before TRANSLATED."""
        return cls.statuses()[:-1]

    @classmethod
    def all(cls) -> list["PhraseStatus"]:
        return cls.statuses() + [cls.MISSING]

    @classmethod
    def index(cls, status: "PhraseStatus | str") -> int | None:
        """Ordinal of a state, or None for markers that carry no ordering."""
        try:
            return cls.statuses().index(cls(status))
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value
