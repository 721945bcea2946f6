"""Data models for commit logs and ref statuses."""

from dataclasses import dataclass, field
from typing import Any

from .phrase_status import PhraseStatus


@dataclass
class CommitLog:
    """Stored record of one processing pass over a commit.

    Attributes:
        commit_id: Full commit hash
        status: Where the commit's phrases are in the translation pipeline
        phrase_count: Number of phrases the commit introduced
        locales: Translated phrase count per locale code
        branch_name: Branch the commit was on when processed, if any
        commit_datetime: ISO timestamp of the commit
    """

    commit_id: str
    status: PhraseStatus = PhraseStatus.UNTRANSLATED
    phrase_count: int = 0
    locales: dict[str, int] = field(default_factory=dict)
    branch_name: str | None = None
    commit_datetime: str | None = None

    def __post_init__(self):
        self.status = PhraseStatus(self.status)


@dataclass(frozen=True)
class LocaleStatus:
    """Translation progress of a ref in one locale."""

    locale: str
    translated_count: int = 0
    percent_translated: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "locale": self.locale,
            "translated_count": self.translated_count,
            "percent_translated": self.percent_translated,
        }


@dataclass(frozen=True)
class RefStatus:
    """Result of a status query for a ref."""

    commit_id: str
    status: PhraseStatus
    phrase_count: int
    locales: list[LocaleStatus]

    def to_dict(self) -> dict[str, Any]:
        return {
            "commit_id": self.commit_id,
            "status": self.status.value,
            "phrase_count": self.phrase_count,
            "locales": [locale.to_dict() for locale in self.locales],
        }
