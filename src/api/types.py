"""GraphQL type definitions for the git-phrases API."""

import strawberry

from extract.models import Phrase as PhraseModel
from status.models import RefStatus as RefStatusModel


@strawberry.type
class LocaleStatus:
    """Translation progress of a ref in one locale."""

    locale: str
    translated_count: int
    percent_translated: float


@strawberry.type
class RefStatus:
    """Aggregate translation status of a ref's branch."""

    commit_id: str
    status: str  # PhraseStatus value, e.g. "PENDING"
    phrase_count: int
    locales: list[LocaleStatus]

    @classmethod
    def from_model(cls, ref_status: RefStatusModel) -> "RefStatus":
        return cls(
            commit_id=ref_status.commit_id,
            status=ref_status.status.value,
            phrase_count=ref_status.phrase_count,
            locales=[
                LocaleStatus(
                    locale=locale_status.locale,
                    translated_count=locale_status.translated_count,
                    percent_translated=locale_status.percent_translated,
                )
                for locale_status in ref_status.locales
            ],
        )


@strawberry.type
class Phrase:
    """A translatable string introduced by a commit."""

    key: str
    meta_key: str | None = None
    file: str | None = None
    commit_id: str | None = None
    author_name: str | None = None
    author_email: str | None = None
    line_number: int | None = None

    @classmethod
    def from_model(cls, phrase: PhraseModel) -> "Phrase":
        return cls(**phrase.to_dict())
