"""Helpers that fold commit logs into branch-level figures."""

from collections.abc import Iterable, Sequence

from extract.git_utils import Repo

from .models import CommitLog, LocaleStatus
from .phrase_status import PhraseStatus

_LOCAL_PREFIX = "refs/heads/"
_REMOTE_PREFIX = "refs/remotes/"


def derive_branch_name(commit_id: str, repo: Repo, main_branch: str = "master") -> str | None:
    """
    Work out which branch a commit belongs to.

    Tags, ``HEAD`` and symbolic remote heads are ignored. A commit reachable
    from a single branch (or from a local branch and its remote-tracking
    copies) belongs to that branch, preferring the local ref. When several
    branches contain it, the main branch wins; otherwise the commit has no
    branch and is treated as detached.

    Args:
        commit_id: Full commit hash
        repo: Repository the commit lives in
        main_branch: Short name of the repository's main branch

    Returns:
        Full ref name (e.g. ``refs/heads/master``) or None
    """
    refs = [
        ref
        for ref in repo.refs_containing(commit_id)
        if ref.startswith((_LOCAL_PREFIX, _REMOTE_PREFIX)) and not ref.endswith("/HEAD")
    ]
    if not refs:
        return None

    short_names = {_short_branch_name(ref) for ref in refs}
    if len(short_names) == 1:
        local = [ref for ref in refs if ref.startswith(_LOCAL_PREFIX)]
        return (local or refs)[0]

    for preferred in (f"{_LOCAL_PREFIX}{main_branch}", f"{_REMOTE_PREFIX}origin/{main_branch}"):
        if preferred in refs:
            return preferred

    return None


def derive_status_from(commit_logs: Iterable[CommitLog]) -> PhraseStatus:
    """
    Merge commit log statuses into one: the least advanced one wins.

    Logs whose status has no ordinal (markers) are ignored. No logs at all
    means there is nothing left to translate.
    """
    ordered = [log.status for log in commit_logs if PhraseStatus.index(log.status) is not None]
    if not ordered:
        return PhraseStatus.TRANSLATED
    return min(ordered, key=PhraseStatus.index)


def derive_phrase_count_from(commit_logs: Iterable[CommitLog]) -> int:
    return sum(log.phrase_count for log in commit_logs)


def derive_locale_statuses_from(
    commit_logs: Iterable[CommitLog], phrase_count: int
) -> dict[str, LocaleStatus]:
    """Sum translated counts per locale across commit logs."""
    totals: dict[str, int] = {}
    for commit_log in commit_logs:
        for locale, translated_count in commit_log.locales.items():
            totals[locale] = totals.get(locale, 0) + translated_count

    return {
        locale: LocaleStatus(
            locale=locale,
            translated_count=translated_count,
            percent_translated=percentage(translated_count, phrase_count),
        )
        for locale, translated_count in totals.items()
    }


def fill_in_missing_locales(
    all_locales: Sequence[str], locale_statuses: dict[str, LocaleStatus]
) -> list[LocaleStatus]:
    """
    Return exactly one status per configured locale, in configuration order.

    Locales without any translations get zeroes; locales that are not
    configured are dropped.
    """
    return [locale_statuses.get(locale, LocaleStatus(locale=locale)) for locale in all_locales]


def percentage(dividend: int, divisor: int) -> float:
    """Ratio rounded to 4 places, 0.0 when the divisor is zero."""
    if divisor <= 0:
        return 0.0
    return round(dividend / divisor, 4)


def _short_branch_name(ref: str) -> str:
    if ref.startswith(_LOCAL_PREFIX):
        return ref[len(_LOCAL_PREFIX):]
    # refs/remotes/<remote>/<branch>
    return ref[len(_REMOTE_PREFIX):].split("/", 1)[-1]
