"""Tests for the commit log store."""

import pytest

from datastore.commit_log_store import CommitLogStore, open_store
from datastore.db import DatabaseConfig, create_database
from extract.models import Phrase
from status.phrase_status import PhraseStatus

MASTER = "refs/heads/master"


class TestAddOrUpdateCommitLog:
    """Writing regular and finalized commit logs."""

    def test_insert_defaults(self, store):
        log = store.add_or_update_commit_log("demo", "a" * 40)

        assert log.commit_id == "a" * 40
        assert log.status == PhraseStatus.UNTRANSLATED
        assert log.phrase_count == 0
        assert log.branch_name is None
        assert log.locales == {}

    def test_update_keeps_unspecified_fields(self, store):
        store.add_or_update_commit_log(
            "demo",
            "abc",
            phrase_count=7,
            branch_name=MASTER,
            commit_datetime="2024-01-02T03:04:05+00:00",
        )

        log = store.add_or_update_commit_log("demo", "abc", PhraseStatus.PENDING)

        assert log.status == PhraseStatus.PENDING
        assert log.phrase_count == 7
        assert log.branch_name == MASTER
        assert log.commit_datetime == "2024-01-02T03:04:05+00:00"
        assert store.commit_log_with_status_count("demo", PhraseStatus.all()) == 1

    def test_update_moves_branch(self, store):
        store.add_or_update_commit_log("demo", "abc", branch_name=MASTER)
        log = store.add_or_update_commit_log("demo", "abc", branch_name="refs/heads/feature")
        assert log.branch_name == "refs/heads/feature"

    def test_accepts_status_names(self, store):
        log = store.add_or_update_commit_log("demo", "abc", "PULLED")
        assert log.status == PhraseStatus.PULLED

    def test_invalid_status(self, store):
        with pytest.raises(ValueError):
            store.add_or_update_commit_log("demo", "abc", "DONE")

    def test_finalized_marker_is_kept_apart(self, store):
        store.add_or_update_commit_log("demo", "abc", PhraseStatus.PENDING, phrase_count=3)

        marker = store.add_or_update_commit_log(
            "demo", "abc", PhraseStatus.FINALIZED, branch_name=MASTER
        )

        assert marker.status == PhraseStatus.FINALIZED
        assert marker.branch_name == MASTER
        assert store.lookup_commit_log("demo", "abc").status == PhraseStatus.PENDING

    def test_one_finalized_marker_per_branch(self, store):
        for branch in (MASTER, MASTER, "refs/heads/release"):
            store.add_or_update_commit_log("demo", "abc", PhraseStatus.FINALIZED, branch_name=branch)

        finalized = [PhraseStatus.FINALIZED]
        assert store.commit_log_with_status_count("demo", finalized) == 2
        assert store.commit_log_with_status_count("demo", finalized, MASTER) == 1

    def test_repositories_are_separate(self, store):
        store.add_or_update_commit_log("demo", "abc", PhraseStatus.PENDING)
        store.add_or_update_commit_log("other", "abc", PhraseStatus.PULLED)

        assert store.lookup_commit_log("demo", "abc").status == PhraseStatus.PENDING
        assert store.lookup_commit_log("other", "abc").status == PhraseStatus.PULLED


class TestQueries:
    """Reading commit logs back."""

    def test_lookup_missing(self, store):
        assert store.lookup_commit_log("demo", "nope") is None

    def test_each_commit_log_with_status(self, store):
        store.add_or_update_commit_log(
            "demo", "new", PhraseStatus.PENDING, branch_name=MASTER, commit_datetime="2024-02-01"
        )
        store.add_or_update_commit_log(
            "demo", "old", PhraseStatus.PULLING, branch_name=MASTER, commit_datetime="2024-01-01"
        )
        store.add_or_update_commit_log(
            "demo", "done", PhraseStatus.TRANSLATED, branch_name=MASTER
        )
        store.add_or_update_commit_log(
            "demo", "elsewhere", PhraseStatus.PENDING, branch_name="refs/heads/feature"
        )

        on_master = store.each_commit_log_with_status("demo", PhraseStatus.incomplete(), MASTER)
        assert [log.commit_id for log in on_master] == ["old", "new"]

        anywhere = store.each_commit_log_with_status("demo", [PhraseStatus.PENDING])
        assert sorted(log.commit_id for log in anywhere) == ["elsewhere", "new"]

    def test_empty_status_list_matches_nothing(self, store):
        store.add_or_update_commit_log("demo", "abc")

        assert list(store.each_commit_log_with_status("demo", [])) == []
        assert store.commit_log_with_status_count("demo", []) == 0

    def test_update_commit_log_status(self, store):
        store.add_or_update_commit_log("demo", "abc", phrase_count=2)
        store.add_or_update_commit_log("demo", "abc", PhraseStatus.FINALIZED, branch_name=MASTER)

        assert store.update_commit_log_status("demo", "abc", PhraseStatus.MISSING)
        assert store.lookup_commit_log("demo", "abc").status == PhraseStatus.MISSING
        assert store.commit_log_with_status_count("demo", [PhraseStatus.FINALIZED]) == 1

    def test_update_status_of_unknown_commit(self, store):
        assert not store.update_commit_log_status("demo", "nope", PhraseStatus.MISSING)


class TestLocales:
    """Per-locale translated counts."""

    def test_locales_are_loaded_with_log(self, store):
        store.add_or_update_commit_log("demo", "abc", phrase_count=10)
        store.add_or_update_commit_log_locale("demo", "abc", "fr-FR", 4)
        store.add_or_update_commit_log_locale("demo", "abc", "de-DE", 1)

        assert store.lookup_commit_log("demo", "abc").locales == {"de-DE": 1, "fr-FR": 4}

    def test_locale_count_is_replaced(self, store):
        store.add_or_update_commit_log("demo", "abc")
        store.add_or_update_commit_log_locale("demo", "abc", "fr-FR", 4)
        store.add_or_update_commit_log_locale("demo", "abc", "fr-FR", 9)

        assert store.lookup_commit_log("demo", "abc").locales == {"fr-FR": 9}

    def test_listed_logs_get_their_own_locales(self, store):
        store.add_or_update_commit_log("demo", "one", commit_datetime="2024-01-01")
        store.add_or_update_commit_log("demo", "two", commit_datetime="2024-01-02")
        store.add_or_update_commit_log("demo", "bare", commit_datetime="2024-01-03")
        store.add_or_update_commit_log("other", "one", commit_datetime="2024-01-01")
        store.add_or_update_commit_log_locale("demo", "one", "fr-FR", 4)
        store.add_or_update_commit_log_locale("demo", "two", "fr-FR", 2)
        store.add_or_update_commit_log_locale("demo", "two", "de-DE", 5)
        store.add_or_update_commit_log_locale("other", "one", "ja-JP", 8)

        logs = store.each_commit_log_with_status("demo", [PhraseStatus.UNTRANSLATED])

        assert [(log.commit_id, log.locales) for log in logs] == [
            ("one", {"fr-FR": 4}),
            ("two", {"de-DE": 5, "fr-FR": 2}),
            ("bare", {}),
        ]

    def test_listing_loads_locales_in_one_query(self, store, monkeypatch):
        for index in range(5):
            commit_id = f"c{index}"
            store.add_or_update_commit_log(
                "demo", commit_id, commit_datetime=f"2024-01-0{index + 1}"
            )
            store.add_or_update_commit_log_locale("demo", commit_id, "fr-FR", index)

        queries = []
        fetchall = store.adapter.fetchall

        def counting_fetchall(query, params=None):
            queries.append(query)
            return fetchall(query, params)

        monkeypatch.setattr(store.adapter, "fetchall", counting_fetchall)

        logs = list(store.each_commit_log_with_status("demo", PhraseStatus.all()))

        assert [log.locales for log in logs] == [{"fr-FR": i} for i in range(5)]
        assert len(queries) == 2


class TestPhrases:
    """Stored phrases of a commit."""

    def test_replace_phrases(self, store):
        phrases = [
            Phrase(key="Hello", meta_key="greeting", file="en.json"),
            Phrase(
                key="Save",
                file="app.py",
                author_name="Alice",
                author_email="alice@example.com",
                line_number=3,
            ),
        ]

        assert store.replace_phrases("demo", "abc", phrases) == 2
        stored = store.phrases_for_commit("demo", "abc")

        assert [p.key for p in stored] == ["Hello", "Save"]
        assert stored[0].meta_key == "greeting"
        assert stored[1].line_number == 3
        assert stored[1].author_email == "alice@example.com"
        assert all(p.commit_id == "abc" for p in stored)

    def test_replace_drops_earlier_phrases(self, store):
        store.replace_phrases("demo", "abc", [Phrase(key="Old")])
        store.replace_phrases("demo", "abc", [Phrase(key="New")])

        assert [p.key for p in store.phrases_for_commit("demo", "abc")] == ["New"]

    def test_replace_accepts_generators(self, store):
        count = store.replace_phrases("demo", "abc", (Phrase(key=k) for k in "xyz"))
        assert count == 3

    def test_failed_replace_keeps_earlier_phrases(self, store):
        store.replace_phrases("demo", "abc", [Phrase(key="Kept")])

        def broken():
            yield Phrase(key="Partial")
            raise RuntimeError("extraction failed")

        with pytest.raises(RuntimeError):
            store.replace_phrases("demo", "abc", broken())

        assert [p.key for p in store.phrases_for_commit("demo", "abc")] == ["Kept"]


class TestOpenStore:
    """The store context manager."""

    def test_prepares_schema_and_commits(self, tmp_path):
        adapter = create_database(DatabaseConfig(db_type="sqlite", db_path=tmp_path / "p.db"))

        with open_store(adapter) as store:
            assert isinstance(store, CommitLogStore)
            store.add_or_update_commit_log("demo", "abc", phrase_count=1)

        with open_store(adapter) as store:
            assert store.lookup_commit_log("demo", "abc").phrase_count == 1

    def test_uses_environment_database(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_TYPE", "sqlite")
        monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "env.db"))

        with open_store() as store:
            store.add_or_update_commit_log("demo", "abc")

        assert (tmp_path / "env.db").exists()
