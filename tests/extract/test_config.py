"""Tests for repository configuration and extractor configs."""

import json

import pytest

from extract.config import Configurator, config_from_dict, load_config
from extract.errors import ConfigError
from extract.extractors import JsonKeyValueExtractor, PythonGettextExtractor
from extract.matchers import PathNode
from extract.models import ExtractorConfig, Phrase


class TestExtractorConfig:
    """Tests for ExtractorConfig."""

    def test_defaults(self):
        config = ExtractorConfig(JsonKeyValueExtractor())
        assert config.encoding == "utf-8"
        assert config.matcher is None

    def test_no_conditions_matches_nothing(self):
        assert not ExtractorConfig(JsonKeyValueExtractor()).matches("en.json")

    def test_fluent_setters_return_self(self):
        config = ExtractorConfig(JsonKeyValueExtractor())
        assert config.set_encoding("utf-16") is config
        assert config.set_conditions(lambda root: root.match_path("config")) is config
        assert config.encoding == "utf-16"
        assert config.matcher == PathNode("config")

    def test_conditions_accept_a_node(self):
        config = ExtractorConfig(JsonKeyValueExtractor()).set_conditions(PathNode("config"))
        assert config.matches("config/en.json")
        assert not config.matches("app/en.json")

    def test_conditions_must_build_a_node(self):
        with pytest.raises(TypeError):
            ExtractorConfig(JsonKeyValueExtractor()).set_conditions(lambda root: root)


class TestPhrase:
    """Tests for the Phrase record."""

    def test_index_key_prefers_meta_key(self):
        assert Phrase(key="Home", meta_key="nav.home").index_key == "nav.home"
        assert Phrase(key="Home").index_key == "Home"

    def test_dict_round_trip(self):
        phrase = Phrase(key="Home", meta_key="nav.home", file="en.json", commit_id="abc")
        assert Phrase.from_dict(phrase.to_dict()) == phrase

    def test_from_empty_dict(self):
        assert Phrase.from_dict({}) is None
        assert Phrase.from_dict(None) is None


class TestConfigurator:
    """Tests for building configuration in Python."""

    def test_add_and_get_repo(self, tmp_path):
        config = Configurator()
        repo_config = config.add_repo("demo").set_path(tmp_path).add_locales(["fr-FR", "de-DE"])

        assert config.get_repo("demo") is repo_config
        assert "demo" in config
        assert repo_config.locales == ["fr-FR", "de-DE"]

    def test_duplicate_locales_are_ignored(self):
        repo_config = Configurator().add_repo("demo").add_locale("fr-FR").add_locale("fr-FR")
        assert repo_config.locales == ["fr-FR"]

    def test_duplicate_repo(self):
        config = Configurator()
        config.add_repo("demo")
        with pytest.raises(ConfigError):
            config.add_repo("demo")

    def test_unknown_repo(self):
        with pytest.raises(ConfigError, match="not configured"):
            Configurator().get_repo("missing")

    def test_repo_without_path(self):
        with pytest.raises(ConfigError, match="No path"):
            Configurator().add_repo("demo").repo

    def test_extractor_configs_for_path(self):
        repo_config = Configurator().add_repo("demo")
        json_config = repo_config.add_extractor("json/key-value").set_conditions(
            lambda root: root.match_file_extension("json")
        )
        python_config = repo_config.add_extractor(PythonGettextExtractor()).set_conditions(
            lambda root: root.match_file_extension("py")
        )
        catch_all = repo_config.add_extractor("json/key-value").set_conditions(
            lambda root: root.match_regex(".")
        )

        assert repo_config.get_extractor_configs("en.json") == [json_config, catch_all]
        assert repo_config.get_extractor_configs("app.py") == [python_config, catch_all]


class TestLoadConfig:
    """Tests for the JSON configuration file."""

    def write_config(self, tmp_path, data):
        config_path = tmp_path / "phrases.json"
        config_path.write_text(json.dumps(data))
        return config_path

    def test_loads_repos(self, tmp_path):
        (tmp_path / "src" / "demo").mkdir(parents=True)
        config_path = self.write_config(
            tmp_path,
            {
                "repos": [
                    {
                        "name": "demo",
                        "path": "src/demo",
                        "locales": ["fr-FR", "de-DE"],
                        "main_branch": "main",
                        "extractors": [
                            {
                                "type": "json/key-value",
                                "encoding": "utf-16",
                                "match": {
                                    "and": [{"path": "config/locales"}, {"extension": ".json"}]
                                },
                            }
                        ],
                    }
                ]
            },
        )

        repo_config = load_config(config_path).get_repo("demo")

        assert repo_config.path == tmp_path.resolve() / "src" / "demo"
        assert repo_config.locales == ["fr-FR", "de-DE"]
        assert repo_config.main_branch == "main"
        assert repo_config.source_locale == "en-US"
        [extractor_config] = repo_config.extractor_configs
        assert isinstance(extractor_config.extractor, JsonKeyValueExtractor)
        assert extractor_config.encoding == "utf-16"
        assert extractor_config.matches("config/locales/fr.json")
        assert not extractor_config.matches("config/fr.json")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        config_path = tmp_path / "phrases.json"
        config_path.write_text("{not json")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(config_path)

    @pytest.mark.parametrize(
        "data, message",
        [
            ({}, "'repos' list"),
            ({"repos": [{"path": "x"}]}, "needs a 'name'"),
            ({"repos": [{"name": "a", "locales": "fr-FR"}]}, "list of strings"),
            ({"repos": [{"name": "a", "extractors": [{"encoding": "utf-8"}]}]}, "'type'"),
            ({"repos": [{"name": "a", "extractors": [{"type": "nope"}]}]}, "Unknown extractor"),
            (
                {"repos": [{"name": "a", "extractors": [{"type": "json/key-value", "encoding": "x-nope"}]}]},
                "Unknown encoding",
            ),
            (
                {"repos": [{"name": "a", "extractors": [{"type": "json/key-value", "match": {"glob": "*"}}]}]},
                "Invalid 'match'",
            ),
        ],
    )
    def test_invalid_config(self, data, message):
        with pytest.raises(ConfigError, match=message):
            config_from_dict(data)
