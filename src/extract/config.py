"""Repository configuration: which repos to process, their locales and extractors.

Configuration is either built in Python:

    >>> config = Configurator()
    >>> repo = config.add_repo("demo").set_path("/src/demo").add_locales(["fr-FR", "de-DE"])
    >>> repo.add_extractor("json/key-value").set_conditions(
    ...     lambda root: root.match_path("config/locales").and_(root.match_file_extension(".json"))
    ... )

or loaded from a JSON file with ``load_config``:

    {
      "repos": [{
        "name": "demo",
        "path": "/src/demo",
        "locales": ["fr-FR", "de-DE"],
        "extractors": [{
          "type": "json/key-value",
          "encoding": "utf-8",
          "match": {"and": [{"path": "config/locales"}, {"extension": ".json"}]}
        }]
      }]
    }
"""

import codecs
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from common.constants import DEFAULT_ENCODING

from .errors import ConfigError
from .extractors import Extractor, get_extractor
from .git_utils import Repo
from .matchers import node_from_dict
from .models import ExtractorConfig


@dataclass
class RepoConfig:
    """Settings for one repository.

    Attributes:
        name: Name the repository is referred to by in commands and the store
        path: Working directory of the git repository
        locales: Locale codes phrases get translated into, in display order
        source_locale: Locale of the source text
        main_branch: Branch that wins when a commit belongs to several branches
        extractor_configs: Extractors and the paths they apply to
    """

    name: str
    path: Path | None = None
    locales: list[str] = field(default_factory=list)
    source_locale: str = "en-US"
    main_branch: str = "master"
    extractor_configs: list[ExtractorConfig] = field(default_factory=list)
    _repo: Repo | None = field(default=None, init=False, repr=False, compare=False)

    def set_path(self, path: str | Path) -> "RepoConfig":
        self.path = Path(path)
        self._repo = None
        return self

    def add_locale(self, locale: str) -> "RepoConfig":
        if locale not in self.locales:
            self.locales.append(locale)
        return self

    def add_locales(self, locales: list[str]) -> "RepoConfig":
        for locale in locales:
            self.add_locale(locale)
        return self

    def set_source_locale(self, locale: str) -> "RepoConfig":
        self.source_locale = locale
        return self

    def set_main_branch(self, branch: str) -> "RepoConfig":
        self.main_branch = branch
        return self

    def add_extractor(
        self, extractor: str | Extractor, encoding: str = DEFAULT_ENCODING
    ) -> ExtractorConfig:
        """Register an extractor (by name or instance) and return its config for chaining."""
        if isinstance(extractor, str):
            extractor = get_extractor(extractor)
        extractor_config = ExtractorConfig(extractor, encoding=encoding)
        self.extractor_configs.append(extractor_config)
        return extractor_config

    def get_extractor_configs(self, path: str) -> list[ExtractorConfig]:
        """Return every extractor config whose predicate matches the path."""
        return [config for config in self.extractor_configs if config.matches(path)]

    @property
    def repo(self) -> Repo:
        if self.path is None:
            raise ConfigError(f"No path configured for repository '{self.name}'")
        if self._repo is None:
            self._repo = Repo.from_path(self.path)
        return self._repo


class Configurator:
    """Holds the configuration of every repository."""

    def __init__(self):
        self._repos: dict[str, RepoConfig] = {}

    def add_repo(self, name: str) -> RepoConfig:
        if name in self._repos:
            raise ConfigError(f"Repository '{name}' is configured twice")
        repo_config = RepoConfig(name=name)
        self._repos[name] = repo_config
        return repo_config

    def get_repo(self, name: str) -> RepoConfig:
        """
        Look up a repository by name.

        Raises:
            ConfigError: If the repository is not configured
        """
        try:
            return self._repos[name]
        except KeyError:
            raise ConfigError(f"Repository '{name}' is not configured") from None

    @property
    def repos(self) -> list[RepoConfig]:
        return list(self._repos.values())

    def __contains__(self, name: str) -> bool:
        return name in self._repos


def load_config(config_path: Path) -> Configurator:
    """
    Load repository configuration from a JSON file.

    Relative repository paths are resolved against the file's directory.

    Args:
        config_path: Path to the JSON configuration file

    Returns:
        Populated Configurator

    Raises:
        ConfigError: If the file is missing or invalid
    """
    config_path = Path(config_path).expanduser()
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse {config_path.name}: {e}") from e

    return config_from_dict(data, base_dir=config_path.parent.resolve())


def config_from_dict(data: dict[str, Any], base_dir: Path | None = None) -> Configurator:
    """Build a Configurator from the parsed form of the JSON configuration."""
    if not isinstance(data, dict) or not isinstance(data.get("repos"), list):
        raise ConfigError("Configuration must be a mapping with a 'repos' list")

    configurator = Configurator()

    for repo_data in data["repos"]:
        if not isinstance(repo_data, dict) or not isinstance(repo_data.get("name"), str):
            raise ConfigError(f"Every repository needs a 'name': {repo_data!r}")

        repo_config = configurator.add_repo(repo_data["name"])

        if repo_data.get("path"):
            path = Path(repo_data["path"]).expanduser()
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path
            repo_config.set_path(path)

        repo_config.add_locales(_as_str_list(repo_data.get("locales"), "locales"))
        if repo_data.get("source_locale"):
            repo_config.set_source_locale(str(repo_data["source_locale"]))
        if repo_data.get("main_branch"):
            repo_config.set_main_branch(str(repo_data["main_branch"]))

        for extractor_data in repo_data.get("extractors", []):
            _add_extractor(repo_config, extractor_data)

    return configurator


def _add_extractor(repo_config: RepoConfig, data: Any) -> None:
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        raise ConfigError(f"Every extractor needs a 'type': {data!r}")

    encoding = data.get("encoding", DEFAULT_ENCODING)
    try:
        codecs.lookup(encoding)
    except (LookupError, TypeError) as e:
        raise ConfigError(f"Unknown encoding '{encoding}' for extractor {data['type']}") from e

    extractor_config = repo_config.add_extractor(data["type"], encoding=encoding)

    if "match" in data:
        try:
            extractor_config.set_conditions(node_from_dict(data["match"]))
        except ValueError as e:
            raise ConfigError(f"Invalid 'match' for extractor {data['type']}: {e}") from e


def _as_str_list(value: Any, name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{name}' must be a list of strings")
    return value
