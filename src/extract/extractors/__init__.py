"""Extractor plugin implementations and lookup by name."""

from collections.abc import Callable, Iterable
from importlib import metadata

from ..errors import ConfigError
from .base import Extractor
from .json_extractor import JsonKeyValueExtractor
from .python_extractor import PythonGettextExtractor

_ENTRY_POINT_GROUP = "git_phrases.extractors"

_BUILTIN_FACTORIES: dict[str, Callable[[], Extractor]] = {
    "json/key-value": JsonKeyValueExtractor,
    "python/gettext": PythonGettextExtractor,
}


def get_extractor(name: str) -> Extractor:
    """
    Instantiate the extractor registered under ``name``.

    Built-in extractors are looked up first, then the
    ``git_phrases.extractors`` entry-point group.

    Raises:
        ConfigError: If no extractor is registered under that name
    """
    factory = _BUILTIN_FACTORIES.get(name.lower())
    if factory is not None:
        return factory()

    for entry in _iter_entry_points():
        if entry.name.lower() == name.lower():
            return _coerce_extractor(entry.name, entry.load())

    available = ", ".join(available_extractors())
    raise ConfigError(f"Unknown extractor '{name}'. Available: {available}")


def available_extractors() -> list[str]:
    """Return the names of all built-in and installed extractors."""
    names = set(_BUILTIN_FACTORIES)
    names.update(entry.name.lower() for entry in _iter_entry_points())
    return sorted(names)


def _coerce_extractor(name: str, obj: object) -> Extractor:
    if isinstance(obj, Extractor):
        return obj
    if callable(obj):
        instance = obj()
        if isinstance(instance, Extractor):
            return instance
    raise ConfigError(f"Extractor entry point '{name}' must be an Extractor subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "Extractor",
    "JsonKeyValueExtractor",
    "PythonGettextExtractor",
    "available_extractors",
    "get_extractor",
]
