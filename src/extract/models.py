"""Data models for phrase extraction."""

from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from common.constants import DEFAULT_ENCODING

from .matchers import EmptyRootNode, Node, create_root

if TYPE_CHECKING:
    from .extractors.base import Extractor


@dataclass
class Phrase:
    """A translatable string found in a file at a commit.

    ``key`` is the source text. ``meta_key`` optionally identifies the
    string independently of its text (e.g. a dotted JSON path). Author and
    line fields are only set when the extractor reports line numbers and
    blame has an entry for that line.
    """

    key: str
    meta_key: str | None = None
    file: str | None = None
    commit_id: str | None = None
    author_name: str | None = None
    author_email: str | None = None
    line_number: int | None = None

    @property
    def index_key(self) -> str:
        """Key under which the phrase is looked up: meta_key if set, else key."""
        return self.meta_key if self.meta_key is not None else self.key

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Phrase | None":
        if not data:
            return None
        return cls(
            key=data["key"],
            meta_key=data.get("meta_key"),
            file=data.get("file"),
            commit_id=data.get("commit_id"),
            author_name=data.get("author_name"),
            author_email=data.get("author_email"),
            line_number=data.get("line_number"),
        )


class ExtractorConfig:
    """Binds an extractor to a text encoding and a path predicate.

    Example:
        >>> config = ExtractorConfig(JsonKeyValueExtractor())
        >>> config.set_encoding("utf-16").set_conditions(
        ...     lambda root: root.match_file_extension(".json")
        ... )
    """

    def __init__(
        self,
        extractor: "Extractor",
        encoding: str = DEFAULT_ENCODING,
        matcher: Node | None = None,
    ):
        self.extractor = extractor
        self.encoding = encoding
        self.matcher = matcher

    def set_encoding(self, encoding: str) -> "ExtractorConfig":
        self.encoding = encoding
        return self

    def set_conditions(
        self, conditions: "Node | Callable[[EmptyRootNode], Node]"
    ) -> "ExtractorConfig":
        """Set the predicate, either directly or via a callable given an empty root."""
        if callable(conditions) and not isinstance(conditions, Node):
            conditions = conditions(create_root())
        if not isinstance(conditions, Node):
            raise TypeError(f"Extractor conditions must build a predicate node, got {conditions!r}")
        self.matcher = conditions
        return self

    def matches(self, path: str) -> bool:
        """True if this config applies to the path. Configs without conditions match nothing."""
        return self.matcher is not None and self.matcher.matches(path)

    def __repr__(self) -> str:
        return (
            f"ExtractorConfig(extractor={self.extractor!r}, "
            f"encoding={self.encoding!r}, matcher={self.matcher!r})"
        )
