"""Boolean path predicates that decide which extractor applies to a file.

Trees are built fluently from an empty root and combined with ``and_``,
``or_`` and ``not_`` (or the ``&``, ``|`` and ``~`` operators):

    >>> root = create_root()
    >>> node = root.match_path("config/locales").and_(root.match_file_extension(".json"))
    >>> node.matches("config/locales/en.json")
    True
    >>> (~node).matches("config/locales/en.json")
    False

Nodes are immutable and evaluation never touches the filesystem.
"""

import posixpath
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class NodeBuilder:
    """Leaf constructors shared by the empty root and every node."""

    def match_path(self, path: str) -> "PathNode":
        return PathNode(path)

    def match_file_extension(self, extension: str) -> "FileExtensionNode":
        return FileExtensionNode(extension)

    def match_regex(self, pattern: "str | re.Pattern[str]") -> "RegexNode":
        return RegexNode(pattern)


class EmptyRootNode(NodeBuilder):
    """Construction anchor for predicate trees. Not a matcher itself."""

    def and_(self, left: "Node", right: "Node") -> "AndNode":
        return AndNode(left, right)

    def or_(self, left: "Node", right: "Node") -> "OrNode":
        return OrNode(left, right)

    def not_(self, child: "Node") -> "NotNode":
        return NotNode(child)

    def __repr__(self) -> str:
        return "EmptyRootNode()"


class Node(NodeBuilder, ABC):
    """A predicate over repository paths."""

    @abstractmethod
    def matches(self, path: str) -> bool:
        """Return True if the path satisfies this predicate."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize the tree in the form accepted by ``node_from_dict``."""

    def and_(self, other: "Node") -> "AndNode":
        return AndNode(self, other)

    def or_(self, other: "Node") -> "OrNode":
        return OrNode(self, other)

    def not_(self) -> "NotNode":
        return NotNode(self)

    def __and__(self, other: "Node") -> "AndNode":
        return self.and_(other)

    def __or__(self, other: "Node") -> "OrNode":
        return self.or_(other)

    def __invert__(self) -> "NotNode":
        return self.not_()


@dataclass(frozen=True, eq=True)
class PathNode(Node):
    """Matches a path or anything below it as a directory.

    ``PathNode("foo/bar")`` matches ``foo/bar`` and ``foo/bar/baz`` but not
    ``foo/barbaz``.
    """

    path: str

    def __post_init__(self):
        object.__setattr__(self, "path", self.path.rstrip("/"))

    def matches(self, path: str) -> bool:
        return path == self.path or path.startswith(f"{self.path}/")

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path}


@dataclass(frozen=True, eq=True)
class FileExtensionNode(Node):
    """Matches files by extension (case sensitive, leading dot optional)."""

    extension: str

    def __post_init__(self):
        object.__setattr__(self, "extension", self.extension.lstrip("."))

    def matches(self, path: str) -> bool:
        name = posixpath.basename(path)
        if "." not in name:
            return False
        # Dotfiles count too: ".bashrc" has the extension "bashrc"
        return name.rpartition(".")[2] == self.extension

    def to_dict(self) -> dict[str, Any]:
        return {"extension": f".{self.extension}"}


@dataclass(frozen=True, eq=True)
class RegexNode(Node):
    """Matches when the pattern is found anywhere in the path."""

    pattern: "str | re.Pattern[str]"

    def __post_init__(self):
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern))

    def matches(self, path: str) -> bool:
        return self.pattern.search(path) is not None

    def to_dict(self) -> dict[str, Any]:
        return {"regex": self.pattern.pattern}


@dataclass(frozen=True, eq=True)
class BinaryNode(Node):
    left: Node
    right: Node


@dataclass(frozen=True, eq=True)
class AndNode(BinaryNode):
    def matches(self, path: str) -> bool:
        return self.left.matches(path) and self.right.matches(path)

    def to_dict(self) -> dict[str, Any]:
        return {"and": [self.left.to_dict(), self.right.to_dict()]}


@dataclass(frozen=True, eq=True)
class OrNode(BinaryNode):
    def matches(self, path: str) -> bool:
        return self.left.matches(path) or self.right.matches(path)

    def to_dict(self) -> dict[str, Any]:
        return {"or": [self.left.to_dict(), self.right.to_dict()]}


@dataclass(frozen=True, eq=True)
class UnaryNode(Node):
    child: Node


@dataclass(frozen=True, eq=True)
class NotNode(UnaryNode):
    def matches(self, path: str) -> bool:
        return not self.child.matches(path)

    def to_dict(self) -> dict[str, Any]:
        return {"not": self.child.to_dict()}


def create_root() -> EmptyRootNode:
    """Return an empty root to start building a predicate tree from."""
    return EmptyRootNode()


def node_from_dict(data: dict[str, Any]) -> Node:
    """
    Build a predicate tree from its dictionary form.

    Supported keys (exactly one per mapping):
    - ``path``: directory-scoped prefix
    - ``extension``: file extension
    - ``regex``: regular expression searched in the path
    - ``and`` / ``or``: list of two or more sub-trees, folded left to right
    - ``not``: a single sub-tree

    Args:
        data: Mapping as found in the JSON configuration file

    Returns:
        Root node of the tree

    Raises:
        ValueError: If the mapping is not a valid predicate
    """
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(f"Predicate must be a mapping with exactly one key, got: {data!r}")

    kind, value = next(iter(data.items()))
    root = create_root()

    if kind == "path":
        return root.match_path(_expect_str(kind, value))
    if kind == "extension":
        return root.match_file_extension(_expect_str(kind, value))
    if kind == "regex":
        try:
            return root.match_regex(_expect_str(kind, value))
        except re.error as e:
            raise ValueError(f"Invalid regex predicate {value!r}: {e}") from e
    if kind in ("and", "or"):
        if not isinstance(value, list) or len(value) < 2:
            raise ValueError(f"'{kind}' predicate needs a list of at least two sub-predicates")
        nodes = [node_from_dict(item) for item in value]
        combined = nodes[0]
        for node in nodes[1:]:
            combined = combined.and_(node) if kind == "and" else combined.or_(node)
        return combined
    if kind == "not":
        return node_from_dict(value).not_()

    raise ValueError(f"Unknown predicate type: {kind}")


def _expect_str(kind: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"'{kind}' predicate expects a string, got: {value!r}")
    return value
