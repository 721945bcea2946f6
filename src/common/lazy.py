"""Lazy sequences that can be iterated more than once."""

from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class RestartableSequence(Generic[T]):
    """Iterable that re-runs a generator function on every iteration.

    Nothing is computed until iteration starts and items are produced one at
    a time, so a consumer that stops early never pays for the rest. Each call
    to ``iter()`` starts a fresh traversal.

    Example:
        >>> seq = RestartableSequence(range, 3)
        >>> list(seq), list(seq)
        ([0, 1, 2], [0, 1, 2])
    """

    def __init__(self, factory: Callable[..., Any], *args: Any, **kwargs: Any):
        self._factory = factory
        self._args = args
        self._kwargs = kwargs

    def __iter__(self) -> Iterator[T]:
        return iter(self._factory(*self._args, **self._kwargs))

    def each(self, handler: Callable[[T], Any]) -> None:
        """Push every item into ``handler``."""
        for item in self:
            handler(item)

    def map(self, func: Callable[[T], Any]) -> "RestartableSequence":
        """Return a new lazy sequence with ``func`` applied to each item."""
        return RestartableSequence(lambda: (func(item) for item in self))

    def to_list(self) -> list[T]:
        return list(self)

    def __repr__(self) -> str:
        name = getattr(self._factory, "__qualname__", repr(self._factory))
        return f"RestartableSequence({name})"
