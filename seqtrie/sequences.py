"""
Predicate helpers over plain iterables.

Small linear scans used by :mod:`seqtrie.trie` and the JSON service.  None of
them keep state beyond a single pass, and the lazy ones stop pulling from
their source as soon as they have what they need.
"""

from __future__ import annotations

from itertools import islice
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence


def first(iterable: Iterable[Any], predicate: Callable[[Any], bool], default: Any = None) -> Any:
    """Return the first element satisfying *predicate*, or *default*."""
    for element in iterable:
        if predicate(element):
            return element
    return default


def last(sequence: Sequence[Any], predicate: Callable[[Any], bool], default: Any = None) -> Any:
    """Return the last element satisfying *predicate*, or *default*."""
    for element in reversed(sequence):
        if predicate(element):
            return element
    return default


def last_index_of(sequence: Sequence[Any], predicate: Callable[[Any], bool]) -> Optional[int]:
    """Index of the last element satisfying *predicate*, or None."""
    for i in reversed(range(len(sequence))):
        if predicate(sequence[i]):
            return i
    return None


def count(iterable: Iterable[Any], predicate: Callable[[Any], bool]) -> int:
    return sum(1 for element in iterable if predicate(element))


def indices_of(sequence: Sequence[Any], predicate: Callable[[Any], bool]) -> list[int]:
    return [i for i, element in enumerate(sequence) if predicate(element)]


def partition(iterable: Iterable[Any], predicate: Callable[[Any], bool]) -> tuple[list, list]:
    """Split *iterable* into ``(matching, non_matching)``, keeping order.

    >>> partition(range(6), lambda n: n % 2 == 0)
    ([0, 2, 4], [1, 3, 5])
    """
    matching: list = []
    rest: list = []
    for element in iterable:
        (matching if predicate(element) else rest).append(element)
    return matching, rest


def take_first_n(iterable: Iterable[Any], predicate: Callable[[Any], bool], n: int) -> Iterator[Any]:
    """Yield at most *n* elements satisfying *predicate*, lazily.

    The result is a single-use iterator: once exhausted it yields nothing
    more.  Call again for a fresh scan over a re-iterable source.

    >>> list(take_first_n([1, 2, 3, 4, 5, 6, 7], lambda x: x > 4, 2))
    [5, 6]
    """
    if n <= 0:
        return iter(())
    return islice((element for element in iterable if predicate(element)), n)


def take_first(iterable: Iterable[Any], predicate: Callable[[Any], bool], default: Any = None) -> Any:
    """Return the first match of a lazy scan over *iterable*.

    >>> take_first([1, 2, 3, 4, 5, 6, 7], lambda x: x > 4)
    5
    """
    return next(take_first_n(iterable, predicate, 1), default)
