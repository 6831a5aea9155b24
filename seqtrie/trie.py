"""
Trie (Prefix Tree) of sequences: a set whose members are sequences of
hashable elements, with shared prefixes stored once.

Techniques used:
  - One node per element: every node is itself a ``Trie`` holding a terminal
    flag and a dict of children keyed by the next element.
  - Cursor traversal: insert, remove, contains and completions pull exactly
    one element from an iterator per level and never look back, so one-shot
    generators are valid input.
  - Iterative walks: enumeration, counting, copying, merging and comparison
    use an explicit stack, so the call stack stays constant regardless of
    sequence length.
  - Lazy enumeration: ``__iter__`` yields members depth-first; ``contents``
    materialises the same walk.

Complexity (n = sequence length, N = number of nodes):
  insert / remove / contains    O(n)
  completions                   O(n + size of the sub-trie reached)
  count / contents / copy / ==  O(N)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Hashable, Iterable, Iterator, Optional, TypeVar

from . import sequences as seqs

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Hashable)


class Trie(Generic[E]):
    """A set of sequences stored as a prefix tree.

    >>> t = Trie(["cat", "car", "ca"])
    >>> "ca" in t, "cat" in t, "c" in t
    (True, True, False)
    >>> len(t)
    3
    >>> sorted(t.completions("ca"))
    [(), ('r',), ('t',)]
    >>> sorted(t)
    [('c', 'a'), ('c', 'a', 'r'), ('c', 'a', 't')]
    """

    def __init__(self, sequences: Iterable[Iterable[E]] = ()) -> None:
        self.children: dict[E, Trie[E]] = {}
        self.is_terminal = False
        for sequence in sequences:
            self.insert(sequence)

    @classmethod
    def from_sequence(cls, sequence: Iterable[E]) -> Trie[E]:
        """Return a trie whose only member is *sequence*."""
        trie = cls()
        trie.insert(sequence)
        return trie

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, sequence: Iterable[E]) -> None:
        """Add *sequence*. Inserting an existing member changes nothing."""
        node = self
        for element in sequence:
            child = node.children.get(element)
            if child is None:
                child = node.children[element] = Trie()
            node = child
        node.is_terminal = True

    def remove(self, sequence: Iterable[E]) -> None:
        """Remove *sequence* if present; non-members are ignored.

        Nodes left without members stay in place, see :meth:`compact`.
        """
        node = self._find_node(sequence)
        if node is not None:
            node.is_terminal = False

    def clear(self) -> None:
        self.children = {}
        self.is_terminal = False

    def compact(self) -> None:
        """Prune every subtree that holds no member."""
        # Edges in pre-order: an edge always precedes the edges below it.
        edges: list[tuple[Trie[E], E, Trie[E]]] = []
        stack: list[Trie[E]] = [self]
        while stack:
            node = stack.pop()
            for element, child in node.children.items():
                edges.append((node, element, child))
                stack.append(child)
        pruned = 0
        for parent, element, child in reversed(edges):
            if not child.is_terminal and not child.children:
                del parent.children[element]
                pruned += 1
        logger.debug("compact pruned %d dead nodes", pruned)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def contains(self, sequence: Iterable[E]) -> bool:
        node = self._find_node(sequence)
        return node is not None and node.is_terminal

    def completions(self, prefix: Iterable[E]) -> list[tuple[E, ...]]:
        """Return the suffixes of all members that start with *prefix*."""
        node = self._find_node(prefix)
        if node is None:
            return []
        return node.contents()

    def contents(self) -> list[tuple[E, ...]]:
        return list(self)

    @property
    def count(self) -> int:
        """Number of member sequences."""
        return seqs.count(self._nodes(), lambda node: node.is_terminal)

    def copy(self) -> Trie[E]:
        """Return a deep copy sharing no nodes with this trie."""
        clone: Trie[E] = Trie()
        stack = [(self, clone)]
        while stack:
            source, target = stack.pop()
            target.is_terminal = source.is_terminal
            for element, child in source.children.items():
                twin = target.children[element] = Trie()
                stack.append((child, twin))
        return clone

    # ------------------------------------------------------------------
    # Set algebra
    # ------------------------------------------------------------------

    def union_in_place(self, other: Iterable[Iterable[E]]) -> None:
        """Merge the members of *other* into this trie.

        Subtrees missing here are copied over, so *other* stays independent.
        """
        if other is self:
            return
        if not isinstance(other, Trie):
            other = Trie(other)
        adopted = 0
        stack = [(self, other)]
        while stack:
            target, source = stack.pop()
            if source.is_terminal:
                target.is_terminal = True
            for element, source_child in source.children.items():
                target_child = target.children.get(element)
                if target_child is None:
                    target.children[element] = source_child.copy()
                    adopted += 1
                else:
                    stack.append((target_child, source_child))
        logger.debug("union adopted %d subtrees", adopted)

    def union(self, other: Iterable[Iterable[E]]) -> Trie[E]:
        result = self.copy()
        result.union_in_place(other)
        return result

    def intersect(self, candidates: Iterable[Iterable[E]]) -> Trie[E]:
        """Return a new trie of the *candidates* that are members here."""
        return Trie(filter(self.contains, map(tuple, candidates)))

    def intersect_in_place(self, candidates: Iterable[Iterable[E]]) -> None:
        result = self.intersect(candidates)
        self.children, self.is_terminal = result.children, result.is_terminal
        logger.debug("intersect replaced contents of the trie")

    def exclusive_or_in_place(self, candidates: Iterable[Iterable[E]]) -> None:
        """Toggle each distinct candidate: members are removed, others added."""
        toggled = 0
        for candidate in Trie(candidates):
            if self.contains(candidate):
                self.remove(candidate)
            else:
                self.insert(candidate)
            toggled += 1
        logger.debug("exclusive-or toggled %d sequences", toggled)

    def exclusive_or(self, candidates: Iterable[Iterable[E]]) -> Trie[E]:
        result = self.copy()
        result.exclusive_or_in_place(candidates)
        return result

    def subtract_in_place(self, candidates: Iterable[Iterable[E]]) -> None:
        doomed = [tuple(candidate) for candidate in candidates]
        for candidate in doomed:
            self.remove(candidate)
        logger.debug("subtract removed up to %d sequences", len(doomed))

    def subtract(self, candidates: Iterable[Iterable[E]]) -> Trie[E]:
        result = self.copy()
        result.subtract_in_place(candidates)
        return result

    def is_disjoint_with(self, candidates: Iterable[Iterable[E]]) -> bool:
        """True if no candidate is a member. Stops at the first member found."""
        return seqs.first(candidates, self.contains) is None

    def is_subset_of(self, candidates: Iterable[Iterable[E]]) -> bool:
        others = _as_trie(candidates)
        return all(others.contains(member) for member in self)

    def is_superset_of(self, candidates: Iterable[Iterable[E]]) -> bool:
        return all(self.contains(candidate) for candidate in candidates)

    def is_strict_subset_of(self, candidates: Iterable[Iterable[E]]) -> bool:
        others = _as_trie(candidates)
        return self.is_subset_of(others) and len(self) < len(others)

    def is_strict_superset_of(self, candidates: Iterable[Iterable[E]]) -> bool:
        others = _as_trie(candidates)
        return self.is_superset_of(others) and len(self) > len(others)

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def map(self, transform: Callable[[tuple[E, ...]], Iterable[Any]]) -> Trie[Any]:
        return Trie(transform(member) for member in self)

    def filter(self, predicate: Callable[[tuple[E, ...]], bool]) -> Trie[E]:
        return Trie(member for member in self if predicate(member))

    def flat_map(self, transform: Callable[[tuple[E, ...]], Any]) -> Trie[Any]:
        """Build a trie from what *transform* returns for each member.

        ``None`` drops the member, a ``Trie`` is merged in whole and any other
        iterable is inserted as one sequence.
        """
        result: Trie[Any] = Trie()
        for member in self:
            produced = transform(member)
            if produced is None:
                continue
            if isinstance(produced, Trie):
                result.union_in_place(produced)
            else:
                result.insert(produced)
        return result

    def partition(self, predicate: Callable[[tuple[E, ...]], bool]) -> tuple[Trie[E], Trie[E]]:
        """Split into ``(matching, non_matching)`` tries."""
        matching, rest = seqs.partition(self, predicate)
        return Trie(matching), Trie(rest)

    # ------------------------------------------------------------------
    # Protocols
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[tuple[E, ...]]:
        stack: list[tuple[Trie[E], tuple[E, ...]]] = [(self, ())]
        while stack:
            node, path = stack.pop()
            if node.is_terminal:
                yield path
            for element, child in reversed(node.children.items()):
                stack.append((child, path + (element,)))

    def __len__(self) -> int:
        return self.count

    def __bool__(self) -> bool:
        return seqs.first(self._nodes(), lambda node: node.is_terminal) is not None

    def __contains__(self, sequence: Iterable[E]) -> bool:
        return self.contains(sequence)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Trie):
            return NotImplemented
        stack: list[tuple[Trie, Trie]] = [(self, other)]
        while stack:
            left, right = stack.pop()
            if left.is_terminal != right.is_terminal:
                return False
            for element in left.children.keys() | right.children.keys():
                left_child = left.children.get(element)
                right_child = right.children.get(element)
                if left_child is None or right_child is None:
                    # A missing child matches a subtree without members.
                    present = left_child if right_child is None else right_child
                    if present:
                        return False
                else:
                    stack.append((left_child, right_child))
        return True

    __hash__ = None  # type: ignore[assignment]

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Trie):
            return NotImplemented
        return self.is_subset_of(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Trie):
            return NotImplemented
        return self.is_strict_subset_of(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Trie):
            return NotImplemented
        return self.is_superset_of(other)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Trie):
            return NotImplemented
        return self.is_strict_superset_of(other)

    def __or__(self, other: object) -> Trie[E]:
        if not isinstance(other, Trie):
            return NotImplemented
        return self.union(other)

    def __ior__(self, other: object) -> Trie[E]:
        if not isinstance(other, Trie):
            return NotImplemented
        self.union_in_place(other)
        return self

    def __and__(self, other: object) -> Trie[E]:
        if not isinstance(other, Trie):
            return NotImplemented
        return self.intersect(other)

    def __xor__(self, other: object) -> Trie[E]:
        if not isinstance(other, Trie):
            return NotImplemented
        return self.exclusive_or(other)

    def __sub__(self, other: object) -> Trie[E]:
        if not isinstance(other, Trie):
            return NotImplemented
        return self.subtract(other)

    def __copy__(self) -> Trie[E]:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> Trie[E]:
        return self.copy()

    def __str__(self) -> str:
        return ", ".join("".join(str(element) for element in member) for member in self)

    def __repr__(self) -> str:
        return f"Trie({self.contents()!r})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find_node(self, sequence: Iterable[E]) -> Optional[Trie[E]]:
        """Walk the trie following *sequence*; return the landing node or None."""
        node: Optional[Trie[E]] = self
        for element in sequence:
            node = node.children.get(element)
            if node is None:
                return None
        return node

    def _nodes(self) -> Iterator[Trie[E]]:
        stack: list[Trie[E]] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(node.children.values())


def _as_trie(candidates: Iterable[Iterable[E]]) -> Trie[E]:
    if isinstance(candidates, Trie):
        return candidates
    return Trie(candidates)
