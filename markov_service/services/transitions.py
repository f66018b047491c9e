"""
Transition table for the word-level Markov chain.

Maps each token to the tokens that followed it and how often. Invariants
kept by every mutation:
- counts are always >= 1
- a token with no successors is never a key
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

# Marks the start of a sequence (as a key) and its end (as a successor).
SENTINEL = ""

TableDict = Dict[str, Dict[str, int]]


class TransitionTable:
    """
    Token -> {successor -> count} with pruning on removal.

    Supports:
    - Incrementing and decrementing single pairs
    - Merging / subtracting whole tables
    - Read-only views for sampling
    """

    def __init__(self):
        self._data: TableDict = {}

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, int]]) -> "TransitionTable":
        """
        Build a table from plain nested mappings.

        Non-positive counts are dropped, so an inner mapping left empty
        never becomes a key.
        """
        table = cls()
        for a, successors in data.items():
            for b, count in successors.items():
                table.increment(a, b, count)
        return table

    # --- mutation ---
    def increment(self, a: str, b: str, amount: int = 1) -> int:
        """
        Add ``amount`` to the count of ``a -> b``.

        Returns:
            The resulting count, or 0 if ``amount`` was not positive
        """
        if amount < 1:
            return 0
        successors = self._data.setdefault(a, {})
        successors[b] = successors.get(b, 0) + amount
        return successors[b]

    def decrement(self, a: str, b: str, amount: int = 1) -> Optional[int]:
        """
        Subtract ``amount`` from the count of ``a -> b``, pruning at zero.

        Returns:
            The new count (0 if the pair was removed), or None if the pair
            is not in the table or ``amount`` was not positive
        """
        if amount < 1:
            return None
        successors = self._data.get(a)
        if successors is None or b not in successors:
            return None

        remaining = successors[b] - amount
        if remaining > 0:
            successors[b] = remaining
            return remaining

        del successors[b]
        if not successors:
            del self._data[a]
        return 0

    def merge(self, other: "TransitionTable") -> None:
        """Add every count of ``other`` into this table."""
        for a, b, count in other.triples():
            self.increment(a, b, count)

    def subtract(self, other: "TransitionTable") -> None:
        """Remove every count of ``other`` from this table."""
        for a, b, count in other.triples():
            self.decrement(a, b, count)

    def clear(self) -> None:
        self._data.clear()

    # --- reads ---
    def triples(self) -> List[Tuple[str, str, int]]:
        """
        Snapshot of all (token, successor, count) entries.

        A list rather than a generator: merge/subtract may be handed this
        same table and must not iterate while mutating it.
        """
        return [
            (a, b, count)
            for a, successors in list(self._data.items())
            for b, count in list(successors.items())
        ]

    def successors(self, a: str) -> Optional[Mapping[str, int]]:
        """Read-only view of the successors of ``a``, or None."""
        successors = self._data.get(a)
        if successors is None:
            return None
        return MappingProxyType(successors)

    def count(self, a: str, b: str) -> int:
        return self._data.get(a, {}).get(b, 0)

    def total_weight(self, a: str) -> int:
        """Sum of the outgoing counts of ``a`` (0 if absent)."""
        return sum(self._data.get(a, {}).values())

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def to_dict(self) -> TableDict:
        """Deep copy as plain dicts, suitable for JSON."""
        return {a: dict(successors) for a, successors in self._data.items()}

    def __contains__(self, a: object) -> bool:
        return a in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransitionTable):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"TransitionTable({self._data!r})"
