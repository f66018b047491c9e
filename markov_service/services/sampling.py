"""
Weighted random selection over integer count maps.

Shared by the chain walk (successor counts) and case-insensitive seed
resolution (per-key outgoing totals).
"""
from __future__ import annotations

from typing import Hashable, Mapping, Optional, Protocol, TypeVar

K = TypeVar("K", bound=Hashable)


class RandomSource(Protocol):
    """Anything with ``randrange``; ``random.Random`` in practice."""

    def randrange(self, stop: int) -> int: ...


def weighted_choice(weights: Mapping[K, int], rng: RandomSource) -> Optional[K]:
    """
    Draw one key with probability proportional to its weight.

    Args:
        weights: Mapping of item -> integer weight
        rng: Random source used for the single draw

    Returns:
        The selected key, or None if there is nothing with positive weight
    """
    # one pass over the mapping so total and scan see the same entries
    items = [(key, weight) for key, weight in weights.items() if weight > 0]
    if not items:
        return None

    total = sum(weight for _, weight in items)
    x = rng.randrange(total)

    running = 0
    for key, weight in items:
        running += weight
        if x < running:
            return key

    # unreachable while x < total
    return items[-1][0]
