"""
Markov chain text generator (CPU-only).
First-order, integer counts, explicit start/end sentinel.
Training: from token lists or a text corpus (list[str]); persistence: JSON.
"""
from __future__ import annotations

import logging
import random
import string
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from .sampling import weighted_choice
from .transitions import SENTINEL, TransitionTable

logger = logging.getLogger(__name__)

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


@dataclass(frozen=True)
class Success:
    """A generated sequence; the sentinel is never included."""
    tokens: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class NoSuchSeed:
    """The requested seed is not a token of the chain."""
    seed: str = ""


GenerateResult = Union[Success, NoSuchSeed]


class MarkovChain:
    """
    Weighted first-order Markov chain over tokens.

    Every added sequence is modelled as running from the sentinel to the
    sentinel, so the sentinel's successors are the sequence starters and
    pairs ``(token, SENTINEL)`` count sequence endings.

    Usage:
        chain = MarkovChain(seed=42)
        chain.add(["hello", "world"])
        chain.generate()  # ['hello', 'world']
    """

    def __init__(
        self,
        table: Optional[TransitionTable] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize chain.

        Args:
            table: Pre-populated table (e.g. loaded from disk); empty if None
            seed: Seed for this chain's own random generator
            rng: Generator to use instead of creating one (takes precedence)
        """
        self.table = table if table is not None else TransitionTable()
        self.random = rng if rng is not None else random.Random(seed)

    # --- training ---
    def add(self, tokens: List[str]) -> None:
        """Add one sequence of tokens."""
        for a, b in _pairs(tokens):
            self.table.increment(a, b)

    def remove(self, tokens: List[str]) -> None:
        """Remove one previously added sequence of tokens."""
        for a, b in _pairs(tokens):
            self.table.decrement(a, b)

    def add_chain(self, other: "MarkovChain") -> None:
        self.table.merge(other.table)

    def remove_chain(self, other: "MarkovChain") -> None:
        self.table.subtract(other.table)

    def train(self, corpus: Iterable[str], lowercase: bool = False) -> "MarkovChain":
        """
        Add every line of a text corpus.

        Args:
            corpus: Lines of text, one sequence each
            lowercase: Lowercase tokens before adding
        """
        added = 0
        for line in corpus:
            tokens = tokenize(line, lowercase=lowercase)
            if tokens:
                self.add(tokens)
                added += 1
        logger.debug(f"[Markov] Trained on {added} sequences, {len(self.table)} tokens")
        return self

    def forget(self, corpus: Iterable[str], lowercase: bool = False) -> "MarkovChain":
        """Remove every line of a text corpus."""
        for line in corpus:
            self.remove(tokenize(line, lowercase=lowercase))
        return self

    def clear(self) -> None:
        self.table.clear()

    # --- generation ---
    def next_token(self, current: str) -> Optional[str]:
        """Weighted draw of a successor of ``current``, or None."""
        successors = self.table.successors(current)
        if successors is None:
            return None
        return weighted_choice(successors, self.random)

    def generate(self, max_tokens: Optional[int] = None) -> List[str]:
        """Generate a sequence starting from a random sequence starter."""
        seed = self.next_token(SENTINEL)
        if seed is None:
            return []
        result = self.generate_with_seed(seed, max_tokens=max_tokens)
        if isinstance(result, Success):
            return result.tokens
        return []

    def generate_with_seed(self, seed: str, max_tokens: Optional[int] = None) -> GenerateResult:
        """
        Walk the chain from ``seed`` until the end sentinel.

        Args:
            seed: Exact (case-sensitive) starting token
            max_tokens: Optional cap on the walk length

        Returns:
            Success with the tokens (seed first), or NoSuchSeed
        """
        if seed not in self.table:
            return NoSuchSeed(seed)

        tokens: List[str] = []
        word: Optional[str] = seed
        while word is not None and word != SENTINEL:
            if max_tokens is not None and len(tokens) >= max_tokens:
                break
            tokens.append(word)
            word = self.next_token(word)
        return Success(tokens)

    def generate_with_case_insensitive_seed(
        self, seed: str, max_tokens: Optional[int] = None
    ) -> GenerateResult:
        """
        Walk from a stored token matching ``seed`` ignoring ASCII case.

        When several stored tokens match (e.g. "Hello" and "hello"), one is
        picked with probability proportional to its total outgoing count.
        """
        folded = ascii_lower(seed)
        candidates: Dict[str, int] = {
            key: self.table.total_weight(key)
            for key in self.table.keys()
            if ascii_lower(key) == folded
        }
        chosen = weighted_choice(candidates, self.random)
        if chosen is None:
            return NoSuchSeed(seed)
        return self.generate_with_seed(chosen, max_tokens=max_tokens)

    # --- persistence ---
    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return self.table.to_dict()

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, int]], seed: Optional[int] = None) -> "MarkovChain":
        return cls(TransitionTable.from_dict(data), seed=seed)

    def __len__(self) -> int:
        return len(self.table)


# --- helpers ---
def _pairs(tokens: List[str]) -> List[tuple]:
    """Sentinel-padded consecutive pairs of a sequence; [] for no tokens."""
    if not tokens:
        return []
    padded = [SENTINEL] + list(tokens) + [SENTINEL]
    return list(zip(padded, padded[1:]))


def tokenize(text: str, lowercase: bool = False) -> List[str]:
    tokens = text.strip().split()
    if lowercase:
        tokens = [t.lower() for t in tokens]
    return tokens


def ascii_lower(text: str) -> str:
    """Lowercase A-Z only; other characters compare as-is."""
    return text.translate(_ASCII_LOWER)


def detokenize(tokens: List[str]) -> str:
    return " ".join(tokens)


def train_from_corpus(lines: List[str], lowercase: bool = False, seed: Optional[int] = None) -> MarkovChain:
    chain = MarkovChain(seed=seed)
    chain.train(lines, lowercase=lowercase)
    return chain
