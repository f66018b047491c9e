"""
Shared pytest fixtures for chain tests.
"""
import json
from pathlib import Path
from typing import Dict, List

import pytest

from markov_service.services.markov import MarkovChain
from markov_service.services.registry import ChainRegistry


class ScriptedRandom:
    """Random source that replays fixed draws, for exact-path tests."""

    def __init__(self, values: List[int]):
        self.values = list(values)
        self.calls: List[int] = []

    def randrange(self, stop: int) -> int:
        self.calls.append(stop)
        value = self.values.pop(0)
        assert 0 <= value < stop, f"scripted draw {value} out of range for {stop}"
        return value


# Single path: "" -> a -> b -> ""
LINEAR_TABLE: Dict[str, Dict[str, int]] = {
    "": {"a": 1},
    "a": {"b": 1},
    "b": {"": 1},
}


@pytest.fixture
def sample_corpus() -> List[str]:
    """Sample text corpus for chain training."""
    return [
        "Hello friend how are you today",
        "The universe is full of amazing wonders",
        "I love exploring new planets and stars",
        "hello there friend",
        "The stars are beautiful tonight",
        "I feel happy when we talk together",
    ]


@pytest.fixture
def linear_table() -> Dict[str, Dict[str, int]]:
    return {a: dict(successors) for a, successors in LINEAR_TABLE.items()}


@pytest.fixture
def seeded_chain(sample_corpus) -> MarkovChain:
    """Chain trained on the sample corpus with a fixed random seed."""
    chain = MarkovChain(seed=1234)
    chain.train(sample_corpus)
    return chain


@pytest.fixture
def registry(tmp_path) -> ChainRegistry:
    """Registry backed by a temporary data dir."""
    return ChainRegistry(tmp_path / "chains", random_seed=7)


# Helper functions for tests


def write_json(data, tmp_path: Path, filename: str = "chain.json") -> Path:
    """Helper to write a JSON document to a temporary file."""
    file_path = tmp_path / filename
    file_path.write_text(json.dumps(data), encoding="utf-8")
    return file_path
