"""
Chain services: sampling, transition table, chain engine, persistence and
the named-chain registry.
"""

from .errors import ChainLoadError, InvalidChainName, MarkovServiceError
from .markov import GenerateResult, MarkovChain, NoSuchSeed, Success, train_from_corpus
from .persistence import read_chain, write_chain
from .registry import ChainRegistry, get_registry
from .sampling import weighted_choice
from .transitions import SENTINEL, TransitionTable

__all__ = [
    "ChainLoadError",
    "InvalidChainName",
    "MarkovServiceError",
    "GenerateResult",
    "MarkovChain",
    "NoSuchSeed",
    "Success",
    "train_from_corpus",
    "read_chain",
    "write_chain",
    "ChainRegistry",
    "get_registry",
    "weighted_choice",
    "SENTINEL",
    "TransitionTable",
]
