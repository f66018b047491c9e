"""
In-memory registry of named Markov chains.

Each chain has its own lock; the HTTP layer holds it around every mutation
and generation, since chains are not safe for concurrent use on their own.
Chains are saved to / loaded from ``<data_dir>/<name>.json``.
"""
from __future__ import annotations

import logging
import re
import threading
from contextlib import ExitStack
from pathlib import Path
from typing import Dict, List, Optional, Union

from .errors import ChainLoadError, InvalidChainName
from .markov import MarkovChain
from .persistence import read_chain, write_chain

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"[A-Za-z0-9_.-]+")


def validate_name(name: str) -> str:
    if not _NAME_RE.fullmatch(name) or name in (".", ".."):
        raise InvalidChainName(f"Invalid chain name: {name!r}")
    return name


class ChainRegistry:
    """
    Named chains plus their locks and backing files.

    Usage:
        registry = ChainRegistry("./data/chains")
        with registry.lock("default"):
            registry.get_or_create("default").train(["hello world"])
        registry.save("default")
    """

    def __init__(self, data_dir: Union[str, Path], random_seed: Optional[int] = None):
        """
        Args:
            data_dir: Directory holding ``<name>.json`` chain files
            random_seed: Seed for every chain created or loaded here
        """
        self.data_dir = Path(data_dir)
        self.random_seed = random_seed
        self._chains: Dict[str, MarkovChain] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{validate_name(name)}.json"

    def lock(self, name: str) -> threading.RLock:
        validate_name(name)
        with self._guard:
            return self._locks.setdefault(name, threading.RLock())

    def lock_many(self, *names: str) -> ExitStack:
        """
        Hold the locks of several chains, acquired in sorted name order.
        """
        stack = ExitStack()
        try:
            for name in sorted(set(names)):
                stack.enter_context(self.lock(name))
        except BaseException:
            stack.close()
            raise
        return stack

    def get(self, name: str) -> Optional[MarkovChain]:
        return self._chains.get(name)

    def get_or_create(self, name: str) -> MarkovChain:
        validate_name(name)
        with self._guard:
            chain = self._chains.get(name)
            if chain is None:
                chain = MarkovChain(seed=self.random_seed)
                self._chains[name] = chain
                logger.info(f"[Registry] Created chain '{name}'")
            return chain

    def names(self) -> List[str]:
        return sorted(self._chains)

    def drop(self, name: str, delete_file: bool = False) -> bool:
        """
        Forget a chain and its lock.

        Args:
            name: Chain name
            delete_file: Also remove ``<name>.json`` so autoload cannot
                bring the chain back
        """
        with self._guard:
            removed = self._chains.pop(name, None) is not None
            self._locks.pop(name, None)
        if delete_file:
            path = self.path_for(name)
            if path.exists():
                path.unlink()
                removed = True
        if removed:
            logger.info(f"[Registry] Dropped chain '{name}'")
        return removed

    def save(self, name: str) -> Path:
        chain = self._chains.get(name)
        if chain is None:
            raise KeyError(name)
        return write_chain(chain, self.path_for(name))

    def load(self, name: str) -> MarkovChain:
        """
        (Re)load a chain from its file, replacing the in-memory one.

        Raises:
            ChainLoadError: file missing or malformed; the registry is unchanged
        """
        chain = read_chain(self.path_for(name), seed=self.random_seed)
        with self._guard:
            self._chains[name] = chain
        return chain

    def load_all(self) -> List[str]:
        """Load every chain file in the data dir; bad files are skipped."""
        if not self.data_dir.is_dir():
            return []

        loaded = []
        for path in sorted(self.data_dir.glob("*.json")):
            name = path.stem
            try:
                self.load(name)
            except (ChainLoadError, InvalidChainName) as e:
                logger.warning(f"[Registry] Skipping {path.name}: {e}")
                continue
            loaded.append(name)
        logger.info(f"[Registry] Loaded {len(loaded)} chains from {self.data_dir}")
        return loaded


# Singleton instance
_REGISTRY: Optional[ChainRegistry] = None


def get_registry() -> ChainRegistry:
    """Get or create the process-wide registry from settings."""
    global _REGISTRY
    if _REGISTRY is None:
        from markov_service.config import settings

        _REGISTRY = ChainRegistry(settings.CHAIN_DATA_DIR, random_seed=settings.RANDOM_SEED)
    return _REGISTRY


def set_registry(registry: Optional[ChainRegistry]) -> None:
    """Replace the process-wide registry (None resets it)."""
    global _REGISTRY
    _REGISTRY = registry
