"""
JSON persistence for transition tables.

The file holds exactly the table: {"token": {"successor": count}}.
The sentinel (empty string) is written and read like any other token.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Annotated, Dict, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError

from .errors import ChainLoadError
from .markov import MarkovChain
from .transitions import TransitionTable

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

Count = Annotated[int, Field(ge=0, strict=True)]
_TABLE_ADAPTER = TypeAdapter(Dict[str, Dict[str, Count]])


def parse_table(raw: Union[str, bytes], path: Optional[PathLike] = None) -> TransitionTable:
    """
    Validate a JSON document and build a table from it.

    Zero counts are accepted and pruned.

    Raises:
        ChainLoadError: invalid JSON or not a token -> {token -> int} object
    """
    try:
        data = _TABLE_ADAPTER.validate_json(raw)
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ())) or "<root>"
        raise ChainLoadError(f"Malformed chain at {where}: {first.get('msg')}", path) from e
    return TransitionTable.from_dict(data)


def load_table(path: PathLike) -> TransitionTable:
    """Read a table from a JSON file (whole file, no partial load)."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ChainLoadError(f"Cannot read chain file: {e.strerror or e}", path) from e

    table = parse_table(raw, path)
    logger.info(f"[Markov] Loaded {len(table)} tokens from {path}")
    return table


def save_table(table: TransitionTable, path: PathLike) -> Path:
    """
    Write a table as JSON, replacing any previous content.

    The document is written to a temporary file in the same directory and
    moved into place, so readers never see a half-written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(table.to_dict(), f, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"[Markov] Saved {len(table)} tokens to {path}")
    return path


def read_chain(path: PathLike, seed: Optional[int] = None) -> MarkovChain:
    """Load a chain file into a new chain with its own random generator."""
    return MarkovChain(load_table(path), seed=seed)


def write_chain(chain: MarkovChain, path: PathLike) -> Path:
    """Persist a chain's table; the random generator is not saved."""
    return save_table(chain.table, path)
