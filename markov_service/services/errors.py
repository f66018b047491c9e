"""
Exceptions raised by the chain services.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class MarkovServiceError(Exception):
    """Base class for chain service errors."""


class ChainLoadError(MarkovServiceError):
    """A persisted chain could not be read or has the wrong shape."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = str(path) if path is not None else None
        super().__init__(f"{message} ({self.path})" if self.path else message)


class InvalidChainName(MarkovServiceError):
    """A chain name that cannot be used as a file name."""
