"""
OrderedEngine Interface

The contract the index layer needs from a sorted key-value database:
ordered prefix iteration, point lookup and counting. The store is only ever
read; no implementation exposes a write path.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Tuple

from .exceptions import EngineError

try:
    import plyvel
    PLYVEL_AVAILABLE = True
except ImportError:
    PLYVEL_AVAILABLE = False

logger = logging.getLogger(__name__)


class OrderedEngine(ABC):
    """
    Abstract base class for ordered key-value engines.

    Rules for implementers:
    1. iterate() yields (key, value) pairs in ascending byte order of key
    2. Every call to iterate() starts a fresh pass from the first key
    3. close() is safe to call multiple times
    """

    @abstractmethod
    def get(self, key: bytes) -> Optional[bytes]:
        """Return the value stored under key, or None."""
        pass

    def has(self, key: bytes) -> bool:
        return self.get(key) is not None

    @abstractmethod
    def iterate(self, prefix: bytes = b"") -> Iterator[Tuple[bytes, bytes]]:
        """Yield every (key, value) whose key starts with prefix, in key order."""
        pass

    def count(self, prefix: bytes = b"") -> int:
        total = 0
        for _ in self.iterate(prefix):
            total += 1
        return total

    @abstractmethod
    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class LevelDBEngine(OrderedEngine):
    """LevelDB engine backed by plyvel. Never creates or writes the database."""

    def __init__(self, path: str):
        if not PLYVEL_AVAILABLE:
            raise RuntimeError("plyvel not available. Install with: pip install 'chunkaudit[leveldb]'")
        if not os.path.isdir(path):
            raise EngineError(f"LevelDB directory not found: {path}")
        self.path = path
        self._db = None
        try:
            self._db = plyvel.DB(path, create_if_missing=False)
        except plyvel.Error as e:
            raise EngineError(f"Failed to open LevelDB at {path}: {e}") from e
        logger.debug("opened leveldb at %s", path)

    def get(self, key: bytes) -> Optional[bytes]:
        try:
            return self._db.get(key)
        except plyvel.Error as e:
            raise EngineError(f"get failed: {e}") from e

    def iterate(self, prefix: bytes = b"") -> Iterator[Tuple[bytes, bytes]]:
        try:
            with self._db.iterator(prefix=prefix or None) as it:
                for key, value in it:
                    yield key, value
        except plyvel.Error as e:
            raise EngineError(f"iteration failed: {e}") from e

    def count(self, prefix: bytes = b"") -> int:
        total = 0
        try:
            with self._db.iterator(prefix=prefix or None, include_value=False) as it:
                for _ in it:
                    total += 1
        except plyvel.Error as e:
            raise EngineError(f"count failed: {e}") from e
        return total

    def close(self):
        if self._db is not None and not self._db.closed:
            self._db.close()
            logger.debug("closed leveldb at %s", self.path)
