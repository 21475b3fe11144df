"""
Read-only access to the shard files holding chunk payloads.

Directory structure:
- shard_000 .. shard_NNN, one file per shard
- each file is a sequence of fixed-size slots of max_record_size bytes;
  a record occupies the first Location.length bytes of its slot
"""

import logging
import mmap
import os
from typing import List, Optional

from models.swarm import SOC_MAX_CHUNK_SIZE

from .exceptions import BlobReadError, BlobStoreError
from .location import Location

logger = logging.getLogger(__name__)

DEFAULT_SHARD_COUNT = 32


def shard_filename(shard: int) -> str:
    return f"shard_{shard:03d}"


class _Shard:
    """One memory-mapped shard file; a missing or empty file has no map."""

    def __init__(self, path: str):
        self.path = path
        self.file_handle = None
        self.mmap = None

    def open(self):
        if not os.path.exists(self.path):
            return
        self.file_handle = open(self.path, 'rb')
        if os.path.getsize(self.path) == 0:
            return
        try:
            self.mmap = mmap.mmap(self.file_handle.fileno(), 0, access=mmap.ACCESS_READ)
        except (OSError, ValueError) as e:
            self.file_handle.close()
            self.file_handle = None
            raise BlobStoreError(f"Failed to memory map {self.path}: {e}") from e

    def read(self, offset: int, length: int) -> bytes:
        if self.file_handle is None:
            raise BlobReadError(f"shard file {self.path} missing")
        size = len(self.mmap) if self.mmap is not None else 0
        if offset + length > size:
            raise BlobReadError(
                f"unexpected EOF: need {length} bytes at offset {offset}, "
                f"{os.path.basename(self.path)} has {size}"
            )
        return bytes(self.mmap[offset:offset + length])

    def close(self):
        if self.mmap is not None:
            self.mmap.close()
            self.mmap = None
        if self.file_handle is not None:
            self.file_handle.close()
            self.file_handle = None


class BlobStore:
    """
    Shard blob store, opened once for reading.

    Usage:
        with BlobStore(basedir) as store:
            data = store.read(location)
    """

    def __init__(self, basedir: str,
                 shard_count: int = DEFAULT_SHARD_COUNT,
                 max_record_size: int = SOC_MAX_CHUNK_SIZE):
        if shard_count < 1 or shard_count > 256:
            raise ValueError(f"shard_count must be within 1..256, got {shard_count}")
        self.basedir = basedir
        self.shard_count = shard_count
        self.max_record_size = max_record_size
        self._shards: Optional[List[_Shard]] = None

    def open(self):
        if not os.path.isdir(self.basedir):
            raise BlobStoreError(f"blob directory not found: {self.basedir}")
        shards = []
        try:
            for i in range(self.shard_count):
                shard = _Shard(os.path.join(self.basedir, shard_filename(i)))
                shard.open()
                shards.append(shard)
        except BlobStoreError:
            for shard in shards:
                shard.close()
            raise
        self._shards = shards
        logger.debug("opened %d shards in %s", self.shard_count, self.basedir)

    def read(self, location: Location) -> bytes:
        """Return exactly location.length bytes stored at location."""
        if self._shards is None:
            raise RuntimeError("Blob store not opened. Call open() or use 'with' statement.")
        if location.shard >= self.shard_count:
            raise BlobReadError(
                f"shard {location.shard} out of range (store has {self.shard_count})"
            )
        if location.length > self.max_record_size:
            raise BlobReadError(
                f"length {location.length} exceeds max record size {self.max_record_size}"
            )
        offset = location.slot * self.max_record_size
        return self._shards[location.shard].read(offset, location.length)

    def close(self):
        """Release every shard. Safe to call multiple times."""
        if self._shards is None:
            return
        for shard in self._shards:
            shard.close()
        self._shards = None
        logger.debug("closed blob store %s", self.basedir)

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
