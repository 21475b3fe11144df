"""
Chunk record model shared by every index of the store.

Each index persists a different subset of these fields. A codec decodes its
key and value into two sparse records which are merged into one; fields an
index does not own keep their zero value. Nothing is inferred.
"""

from dataclasses import dataclass, fields, replace

from .swarm import address_hex


@dataclass(frozen=True)
class ChunkRecord:
    """
    Sparse view of one chunk as seen by a single index.

    Field ownership per index:
    - retrievalData: address | bin_id, store_timestamp, batch_id, index,
      timestamp, sig, location
    - retrievalAccess: address | access_timestamp
    - pull: bin_id | address, batch_id
    - push: store_timestamp, address | tag
    - gc: access_timestamp, bin_id, address | batch_id, index
    - pin: address | pin_counter
    - postageChunks: batch_id, address | -
    - postageIndex: batch_id, index | address, timestamp
    """

    address: bytes = b""
    """32-byte content identifier; the primary key across the store."""

    bin_id: int = 0
    """Per-bin insertion sequence number (uint64)."""

    store_timestamp: int = 0
    """Unix time of insertion (int64)."""

    access_timestamp: int = 0
    """Unix time of the last read (int64)."""

    # ========== POSTAGE STAMP ==========
    batch_id: bytes = b""
    index: bytes = b""
    """Batch-relative stamp index, 8 bytes."""
    timestamp: bytes = b""
    """Stamp timestamp, 8 opaque bytes."""
    sig: bytes = b""

    # ========== STORAGE REFERENCE ==========
    location: bytes = b""
    """Binary blob-store location, see blob_store.location."""

    tag: int = 0
    """Upload tag (uint32); 0 when the push entry carries none."""

    pin_counter: int = 0

    def merge(self, other: "ChunkRecord") -> "ChunkRecord":
        """Return a copy with every zero-valued field taken from other."""
        updates = {}
        for f in fields(self):
            if not getattr(self, f.name) and getattr(other, f.name):
                updates[f.name] = getattr(other, f.name)
        if not updates:
            return self
        return replace(self, **updates)

    @property
    def address_hex(self) -> str:
        return address_hex(self.address)
