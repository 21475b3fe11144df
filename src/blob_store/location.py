"""
Blob store location: which shard, which slot, how many bytes.

Binary form (7 bytes, little-endian):
- Shard  (1 byte)
- Slot   (4 bytes)
- Length (2 bytes)
"""

import struct
from dataclasses import dataclass

from .exceptions import LocationError

LOCATION_SIZE = 7

_LOCATION = struct.Struct('<BIH')


@dataclass(frozen=True)
class Location:
    shard: int
    slot: int
    length: int

    def to_bytes(self) -> bytes:
        return _LOCATION.pack(self.shard, self.slot, self.length)

    @classmethod
    def from_bytes(cls, buf: bytes) -> "Location":
        if len(buf) != LOCATION_SIZE:
            raise LocationError(
                f"invalid location: expected {LOCATION_SIZE} bytes, got {len(buf)}"
            )
        shard, slot, length = _LOCATION.unpack(buf)
        return cls(shard=shard, slot=slot, length=length)

    def __str__(self) -> str:
        return f"shard: {self.shard}, slot: {self.slot}, length: {self.length}"
