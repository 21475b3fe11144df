"""Chunk: an address together with the raw bytes stored for it."""

from dataclasses import dataclass

from .swarm import SPAN_SIZE, address_hex


@dataclass(frozen=True)
class Chunk:
    address: bytes
    data: bytes

    @property
    def span(self) -> bytes:
        return self.data[:SPAN_SIZE]

    def __str__(self) -> str:
        return address_hex(self.address)
