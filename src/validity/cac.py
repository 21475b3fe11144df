"""Content-addressed chunks: the address is the BMT hash of the data."""

import struct

from models.chunk import Chunk
from models.swarm import CHUNK_SIZE, CHUNK_WITH_SPAN_SIZE, SPAN_SIZE

from .bmt import bmt_hash


def valid_data_length(data: bytes) -> bool:
    return SPAN_SIZE <= len(data) <= CHUNK_WITH_SPAN_SIZE


def address_of(data: bytes) -> bytes:
    """BMT address of span-prefixed chunk data."""
    return bmt_hash(data[:SPAN_SIZE], data[SPAN_SIZE:])


def valid(chunk: Chunk) -> bool:
    if not valid_data_length(chunk.data):
        return False
    return address_of(chunk.data) == chunk.address


def new_chunk(payload: bytes) -> Chunk:
    """Build the content-addressed chunk carrying payload."""
    if len(payload) > CHUNK_SIZE:
        raise ValueError(f"payload of {len(payload)} bytes exceeds {CHUNK_SIZE}")
    data = struct.pack('<Q', len(payload)) + payload
    return Chunk(address=address_of(data), data=data)
