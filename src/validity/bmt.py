"""
Binary Merkle tree hash of a chunk.

The payload is zero-padded to CHUNK_SIZE and split into 32-byte segments;
pairs of segments are hashed with keccak256 level by level up to one root,
and the chunk address is keccak256(span || root).
"""

from Crypto.Hash import keccak

from models.swarm import CHUNK_SIZE, SECTION_SIZE


def keccak256(*parts: bytes) -> bytes:
    h = keccak.new(digest_bits=256)
    for part in parts:
        h.update(part)
    return h.digest()


def bmt_root(payload: bytes) -> bytes:
    data = bytes(payload[:CHUNK_SIZE]).ljust(CHUNK_SIZE, b'\x00')
    level = [data[i:i + SECTION_SIZE] for i in range(0, CHUNK_SIZE, SECTION_SIZE)]
    while len(level) > 1:
        level = [keccak256(level[i], level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]


def bmt_hash(span: bytes, payload: bytes) -> bytes:
    return keccak256(span, bmt_root(payload))
