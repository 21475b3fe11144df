"""
Size constants and address helpers for the chunk store.

A chunk is at most CHUNK_SIZE payload bytes prefixed by an 8-byte span.
Single-owner chunks additionally carry a 32-byte identifier and a 65-byte
signature in front of the wrapped content-addressed chunk.
"""

HASH_SIZE = 32
"""Length of a chunk address, batch id and SOC identifier."""

SPAN_SIZE = 8
"""Little-endian uint64 payload length prefixed to every chunk."""

SECTION_SIZE = 32
BRANCHES = 128
CHUNK_SIZE = SECTION_SIZE * BRANCHES
"""4096: maximum payload carried by one chunk."""

CHUNK_WITH_SPAN_SIZE = CHUNK_SIZE + SPAN_SIZE

SOC_SIGNATURE_SIZE = 65
SOC_MIN_CHUNK_SIZE = HASH_SIZE + SOC_SIGNATURE_SIZE + SPAN_SIZE
SOC_MAX_CHUNK_SIZE = SOC_MIN_CHUNK_SIZE + CHUNK_SIZE
"""4201: the largest record the blob store ever has to hold."""

MAX_PO = 31
"""Highest proximity order (bin) of the address space."""


def proximity(one: bytes, other: bytes) -> int:
    """
    Proximity order of two addresses: the number of leading bits they share,
    capped at MAX_PO.
    """
    size = MAX_PO // 8 + 1
    if len(one) < size or len(other) < size:
        size = min(len(one), len(other))
    for i in range(size):
        oxo = one[i] ^ other[i]
        for j in range(8):
            if (oxo >> (7 - j)) & 0x01:
                return i * 8 + j
    return MAX_PO


def address_hex(address: bytes) -> str:
    """Lowercase hex form used in every report line."""
    return bytes(address).hex()
