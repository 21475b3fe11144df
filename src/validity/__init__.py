"""
Chunk validity schemes: content-addressed (cac) and single-owner (soc).
"""

from . import cac, soc
from .bmt import bmt_hash, keccak256


def chunk_valid(chunk) -> bool:
    """True if chunk verifies under either scheme, content-addressed first."""
    return cac.valid(chunk) or soc.valid(chunk)


__all__ = [
    'cac',
    'soc',
    'bmt_hash',
    'keccak256',
    'chunk_valid',
]
