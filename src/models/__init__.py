"""
Chunk store data models.
"""

from .chunk import Chunk
from .chunk_record import ChunkRecord
from .swarm import proximity, address_hex

__all__ = [
    'Chunk',
    'ChunkRecord',
    'proximity',
    'address_hex',
]
