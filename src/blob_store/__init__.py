"""
Shard blob store holding raw chunk payloads.
"""

from .location import Location, LOCATION_SIZE
from .store import BlobStore, DEFAULT_SHARD_COUNT, shard_filename
from .exceptions import BlobStoreError, LocationError, BlobReadError

__all__ = [
    'Location',
    'LOCATION_SIZE',
    'BlobStore',
    'DEFAULT_SHARD_COUNT',
    'shard_filename',
    'BlobStoreError',
    'LocationError',
    'BlobReadError',
]
