# Custom exceptions

"""
Custom exceptions for the shard blob store.
"""

class BlobStoreError(Exception):
    """Base exception for all blob store errors."""
    pass

class LocationError(BlobStoreError):
    """Raised when a binary location cannot be decoded."""
    pass

class BlobReadError(BlobStoreError):
    """Raised when the bytes behind a location cannot be read."""
    pass
