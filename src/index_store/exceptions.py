# Custom exceptions

"""
Custom exceptions for the ordered index store.
"""

class IndexStoreError(Exception):
    """Base exception for all index store errors."""
    pass

class EngineError(IndexStoreError):
    """Raised when the underlying key-value engine fails to open or read."""
    pass

class SchemaError(IndexStoreError):
    """Raised when the persisted schema is missing, malformed or mismatched."""
    pass

class IndexNotFoundError(SchemaError):
    """Raised when a named index is not declared in the persisted schema."""
    pass

class CodecError(IndexStoreError):
    """Raised when an index key or value cannot be encoded or decoded."""
    pass
