"""
Ordered index store: engine access, per-index codecs and schema binding.
"""

from .engine import OrderedEngine, LevelDBEngine
from .codecs import (
    IndexCodec,
    PRIMARY_INDEX,
    SECONDARY_INDEXES,
    STAMP_SIZE,
    create_codec,
    list_codecs,
    register_codec,
)
from .schema import Index, IndexRegistry, StoreSchema, open_registry
from .exceptions import (
    IndexStoreError,
    EngineError,
    SchemaError,
    IndexNotFoundError,
    CodecError,
)

__all__ = [
    'OrderedEngine',
    'LevelDBEngine',
    'IndexCodec',
    'PRIMARY_INDEX',
    'SECONDARY_INDEXES',
    'STAMP_SIZE',
    'create_codec',
    'list_codecs',
    'register_codec',
    'Index',
    'IndexRegistry',
    'StoreSchema',
    'open_registry',
    'IndexStoreError',
    'EngineError',
    'SchemaError',
    'IndexNotFoundError',
    'CodecError',
]
