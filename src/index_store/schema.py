"""
Index schema registry.

Key layout of the store (one flat ordered keyspace):
- 0x00            JSON schema: {"fields": {name: {"type": t}},
                                "indexes": {"<id>": {"name": n}}}
- 0x01 + name     value of a scalar field
- <id> + key      one entry of the index registered under id (id >= 2)

The registry binds each codec to the id its schema name was given when the
store was created. It only reads; an index the schema does not know is an
error, never created.
"""
from __future__ import annotations

import json
import logging
import struct
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from models.chunk_record import ChunkRecord

from .codecs import IndexCodec, PRIMARY_INDEX, SECONDARY_INDEXES, create_codec
from .engine import OrderedEngine
from .exceptions import CodecError, IndexNotFoundError, SchemaError

logger = logging.getLogger(__name__)

SCHEMA_KEY = b'\x00'
FIELD_KEY_PREFIX = 1
INDEX_KEY_PREFIX_START = 2

SCHEMA_NAME_FIELD = "schema-name"
GC_SIZE_FIELD = "gc-size"
RESERVE_SIZE_FIELD = "reserve-size"


@dataclass
class StoreSchema:
    """Field and index declarations persisted under the schema key."""
    fields: Dict[str, str] = field(default_factory=dict)
    """Field name -> type name ("uint64", "string", ...)."""
    indexes: Dict[int, str] = field(default_factory=dict)
    """Key prefix byte -> index schema name."""

    @classmethod
    def load(cls, engine: OrderedEngine) -> "StoreSchema":
        raw = engine.get(SCHEMA_KEY)
        if raw is None:
            raise SchemaError("store has no schema")
        try:
            data = json.loads(raw)
            fields = {name: spec["type"] for name, spec in (data.get("fields") or {}).items()}
            indexes = {int(i): spec["name"] for i, spec in (data.get("indexes") or {}).items()}
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise SchemaError(f"malformed schema: {e}") from e
        return cls(fields=fields, indexes=indexes)

    def to_json(self) -> bytes:
        return json.dumps({
            "fields": {name: {"type": t} for name, t in self.fields.items()},
            "indexes": {str(i): {"name": n} for i, n in sorted(self.indexes.items())},
        }).encode()

    def index_prefix(self, name: str) -> int:
        for prefix, index_name in self.indexes.items():
            if index_name == name:
                return prefix
        raise IndexNotFoundError(f"index {name!r} not found in schema")


def field_key(name: str) -> bytes:
    return bytes([FIELD_KEY_PREFIX]) + name.encode()


class _Field:
    type_name = ""

    def __init__(self, engine: OrderedEngine, schema: StoreSchema, name: str):
        declared = schema.fields.get(name)
        if declared is not None and declared != self.type_name:
            raise SchemaError(
                f"field {name!r} is {declared}, expected {self.type_name}"
            )
        self.engine = engine
        self.name = name
        self.key = field_key(name)


class Uint64Field(_Field):
    """Scalar counter; reads 0 when never written."""
    type_name = "uint64"

    def get(self) -> int:
        value = self.engine.get(self.key)
        if value is None:
            return 0
        if len(value) != 8:
            raise CodecError(f"field {self.name!r}: expected 8 bytes, got {len(value)}")
        return struct.unpack('>Q', value)[0]


class StringField(_Field):
    type_name = "string"

    def get(self) -> str:
        value = self.engine.get(self.key)
        if value is None:
            return ""
        return value.decode("utf-8", errors="replace")


class Index:
    """One index bound to its key prefix and codec."""

    def __init__(self, engine: OrderedEngine, prefix: int, codec: IndexCodec):
        self.engine = engine
        self.prefix = bytes([prefix])
        self.codec = codec

    @property
    def label(self) -> str:
        return self.codec.label

    def iterate(self,
                on_error: Optional[Callable[[bytes, CodecError], None]] = None
                ) -> Iterator[ChunkRecord]:
        """
        Yield every entry as a decoded record in ascending key order.

        Each call starts over from the first entry. An entry that fails to
        decode is passed to on_error with its key (prefix stripped) and
        skipped; without on_error the CodecError propagates. EngineError
        always propagates and ends the pass.
        """
        for key, value in self.engine.iterate(self.prefix):
            try:
                key_record = self.codec.decode_key(key[1:])
                value_record = self.codec.decode_value(key_record, value)
            except CodecError as e:
                if on_error is None:
                    raise
                on_error(bytes(key[1:]), e)
                continue
            yield key_record.merge(value_record)

    def has(self, record: ChunkRecord) -> bool:
        return self.engine.has(self.prefix + self.codec.encode_key(record))

    def count(self) -> int:
        return self.engine.count(self.prefix)

    def __repr__(self) -> str:
        return f"Index({self.label!r}, prefix={self.prefix[0]})"


@dataclass
class IndexRegistry:
    """The eight index bindings and the scalar fields of one store."""
    indexes: Dict[str, Index]
    schema_name: StringField
    gc_size: Uint64Field
    reserve_size: Uint64Field

    @property
    def primary(self) -> Index:
        return self.indexes[PRIMARY_INDEX]

    def secondary(self) -> List[Index]:
        return [self.indexes[label] for label in SECONDARY_INDEXES]

    def index(self, label: str) -> Index:
        if label not in self.indexes:
            raise KeyError(f"Unknown index: {label}")
        return self.indexes[label]


def open_registry(engine: OrderedEngine,
                  base_address: Optional[bytes] = None) -> IndexRegistry:
    """
    Bind every index and field of the store.

    Raises:
        SchemaError: schema missing or a field declared with another type
        IndexNotFoundError: an index name is absent from the schema
    """
    schema = StoreSchema.load(engine)

    indexes: Dict[str, Index] = {}
    for label in (PRIMARY_INDEX,) + SECONDARY_INDEXES:
        if label in ("pullIdx", "postageChunksIdx"):
            codec = create_codec(label, base_address=base_address)
        else:
            codec = create_codec(label)
        prefix = schema.index_prefix(codec.schema_name)
        indexes[label] = Index(engine, prefix, codec)
        logger.debug("bound %s to prefix %d", label, prefix)

    return IndexRegistry(
        indexes=indexes,
        schema_name=StringField(engine, schema, SCHEMA_NAME_FIELD),
        gc_size=Uint64Field(engine, schema, GC_SIZE_FIELD),
        reserve_size=Uint64Field(engine, schema, RESERVE_SIZE_FIELD),
    )
