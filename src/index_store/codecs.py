"""
Binary codecs for the store's eight indexes.

Every index maps a ChunkRecord to an ordered key and a value. Codecs are
stateless apart from the optional base address used to compute proximity
order bytes, which the decoders never read back.

All integers are big-endian: 8 bytes for timestamps, bin ids and counters,
4 bytes for tags, 1 byte for proximity order. Trailing variable fields are
sliced off after a fixed header whose size is a class constant.
"""
from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from .exceptions import CodecError

from models.chunk_record import ChunkRecord
from models.swarm import HASH_SIZE, proximity

# Postage stamp layout: BatchID(32) | Index(8) | Timestamp(8) | Sig(65)
STAMP_INDEX_SIZE = 8
STAMP_TIMESTAMP_SIZE = 8
STAMP_SIG_SIZE = 65
STAMP_SIZE = HASH_SIZE + STAMP_INDEX_SIZE + STAMP_TIMESTAMP_SIZE + STAMP_SIG_SIZE

_U64 = struct.Struct('>Q')
_I64 = struct.Struct('>q')
_U32 = struct.Struct('>I')


def _fixed(field: bytes, size: int) -> bytes:
    """Copy field into a zero-padded slot of exactly size bytes."""
    return bytes(field[:size]).ljust(size, b'\x00')


def encode_stamp(record: ChunkRecord) -> bytes:
    return (_fixed(record.batch_id, HASH_SIZE)
            + _fixed(record.index, STAMP_INDEX_SIZE)
            + _fixed(record.timestamp, STAMP_TIMESTAMP_SIZE)
            + _fixed(record.sig, STAMP_SIG_SIZE))


def decode_stamp(buf: bytes) -> ChunkRecord:
    if len(buf) != STAMP_SIZE:
        raise CodecError(f"invalid stamp: expected {STAMP_SIZE} bytes, got {len(buf)}")
    return ChunkRecord(
        batch_id=bytes(buf[:32]),
        index=bytes(buf[32:40]),
        timestamp=bytes(buf[40:48]),
        sig=bytes(buf[48:]),
    )


class IndexCodec(ABC):
    """
    Encode/decode contract of one index.

    decode_key(encode_key(r)) and decode_value(k, encode_value(r)) must
    reconstruct exactly the fields the index owns.
    """
    label = "base"
    schema_name = ""
    key_size: Optional[int] = None
    """Minimum key length; decode_key rejects anything shorter."""
    value_size = 0
    """Fixed value header length; decode_value rejects anything shorter."""

    @abstractmethod
    def encode_key(self, record: ChunkRecord) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def decode_key(self, key: bytes) -> ChunkRecord:
        raise NotImplementedError

    @abstractmethod
    def encode_value(self, record: ChunkRecord) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def decode_value(self, key_record: ChunkRecord, value: bytes) -> ChunkRecord:
        raise NotImplementedError

    def _check_key(self, key: bytes) -> None:
        if self.key_size is not None and len(key) < self.key_size:
            raise CodecError(
                f"{self.label}: key too short: expected {self.key_size} bytes, got {len(key)}"
            )

    def _check_value(self, value: bytes) -> None:
        if len(value) < self.value_size:
            raise CodecError(
                f"{self.label}: value too short: expected {self.value_size} bytes, got {len(value)}"
            )

    def _check_address(self, record: ChunkRecord) -> None:
        if len(record.address) != HASH_SIZE:
            raise CodecError(
                f"{self.label}: address must be {HASH_SIZE} bytes, got {len(record.address)}"
            )


_REGISTRY: Dict[str, Type[IndexCodec]] = {}


def register_codec(cls: Type[IndexCodec]) -> Type[IndexCodec]:
    _REGISTRY[cls.label] = cls
    return cls


def list_codecs() -> List[str]:
    return list(_REGISTRY.keys())


def create_codec(label: str, **kwargs) -> IndexCodec:
    if label not in _REGISTRY:
        raise KeyError(f"Unknown index: {label}")
    return _REGISTRY[label](**kwargs)


class _AddressKeyCodec(IndexCodec):
    """Indexes keyed by the bare chunk address."""
    key_size = HASH_SIZE

    def encode_key(self, record: ChunkRecord) -> bytes:
        self._check_address(record)
        return bytes(record.address)

    def decode_key(self, key: bytes) -> ChunkRecord:
        self._check_key(key)
        return ChunkRecord(address=bytes(key))


class _ProximityCodec(IndexCodec):
    """Indexes whose key embeds a proximity order byte."""

    def __init__(self, base_address: Optional[bytes] = None):
        self.base_address = base_address

    def _po(self, record: ChunkRecord) -> int:
        if not self.base_address:
            # the overlay address is not part of the store; leave the bin unset
            return 0
        return proximity(self.base_address, record.address)


@register_codec
class RetrievalDataCodec(_AddressKeyCodec):
    """Address -> BinID | StoreTimestamp | Stamp | Location (primary index)."""
    label = "retrievalDataIndex"
    schema_name = "Address->StoreTimestamp|BinID|BatchID|BatchIndex|Sig|Location"
    value_size = 16 + STAMP_SIZE

    def encode_value(self, record: ChunkRecord) -> bytes:
        header = _U64.pack(record.bin_id) + _I64.pack(record.store_timestamp)
        return header + encode_stamp(record) + bytes(record.location)

    def decode_value(self, key_record: ChunkRecord, value: bytes) -> ChunkRecord:
        self._check_value(value)
        bin_id, = _U64.unpack_from(value, 0)
        store_timestamp, = _I64.unpack_from(value, 8)
        stamp = decode_stamp(value[16:self.value_size])
        return ChunkRecord(
            bin_id=bin_id,
            store_timestamp=store_timestamp,
            batch_id=stamp.batch_id,
            index=stamp.index,
            timestamp=stamp.timestamp,
            sig=stamp.sig,
            location=bytes(value[self.value_size:]),
        )


@register_codec
class RetrievalAccessCodec(_AddressKeyCodec):
    """Address -> AccessTimestamp."""
    label = "retrievalAccessIdx"
    schema_name = "Address->AccessTimestamp"
    value_size = 8

    def encode_value(self, record: ChunkRecord) -> bytes:
        return _I64.pack(record.access_timestamp)

    def decode_value(self, key_record: ChunkRecord, value: bytes) -> ChunkRecord:
        self._check_value(value)
        access_timestamp, = _I64.unpack_from(value, 0)
        return ChunkRecord(access_timestamp=access_timestamp)


@register_codec
class PullCodec(_ProximityCodec):
    """PO | BinID -> Address | BatchID, per-bin sync order."""
    label = "pullIdx"
    schema_name = "PO|BinID->Hash"
    key_size = 9
    value_size = 2 * HASH_SIZE

    def encode_key(self, record: ChunkRecord) -> bytes:
        return bytes([self._po(record)]) + _U64.pack(record.bin_id)

    def decode_key(self, key: bytes) -> ChunkRecord:
        self._check_key(key)
        bin_id, = _U64.unpack_from(key, 1)
        return ChunkRecord(bin_id=bin_id)

    def encode_value(self, record: ChunkRecord) -> bytes:
        return _fixed(record.address, HASH_SIZE) + _fixed(record.batch_id, HASH_SIZE)

    def decode_value(self, key_record: ChunkRecord, value: bytes) -> ChunkRecord:
        self._check_value(value)
        return ChunkRecord(address=bytes(value[:32]), batch_id=bytes(value[32:64]))


@register_codec
class PushCodec(IndexCodec):
    """StoreTimestamp | Address -> Tag, chunks not yet pushed to the network."""
    label = "pushIdx"
    schema_name = "StoreTimestamp|Hash->Tags"
    key_size = 8 + HASH_SIZE

    def encode_key(self, record: ChunkRecord) -> bytes:
        self._check_address(record)
        return _I64.pack(record.store_timestamp) + bytes(record.address)

    def decode_key(self, key: bytes) -> ChunkRecord:
        self._check_key(key)
        store_timestamp, = _I64.unpack_from(key, 0)
        return ChunkRecord(address=bytes(key[8:]), store_timestamp=store_timestamp)

    def encode_value(self, record: ChunkRecord) -> bytes:
        return _U32.pack(record.tag)

    def decode_value(self, key_record: ChunkRecord, value: bytes) -> ChunkRecord:
        # only values carrying a tag are decoded
        if len(value) == _U32.size:
            tag, = _U32.unpack(value)
            return ChunkRecord(tag=tag)
        return ChunkRecord()


@register_codec
class GcCodec(IndexCodec):
    """AccessTimestamp | BinID | Address -> BatchID | Index, oldest access first."""
    label = "gcIdx"
    schema_name = "AccessTimestamp|BinID|Hash->BatchID|BatchIndex"
    key_size = 16
    value_size = HASH_SIZE + STAMP_INDEX_SIZE

    def encode_key(self, record: ChunkRecord) -> bytes:
        return (_I64.pack(record.access_timestamp)
                + _U64.pack(record.bin_id)
                + bytes(record.address))

    def decode_key(self, key: bytes) -> ChunkRecord:
        self._check_key(key)
        access_timestamp, bin_id = struct.unpack_from('>qQ', key, 0)
        return ChunkRecord(
            access_timestamp=access_timestamp,
            bin_id=bin_id,
            address=bytes(key[16:]),
        )

    def encode_value(self, record: ChunkRecord) -> bytes:
        return _fixed(record.batch_id, HASH_SIZE) + _fixed(record.index, STAMP_INDEX_SIZE)

    def decode_value(self, key_record: ChunkRecord, value: bytes) -> ChunkRecord:
        self._check_value(value)
        return ChunkRecord(batch_id=bytes(value[:32]), index=bytes(value[32:40]))


@register_codec
class PinCodec(_AddressKeyCodec):
    """Address -> PinCounter."""
    label = "pinIdx"
    schema_name = "Hash->PinCounter"
    value_size = 8

    def encode_value(self, record: ChunkRecord) -> bytes:
        return _U64.pack(record.pin_counter)

    def decode_value(self, key_record: ChunkRecord, value: bytes) -> ChunkRecord:
        self._check_value(value)
        pin_counter, = _U64.unpack_from(value, 0)
        return ChunkRecord(pin_counter=pin_counter)


@register_codec
class PostageChunksCodec(_ProximityCodec):
    """BatchID | PO | Address -> nil, chunks grouped by batch."""
    label = "postageChunksIdx"
    schema_name = "BatchID|PO|Hash->nil"
    key_size = 2 * HASH_SIZE + 1

    def encode_key(self, record: ChunkRecord) -> bytes:
        return (_fixed(record.batch_id, HASH_SIZE)
                + bytes([self._po(record)])
                + _fixed(record.address, HASH_SIZE))

    def decode_key(self, key: bytes) -> ChunkRecord:
        self._check_key(key)
        return ChunkRecord(batch_id=bytes(key[:32]), address=bytes(key[33:65]))

    def encode_value(self, record: ChunkRecord) -> bytes:
        return b""

    def decode_value(self, key_record: ChunkRecord, value: bytes) -> ChunkRecord:
        return ChunkRecord()


@register_codec
class PostageIndexCodec(IndexCodec):
    """BatchID | Index -> Address | Timestamp, resolves a stamp slot to its chunk."""
    label = "postageIndexIdx"
    schema_name = "BatchID|BatchIndex->Hash|Timestamp"
    key_size = HASH_SIZE + STAMP_INDEX_SIZE
    value_size = HASH_SIZE + STAMP_TIMESTAMP_SIZE

    def encode_key(self, record: ChunkRecord) -> bytes:
        return _fixed(record.batch_id, HASH_SIZE) + _fixed(record.index, STAMP_INDEX_SIZE)

    def decode_key(self, key: bytes) -> ChunkRecord:
        self._check_key(key)
        return ChunkRecord(batch_id=bytes(key[:32]), index=bytes(key[32:40]))

    def encode_value(self, record: ChunkRecord) -> bytes:
        return _fixed(record.address, HASH_SIZE) + _fixed(record.timestamp, STAMP_TIMESTAMP_SIZE)

    def decode_value(self, key_record: ChunkRecord, value: bytes) -> ChunkRecord:
        self._check_value(value)
        return ChunkRecord(address=bytes(value[:32]), timestamp=bytes(value[32:40]))


PRIMARY_INDEX = RetrievalDataCodec.label

SECONDARY_INDEXES = (
    RetrievalAccessCodec.label,
    PullCodec.label,
    PushCodec.label,
    GcCodec.label,
    PinCodec.label,
    PostageChunksCodec.label,
    PostageIndexCodec.label,
)
