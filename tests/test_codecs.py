"""
test_codecs - per-index key/value codec tests

1. decode(encode(r)) reconstructs exactly the fields each index owns
2. short keys and values raise CodecError instead of slicing garbage
3. push values without a tag decode to tag 0
4. proximity order byte is written only when a base address is known
"""

import struct

import pytest

from index_store.codecs import (
    PRIMARY_INDEX,
    SECONDARY_INDEXES,
    STAMP_SIZE,
    create_codec,
    decode_stamp,
    list_codecs,
)
from index_store.exceptions import CodecError
from models.chunk_record import ChunkRecord
from models.swarm import proximity

ADDRESS = bytes(range(32))
BATCH = bytes([0xBA]) * 32

FULL = ChunkRecord(
    address=ADDRESS,
    bin_id=42,
    store_timestamp=1_650_000_000,
    access_timestamp=1_660_000_000,
    batch_id=BATCH,
    index=struct.pack('>Q', 9),
    timestamp=struct.pack('>Q', 1_640_000_000),
    sig=bytes([0x51]) * 65,
    location=b"\x01\x02\x00\x00\x00\x10\x00",
    tag=77,
    pin_counter=3,
)

# fields each index persists, key and value halves together
OWNED = {
    "retrievalDataIndex": ChunkRecord(
        address=ADDRESS, bin_id=42, store_timestamp=1_650_000_000,
        batch_id=BATCH, index=FULL.index, timestamp=FULL.timestamp,
        sig=FULL.sig, location=FULL.location,
    ),
    "retrievalAccessIdx": ChunkRecord(address=ADDRESS, access_timestamp=1_660_000_000),
    "pullIdx": ChunkRecord(bin_id=42, address=ADDRESS, batch_id=BATCH),
    "pushIdx": ChunkRecord(store_timestamp=1_650_000_000, address=ADDRESS, tag=77),
    "gcIdx": ChunkRecord(
        access_timestamp=1_660_000_000, bin_id=42, address=ADDRESS,
        batch_id=BATCH, index=FULL.index,
    ),
    "pinIdx": ChunkRecord(address=ADDRESS, pin_counter=3),
    "postageChunksIdx": ChunkRecord(batch_id=BATCH, address=ADDRESS),
    "postageIndexIdx": ChunkRecord(
        batch_id=BATCH, index=FULL.index, address=ADDRESS, timestamp=FULL.timestamp,
    ),
}


def _roundtrip(codec, record):
    key_record = codec.decode_key(codec.encode_key(record))
    return key_record.merge(codec.decode_value(key_record, codec.encode_value(record)))


def test_all_indexes_registered():
    assert set(list_codecs()) == {PRIMARY_INDEX, *SECONDARY_INDEXES}


@pytest.mark.parametrize("label", sorted(OWNED))
def test_roundtrip_restores_owned_fields_only(label):
    codec = create_codec(label)
    assert _roundtrip(codec, FULL) == OWNED[label]


def test_retrieval_data_value_layout():
    codec = create_codec("retrievalDataIndex")
    value = codec.encode_value(FULL)
    assert value[:8] == struct.pack('>Q', 42)
    assert value[8:16] == struct.pack('>q', 1_650_000_000)
    assert value[16:48] == BATCH
    assert len(value) == 16 + STAMP_SIZE + len(FULL.location)
    assert value[16 + STAMP_SIZE:] == FULL.location


def test_retrieval_data_empty_location():
    codec = create_codec("retrievalDataIndex")
    record = ChunkRecord(address=ADDRESS, bin_id=1)
    decoded = codec.decode_value(ChunkRecord(), codec.encode_value(record))
    assert decoded.location == b""
    assert decoded.bin_id == 1


def test_negative_timestamps_survive():
    codec = create_codec("gcIdx")
    record = ChunkRecord(access_timestamp=-5, bin_id=1, address=ADDRESS)
    assert codec.decode_key(codec.encode_key(record)).access_timestamp == -5


@pytest.mark.parametrize("label", [
    "retrievalDataIndex", "retrievalAccessIdx", "pullIdx",
    "gcIdx", "pinIdx", "postageIndexIdx",
])
def test_short_value_raises_codec_error(label):
    codec = create_codec(label)
    value = codec.encode_value(FULL)
    with pytest.raises(CodecError):
        codec.decode_value(ChunkRecord(), value[:codec.value_size - 1])


@pytest.mark.parametrize("label", [
    "retrievalDataIndex", "pullIdx", "pushIdx",
    "gcIdx", "postageChunksIdx", "postageIndexIdx",
])
def test_short_key_raises_codec_error(label):
    codec = create_codec(label)
    with pytest.raises(CodecError):
        codec.decode_key(codec.encode_key(FULL)[:codec.key_size - 1])


def test_push_without_tag():
    codec = create_codec("pushIdx")
    assert codec.decode_value(ChunkRecord(), b"").tag == 0
    assert codec.decode_value(ChunkRecord(), struct.pack('>I', 5)).tag == 5


def test_address_keyed_encode_rejects_bad_address():
    codec = create_codec("retrievalDataIndex")
    with pytest.raises(CodecError):
        codec.encode_key(ChunkRecord(address=b"\x01" * 20))


def test_stamp_requires_exact_size():
    with pytest.raises(CodecError):
        decode_stamp(b"\x00" * (STAMP_SIZE - 1))


def test_proximity_byte_without_base_address_is_zero():
    codec = create_codec("pullIdx")
    assert codec.encode_key(FULL)[0] == 0
    codec = create_codec("postageChunksIdx")
    assert codec.encode_key(FULL)[32] == 0


def test_proximity_byte_with_base_address():
    base = bytes([ADDRESS[0] ^ 0x20]) + ADDRESS[1:]
    codec = create_codec("pullIdx", base_address=base)
    key = codec.encode_key(FULL)
    assert key[0] == 2
    # decoding never reads the bin back into the record
    assert codec.decode_key(key) == ChunkRecord(bin_id=42)


def test_proximity():
    assert proximity(b"\x00" * 32, b"\x80" + b"\x00" * 31) == 0
    assert proximity(b"\x00" * 32, b"\x00\x01" + b"\x00" * 30) == 15
    assert proximity(ADDRESS, ADDRESS) == 31


def test_unknown_codec():
    with pytest.raises(KeyError):
        create_codec("nope")
