import struct

import pytest

from index_store.codecs import PRIMARY_INDEX, SECONDARY_INDEXES
from index_store.exceptions import CodecError, IndexNotFoundError, SchemaError
from index_store.schema import SCHEMA_KEY, StoreSchema, field_key, open_registry
from validity import cac

from tests.fakes import MemoryEngine, StoreBuilder


def test_schema_json_roundtrip():
    schema = StoreSchema(fields={"gc-size": "uint64"}, indexes={2: "Hash->PinCounter"})
    engine = MemoryEngine()
    engine.put(SCHEMA_KEY, schema.to_json())
    assert StoreSchema.load(engine) == schema


def test_missing_schema():
    with pytest.raises(SchemaError):
        StoreSchema.load(MemoryEngine())


def test_malformed_schema():
    engine = MemoryEngine()
    engine.put(SCHEMA_KEY, b"{not json")
    with pytest.raises(SchemaError):
        StoreSchema.load(engine)


def test_registry_binds_every_index(builder):
    registry = open_registry(builder.engine)
    assert set(registry.indexes) == {PRIMARY_INDEX, *SECONDARY_INDEXES}
    assert registry.primary.label == PRIMARY_INDEX
    assert [i.label for i in registry.secondary()] == list(SECONDARY_INDEXES)
    for label, prefix in builder.prefixes.items():
        assert registry.index(label).prefix == bytes([prefix])


def test_missing_index_is_fatal(store_root):
    builder = StoreBuilder(store_root, missing_indexes=("pinIdx",))
    with pytest.raises(IndexNotFoundError):
        open_registry(builder.engine)


def test_fields_default_to_zero(builder):
    registry = open_registry(builder.engine)
    assert registry.gc_size.get() == 0
    assert registry.reserve_size.get() == 0
    assert registry.schema_name.get() == "sharky"


def test_uint64_field_big_endian(builder):
    builder.set_counter("gc-size", 0x0102)
    registry = open_registry(builder.engine)
    assert registry.gc_size.get() == 258


def test_uint64_field_wrong_width(builder):
    builder.engine.put(field_key("reserve-size"), struct.pack('>I', 1))
    registry = open_registry(builder.engine)
    with pytest.raises(CodecError):
        registry.reserve_size.get()


def test_field_type_mismatch_is_fatal(builder):
    schema = StoreSchema.load(builder.engine)
    schema.fields["gc-size"] = "string"
    builder.engine.put(SCHEMA_KEY, schema.to_json())
    with pytest.raises(SchemaError):
        open_registry(builder.engine)


def test_iteration_is_ordered_and_restartable(builder):
    chunks = [cac.new_chunk(bytes([i]) * 10) for i in range(5)]
    for chunk in chunks:
        builder.add_chunk(chunk)
    registry = open_registry(builder.engine)

    first = [r.address for r in registry.primary.iterate()]
    second = [r.address for r in registry.primary.iterate()]
    assert first == sorted(c.address for c in chunks)
    assert first == second
    assert registry.primary.count() == 5


def test_index_has(builder):
    chunk = cac.new_chunk(b"present")
    record = builder.add_chunk(chunk)
    builder.add_secondaries(record, labels=("pinIdx",))
    registry = open_registry(builder.engine)
    assert registry.index("pinIdx").has(record)
    assert not registry.index("retrievalAccessIdx").has(record)


def test_iteration_merges_key_and_value(builder):
    record = builder.add_chunk(cac.new_chunk(b"merge me"))
    builder.add_secondaries(record, labels=("gcIdx",))
    registry = open_registry(builder.engine)
    decoded, = list(registry.index("gcIdx").iterate())
    assert decoded.address == record.address
    assert decoded.access_timestamp == record.access_timestamp
    assert decoded.batch_id == record.batch_id
    assert decoded.location == b""


def test_unknown_index_label(builder):
    registry = open_registry(builder.engine)
    with pytest.raises(KeyError):
        registry.index("nope")


def test_undecodable_entry_raises_without_handler(builder):
    builder.put_raw("pinIdx", b"\x01" * 32, b"\x00")
    registry = open_registry(builder.engine)
    with pytest.raises(CodecError):
        list(registry.index("pinIdx").iterate())


def test_undecodable_entry_goes_to_handler(builder):
    builder.put_raw("pinIdx", b"\x01" * 32, b"\x00")
    record = builder.add_chunk(cac.new_chunk(b"after the bad one"))
    builder.add_secondaries(record, labels=("pinIdx",))
    registry = open_registry(builder.engine)

    errors = []
    decoded = list(registry.index("pinIdx").iterate(
        on_error=lambda key, e: errors.append((key, str(e)))
    ))
    assert [r.address for r in decoded] == [record.address]
    assert errors == [(b"\x01" * 32, "pinIdx: value too short: expected 8 bytes, got 1")]
