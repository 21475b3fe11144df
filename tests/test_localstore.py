import os
import shutil

import pytest

from audit.exceptions import StoreSetupError
from audit.localstore import LocalStore
from index_store.exceptions import EngineError
from index_store.schema import SCHEMA_KEY

from tests.fakes import StoreBuilder


def _open_error(store):
    with pytest.raises(StoreSetupError) as excinfo:
        store.open()
    return str(excinfo.value)


def test_opens_well_formed_store(builder):
    with builder.open_store() as store:
        assert store.registry.primary.count() == 0
        assert store.blob_store is not None
    assert builder.engine.close_calls == 1


def test_path_not_a_directory(builder, tmp_path):
    store = builder.open_store(path=str(tmp_path / "nowhere"))
    assert _open_error(store) == "path should be full path to localstore directory"
    assert builder.engine.close_calls == 0


def test_engine_open_failure(builder):
    def failing_factory(path):
        raise EngineError("lock held by another process")

    store = LocalStore(builder.config(), failing_factory)
    assert _open_error(store) == "failed initializing index store: lock held by another process"


def test_sharky_missing(builder):
    shutil.rmtree(builder.sharky_path)
    assert _open_error(builder.open_store()) == "sharky directory missing"
    assert builder.engine.close_calls == 1


def test_index_missing_from_schema(store_root):
    builder = StoreBuilder(store_root, missing_indexes=("gcIdx",))
    msg = _open_error(builder.open_store())
    assert msg.startswith("failed initializing indexes: ")
    assert "AccessTimestamp|BinID|Hash->BatchID|BatchIndex" in msg
    assert builder.engine.close_calls == 1


def test_schema_key_missing(builder):
    builder.engine.delete(SCHEMA_KEY)
    assert _open_error(builder.open_store()).startswith("failed initializing indexes: ")
    assert builder.engine.close_calls == 1


def test_wrong_schema_name(store_root):
    builder = StoreBuilder(store_root, schema_name="yuj")
    assert _open_error(builder.open_store()) == "incorrect schema, needs sharky"
    assert builder.engine.close_calls == 1


def test_expected_schema_name_is_configurable(store_root):
    builder = StoreBuilder(store_root, schema_name="yuj")
    with builder.open_store(schema_name="yuj") as store:
        assert store.registry.schema_name.get() == "yuj"


def test_missing_shard_file_is_not_fatal(builder):
    os.remove(os.path.join(builder.sharky_path, "shard_001"))
    with builder.open_store() as store:
        assert store.blob_store is not None


def test_close_is_idempotent(builder):
    store = builder.open_store()
    store.open()
    store.close()
    store.close()
    assert builder.engine.close_calls == 1
    assert store.registry is None
