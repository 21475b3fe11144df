"""
pytest shared fixtures

- builder: an empty but well-formed store (schema, fields, shard files)
- private_key: a fixed secp256k1 key for single-owner chunks
"""

import coincurve
import pytest

from tests.fakes import StoreBuilder


@pytest.fixture
def store_root(tmp_path):
    return str(tmp_path / "localstore")


@pytest.fixture
def builder(store_root):
    return StoreBuilder(store_root)


@pytest.fixture
def private_key():
    return coincurve.PrivateKey(bytes(range(1, 33)))
