"""
Store lifecycle for one audit run.

The index engine and the blob store are each opened once and closed once,
including when setup fails part way through.
"""
from __future__ import annotations

import logging
import os
from typing import Callable, Optional

from blob_store.exceptions import BlobStoreError
from blob_store.store import BlobStore
from index_store.engine import LevelDBEngine, OrderedEngine
from index_store.exceptions import IndexStoreError
from index_store.schema import IndexRegistry, open_registry

from .config import AuditConfig
from .exceptions import StoreSetupError

logger = logging.getLogger(__name__)


class LocalStore:
    """
    Read-only handle on a store root: index engine, registry, blob store.

    Usage:
        with LocalStore(config) as store:
            store.registry.primary.count()
    """

    def __init__(self, config: AuditConfig,
                 engine_factory: Callable[[str], OrderedEngine] = LevelDBEngine):
        self.config = config
        self.engine_factory = engine_factory
        self.engine: Optional[OrderedEngine] = None
        self.registry: Optional[IndexRegistry] = None
        self.blob_store: Optional[BlobStore] = None

    def open(self):
        """
        Validate the store layout and open it.

        Raises:
            StoreSetupError: with the diagnostic line to show the user
        """
        config = self.config
        if not os.path.isdir(config.path):
            raise StoreSetupError("path should be full path to localstore directory")

        try:
            self.engine = self.engine_factory(config.path)
        except IndexStoreError as e:
            raise StoreSetupError(f"failed initializing index store: {e}") from e

        try:
            self._open_rest()
        except Exception:
            self.close()
            raise

    def _open_rest(self):
        config = self.config
        if not os.path.isdir(config.sharky_path):
            raise StoreSetupError("sharky directory missing")

        try:
            self.registry = open_registry(self.engine, base_address=config.base_address)
        except IndexStoreError as e:
            raise StoreSetupError(f"failed initializing indexes: {e}") from e

        try:
            schema_name = self.registry.schema_name.get()
        except IndexStoreError as e:
            raise StoreSetupError(f"failed reading schema: {e}") from e
        if schema_name != config.schema_name:
            raise StoreSetupError(f"incorrect schema, needs {config.schema_name}")

        blob_store = BlobStore(
            config.sharky_path,
            shard_count=config.shard_count,
            max_record_size=config.max_record_size,
        )
        try:
            blob_store.open()
        except BlobStoreError as e:
            raise StoreSetupError(f"failed initializing sharky: {e}") from e
        self.blob_store = blob_store
        logger.debug("opened store at %s (schema %s)", config.path, schema_name)

    def close(self):
        """Close the blob store and the engine. Safe to call multiple times."""
        if self.blob_store is not None:
            self.blob_store.close()
            self.blob_store = None
        if self.engine is not None:
            self.engine.close()
            self.engine = None
        self.registry = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
