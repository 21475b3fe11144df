"""
Audit configuration.
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from blob_store.store import DEFAULT_SHARD_COUNT
from models.swarm import SOC_MAX_CHUNK_SIZE

DEFAULT_STORE_PATH = "./localstore"
SHARKY_DIRNAME = "sharky"
CURRENT_SCHEMA_NAME = "sharky"
DEFAULT_CHECKS = ("index_references", "counter_bound", "content_integrity")


@dataclass
class AuditConfig:
    """Audit configuration."""
    path: str = DEFAULT_STORE_PATH
    schema_name: str = CURRENT_SCHEMA_NAME
    shard_count: int = DEFAULT_SHARD_COUNT
    max_record_size: int = SOC_MAX_CHUNK_SIZE
    base_address: Optional[bytes] = None  # overlay address, only for PO bytes
    checks: List[str] = field(default_factory=lambda: list(DEFAULT_CHECKS))
    strict: bool = False  # exit non-zero when findings exist

    @property
    def sharky_path(self) -> str:
        return os.path.join(self.path, SHARKY_DIRNAME)
