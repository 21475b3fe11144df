"""Chunk content integrity checker."""
from __future__ import annotations

from blob_store.exceptions import BlobStoreError
from blob_store.location import Location
from blob_store.store import BlobStore
from index_store.exceptions import IndexStoreError
from index_store.schema import Index
from models.chunk import Chunk
from validity import chunk_valid

from .base import Checker
from ..models import CheckResult, CRITICAL_PREFIX, undecodable_entry
from ..registry import register_checker


def check_content(primary: Index, blob_store: BlobStore, result: CheckResult) -> int:
    """
    Read every stored chunk once and verify it against its address.

    Undecodable entries, location and read failures are inconsistencies;
    bytes that verify under neither chunk scheme are corruptions. Returns the number of chunks read.
    """
    checked = 0

    def undecodable(key, e):
        result.inconsistencies.append(undecodable_entry(primary.label, key, e))

    try:
        for record in primary.iterate(on_error=undecodable):
            try:
                location = Location.from_bytes(record.location)
            except BlobStoreError as e:
                result.inconsistencies.append(
                    f"invalid blob location for item {record.address_hex}: {e}"
                )
                continue
            try:
                data = blob_store.read(location)
            except BlobStoreError as e:
                result.inconsistencies.append(
                    f"cannot read location {location} for item {record.address_hex}: {e}"
                )
                continue
            checked += 1
            chunk = Chunk(address=record.address, data=data)
            if not chunk_valid(chunk):
                result.corruptions.append(f"address {record.address_hex}")
    except IndexStoreError as e:
        result.inconsistencies.append(
            f"{CRITICAL_PREFIX}failed iterating {primary.label} index: {e}"
        )
    return checked


@register_checker
class ContentIntegrityChecker(Checker):
    name = "content_integrity"
    version = "1.0"

    def run(self, context) -> CheckResult:
        result = CheckResult(checker=self.name)
        checked = check_content(context.registry.primary, context.blob_store, result)
        context.stats["chunks_read"] = checked
        context.stats["chunks_corrupt"] = len(result.corruptions)
        return result
