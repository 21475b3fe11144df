"""Persisted counter bound checker."""
from __future__ import annotations

from typing import List

from index_store.exceptions import IndexStoreError
from index_store.schema import Index, Uint64Field

from .base import Checker
from ..models import CheckResult, CRITICAL_PREFIX
from ..registry import register_checker


def check_counter_bound(gc_size: Uint64Field,
                        reserve_size: Uint64Field,
                        primary: Index) -> List[str]:
    """gcSize + reserveSize may never exceed the number of stored chunks."""
    try:
        gc_count = gc_size.get()
        reserve_count = reserve_size.get()
    except IndexStoreError as e:
        return [f"{CRITICAL_PREFIX}failed reading gc-size/reserve-size: {e}"]
    try:
        chunk_count = primary.count()
    except IndexStoreError as e:
        return [f"{CRITICAL_PREFIX}failed counting {primary.label} index: {e}"]

    total = gc_count + reserve_count
    if total > chunk_count:
        return [
            f"gcSize+reserveSize({total}) > chunkCount({chunk_count}) "
            f"(gcSize={gc_count}, reserveSize={reserve_count})"
        ]
    return []


@register_checker
class CounterBoundChecker(Checker):
    name = "counter_bound"
    version = "1.0"

    def run(self, context) -> CheckResult:
        registry = context.registry
        msgs = check_counter_bound(registry.gc_size, registry.reserve_size, registry.primary)
        return CheckResult(checker=self.name, inconsistencies=msgs)
