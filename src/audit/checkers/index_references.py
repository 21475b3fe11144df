"""Cross-index referential integrity checker."""
from __future__ import annotations

from typing import List

from index_store.exceptions import IndexStoreError
from index_store.schema import Index

from .base import Checker
from ..models import CheckResult, CRITICAL_PREFIX, undecodable_entry
from ..registry import register_checker


def check_indexes(source: Index, destination: Index) -> List[str]:
    """
    Report every entry of source whose address has no entry in destination.

    A failed lookup counts as missing and carries the error. An entry of
    source that cannot be decoded is reported and skipped. A failed pass
    over source ends this pair with one CRITICAL message.
    """
    msgs: List[str] = []

    def undecodable(key, e):
        msgs.append(undecodable_entry(source.label, key, e))

    try:
        for record in source.iterate(on_error=undecodable):
            missing = f"item in {source.label} and not in {destination.label} {record.address_hex}"
            try:
                exists = destination.has(record)
            except IndexStoreError as e:
                msgs.append(f"{missing}: {e}")
                continue
            if not exists:
                msgs.append(missing)
    except IndexStoreError as e:
        msgs.append(f"{CRITICAL_PREFIX}failed checking {source.label} index: {e}")
    return msgs


@register_checker
class IndexReferencesChecker(Checker):
    """Every secondary index entry must resolve in the primary index."""
    name = "index_references"
    version = "1.0"

    def run(self, context) -> CheckResult:
        result = CheckResult(checker=self.name)
        primary = context.registry.primary
        for secondary in context.registry.secondary():
            msgs = check_indexes(secondary, primary)
            context.stats[f"{secondary.label}_violations"] = len(msgs)
            result.inconsistencies.extend(msgs)
        return result
