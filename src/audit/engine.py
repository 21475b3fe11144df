"""Audit engine running checkers over an opened store."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from blob_store.store import BlobStore
from index_store.schema import IndexRegistry

from .checkers.base import Checker
from .models import AuditReport, CheckResult

logger = logging.getLogger(__name__)

@dataclass
class AuditContext:
    registry: IndexRegistry
    blob_store: BlobStore
    stats: Dict[str, int]

class AuditEngine:
    """Runs each checker once, strictly in order, and aggregates the findings."""

    def __init__(self,
                 checkers: List[Checker],
                 registry: IndexRegistry,
                 blob_store: BlobStore):
        self.checkers = checkers
        self.context = AuditContext(
            registry=registry,
            blob_store=blob_store,
            stats={},
        )

    def run(self) -> AuditReport:
        report = AuditReport()
        for checker in self.checkers:
            result: CheckResult = checker.run(self.context)
            logger.debug("%s %s: %d inconsistencies, %d corruptions",
                         checker.name, checker.version,
                         len(result.inconsistencies), len(result.corruptions))
            report.add(result)
        return report
