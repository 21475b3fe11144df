"""Audit result models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

INCONSISTENCY_PREFIX = "INCONSISTENCY: "
CORRUPTION_PREFIX = "DATA CORRUPTION: "
CRITICAL_PREFIX = "CRITICAL: "


def undecodable_entry(label: str, key: bytes, error: Exception) -> str:
    """Finding for an index entry whose key or value cannot be decoded."""
    return f"undecodable entry {key.hex()} in {label}: {error}"


@dataclass
class CheckResult:
    """Findings of one checker, in the order they were found."""
    checker: str
    inconsistencies: List[str] = field(default_factory=list)
    corruptions: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.inconsistencies) + len(self.corruptions)


@dataclass
class AuditReport:
    """
    Aggregated findings of a full audit.

    Appends only: findings keep their check order and are never filtered
    or deduplicated.
    """
    inconsistencies: List[str] = field(default_factory=list)
    corruptions: List[str] = field(default_factory=list)

    def add(self, result: CheckResult) -> None:
        self.inconsistencies.extend(result.inconsistencies)
        self.corruptions.extend(result.corruptions)

    @property
    def has_findings(self) -> bool:
        return bool(self.inconsistencies or self.corruptions)

    def summary_line(self) -> str:
        if not self.has_findings:
            return "No inconsistencies or corruptions found"
        return (f"Summary: {len(self.inconsistencies)} inconsistencies, "
                f"{len(self.corruptions)} data corruptions")

    def render_lines(self) -> List[str]:
        lines = ["Check complete"]
        if self.inconsistencies:
            lines.append(f"Found {len(self.inconsistencies)} inconsistencies in indexes")
            lines.extend(INCONSISTENCY_PREFIX + v for v in self.inconsistencies)
        if self.corruptions:
            lines.append(f"Found {len(self.corruptions)} data corruptions")
            lines.extend(CORRUPTION_PREFIX + v for v in self.corruptions)
        lines.append(self.summary_line())
        return lines

    def to_text(self) -> str:
        return "\n".join(self.render_lines())
