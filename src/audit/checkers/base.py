"""Checker base class."""
from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import CheckResult

class Checker(ABC):
    name = "base"
    version = "0.1"

    @abstractmethod
    def run(self, context) -> CheckResult:
        raise NotImplementedError
