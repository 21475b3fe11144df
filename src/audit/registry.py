"""Checker registry."""
from __future__ import annotations

from typing import Dict, List, Type

from .checkers.base import Checker

_REGISTRY: Dict[str, Type[Checker]] = {}
_BUILTINS_LOADED = False


def register_checker(cls: Type[Checker]) -> Type[Checker]:
    _REGISTRY[cls.name] = cls
    return cls


def _load_builtin_checkers() -> None:
    global _BUILTINS_LOADED
    if _BUILTINS_LOADED:
        return
    from .checkers import index_references  # noqa: F401
    from .checkers import counter_bound  # noqa: F401
    from .checkers import content_integrity  # noqa: F401
    _BUILTINS_LOADED = True


def list_checkers() -> List[str]:
    _load_builtin_checkers()
    return sorted(_REGISTRY.keys())


def create_checker(name: str, **kwargs) -> Checker:
    _load_builtin_checkers()
    if name not in _REGISTRY:
        raise KeyError(f"Unknown checker: {name}")
    return _REGISTRY[name](**kwargs)
