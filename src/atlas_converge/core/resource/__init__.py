# src/atlas_converge/core/resource/__init__.py
"""
Resources, guards, notificações e coleção.

Componentes:
    - resource   → `Resource`, tabela de notificações, `run_action`
    - builtin    → `Execute`, `Block`
    - collection → `ResourceCollection`, `ResourceNotFound`
    - guards     → `GuardEvaluator`
"""

from .builtin import Block, Execute
from .collection import ResourceCollection, ResourceNotFound
from .guards import NOT_IF, ONLY_IF, GuardEvaluator
from .resource import (
    DELAYED,
    IMMEDIATE,
    NOTHING,
    DelayedNotification,
    DelayedTable,
    Resource,
    normalize_timing,
)

__all__ = [
    "Block",
    "DELAYED",
    "DelayedNotification",
    "DelayedTable",
    "Execute",
    "GuardEvaluator",
    "IMMEDIATE",
    "NOTHING",
    "NOT_IF",
    "ONLY_IF",
    "Resource",
    "ResourceCollection",
    "ResourceNotFound",
    "normalize_timing",
]
