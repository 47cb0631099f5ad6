# src/atlas_converge/core/provider/__init__.py
"""Contrato de Provider e Providers embutidos."""

from .builtin import BlockProvider, ExecuteProvider
from .provider import ACTION_PREFIX, Provider, action_handler

__all__ = [
    "ACTION_PREFIX",
    "BlockProvider",
    "ExecuteProvider",
    "Provider",
    "action_handler",
]
