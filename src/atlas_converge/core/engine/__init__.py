# src/atlas_converge/core/engine/__init__.py
"""Engine de convergência."""

from .runner import Runner, converge

__all__ = ["Runner", "converge"]
