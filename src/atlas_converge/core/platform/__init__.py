# src/atlas_converge/core/platform/__init__.py
"""Registry de Providers por plataforma/versão."""

from .registry import (
    BUILTIN_PROVIDERS,
    DEFAULT,
    PlatformRegistry,
    build_default_registry,
    normalize_platform,
    normalize_version,
    platform_registry,
)

__all__ = [
    "BUILTIN_PROVIDERS",
    "DEFAULT",
    "PlatformRegistry",
    "build_default_registry",
    "normalize_platform",
    "normalize_version",
    "platform_registry",
]
