"""
Atlas Converge — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do engine de convergência.

Objetivo:
- Permitir que Registry, Resources e Runner levantem exceções semânticas
- Facilitar o mapeamento determinístico para ErrorPayload (core.errors)
- Separar falhas interceptáveis por `ignore_failure` das sempre fatais

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`
- Apenas subclasses de `ResourceExecutionError` podem ser ignoradas por
  um Resource com `ignore_failure=True`; todo o resto aborta a run
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional


@dataclass(frozen=True, eq=False)
class ConvergeException(Exception):
    """Base class para exceções internas do Atlas Converge.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    - `code` é o código estável usado em ErrorPayload
    """

    code: ClassVar[str] = "CONVERGE_ERROR"

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Despacho de Providers / Plataforma (sempre fatais)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ProviderNotFound(ConvergeException):
    """Nenhum Provider explícito, de plataforma ou por convenção de nome."""

    code: ClassVar[str] = "PROVIDER_NOT_FOUND"


@dataclass(frozen=True, eq=False)
class MissingPlatformInfo(ConvergeException):
    """O Node não possui atributos de plataforma e/ou versão."""

    code: ClassVar[str] = "MISSING_PLATFORM_INFO"


@dataclass(frozen=True, eq=False)
class RegistryFrozenError(ConvergeException):
    """Tentativa de registrar binding após `PlatformRegistry.freeze()`."""

    code: ClassVar[str] = "REGISTRY_FROZEN"


# ---------------------------------------------------------------------------
# Declaração de Resources (sempre fatais)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class InvalidTiming(ConvergeException):
    """Timing de notificação diferente de delayed/immediate."""

    code: ClassVar[str] = "INVALID_TIMING"


@dataclass(frozen=True, eq=False)
class InvalidAction(ConvergeException):
    """Action fora de `allowed_actions` do Resource."""

    code: ClassVar[str] = "INVALID_ACTION"


# ---------------------------------------------------------------------------
# Run List / Roles
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class RoleNotFound(ConvergeException):
    """A fonte de Roles não conhece a Role referenciada na Run List."""

    code: ClassVar[str] = "ROLE_NOT_FOUND"


# ---------------------------------------------------------------------------
# Execução de Resources (interceptáveis por ignore_failure)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ResourceExecutionError(ConvergeException):
    """Falha durante a execução de um Resource (base interceptável)."""

    code: ClassVar[str] = "RESOURCE_EXECUTION_ERROR"


@dataclass(frozen=True, eq=False)
class ProviderExecutionError(ResourceExecutionError):
    """Erro levantado por um Provider ao executar uma action (encapsulado)."""

    code: ClassVar[str] = "PROVIDER_EXECUTION_ERROR"


@dataclass(frozen=True, eq=False)
class GuardEvaluationFailure(ResourceExecutionError):
    """O avaliador de guard (callable ou comando) falhou ao avaliar."""

    code: ClassVar[str] = "GUARD_EVALUATION_FAILURE"
