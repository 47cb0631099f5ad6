"""
Atlas Converge — Canonical Error Structures (v1)

Este módulo define o payload canônico de erros registrado nos resultados
de convergência. Falhas ignoradas (`ignore_failure`) e falhas fatais são
convertidas em `ErrorPayload` antes de entrarem no RunResult ou no log
estruturado do RunContext, devendo ser:

- explícitas
- serializáveis
- localizáveis (Resource + source_location)
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import ConvergeException


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do Atlas Converge.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Despacho
PROVIDER_NOT_FOUND = "PROVIDER_NOT_FOUND"
MISSING_PLATFORM_INFO = "MISSING_PLATFORM_INFO"

# Declaração
INVALID_TIMING = "INVALID_TIMING"
INVALID_ACTION = "INVALID_ACTION"

# Execução
PROVIDER_EXECUTION_ERROR = "PROVIDER_EXECUTION_ERROR"
GUARD_EVALUATION_FAILURE = "GUARD_EVALUATION_FAILURE"
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"


def error_payload_from_exception(
    exc: BaseException,
    *,
    resource: Optional[str] = None,
    source_location: Optional[str] = None,
) -> ErrorPayload:
    """Converte uma exceção em ErrorPayload (serializável, acionável).

    Regras:
    - ConvergeException: usa `code`, `message`, `details` e `hint` da exceção.
    - Outras exceções: encapsular como ENGINE_EXECUTION_ERROR sem stack trace.
    - `resource` e `source_location` são sempre anexados aos details.
    """
    if isinstance(exc, ConvergeException):
        details = dict(exc.details or {})
        payload_type = exc.code
        message = exc.message or "Erro de convergência"
        hint = exc.hint
    else:
        details = {"exception_class": exc.__class__.__name__}
        payload_type = ENGINE_EXECUTION_ERROR
        message = str(exc) or "Erro inesperado durante a convergência"
        hint = "Verifique o log estruturado da run e a declaração do Resource"

    if resource is not None:
        details.setdefault("resource", resource)
    if source_location is not None:
        details.setdefault("source_location", source_location)

    return ErrorPayload(type=payload_type, message=message, details=details, hint=hint)
