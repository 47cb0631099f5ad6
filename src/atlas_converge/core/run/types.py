# src/atlas_converge/core/run/types.py
"""
Tipos canônicos de resultado de convergência.

Componentes principais:
    - ResourceStatus → enum de estados finais (CONVERGED, SKIPPED, FAILED)
    - ResourceResult → resultado imutável de um Resource na run
    - RunResult      → resultado agregado da run

Invariantes:
    - Enums possuem valores textuais canônicos
    - Resultados são imutáveis e serializáveis
    - Um Resource FAILED só aparece em um RunResult bem-sucedido quando
      declarou `ignore_failure=True`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ResourceStatus(str, Enum):
    """
    Estados finais possíveis de um Resource na run.

    Estados definidos:
        - CONVERGED: todas as actions foram executadas
        - SKIPPED: actions não executadas por guard (`only_if`/`not_if`)
        - FAILED: falha interceptada por `ignore_failure`

    Limites explícitos:
        - Não representa estados em andamento
        - Falhas fatais não produzem ResourceResult: a run é abortada
    """
    CONVERGED = "converged"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ResourceResult:
    """Resultado imutável de um Resource na run de convergência."""

    resource: str
    status: ResourceStatus
    summary: str
    updated: bool = False
    source_location: Optional[str] = None
    error: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resource": self.resource,
            "status": self.status.value,
            "summary": self.summary,
            "updated": self.updated,
            "source_location": self.source_location,
            "error": self.error,
        }


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado de uma run de convergência.

    `resources` segue a ordem da coleção; `delayed` lista, em ordem de
    disparo, as notificações adiadas executadas após a passada principal
    (`"action -> kind[name]"`).
    """

    success: bool
    resources: List[ResourceResult] = field(default_factory=list)
    delayed: List[str] = field(default_factory=list)

    def by_status(self, status: ResourceStatus) -> List[ResourceResult]:
        return [r for r in self.resources if r.status == status]
