# src/atlas_converge/core/run/context.py
"""
Contexto de execução compartilhado de uma run de convergência.

Este módulo define o `RunContext`, a estrutura canônica que acompanha o
Runner, os Resources e suas notificações durante uma run, registrando:
    - identidade da execução (run_id, created_at)
    - configuração efetiva
    - log estruturado de eventos (processamento, guards, notificações, erros)
    - warnings não fatais por Resource (falhas ignoradas)

Princípios fundamentais:
    - Isolamento por execução (cada run possui seu próprio contexto)
    - Logs são eventos estruturados, não texto livre
    - Nível mínimo de log controlado por `runner.log_level`

Invariantes:
    - Eventos sempre incluem `run_id`, `resource`, `level` e `message`
    - Warnings são agrupados pela forma `kind[name]` do Resource

Limites explícitos:
    - Não executa Resources
    - Não persiste eventos automaticamente
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

LOG_LEVELS: Dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
}

# Chave usada em eventos que não pertencem a um Resource específico.
RUN_SCOPE = "run"


@dataclass
class RunContext:
    """
    Contexto de execução compartilhado de uma run de convergência.

    O RunContext consolida:
        - identidade da execução (run_id, created_at)
        - configuração resolvida
        - logs estruturados de execução
        - warnings associados a Resources específicos

    Decisões arquiteturais:
        - Runner, Resources e notificações registram eventos apenas aqui
        - Eventos abaixo de `runner.log_level` são descartados no registro
        - Warnings não alteram o resultado da run

    Invariantes:
        - Cada execução possui um RunContext único
        - Logs incluem sempre `run_id` e `resource`
    """
    run_id: str
    created_at: datetime
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @property
    def log_level(self) -> str:
        runner_cfg = (self.config or {}).get("runner", {}) or {}
        level = str(runner_cfg.get("log_level", "DEBUG")).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        return level

    def is_enabled_for(self, level: str) -> bool:
        return LOG_LEVELS[level.upper()] >= LOG_LEVELS[self.log_level]

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, resource: str, level: str, message: str, **extra: Any) -> None:
        level = level.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        if not self.is_enabled_for(level):
            return
        event = {
            "run_id": self.run_id,
            "resource": resource,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, resource: str, message: str) -> None:
        if resource not in self.warnings:
            self.warnings[resource] = []
        self.warnings[resource].append(message)

    def events_for(self, resource: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["resource"] == resource]


def new_run_context(
    config: Optional[Dict[str, Any]] = None,
    *,
    meta: Optional[Dict[str, Any]] = None,
) -> RunContext:
    """Cria um RunContext com `run_id` aleatório e timestamp UTC."""
    return RunContext(
        run_id=f"run-{uuid.uuid4().hex[:12]}",
        created_at=datetime.now(timezone.utc),
        config=dict(config or {}),
        meta=dict(meta or {}),
    )
