# src/atlas_converge/core/provider/builtin.py
"""
Providers embutidos do Atlas Converge.

Estes Providers são registrados no bucket DEFAULT global do
PlatformRegistry e, portanto, valem para qualquer plataforma que não
os sobrescreva.

Providers:
    - ExecuteProvider → executa um comando externo (Resource `execute`)
    - BlockProvider   → executa um callable em processo (Resource `block`)

Decisões arquiteturais:
    - Ambos reportam mudança (`True`) sempre que a action `run` executa
    - A action `nothing` é suportada e nunca reporta mudança
    - Código de saída inesperado é erro (encapsulado pelo Resource como
      ProviderExecutionError)
"""

from __future__ import annotations

import os
import subprocess
from typing import Any, Dict, Optional


class ExecuteProvider:
    """Executa `resource.command` via subprocess."""

    def __init__(self, node: Any, resource: Any, collection: Any = None):
        self.node = node
        self.resource = resource
        self.collection = collection

    def load_current_state(self) -> Dict[str, Any]:
        return {"command": self.resource.command}

    def _environment(self) -> Optional[Dict[str, str]]:
        extra = getattr(self.resource, "environment", None)
        if not extra:
            return None
        env = dict(os.environ)
        env.update({str(k): str(v) for k, v in extra.items()})
        return env

    def action_run(self, state: Dict[str, Any]) -> bool:
        command = self.resource.command
        completed = subprocess.run(
            command,
            shell=isinstance(command, str),
            cwd=getattr(self.resource, "cwd", None),
            env=self._environment(),
            capture_output=True,
            text=True,
            timeout=getattr(self.resource, "timeout", None),
        )
        expected = getattr(self.resource, "returns", 0)
        allowed = expected if isinstance(expected, (list, tuple)) else [expected]
        if completed.returncode not in allowed:
            raise RuntimeError(
                f"{self.resource} returned {completed.returncode}, expected {expected}: "
                f"{completed.stderr.strip()}"
            )
        return True

    def action_nothing(self, state: Dict[str, Any]) -> bool:
        return False


class BlockProvider:
    """Executa `resource.block` em processo."""

    def __init__(self, node: Any, resource: Any, collection: Any = None):
        self.node = node
        self.resource = resource
        self.collection = collection

    def load_current_state(self) -> None:
        return None

    def action_run(self, state: Any) -> bool:
        self.resource.block()
        return True

    def action_nothing(self, state: Any) -> bool:
        return False
