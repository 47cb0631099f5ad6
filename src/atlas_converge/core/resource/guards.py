# src/atlas_converge/core/resource/guards.py
"""
Avaliação de guards (`only_if` / `not_if`).

Um guard é um predicado que decide se as actions de um Resource
executam. Dois formatos são aceitos:
    - callable → avaliado em processo; o retorno é interpretado como bool
    - comando  → string (via shell) ou sequência de argumentos (sem
      shell); código de saída zero significa verdadeiro

Decisões arquiteturais:
    - Qualquer falha ao avaliar o predicado vira `GuardEvaluationFailure`
      (subclasse de `ResourceExecutionError`, interceptável por
      `ignore_failure`)
    - Timeout de comando é opcional (`guards.command_timeout`)
    - Ordem de avaliação no Runner: `not_if` e depois `only_if`

Limites explícitos:
    - Não interpreta stdout/stderr do comando
    - Não registra eventos (o Runner registra o motivo do skip)
"""

from __future__ import annotations

import subprocess
from typing import Any, Mapping, Optional, Sequence, Union

from atlas_converge.core.exceptions import GuardEvaluationFailure

Predicate = Union[str, Sequence[str], Any]

ONLY_IF = "only_if"
NOT_IF = "not_if"


class GuardEvaluator:
    """Avaliador de predicados de guard (callable ou comando externo)."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> "GuardEvaluator":
        guards_cfg = (config or {}).get("guards") or {}
        timeout = guards_cfg.get("command_timeout")
        return cls(timeout=float(timeout) if timeout is not None else None)

    def evaluate(self, predicate: Predicate) -> bool:
        """
        Avalia um predicado de guard.

        Raises:
            GuardEvaluationFailure: Se o callable levantar exceção, se o
                comando não puder ser executado ou exceder o timeout.
        """
        if callable(predicate):
            try:
                return bool(predicate())
            except Exception as e:
                raise GuardEvaluationFailure(
                    message=f"Guard callable raised {e.__class__.__name__}: {e}",
                    details={"predicate": repr(predicate)},
                    hint="Corrija o callable do guard",
                ) from e

        if isinstance(predicate, str):
            command: Any = predicate
            shell = True
        elif isinstance(predicate, Sequence) and predicate:
            command = [str(arg) for arg in predicate]
            shell = False
        else:
            raise GuardEvaluationFailure(
                message="Guard must be a callable or a command",
                details={"predicate": repr(predicate)},
                hint="Use um callable, uma string de comando ou uma lista de argumentos",
            )

        try:
            completed = subprocess.run(
                command,
                shell=shell,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GuardEvaluationFailure(
                message=f"Guard command timed out after {self.timeout}s",
                details={"command": command, "timeout": self.timeout},
                hint="Aumente `guards.command_timeout` ou simplifique o comando",
            ) from e
        except OSError as e:
            raise GuardEvaluationFailure(
                message=f"Guard command could not be executed: {e}",
                details={"command": command},
                hint="Verifique se o comando existe no PATH do Node",
            ) from e
        return completed.returncode == 0

    def skip_reason(self, resource: Any) -> Optional[str]:
        """Retorna `not_if`/`only_if` quando o Resource deve ser pulado, senão None."""
        not_if = getattr(resource, NOT_IF, None)
        if not_if is not None and self.evaluate(not_if):
            return NOT_IF
        only_if = getattr(resource, ONLY_IF, None)
        if only_if is not None and not self.evaluate(only_if):
            return ONLY_IF
        return None
