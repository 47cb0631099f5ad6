# src/atlas_converge/core/run/__init__.py
"""
# Run: contexto e resultados de uma convergência

Este pacote define as estruturas compartilhadas por uma run de convergência:

- **context**
  - `RunContext`: identidade da run, configuração efetiva, log estruturado
    de eventos e warnings por Resource
- **types**
  - `ResourceStatus`: estados finais de um Resource na run
  - `ResourceResult`: resultado imutável de um Resource
  - `RunResult`: resultado agregado da convergência

## Invariantes

- Cada run possui um RunContext próprio (sem estado global)
- Eventos sempre incluem `run_id` e `resource`
"""

from .context import LOG_LEVELS, RunContext, new_run_context
from .types import ResourceResult, ResourceStatus, RunResult

__all__ = [
    "LOG_LEVELS",
    "ResourceResult",
    "ResourceStatus",
    "RunContext",
    "RunResult",
    "new_run_context",
]
