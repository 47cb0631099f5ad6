# src/atlas_converge/core/provider/provider.py
"""
Contrato canônico de Provider do Atlas Converge.

Um Provider é a estratégia executável que realiza um Resource em uma
plataforma específica. O engine não impõe herança: qualquer classe que
satisfaça o contrato estrutural abaixo é um Provider.

Contrato:
    - construtor `ProviderClass(node, resource, collection)`
    - `load_current_state()` → estado atual do sistema (qualquer valor)
    - `action_<nome>(state)` → um handler por action suportada; retorna
      `{"updated": bool}` ou um bool, ou marca `resource.updated`

Decisões arquiteturais:
    - Conformidade por duck typing (`@runtime_checkable`)
    - Handlers de action são resolvidos por nome (`action_<nome>`)
    - Providers não conhecem o Runner nem o Registry

Invariantes:
    - `load_current_state` é chamado uma vez por invocação de action,
      sempre antes do handler

Limites explícitos:
    - Não define retry nem timeout
    - Não registra eventos no RunContext
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable

ACTION_PREFIX = "action_"


@runtime_checkable
class Provider(Protocol):
    """
    Contrato estrutural de um Provider.

    Atributos obrigatórios:
        - node: Node alvo da convergência
        - resource: Resource sendo realizado
        - collection: coleção de Resources da run

    Os handlers `action_<nome>(state)` não fazem parte do Protocol por
    serem dinâmicos; a ausência de um handler é detectada no despacho.
    """
    node: Any
    resource: Any
    collection: Any

    def load_current_state(self) -> Any:
        """Lê o estado atual do sistema para o Resource."""
        ...


def action_handler(provider: Any, action: str) -> Optional[Callable[[Any], Any]]:
    """Retorna o handler `action_<action>` do Provider, ou None."""
    handler = getattr(provider, f"{ACTION_PREFIX}{action}", None)
    if handler is None or not callable(handler):
        return None
    return handler
