# src/atlas_converge/__init__.py
"""
Atlas Converge — engine de convergência de configuração para nós gerenciados.

Este pacote raiz define o namespace público do Atlas Converge, um engine
que recebe uma coleção ordenada de asserções de estado desejado (Resources)
e as converge no nó, escolhendo para cada uma o Provider adequado à
plataforma real do sistema operacional.

Princípios centrais:
    - A convergência é sequencial, síncrona e determinística
    - A seleção de Provider é uma tabela de despacho em camadas, inspecionável
    - Falhas são explícitas; tolerância a falhas é declarada por Resource
    - Notificações entre Resources têm semântica imediata ou adiada

Arquitetura em alto nível:
    - core.config   → carregamento e deep-merge de configuração
    - core.node     → Node, camadas de atributos, Run List e Roles
    - core.resource → Resources, guards, notificações e coleção
    - core.provider → contrato de Provider e Providers embutidos
    - core.platform → registry de Providers por plataforma/versão
    - core.engine   → Runner (engine de convergência)
    - core.run      → contexto de execução e tipos de resultado

Limites explícitos:
    - Não define DSL de declaração de Resources
    - Não persiste nós, roles ou data bags
    - Não busca nem renderiza arquivos
"""
# src/atlas_converge/__init__.py
from .core.engine import Runner, converge
from .core.node import Node, RunList
from .core.platform import PlatformRegistry, platform_registry

__all__ = [
    "Node",
    "PlatformRegistry",
    "RunList",
    "Runner",
    "converge",
    "platform_registry",
]
