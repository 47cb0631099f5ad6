# src/atlas_converge/core/__init__.py
"""
Core do Atlas Converge.

Este pacote contém a implementação canônica do engine de convergência,
reunindo as responsabilidades essenciais para expandir a Run List de um
nó, resolver Providers por plataforma e executar Resources em ordem.

O core é projetado para ser:
    - síncrono e single-thread
    - testável de forma isolada
    - livre de dependências de persistência, UI ou CLI
    - orientado a contratos explícitos (Protocols)

Componentes principais:
    - config   → resolução de configuração (load, deep-merge)
    - node     → Node, AttributeView, RunList, Role e fontes de Role
    - resource → Resource, guards, tabela de notificações, coleção
    - provider → contrato de Provider e Providers embutidos
    - platform → PlatformRegistry (global → plataforma → versão)
    - engine   → Runner
    - run      → RunContext e tipos de resultado

Princípios fundamentais:
    - Nenhuma decisão silenciosa: todo skip, falha ignorada ou notificação
      é registrado no RunContext
    - Estado global apenas no PlatformRegistry, congelado antes da execução

Limites explícitos:
    - Não carrega cookbooks
    - Não avalia declarações de recipes
    - Não acessa backends de persistência diretamente
"""
