# src/atlas_converge/core/config/merge.py
"""
Utilitário canônico de deep-merge.

Este módulo implementa a política oficial de deep-merge utilizada pelo
Atlas Converge em dois contextos:
    - resolução da configuração final (defaults + local), em modo estrito
    - composição das camadas de atributos durante a expansão da Run List
      (Roles processadas depois vencem), em modo não estrito

Política de merge:
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - conflito de tipos → erro (estrito) ou overlay vence (não estrito)

Invariantes:
    - A mesma entrada sempre produz a mesma saída
    - Chaves não sobrescritas são preservadas
    - Nenhum input é mutado
"""

from copy import deepcopy
from typing import Any, Dict, Mapping

from .errors import ConfigTypeConflictError


def deep_merge(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
    *,
    strict: bool = True,
) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários.

    Esta função combina uma estrutura base com um overlay, produzindo uma
    nova estrutura resultante sem mutar nenhum dos inputs.

    Política de merge:
        - dict + dict → merge recursivo por chave
        - list        → sobrescrita total
        - escalar     → sobrescrita direta pelo overlay
        - conflito de tipos:
            - strict=True  → `ConfigTypeConflictError`
            - strict=False → o valor do overlay vence

    Decisões arquiteturais:
        - Configuração usa modo estrito: conflito estrutural é erro fatal
        - Atributos de Role usam modo não estrito: o contrato do primitivo
          de merge de atributos é "overlay vence"

    Args:
        base (Mapping[str, Any]): Estrutura base (ex.: defaults).
        override (Mapping[str, Any]): Overlay explícito.
        strict (bool): Se conflitos de tipo devem levantar erro.

    Returns:
        Dict[str, Any]: Nova estrutura resultante do deep-merge.

    Raises:
        ConfigTypeConflictError: Em modo estrito, se ocorrer conflito de tipo.
    """

    if not isinstance(base, Mapping) or not isinstance(override, Mapping):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(dict(base))

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        # dict -> merge recursivo
        if isinstance(base_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value, strict=strict)
            continue

        # list -> sobrescrita total
        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # conflito de tipo (None na base nunca conflita)
        if strict and base_value is not None and type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        # escalar -> sobrescrita
        result[key] = deepcopy(override_value)

    return result
