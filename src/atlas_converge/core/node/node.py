# src/atlas_converge/core/node/node.py
"""
Node — a máquina gerenciada, seus atributos e sua Run List.

Este módulo define o `Node`, o alvo de uma run de convergência. Um Node
possui identidade (`name`), três camadas de atributos (default, normal,
override) expostas por um `AttributeView`, e uma `RunList`.

Ciclo de vida:
    - construído uma vez por run
    - camadas mutadas durante a expansão da Run List (`apply_expansion`)
      e durante a avaliação de declarações (externa)
    - tratado como somente-leitura pelo Runner durante a convergência

Decisões arquiteturais:
    - Escritas via `node[key] = value` vão para a camada normal
    - Leituras via `node[key]` retornam None para atributos ausentes
    - Fatos de plataforma (`platform`, `platform_version`, `os`, ...) são
      atributos comuns, lidos pelo PlatformRegistry
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from atlas_converge.core.config.loader import load_document

from .attributes import AttributeView
from .role import RoleSource
from .run_list import RunList, RunListEntry, ROLE

RUN_LIST_KEYS = ("run_list", "recipes")


class Node:
    """Node gerenciado: nome, camadas de atributos e Run List."""

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        normal: Optional[Dict[str, Any]] = None,
        default: Optional[Dict[str, Any]] = None,
        override: Optional[Dict[str, Any]] = None,
        run_list: Optional[Iterable[Any]] = None,
    ):
        if name is not None and not isinstance(name, str):
            raise TypeError("node name must be a string")
        self.name = name
        self.normal_attrs: Dict[str, Any] = dict(normal or {})
        self.default_attrs: Dict[str, Any] = dict(default or {})
        self.override_attrs: Dict[str, Any] = dict(override or {})
        self.run_list = RunList()
        if run_list is not None:
            self.run_list.reset(list(run_list))
        self.expanded_recipes: List[str] = []

    # -----------------------------
    # Atributos
    # -----------------------------
    @property
    def attributes(self) -> AttributeView:
        return AttributeView(self.default_attrs, self.normal_attrs, self.override_attrs)

    def __getitem__(self, key: str) -> Any:
        return self.attributes.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.normal_attrs[key] = value

    def has_attribute(self, key: str) -> bool:
        return key in self.attributes

    def set_unless(self, key: str, value: Any) -> None:
        """Define o atributo normal apenas se a chave ainda não existir."""
        if key not in self.normal_attrs:
            self.normal_attrs[key] = value

    def consume_attributes(self, attrs: Optional[Mapping[str, Any]]) -> None:
        """
        Incorpora um documento de atributos (ex.: JSON de bootstrap).

        `run_list`/`recipes` são acrescentados à Run List; as demais chaves
        são gravadas na camada normal. `tags` é inicializado como lista
        vazia quando ausente.
        """
        for key, value in (attrs or {}).items():
            if key in RUN_LIST_KEYS:
                self.run_list.extend(value if isinstance(value, (list, tuple)) else [value])
            else:
                self[key] = value
        if not self.has_attribute("tags"):
            self["tags"] = []

    def load_attributes(self, path: Union[str, Path]) -> None:
        """Carrega um documento JSON/YAML de atributos e o incorpora."""
        self.consume_attributes(load_document(path))

    # -----------------------------
    # Run List
    # -----------------------------
    def apply_expansion(self, source: RoleSource) -> List[str]:
        """
        Expande a Run List e grava as camadas default/override resultantes.

        As camadas default e override do Node são substituídas pelo
        resultado da expansão; a camada normal não é tocada.

        Returns:
            List[str]: Recipes expandidas, em ordem de execução.
        """
        recipes, default_attrs, override_attrs = self.run_list.expand(source)
        self.default_attrs = default_attrs
        self.override_attrs = override_attrs
        self.expanded_recipes = list(recipes)
        return list(recipes)

    def has_recipe(self, name: str) -> bool:
        return name in self.run_list or name in self.expanded_recipes

    def has_role(self, name: str) -> bool:
        return str(RunListEntry(kind=ROLE, name=name)) in self.run_list

    def in_run_list(self, entry: Any) -> bool:
        return entry in self.run_list

    # -----------------------------
    # Serialização
    # -----------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "attributes": dict(self.normal_attrs),
            "defaults": dict(self.default_attrs),
            "overrides": dict(self.override_attrs),
            "run_list": self.run_list.run_list,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Node":
        node = cls(
            data.get("name"),
            normal=dict(data.get("attributes") or {}),
            default=dict(data.get("defaults") or {}),
            override=dict(data.get("overrides") or {}),
        )
        if "run_list" in data:
            node.run_list.reset(list(data.get("run_list") or []))
        else:
            node.run_list.extend(data.get("recipes") or [])
        return node

    def __str__(self) -> str:
        return f"node[{self.name}]"

    def __repr__(self) -> str:
        return f"Node(name={self.name!r}, run_list={self.run_list.run_list!r})"
