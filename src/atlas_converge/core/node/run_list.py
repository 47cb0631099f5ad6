# src/atlas_converge/core/node/run_list.py
"""
Run List canônica de um Node.

Este módulo define a `RunList`, a sequência ordenada e deduplicada de
entradas de política (recipes e roles) associada a um Node, e a sua
expansão em uma lista ordenada de recipes acompanhada das camadas de
atributos default/override mescladas a partir das Roles.

Formato de entrada:
    - `kind[name]` → entrada tipada (ex.: `role[base]`, `recipe[apache2]`)
    - qualquer string sem o envelope `kind[name]` → recipe, verbatim

Decisões arquiteturais:
    - A deduplicação é feita pela forma normalizada (`recipe[x]`), por
      comparação exata de string
    - A ordem de inserção é preservada e define a ordem de execução
    - Roles são expandidas recursivamente, cada Role no máximo uma vez
      por expansão (Roles repetidas ou cíclicas são ignoradas)
    - A expansão não muta a Run List

Invariantes:
    - `recipes` e `roles` contêm apenas nomes, sem duplicatas
    - A sequência mestre contém apenas formas normalizadas, sem duplicatas

Limites explícitos:
    - Não valida existência de recipes
    - Não carrega cookbooks
    - Não decide de onde as Roles são lidas (a fonte é um parâmetro)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Set, Tuple, Union

from atlas_converge.core.config.merge import deep_merge

if TYPE_CHECKING:
    from .role import RoleSource

ENTRY_PATTERN = re.compile(r"^(.+)\[(.+)\]$")

RECIPE = "recipe"
ROLE = "role"


@dataclass(frozen=True)
class RunListEntry:
    """Entrada tipada da Run List (`Recipe(name) | Role(name)`)."""

    kind: str
    name: str

    @classmethod
    def parse(cls, entry: Union[str, "RunListEntry"]) -> "RunListEntry":
        if isinstance(entry, RunListEntry):
            return entry
        text = str(entry)
        match = ENTRY_PATTERN.match(text)
        if match:
            return cls(kind=match.group(1), name=match.group(2))
        return cls(kind=RECIPE, name=text)

    @property
    def is_recipe(self) -> bool:
        return self.kind == RECIPE

    @property
    def is_role(self) -> bool:
        return self.kind == ROLE

    def __str__(self) -> str:
        return f"{self.kind}[{self.name}]"


EntryLike = Union[str, RunListEntry]


class RunList:
    """
    Sequência ordenada e deduplicada de recipes e roles.

    Mantém três coleções sincronizadas:
        - `run_list`: formas normalizadas, na ordem de inserção
        - `recipes`: nomes de recipes declaradas diretamente
        - `roles`: nomes de roles declaradas diretamente

    Os métodos de mutação retornam a própria instância para encadeamento.
    """

    def __init__(self, *entries: Any):
        self._run_list: List[str] = []
        self.recipes: List[str] = []
        self.roles: List[str] = []
        if entries:
            self.reset(*entries)

    @property
    def run_list(self) -> List[str]:
        return list(self._run_list)

    # -----------------------------
    # Mutação
    # -----------------------------
    def append(self, entry: EntryLike) -> "RunList":
        parsed = RunListEntry.parse(entry)
        if parsed.is_recipe and parsed.name not in self.recipes:
            self.recipes.append(parsed.name)
        elif parsed.is_role and parsed.name not in self.roles:
            self.roles.append(parsed.name)
        normalized = str(parsed)
        if normalized not in self._run_list:
            self._run_list.append(normalized)
        return self

    def extend(self, entries: Iterable[EntryLike]) -> "RunList":
        for entry in entries:
            self.append(entry)
        return self

    def reset(self, *entries: Any) -> "RunList":
        self._run_list = []
        self.recipes = []
        self.roles = []
        for item in _flatten(entries):
            self.append(item)
        return self

    def remove(self, entry: EntryLike) -> "RunList":
        parsed = RunListEntry.parse(entry)
        normalized = str(parsed)
        self._run_list = [e for e in self._run_list if e != normalized]
        if parsed.is_recipe:
            self.recipes = [r for r in self.recipes if r != parsed.name]
        elif parsed.is_role:
            self.roles = [r for r in self.roles if r != parsed.name]
        return self

    def _rebuild_buckets(self) -> None:
        self.recipes = []
        self.roles = []
        for normalized in self._run_list:
            parsed = RunListEntry.parse(normalized)
            if parsed.is_recipe and parsed.name not in self.recipes:
                self.recipes.append(parsed.name)
            elif parsed.is_role and parsed.name not in self.roles:
                self.roles.append(parsed.name)

    # -----------------------------
    # Expansão
    # -----------------------------
    def expand(self, source: "RoleSource") -> Tuple[List[str], Dict[str, Any], Dict[str, Any]]:
        """
        Expande a Run List em recipes ordenadas e camadas de atributos.

        Percorre a sequência mestre em ordem:
            - recipe → acrescenta o nome à lista de saída (deduplicado)
            - role   → carrega a Role da `source`, faz deep-merge dos seus
              atributos default/override sobre os acumulados (a Role
              processada depois vence) e expande a sua própria Run List
              no ponto em que aparece

        Args:
            source (RoleSource): Fonte de Roles (disco, memória, document store).

        Returns:
            Tuple[List[str], Dict[str, Any], Dict[str, Any]]:
                (recipes, default_attrs, override_attrs)

        Raises:
            RoleNotFound: Se a fonte não conhecer uma Role referenciada.
        """
        recipes: List[str] = []
        default_attrs: Dict[str, Any] = {}
        override_attrs: Dict[str, Any] = {}
        seen_roles: Set[str] = set()

        def walk(entries: Iterable[EntryLike]) -> None:
            nonlocal default_attrs, override_attrs
            for raw in entries:
                entry = RunListEntry.parse(raw)
                if entry.is_recipe:
                    if entry.name not in recipes:
                        recipes.append(entry.name)
                elif entry.is_role:
                    if entry.name in seen_roles:
                        continue
                    seen_roles.add(entry.name)
                    role = source.load_role(entry.name)
                    default_attrs = deep_merge(default_attrs, role.default_attributes, strict=False)
                    override_attrs = deep_merge(override_attrs, role.override_attributes, strict=False)
                    walk(role.run_list)

        walk(self._run_list)
        return recipes, default_attrs, override_attrs

    # -----------------------------
    # Protocolo de sequência
    # -----------------------------
    def is_empty(self) -> bool:
        return len(self._run_list) == 0

    def __len__(self) -> int:
        return len(self._run_list)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._run_list))

    def __getitem__(self, pos: int) -> str:
        return self._run_list[pos]

    def __setitem__(self, pos: int, entry: EntryLike) -> None:
        self._run_list[pos] = str(RunListEntry.parse(entry))
        self._rebuild_buckets()

    def __contains__(self, entry: object) -> bool:
        if not isinstance(entry, (str, RunListEntry)):
            return False
        return str(RunListEntry.parse(entry)) in self._run_list

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RunList):
            check = other.run_list
        elif isinstance(other, (list, tuple)):
            check = [str(RunListEntry.parse(e)) for e in _flatten(other)]
        else:
            return NotImplemented
        return check == self._run_list

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return ", ".join(self._run_list)

    def __repr__(self) -> str:
        return f"RunList({self._run_list!r})"


def _flatten(items: Iterable[Any]) -> Iterator[EntryLike]:
    for item in items:
        if isinstance(item, RunList):
            yield from item.run_list
        elif isinstance(item, (list, tuple)):
            yield from _flatten(item)
        else:
            yield item
