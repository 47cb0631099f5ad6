# src/atlas_converge/core/node/role.py
"""
Roles e fontes de Roles.

Uma Role é um pacote nomeado e reutilizável de recipes e de atributos
default/override. Este módulo define:
    - `Role`: o registro consumido pela expansão da Run List
    - `RoleSource` (Protocol): contrato `load_role(name) -> Role`
    - Fontes concretas:
        - `DiskRoleSource`: um documento JSON/YAML por Role em um diretório
        - `MappingRoleSource`: Roles em memória
        - `DocumentStoreRoleSource`: adapta um cliente de document store
          ou REST (`load(kind, key)`)
    - `role_source_from_config`: seleção da fonte pela configuração

Decisões arquiteturais:
    - A seleção de fonte é um parâmetro da expansão, não uma decisão do core
    - A persistência (criação, revisão, remoção de Roles) pertence ao
      cliente externo; este módulo apenas lê
    - Role desconhecida é erro explícito (`RoleNotFound`)

Limites explícitos:
    - Não salva Roles
    - Não valida recipes referenciadas
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Union, runtime_checkable

from atlas_converge.core.config.loader import config_section, load_document
from atlas_converge.core.exceptions import RoleNotFound

from .run_list import RunListEntry


@dataclass
class Role:
    """Role: recipes (Run List própria) + atributos default/override."""

    name: str
    description: str = ""
    run_list: List[str] = field(default_factory=list)
    default_attributes: Dict[str, Any] = field(default_factory=dict)
    override_attributes: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized: List[str] = []
        for entry in self.run_list:
            text = str(RunListEntry.parse(entry))
            if text not in normalized:
                normalized.append(text)
        self.run_list = normalized

    @property
    def recipes(self) -> List[str]:
        return [
            RunListEntry.parse(e).name
            for e in self.run_list
            if RunListEntry.parse(e).is_recipe
        ]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, name: Optional[str] = None) -> "Role":
        """Cria uma Role a partir de um documento (`recipes` ou `run_list`)."""
        role_name = data.get("name") or name
        if not isinstance(role_name, str) or not role_name.strip():
            raise ValueError("role name must be a non-empty string")
        entries = list(data.get("run_list") or []) + list(data.get("recipes") or [])
        return cls(
            name=role_name,
            description=str(data.get("description") or ""),
            run_list=entries,
            default_attributes=dict(data.get("default_attributes") or {}),
            override_attributes=dict(data.get("override_attributes") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "run_list": list(self.run_list),
            "default_attributes": dict(self.default_attributes),
            "override_attributes": dict(self.override_attributes),
        }


@runtime_checkable
class RoleSource(Protocol):
    """Contrato mínimo de uma fonte de Roles consumida por `RunList.expand`."""

    def load_role(self, name: str) -> Role:
        ...


@runtime_checkable
class DocumentStore(Protocol):
    """
    Contrato do cliente externo de persistência (document store ou REST).

    Apenas `load` é utilizado pelo engine; os demais métodos documentam o
    contrato completo do colaborador.
    """

    def load(self, kind: str, key: str) -> Any:
        ...

    def save(self, kind: str, record: Any) -> Any:
        ...

    def delete(self, kind: str, key: str, revision: Any) -> None:
        ...

    def list(self, kind: str) -> List[Any]:
        ...


def _role_not_found(name: str, source: str, **details: Any) -> RoleNotFound:
    return RoleNotFound(
        message=f"Role not found: {name}",
        details={"role": name, "source": source, **details},
        hint="Declare a Role na fonte configurada ou remova-a da Run List",
    )


class MappingRoleSource:
    """Fonte de Roles em memória (indexada por nome)."""

    def __init__(self, roles: Union[Mapping[str, Any], Iterable[Role], None] = None):
        self._roles: Dict[str, Role] = {}
        if isinstance(roles, Mapping):
            for name, role in roles.items():
                self.add(role if isinstance(role, Role) else Role.from_dict(role, name=name))
        elif roles is not None:
            for role in roles:
                self.add(role)

    def add(self, role: Role) -> None:
        self._roles[role.name] = role

    def load_role(self, name: str) -> Role:
        if name not in self._roles:
            raise _role_not_found(name, "mapping")
        return self._roles[name]


class DiskRoleSource:
    """
    Fonte de Roles em disco: `<path>/<name>.json|.yaml|.yml`.

    Quando mais de um formato existe para a mesma Role, a ordem de
    preferência é json, yaml, yml.
    """

    SUFFIX_ORDER = (".json", ".yaml", ".yml")

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _find(self, name: str) -> Optional[Path]:
        for suffix in self.SUFFIX_ORDER:
            candidate = self.path / f"{name}{suffix}"
            if candidate.exists():
                return candidate
        return None

    def load_role(self, name: str) -> Role:
        role_file = self._find(name)
        if role_file is None:
            raise _role_not_found(name, "disk", path=str(self.path))
        return Role.from_dict(load_document(role_file), name=name)


class DocumentStoreRoleSource:
    """Fonte de Roles que delega a um cliente externo (`load(kind, key)`)."""

    def __init__(self, store: DocumentStore, *, kind: str = "role"):
        self.store = store
        self.kind = kind

    def load_role(self, name: str) -> Role:
        try:
            record = self.store.load(self.kind, name)
        except KeyError as e:
            raise _role_not_found(name, "document_store", kind=self.kind) from e
        if record is None:
            raise _role_not_found(name, "document_store", kind=self.kind)
        if isinstance(record, Role):
            return record
        return Role.from_dict(record, name=name)


def role_source_from_config(
    config: Optional[Dict[str, Any]],
    *,
    store: Optional[DocumentStore] = None,
) -> RoleSource:
    """
    Seleciona a fonte de Roles a partir da seção `roles` da configuração.

    Valores de `roles.source`:
        - `disk` (padrão): `DiskRoleSource(roles.path)` (padrão `roles`)
        - `store`: `DocumentStoreRoleSource(store)`; exige `store`

    Raises:
        ValueError: Se a fonte for desconhecida ou se `store` estiver ausente.
    """
    roles_cfg = config_section(config, "roles")
    source = roles_cfg.get("source", "disk")
    if source == "disk":
        return DiskRoleSource(roles_cfg.get("path", "roles"))
    if source == "store":
        if store is None:
            raise ValueError("roles.source=store requires a document store client")
        return DocumentStoreRoleSource(store, kind=roles_cfg.get("kind", "role"))
    raise ValueError(f"Unknown role source: {source!r}")
