# src/atlas_converge/core/node/__init__.py
"""
Node, atributos, Run List e Roles.

Componentes:
    - attributes → `AttributeView` (default < normal < override)
    - run_list   → `RunListEntry`, `RunList` e a expansão de Roles
    - role       → `Role`, `RoleSource` e fontes concretas
    - node       → `Node`
"""

from .attributes import AttributeView
from .node import Node
from .role import (
    DiskRoleSource,
    DocumentStore,
    DocumentStoreRoleSource,
    MappingRoleSource,
    Role,
    RoleSource,
    role_source_from_config,
)
from .run_list import RECIPE, ROLE, RunList, RunListEntry

__all__ = [
    "AttributeView",
    "DiskRoleSource",
    "DocumentStore",
    "DocumentStoreRoleSource",
    "MappingRoleSource",
    "Node",
    "RECIPE",
    "ROLE",
    "Role",
    "RoleSource",
    "RunList",
    "RunListEntry",
    "role_source_from_config",
]
