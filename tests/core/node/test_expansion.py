# tests/core/node/test_expansion.py
"""
Testes da expansão da Run List em recipes e camadas de atributos.

Este módulo valida:
- ordem determinística das recipes expandidas
- deduplicação de recipes repetidas por Roles
- merge de atributos default/override (a Role processada depois vence)
- Roles aninhadas, repetidas e cíclicas
- Role desconhecida como erro explícito
- a expansão não muta a Run List

Decisões arquiteturais:
    - A fonte de Roles é injetada (MappingRoleSource), sem I/O
"""

import pytest

from atlas_converge.core.exceptions import RoleNotFound
from atlas_converge.core.node.role import MappingRoleSource, Role
from atlas_converge.core.node.run_list import RunList


def test_expansion_order_and_override_attributes():
    source = MappingRoleSource([
        Role(name="r", run_list=["c", "a"], override_attributes={"x": 1}),
    ])
    rl = RunList("recipe[a]", "role[r]", "recipe[b]")

    recipes, default_attrs, override_attrs = rl.expand(source)

    assert recipes == ["a", "c", "b"]
    assert override_attrs == {"x": 1}
    assert default_attrs == {}
    assert rl.run_list == ["recipe[a]", "role[r]", "recipe[b]"]


def test_later_role_wins_on_attribute_conflict():
    source = MappingRoleSource({
        "base": {"recipes": ["ntp"], "default_attributes": {"ntp": {"server": "a", "burst": True}}},
        "web": {"run_list": ["recipe[apache2]"], "default_attributes": {"ntp": {"server": "b"}}},
    })
    recipes, default_attrs, _ = RunList("role[base]", "role[web]").expand(source)

    assert recipes == ["ntp", "apache2"]
    assert default_attrs == {"ntp": {"server": "b", "burst": True}}


def test_nested_roles_expand_in_place():
    source = MappingRoleSource([
        Role(name="outer", run_list=["first", "role[inner]", "last"]),
        Role(name="inner", run_list=["middle"], default_attributes={"level": "inner"}),
    ])
    recipes, default_attrs, _ = RunList("role[outer]").expand(source)

    assert recipes == ["first", "middle", "last"]
    assert default_attrs == {"level": "inner"}


def test_cyclic_and_repeated_roles_expand_once():
    source = MappingRoleSource([
        Role(name="a", run_list=["x", "role[b]"]),
        Role(name="b", run_list=["y", "role[a]"]),
    ])
    recipes, _, _ = RunList("role[a]", "role[b]", "role[a]").expand(source)

    assert recipes == ["x", "y"]


def test_unknown_role_raises():
    with pytest.raises(RoleNotFound) as exc:
        RunList("role[missing]").expand(MappingRoleSource())
    assert exc.value.details["role"] == "missing"
