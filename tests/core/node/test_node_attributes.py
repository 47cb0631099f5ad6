# tests/core/node/test_node_attributes.py
"""
Testes do Node e da visão de atributos em camadas.

Este módulo valida:
- prioridade override > normal > default
- deep-merge de mappings presentes em mais de uma camada
- leitura de atributo ausente (None) e `get_path`
- escrita na camada normal e `set_unless`
- `consume_attributes` (run_list/recipes, tags)
- `apply_expansion` gravando as camadas default/override
- serialização `to_dict` / `from_dict`
"""

import json
from pathlib import Path

from atlas_converge.core.node.attributes import AttributeView
from atlas_converge.core.node.node import Node
from atlas_converge.core.node.role import MappingRoleSource, Role


def test_layer_priority():
    node = Node(
        "n1",
        default={"port": 80, "user": "www"},
        normal={"port": 8080},
        override={"user": "nginx"},
    )
    assert node["port"] == 8080
    assert node["user"] == "nginx"
    assert node["missing"] is None
    assert node.has_attribute("port")
    assert not node.has_attribute("missing")


def test_mapping_values_are_deep_merged_across_layers():
    view = AttributeView(
        {"apache": {"port": 80, "dir": "/etc/apache2"}},
        {"apache": {"port": 8080}},
        {"apache": {"user": "www-data"}},
    )
    assert view["apache"] == {"port": 8080, "dir": "/etc/apache2", "user": "www-data"}
    assert view.get_path("apache", "port") == 8080
    assert view.get_path("apache", "port", "x", default="d") == "d"
    assert view.get_path("nope", default=0) == 0


def test_scalar_override_hides_lower_mappings():
    view = AttributeView({"apache": {"port": 80}}, {}, {"apache": "disabled"})
    assert view["apache"] == "disabled"


def test_view_iterates_keys_in_first_appearance_order():
    view = AttributeView({"a": 1, "b": 2}, {"c": 3, "a": 4}, {"d": 5})
    assert list(view) == ["a", "b", "c", "d"]
    assert len(view) == 4
    assert view.to_dict() == {"a": 4, "b": 2, "c": 3, "d": 5}


def test_writes_go_to_normal_layer():
    node = Node("n1", default={"port": 80})
    node["port"] = 81
    node.set_unless("port", 82)
    node.set_unless("user", "www")

    assert node.normal_attrs == {"port": 81, "user": "www"}
    assert node.default_attrs == {"port": 80}


def test_consume_attributes_splits_run_list():
    node = Node("n1")
    node.consume_attributes({"run_list": ["role[base]", "ntp"], "recipes": "apache2", "fqdn": "n1.local"})

    assert node.run_list.run_list == ["role[base]", "recipe[ntp]", "recipe[apache2]"]
    assert node["fqdn"] == "n1.local"
    assert node["tags"] == []
    assert "run_list" not in node.normal_attrs


def test_load_attributes_from_json(tmp_path: Path):
    doc = tmp_path / "node.json"
    doc.write_text(json.dumps({"run_list": ["recipe[a]"], "tags": ["prod"]}), encoding="utf-8")
    node = Node("n1")
    node.load_attributes(doc)

    assert node.run_list == ["recipe[a]"]
    assert node["tags"] == ["prod"]


def test_apply_expansion_replaces_default_and_override_layers():
    source = MappingRoleSource([
        Role(name="web", run_list=["apache2"], default_attributes={"port": 80}, override_attributes={"user": "www"}),
    ])
    node = Node("n1", normal={"port": 8080, "user": "me"}, default={"stale": True}, run_list=["role[web]", "ntp"])

    recipes = node.apply_expansion(source)

    assert recipes == ["apache2", "ntp"]
    assert node.expanded_recipes == ["apache2", "ntp"]
    assert node.default_attrs == {"port": 80}
    assert node["port"] == 8080
    assert node["user"] == "www"
    assert node["stale"] is None
    assert node.has_role("web")
    assert node.has_recipe("apache2")
    assert node.has_recipe("ntp")
    assert node.in_run_list("role[web]")
    assert not node.in_run_list("apache2")


def test_to_dict_from_dict_preserves_layers():
    node = Node("n1", normal={"a": 1}, default={"b": 2}, override={"c": 3}, run_list=["role[base]"])
    restored = Node.from_dict(node.to_dict())

    assert restored.name == "n1"
    assert restored.normal_attrs == {"a": 1}
    assert restored.default_attrs == {"b": 2}
    assert restored.override_attrs == {"c": 3}
    assert restored.run_list == node.run_list
    assert str(restored) == "node[n1]"
