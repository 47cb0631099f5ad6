# tests/core/config/test_loader.py
"""
Testes do loader de configuração e de documentos.

Este módulo valida:
- carregamento de defaults obrigatórios
- aplicação opcional de overrides locais (deep-merge estrito)
- documentos JSON e YAML (fonte de Roles e atributos de Node)
- rejeição explícita de raiz não-dict e de formatos não suportados
- leitura tolerante de seções ausentes (`config_section`)

Decisões arquiteturais:
    - Arquivos são criados em `tmp_path`, nunca no repositório
    - Erros são verificados pelas exceções canônicas de `core.config.errors`

Limites explícitos:
    - Não valida a semântica das chaves de configuração
"""

import json
import pytest
from pathlib import Path

try:
    from atlas_converge.core.config.loader import config_section, load_config, load_document
    from atlas_converge.core.config.errors import (
        ConfigError,
        DefaultsNotFoundError,
        DocumentNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
    )
except Exception as e:  # noqa: BLE001
    load_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config loader. Implement:\n"
            "- src/atlas_converge/core/config/loader.py (load_config, load_document)\n"
            "- src/atlas_converge/core/config/errors.py\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_missing_defaults_raises(tmp_path: Path):
    _require_imports()
    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=str(tmp_path / "defaults.yaml"))


def test_defaults_not_found_is_a_document_and_config_error(tmp_path: Path):
    _require_imports()
    with pytest.raises(DocumentNotFoundError):
        load_config(defaults_path=str(tmp_path / "defaults.yaml"))
    assert issubclass(DefaultsNotFoundError, ConfigError)


def test_missing_local_is_ok(tmp_path: Path, defaults_yaml):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(defaults_yaml, encoding="utf-8")

    cfg = load_config(defaults_path=str(defaults), local_path=str(tmp_path / "local.yaml"))
    assert cfg["runner"]["log_level"] == "DEBUG"
    assert cfg["guards"]["command_timeout"] == 30


def test_load_defaults_and_local(tmp_path: Path, defaults_yaml, local_yaml):
    """
    Verifica que o local sobrescreve os defaults chave a chave.

    Invariantes:
        - Chaves não sobrescritas são preservadas
        - O local sempre tem prioridade
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(defaults_yaml, encoding="utf-8")
    local.write_text(local_yaml, encoding="utf-8")

    cfg = load_config(defaults_path=str(defaults), local_path=str(local))
    assert cfg["runner"]["log_level"] == "INFO"
    assert cfg["roles"] == {"source": "disk", "path": "/srv/roles"}
    assert cfg["guards"]["command_timeout"] == 30


def test_invalid_root_type_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=str(defaults))


def test_unsupported_extension_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.toml"
    defaults.write_text("a = 1\n", encoding="utf-8")
    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=str(defaults))


def test_load_document_json_and_empty_yaml(tmp_path: Path):
    _require_imports()
    doc = tmp_path / "node.json"
    doc.write_text(json.dumps({"run_list": ["role[base]"]}), encoding="utf-8")
    empty = tmp_path / "empty.yml"
    empty.write_text("", encoding="utf-8")

    assert load_document(doc) == {"run_list": ["role[base]"]}
    assert load_document(empty) == {}


def test_missing_document_raises(tmp_path: Path):
    _require_imports()
    with pytest.raises(DocumentNotFoundError):
        load_document(tmp_path / "nope.json")


def test_config_section_tolerates_missing_and_rejects_scalars():
    _require_imports()
    assert config_section({}, "roles") == {}
    assert config_section({"roles": None}, "roles") == {}
    assert config_section(None, "roles") == {}
    with pytest.raises(InvalidConfigRootTypeError):
        config_section({"roles": "disk"}, "roles")
