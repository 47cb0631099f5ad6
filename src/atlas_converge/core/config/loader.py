# src/atlas_converge/core/config/loader.py
"""
Loader canônico de configuração e documentos declarativos do Atlas Converge.

Este módulo é responsável por carregar documentos YAML/JSON com raiz em
dicionário e por resolver a configuração efetiva de uma run de
convergência a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional)

O mesmo carregador de documentos é reutilizado por fontes de Role em
disco e pelo carregamento de atributos de Node (JSON/YAML).

Princípios fundamentais:
    - Configuração é declarativa e explícita
    - Erros estruturais são tratados como falhas fatais
    - A mesma entrada sempre produz a mesma configuração final

Invariantes:
    - O arquivo de defaults é obrigatório
    - O resultado é sempre um dicionário puro (`dict`)
    - Overrides nunca mutam os defaults

Limites explícitos:
    - Não valida semântica de domínio
    - Não interage com Runner ou Registry
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import json

import yaml  # PyYAML

from .merge import deep_merge
from .errors import (
    DefaultsNotFoundError,
    DocumentNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}
SUPPORTED_SUFFIXES = YAML_SUFFIXES | JSON_SUFFIXES


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Carrega um documento YAML/JSON e valida sua estrutura básica.

    Decisões arquiteturais:
        - O arquivo deve existir no momento do carregamento
        - O conteúdo raiz deve ser um dicionário (`dict`)
        - Arquivos vazios são interpretados como dicionários vazios

    Args:
        path (Union[str, Path]): Caminho para o documento.

    Returns:
        Dict[str, Any]: Conteúdo do documento carregado como dicionário.

    Raises:
        DocumentNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se o formato não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    path = Path(path)
    if not path.exists():
        raise DocumentNotFoundError(f"Documento não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in YAML_SUFFIXES:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix in JSON_SUFFIXES:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Documento root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_config(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva de uma run de convergência.

    Política de resolução:
        - O arquivo de defaults é obrigatório
        - O arquivo local é opcional; se ausente no disco é ignorado
        - Quando presente, o local sempre tem prioridade sobre defaults
        - A resolução utiliza `deep_merge` em modo estrito

    Args:
        defaults_path (str): Caminho para o arquivo de configuração base.
        local_path (Optional[str]): Caminho opcional para overrides locais.

    Returns:
        Dict[str, Any]: Configuração final resolvida.

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
    """

    defaults_file = Path(defaults_path)
    if not defaults_file.exists():
        raise DefaultsNotFoundError(f"Arquivo de defaults não encontrado: {defaults_file}")
    defaults = load_document(defaults_file)

    effective = defaults

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            local = load_document(local_file)
            effective = deep_merge(defaults, local)

    return effective


def config_section(config: Optional[Dict[str, Any]], name: str) -> Dict[str, Any]:
    """Retorna `config[name]` como dict, tolerando seção ausente ou nula."""
    section = (config or {}).get(name, {}) or {}
    if not isinstance(section, dict):
        raise InvalidConfigRootTypeError(
            f"Seção '{name}' deve ser dict, recebido: {type(section).__name__}"
        )
    return section
