# src/atlas_converge/core/config/__init__.py

"""
Camada de configuração do Atlas Converge.

Este pacote contém as estruturas e utilitários responsáveis por carregar,
mesclar e validar estruturalmente a configuração de uma run de
convergência, além do primitivo de deep-merge reutilizado na expansão
de Roles (camadas de atributos default/override).

A configuração no Atlas Converge é:
    - declarativa (YAML ou JSON)
    - determinística
    - composta por defaults obrigatórios + overrides locais opcionais

Responsabilidades do pacote:
    - Carregamento de documentos YAML/JSON com raiz em dicionário
    - Resolução de configuração final via deep-merge estrito
    - Deep-merge não estrito (overlay vence) para camadas de atributos

Invariantes:
    - A configuração final é um dicionário puro (dict)
    - Conflitos de tipo na configuração são tratados como erro
    - Inputs nunca são mutados pelo merge

Limites explícitos:
    - Não valida semântica de domínio
    - Não interage com Runner ou Resources diretamente
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    DocumentNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .loader import config_section, load_config, load_document
from .merge import deep_merge

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "DocumentNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "config_section",
    "deep_merge",
    "load_config",
    "load_document",
]
