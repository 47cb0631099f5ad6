# src/atlas_converge/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Atlas Converge.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento, validação estrutural e resolução de configuração e de
documentos declarativos (Roles e atributos de Node em disco).

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros estruturais são tratados como falhas fatais
    - Mensagens de erro são claras e direcionadas ao operador

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção aqui representa falha de Provider ou de Resource

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende de Runner, Registry ou Node
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do Atlas Converge.

    Todas as exceções levantadas durante carregamento, validação estrutural
    e resolução de configuração devem herdar desta classe.

    Limites explícitos:
        - Não representa falha de convergência
        - Não representa erro de Provider
    """


class DocumentNotFoundError(ConfigError):
    """
    Exceção levantada quando um documento declarativo (Role, atributos de
    Node) não é encontrado no caminho indicado.
    """


class DefaultsNotFoundError(DocumentNotFoundError):
    """
    Exceção levantada quando o arquivo de defaults da configuração não é
    encontrado no caminho especificado.

    Decisões arquiteturais:
        - O arquivo de defaults é obrigatório
        - Nenhum default implícito é criado automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando o formato do documento não é suportado.

    Formatos suportados:
        - YAML (.yaml, .yml)
        - JSON (.json)

    Limites explícitos:
        - Não tenta inferir formato por conteúdo
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz de um documento
    não é um dicionário (`dict`).

    Invariantes:
        - O loader só opera sobre estruturas do tipo dicionário
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge
    estrito de configuração.

    Exemplo de conflito:
        - base:     {"guards": {"command_timeout": 10}}
        - override: {"guards": "off"}

    Decisões arquiteturais:
        - O deep-merge de configuração é estritamente tipado por chave
        - O deep-merge de atributos (Roles) não levanta este erro:
          o overlay sempre vence

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """
