# src/atlas_converge/core/platform/registry.py
"""
Registry de Providers por plataforma e versão.

Este módulo define o `PlatformRegistry`, a tabela de despacho em camadas
que responde "qual Provider realiza um Resource do tipo K na plataforma
P, versão V":

    DEFAULT global  →  {kind → Provider}
    plataforma      →  {DEFAULT → {kind → Provider},
                        versão  → {kind → Provider}}

Resolução (`resolve_bindings`):
    cópia do DEFAULT global
        ← sobreposta pelo DEFAULT da plataforma
        ← sobreposta pelo bucket da versão

Seleção (`find_provider`), em ordem:
    1. Provider explícito do Resource (classe ou nome)
    2. Despacho por plataforma/versão/kind
    3. Convenção de nome (Provider registrado com o nome da classe do
       Resource no catálogo nomeado)

Decisões arquiteturais:
    - Camadas são dicts mesclados, não herança
    - Nomes de plataforma são normalizados (minúsculas, espaços → `_`)
    - Versões são comparadas como string exata (sem semântica de versão)
    - Plataforma desconhecida não é erro: vale o DEFAULT global
    - Ciclo de vida explícito: popular na inicialização, `freeze()` antes
      da convergência

Invariantes:
    - Após `freeze()`, nenhum binding é alterado
    - `resolve_bindings` nunca muta a tabela

Limites explícitos:
    - Não instancia Providers
    - Não executa actions
"""

from __future__ import annotations

import importlib
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from atlas_converge.core.exceptions import (
    MissingPlatformInfo,
    ProviderNotFound,
    RegistryFrozenError,
)
from atlas_converge.core.provider.builtin import BlockProvider, ExecuteProvider

logger = logging.getLogger(__name__)

DEFAULT = "default"

PLATFORM_KEYS = ("platform", "os")
VERSION_KEYS = ("platform_version", "os_version", "os_release")

_WHITESPACE = re.compile(r"\s+")

Bindings = Dict[str, Any]


def normalize_platform(platform: Any) -> str:
    return _WHITESPACE.sub("_", str(platform).strip().lower())


def normalize_version(version: Any) -> str:
    return str(version).strip()


def _class_name(kind: str) -> str:
    """`package_source` → `PackageSource`."""
    return "".join(part.capitalize() for part in re.split(r"[_\-\s]+", kind) if part)


def _fact(node: Any, key: str) -> Any:
    try:
        return node[key]
    except (KeyError, TypeError):
        return None


class PlatformRegistry:
    """
    Tabela de despacho `(plataforma, versão, kind) → Provider`.

    Além dos bindings por kind, mantém um catálogo nomeado de classes de
    Provider (`__name__ → classe`), usado para referências textuais e
    para a convenção de nome.
    """

    def __init__(self) -> None:
        self._default: Bindings = {}
        self._platforms: Dict[str, Dict[str, Bindings]] = {}
        self._named: Dict[str, Any] = {}
        self._frozen = False

    # -----------------------------
    # Ciclo de vida
    # -----------------------------
    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "PlatformRegistry":
        self._frozen = True
        return self

    def _check_mutable(self, what: str) -> None:
        if self._frozen:
            raise RegistryFrozenError(
                message="Platform registry is frozen",
                details={"operation": what},
                hint="Registre Providers na inicialização, antes da convergência",
            )

    # -----------------------------
    # Registro
    # -----------------------------
    def register(
        self,
        kind: str,
        provider: Any,
        platform: Optional[str] = None,
        version: Optional[Any] = None,
    ) -> None:
        """
        Registra um Provider para um kind.

        - sem plataforma → DEFAULT global
        - só plataforma  → DEFAULT da plataforma
        - ambos          → bucket da versão
        """
        self._check_mutable("register")
        provider = self.resolve_reference(provider)
        if platform is None:
            bucket = self._default
        else:
            versions = self._platforms.setdefault(normalize_platform(platform), {})
            key = DEFAULT if version is None else normalize_version(version)
            bucket = versions.setdefault(key, {})
        bucket[kind] = provider
        self._index(provider)

    def register_named(self, provider: Any, name: Optional[str] = None) -> None:
        """Adiciona um Provider ao catálogo nomeado, sem binding de kind."""
        self._check_mutable("register_named")
        self._index(provider, name)

    def _index(self, provider: Any, name: Optional[str] = None) -> None:
        key = name or getattr(provider, "__name__", None)
        if key:
            self._named[key] = provider

    def register_from_config(self, platforms: Mapping[str, Any]) -> None:
        """
        Registra bindings declarativos vindos da configuração.

        Formato:
            {"default": {kind: ref},
             "<plataforma>": {"default": {kind: ref}, "<versão>": {kind: ref}}}

        `ref` é um nome do catálogo ou um caminho `modulo:Classe`.
        """
        for platform, section in (platforms or {}).items():
            if not isinstance(section, Mapping):
                raise ValueError(f"platform section '{platform}' must be a mapping")
            if platform == DEFAULT:
                for kind, ref in section.items():
                    self.register(kind, ref)
                continue
            for version, bindings in section.items():
                if not isinstance(bindings, Mapping):
                    raise ValueError(
                        f"bindings for platform '{platform}' version '{version}' must be a mapping"
                    )
                for kind, ref in bindings.items():
                    if version == DEFAULT:
                        self.register(kind, ref, platform=platform)
                    else:
                        self.register(kind, ref, platform=platform, version=version)

    def resolve_reference(self, ref: Any) -> Any:
        """Resolve uma referência textual de Provider para a classe."""
        if not isinstance(ref, str):
            return ref
        if ":" in ref:
            module_name, _, attr = ref.partition(":")
            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                raise ProviderNotFound(
                    message=f"Provider '{ref}' not found: module '{module_name}' cannot be imported",
                    details={"reference": ref, "module": module_name},
                    hint="Verifique o caminho `modulo:Classe` do Provider",
                ) from e
            try:
                return getattr(module, attr)
            except AttributeError as e:
                raise ProviderNotFound(
                    message=f"Provider '{ref}' not found",
                    details={"reference": ref},
                    hint="Verifique o caminho `modulo:Classe` do Provider",
                ) from e
        if ref in self._named:
            return self._named[ref]
        raise ProviderNotFound(
            message=f"Provider '{ref}' not found",
            details={"reference": ref, "known": sorted(self._named)},
            hint="Registre o Provider no catálogo (`register_named`) antes de referenciá-lo",
        )

    # -----------------------------
    # Consulta
    # -----------------------------
    @property
    def platforms(self) -> List[str]:
        return list(self._platforms)

    def named(self, name: str) -> Optional[Any]:
        return self._named.get(name)

    def resolve_bindings(self, platform: Optional[str], version: Optional[Any]) -> Bindings:
        """Retorna a visão efetiva `{kind → Provider}` para plataforma/versão."""
        bindings: Bindings = dict(self._default)
        if platform is None:
            return bindings
        name = normalize_platform(platform)
        versions = self._platforms.get(name)
        if versions is None:
            logger.debug("Platform %s not found, using all defaults (unsupported platform?)", name)
            return bindings
        bindings.update(versions.get(DEFAULT, {}))
        if version is not None:
            bindings.update(versions.get(normalize_version(version), {}))
        return bindings

    def find_provider(self, platform: Optional[str], version: Optional[Any], resource: Any) -> Any:
        """
        Seleciona o Provider de um Resource (ou de um kind textual).

        Raises:
            ProviderNotFound: Se nenhuma das três estratégias encontrar Provider.
        """
        if isinstance(resource, str):
            kind = resource
            candidates = [_class_name(kind)]
        else:
            explicit = getattr(resource, "explicit_provider", None)
            if explicit is not None:
                return self.resolve_reference(explicit)
            kind = resource.kind
            candidates = [type(resource).__name__, _class_name(kind)]

        bindings = self.resolve_bindings(platform, version)
        if kind in bindings:
            return bindings[kind]

        for name in _dedup(candidates):
            for key in (name, f"{name}Provider"):
                if key in self._named:
                    return self._named[key]

        raise ProviderNotFound(
            message=f"Cannot find a provider for {kind} on {platform} version {version}",
            details={"kind": kind, "platform": platform, "version": version},
            hint="Registre um Provider para o kind no PlatformRegistry",
        )

    def find_platform_and_version(self, node: Any) -> Tuple[str, str]:
        """
        Lê plataforma e versão dos atributos do Node.

        Plataforma: `platform` | `os`.
        Versão: `platform_version` | `os_version` | `os_release`.

        Raises:
            MissingPlatformInfo: Se plataforma ou versão estiver ausente.
        """
        platform = _first_fact(node, PLATFORM_KEYS)
        version = _first_fact(node, VERSION_KEYS)
        if platform is None or version is None:
            raise MissingPlatformInfo(
                message=f"Could not find platform and version information for {node}",
                details={
                    "node": getattr(node, "name", None),
                    "platform": platform,
                    "version": version,
                },
                hint="Defina os atributos `platform` e `platform_version` do Node",
            )
        return normalize_platform(platform), normalize_version(version)

    def provider_for_node(self, node: Any, resource: Any) -> Any:
        """Combina `find_platform_and_version` e `find_provider`."""
        platform, version = self.find_platform_and_version(node)
        return self.find_provider(platform, version, resource)


def _first_fact(node: Any, keys: Iterable[str]) -> Any:
    for key in keys:
        value = _fact(node, key)
        if value is not None:
            return value
    return None


def _dedup(names: Iterable[str]) -> List[str]:
    out: List[str] = []
    for name in names:
        if name and name not in out:
            out.append(name)
    return out


# -----------------------------
# Instância de processo
# -----------------------------
BUILTIN_PROVIDERS = {
    "execute": ExecuteProvider,
    "block": BlockProvider,
}

_registry: Optional[PlatformRegistry] = None


def build_default_registry(config: Optional[Mapping[str, Any]] = None) -> PlatformRegistry:
    """Cria um registry com os Providers embutidos e os bindings da configuração."""
    registry = PlatformRegistry()
    for kind, provider in BUILTIN_PROVIDERS.items():
        registry.register(kind, provider)
    platforms = (config or {}).get("platforms")
    if platforms:
        registry.register_from_config(platforms)
    return registry


def platform_registry() -> PlatformRegistry:
    """Retorna o registry de processo, criando-o na primeira chamada."""
    global _registry
    if _registry is None:
        _registry = build_default_registry()
    return _registry


def _reset_platform_registry() -> None:
    """Descarta o registry de processo. Apenas para testes."""
    global _registry
    _registry = None
