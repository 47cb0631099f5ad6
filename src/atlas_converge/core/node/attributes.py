# src/atlas_converge/core/node/attributes.py
"""
Visão explícita sobre as camadas de atributos de um Node.

Um Node possui três camadas de atributos, consultadas em ordem crescente
de prioridade: default < normal < override. O `AttributeView` expõe as
três camadas como um único `Mapping` somente-leitura.

Política de leitura:
    - Valor escalar ou lista → a camada de maior prioridade vence
    - Valor mapping → deep-merge das camadas que possuem a chave como
      mapping (default ← normal ← override); valores não-mapping em
      camadas inferiores são ignorados

Decisões arquiteturais:
    - Acesso explícito por chave (sem despacho dinâmico de métodos)
    - A visão não copia as camadas; reflete o estado atual do Node
    - Escrita acontece no Node, nunca na visão
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Tuple

from atlas_converge.core.config.merge import deep_merge

_MISSING = object()


class AttributeView(Mapping[str, Any]):
    """Mapping somente-leitura sobre (default, normal, override)."""

    def __init__(
        self,
        default: Mapping[str, Any],
        normal: Mapping[str, Any],
        override: Mapping[str, Any],
    ):
        self._default = default
        self._normal = normal
        self._override = override

    @property
    def layers(self) -> Tuple[Mapping[str, Any], ...]:
        """Camadas em ordem crescente de prioridade."""
        return (self._default, self._normal, self._override)

    def __getitem__(self, key: str) -> Any:
        found: List[Any] = [layer[key] for layer in self.layers if key in layer]
        if not found:
            raise KeyError(key)
        winner = found[-1]
        if not isinstance(winner, Mapping):
            return winner
        merged: Dict[str, Any] = {}
        for value in found:
            if isinstance(value, Mapping):
                merged = deep_merge(merged, value, strict=False)
        return merged

    def __iter__(self) -> Iterator[str]:
        seen: List[str] = []
        for layer in self.layers:
            for key in layer:
                if key not in seen:
                    seen.append(key)
        return iter(seen)

    def __len__(self) -> int:
        return len(list(iter(self)))

    def get_path(self, *keys: str, default: Any = None) -> Any:
        """Leitura aninhada: `get_path("apache", "port")`."""
        current: Any = self
        for key in keys:
            if not isinstance(current, Mapping):
                return default
            current = current.get(key, _MISSING)
            if current is _MISSING:
                return default
        return current

    def to_dict(self) -> Dict[str, Any]:
        return {key: self[key] for key in self}
