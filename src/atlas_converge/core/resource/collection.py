# src/atlas_converge/core/resource/collection.py
"""
Coleção ordenada de Resources de uma run.

A ordem da coleção é a ordem de convergência. A busca é feita pela forma
`kind[name]`; declarações repetidas com a mesma chave são permitidas e a
mais recente vence a busca.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from .resource import Resource


class ResourceNotFound(KeyError):
    """Nenhum Resource com a chave `kind[name]` na coleção."""


class ResourceCollection:
    """Sequência ordenada de Resources com busca por `kind[name]`."""

    def __init__(self, resources: Optional[Iterable[Resource]] = None):
        self._resources: List[Resource] = []
        for resource in resources or []:
            self.append(resource)

    def append(self, resource: Resource) -> Resource:
        if resource.collection is None:
            resource.collection = self
        self._resources.append(resource)
        return resource

    def insert(self, position: int, resource: Resource) -> Resource:
        if resource.collection is None:
            resource.collection = self
        self._resources.insert(position, resource)
        return resource

    def lookup(self, key: str) -> Resource:
        for resource in reversed(self._resources):
            if str(resource) == key:
                return resource
        raise ResourceNotFound(key)

    def keys(self) -> List[str]:
        return [str(r) for r in self._resources]

    def __contains__(self, key: object) -> bool:
        return any(str(r) == key for r in self._resources)

    def __iter__(self) -> Iterator[Resource]:
        return iter(list(self._resources))

    def __len__(self) -> int:
        return len(self._resources)

    def __getitem__(self, pos: int) -> Resource:
        return self._resources[pos]
