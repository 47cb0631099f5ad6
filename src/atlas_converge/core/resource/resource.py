# src/atlas_converge/core/resource/resource.py
"""
Resource — uma asserção de estado desejado.

Este módulo define a classe `Resource`, a unidade declarativa convergida
pelo Runner. Um Resource carrega:
    - identidade (`kind`, `name`) e a forma textual `kind[name]`
    - actions ordenadas, restritas a `allowed_actions`
    - Provider explícito opcional (classe ou nome do catálogo)
    - guards (`only_if`, `not_if`)
    - política de falha (`ignore_failure`)
    - flag `updated` e tabela de notificações
    - `source_location` capturado na construção

Tabela de notificações:
    action → {"immediate": [Resource], "delayed": [Resource]}

Direção das notificações:
    `a.notifies(action, b)` registra `a` como assinante na tabela de `b`.
    Quando `b` é atualizado, `a.run_action(action)` é executado (imediato)
    ou agendado para depois da passada principal (adiado). Esta direção é
    preservada literalmente; `subscribes` é a declaração inversa.

Invariantes:
    - `actions` é sempre não vazio e contido em `allowed_actions`
    - Uma chave de action na tabela sempre possui as listas `immediate` e
      `delayed`
    - `updated` nunca volta a False durante a run

Limites explícitos:
    - Não avalia guards (responsabilidade do Runner)
    - Não decide a política de falha (responsabilidade do Runner)
"""

from __future__ import annotations

import inspect
import os
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from atlas_converge.core.exceptions import (
    ConvergeException,
    InvalidAction,
    InvalidTiming,
    ProviderExecutionError,
)
from atlas_converge.core.platform.registry import PlatformRegistry, platform_registry
from atlas_converge.core.provider.provider import action_handler

NOTHING = "nothing"
IMMEDIATE = "immediate"
DELAYED = "delayed"
TIMING_ALIASES = {"immediately": IMMEDIATE}
TIMINGS = (IMMEDIATE, DELAYED)


def normalize_timing(timing: str) -> str:
    value = TIMING_ALIASES.get(str(timing), str(timing))
    if value not in TIMINGS:
        raise InvalidTiming(
            message=f"Timing must be delayed or immediate(ly), got {timing!r}",
            details={"timing": timing},
            hint="Use 'delayed' (padrão) ou 'immediate'",
        )
    return value


@dataclass(frozen=True)
class DelayedNotification:
    """Entrada de log de uma notificação adiada."""

    notifier: "Resource"
    subscriber: "Resource"
    action: str

    @property
    def message(self) -> str:
        return f"{self.notifier} sending {self.action} action to {self.subscriber} (delayed)"


DelayedTable = Dict["Resource", Dict[str, List[DelayedNotification]]]


class Resource:
    """
    Asserção de estado desejado convergida por um Provider.

    Subclasses definem `kind`, `allowed_actions` e `default_action`.
    """

    kind: ClassVar[str] = "resource"
    allowed_actions: ClassVar[Tuple[str, ...]] = (NOTHING,)
    default_action: ClassVar[str] = NOTHING

    def __init__(
        self,
        name: str,
        *,
        node: Any = None,
        collection: Any = None,
        action: Union[str, Sequence[str], None] = None,
        provider: Any = None,
        only_if: Any = None,
        not_if: Any = None,
        ignore_failure: bool = False,
        supports: Optional[Dict[str, Any]] = None,
    ):
        if not isinstance(name, str) or not name.strip():
            raise ValueError("resource name must be a non-empty string")
        self.name = name
        self.node = node
        self.collection = collection
        self.explicit_provider = provider
        self.only_if = only_if
        self.not_if = not_if
        self.ignore_failure = bool(ignore_failure)
        self.supports: Dict[str, Any] = dict(supports or {})
        self.updated = False
        self.notification_table: Dict[str, Dict[str, List[Resource]]] = {}
        self.allowed_actions = list(type(self).allowed_actions)  # type: ignore[misc]
        if NOTHING not in self.allowed_actions:
            self.allowed_actions.insert(0, NOTHING)
        self._actions: List[str] = []
        self.actions = action if action is not None else self.default_action
        self.source_location = _capture_source_location(self)

    # -----------------------------
    # Actions
    # -----------------------------
    @property
    def actions(self) -> List[str]:
        return list(self._actions)

    @actions.setter
    def actions(self, value: Union[str, Sequence[str]]) -> None:
        requested = [value] if isinstance(value, str) else [str(a) for a in value]
        if not requested:
            raise InvalidAction(
                message=f"{self} requires at least one action",
                details={"resource": str(self), "allowed": list(self.allowed_actions)},
            )
        for action in requested:
            if action not in self.allowed_actions:
                raise InvalidAction(
                    message=f"{action!r} is not a valid action for {self}",
                    details={
                        "resource": str(self),
                        "action": action,
                        "allowed": list(self.allowed_actions),
                    },
                    hint=f"Use uma das actions: {', '.join(self.allowed_actions)}",
                )
        self._actions = requested

    # -----------------------------
    # Notificações
    # -----------------------------
    def _table_entry(self, action: str) -> Dict[str, List["Resource"]]:
        return self.notification_table.setdefault(action, {IMMEDIATE: [], DELAYED: []})

    def notifies(
        self,
        action: Union[str, Mapping["Resource", Any]],
        targets: Union["Resource", Iterable["Resource"], None] = None,
        timing: str = DELAYED,
    ) -> None:
        """
        Registra este Resource como assinante de `action` em cada alvo.

        Também aceita a forma de mapeamento `{alvo: action}` ou
        `{alvo: (action, timing)}`; nela, `timing` é o padrão das entradas
        sem timing próprio.
        """
        if isinstance(action, Mapping):
            if targets is not None:
                raise TypeError("notifies() com mapeamento não aceita `targets`")
            for target, declared in action.items():
                if isinstance(declared, str):
                    self.notifies(declared, target, timing)
                    continue
                declared = list(declared)
                if len(declared) not in (1, 2):
                    raise TypeError(f"notifies() espera (action, timing) para {target}, recebeu {declared!r}")
                self.notifies(declared[0], target, declared[1] if len(declared) == 2 else timing)
            return
        if targets is None:
            raise TypeError("notifies() requer `targets`")
        timing = normalize_timing(timing)
        for target in _as_list(targets):
            target._table_entry(str(action))[timing].append(self)

    def subscribes(
        self,
        action: str,
        targets: Union["Resource", Iterable["Resource"]],
        timing: str = DELAYED,
    ) -> None:
        """Registra cada alvo como assinante de `action` na tabela deste Resource."""
        timing = normalize_timing(timing)
        entry = self._table_entry(str(action))
        for target in _as_list(targets):
            entry[timing].append(target)

    def collect_delayed(self) -> DelayedTable:
        """Notificações adiadas da própria tabela: assinante → action → entradas."""
        table: DelayedTable = {}
        for action, timings in self.notification_table.items():
            for subscriber in timings.get(DELAYED, []):
                table.setdefault(subscriber, {}).setdefault(action, []).append(
                    DelayedNotification(notifier=self, subscriber=subscriber, action=action)
                )
        return table

    # -----------------------------
    # Execução
    # -----------------------------
    def provider_class(self, registry: Optional[PlatformRegistry] = None) -> Any:
        registry = registry or platform_registry()
        if self.explicit_provider is not None:
            return registry.resolve_reference(self.explicit_provider)
        return registry.provider_for_node(self.node, self)

    def run_action(
        self,
        action: str,
        collection: Any = None,
        *,
        registry: Optional[PlatformRegistry] = None,
        ctx: Any = None,
    ) -> bool:
        """
        Resolve o Provider, carrega o estado atual e executa `action_<action>`.

        Quando o Provider reporta mudança, marca `updated` e executa os
        assinantes imediatos da tabela deste Resource. O handler reporta
        mudança retornando `{"updated": bool}`, um bool, ou marcando
        `resource.updated` durante a chamada.

        Returns:
            bool: True se o Provider reportou mudança.

        Raises:
            ProviderNotFound, MissingPlatformInfo: propagadas sem alteração.
            ProviderExecutionError: qualquer outro erro do Provider.
        """
        collection = collection if collection is not None else self.collection
        provider_cls = self.provider_class(registry)
        _log(ctx, self, "DEBUG", f"{self} using {getattr(provider_cls, '__name__', provider_cls)}")

        try:
            provider = provider_cls(self.node, self, collection)
            state = provider.load_current_state()
        except ConvergeException:
            raise
        except Exception as e:
            raise self._execution_error(action, e) from e

        handler = action_handler(provider, action)
        if handler is None:
            if action == NOTHING:
                return False
            raise ProviderExecutionError(
                message=f"{provider_cls.__name__} does not implement action {action!r}",
                details=self._error_details(action),
                hint=f"Implemente `action_{action}` no Provider",
            )

        was_updated = self.updated
        try:
            result = handler(state)
        except ConvergeException:
            raise
        except Exception as e:
            raise self._execution_error(action, e) from e

        changed = _reported_change(result) or (self.updated and not was_updated)
        if changed:
            self.updated = True
            self._notify_immediate(collection, registry=registry, ctx=ctx)
        return changed

    def _notify_immediate(self, collection: Any, *, registry: Any, ctx: Any) -> None:
        for action, timings in self.notification_table.items():
            for subscriber in list(timings.get(IMMEDIATE, [])):
                _log(ctx, self, "INFO", f"{self} sending {action} action to {subscriber} (immediate)")
                subscriber.run_action(action, collection, registry=registry, ctx=ctx)

    def _error_details(self, action: str) -> Dict[str, Any]:
        return {
            "resource": str(self),
            "action": action,
            "source_location": self.source_location,
        }

    def _execution_error(self, action: str, error: Exception) -> ProviderExecutionError:
        details = self._error_details(action)
        details["exception_class"] = error.__class__.__name__
        return ProviderExecutionError(
            message=f"{self} failed on action {action}: {error}",
            details=details,
            hint=f"Verifique a declaração em {self.source_location}",
        )

    # -----------------------------
    # Representação
    # -----------------------------
    def to_dict(self) -> Dict[str, Any]:
        provider = self.explicit_provider
        return {
            "kind": self.kind,
            "name": self.name,
            "actions": self.actions,
            "provider": getattr(provider, "__name__", provider),
            "ignore_failure": self.ignore_failure,
            "updated": self.updated,
            "supports": dict(self.supports),
            "source_location": self.source_location,
            "notifications": {
                action: {timing: [str(r) for r in subs] for timing, subs in timings.items()}
                for action, timings in self.notification_table.items()
            },
        }

    def __str__(self) -> str:
        return f"{self.kind}[{self.name}]"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"


def _as_list(targets: Any) -> List[Resource]:
    if isinstance(targets, Resource):
        return [targets]
    return list(targets)


def _reported_change(result: Any) -> bool:
    """`{"updated": bool}` lê a chave; bool ou None valem como estão."""
    if isinstance(result, Mapping):
        return bool(result.get("updated"))
    return bool(result)


def _log(ctx: Any, resource: Resource, level: str, message: str) -> None:
    if ctx is not None:
        ctx.log(resource=str(resource), level=level, message=message)


def _capture_source_location(resource: Resource) -> Optional[str]:
    """Primeiro frame fora dos construtores do próprio Resource."""
    frame = inspect.currentframe()
    try:
        current = frame.f_back if frame is not None else None
        while current is not None and current.f_locals.get("self") is resource:
            current = current.f_back
        if current is None:
            return None
        return f"{os.path.abspath(current.f_code.co_filename)} line {current.f_lineno}"
    finally:
        del frame
