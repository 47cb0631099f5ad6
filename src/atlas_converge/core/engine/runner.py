# src/atlas_converge/core/engine/runner.py
"""
Runner — engine de convergência do Atlas Converge.

O Runner percorre a coleção de Resources em ordem, avalia guards,
executa as actions declaradas, acumula notificações adiadas e aplica a
política de falha de cada Resource.

Fluxo de uma run:
    1. congela o PlatformRegistry
    2. valida plataforma/versão do Node (quando algum Resource depende de
       despacho por plataforma)
    3. passada principal, na ordem da coleção:
        - `not_if` e depois `only_if` (skip registrado)
        - actions na ordem declarada (notificações imediatas disparam
          de forma síncrona dentro de `run_action`)
        - merge das notificações adiadas do Resource
    4. passada de notificações adiadas, na ordem do primeiro merge e,
       por assinante, na ordem das actions

Decisões arquiteturais:
    - Apenas `ResourceExecutionError` (erro de Provider ou de guard) é
      interceptável por `ignore_failure`; todo o resto aborta a run
    - Toda falha, fatal ou ignorada, é registrada com `kind[name]` e
      `source_location` antes de propagar ou continuar
    - Uma falha fatal interrompe também a passada de notificações adiadas
    - Falhas na passada adiada são sempre fatais
    - Resources declarados sem Node são ligados ao Node da run, inclusive
      assinantes fora da coleção alcançáveis pelas tabelas de notificação
    - Sem retry

Merge da tabela adiada:
    - um assinante mantém a posição da sua primeira inserção
    - cada action de um assinante mantém a posição da primeira inserção
    - entradas de log de merges posteriores são acumuladas
    - cada (assinante, action) executa uma única vez

Limites explícitos:
    - Não expande Run List
    - Não avalia declarações de Resources
    - Não persiste resultados
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from atlas_converge.core.errors import error_payload_from_exception
from atlas_converge.core.exceptions import ConvergeException, ResourceExecutionError
from atlas_converge.core.platform.registry import PlatformRegistry, platform_registry
from atlas_converge.core.resource.guards import GuardEvaluator
from atlas_converge.core.resource.resource import DelayedTable, Resource
from atlas_converge.core.run.context import RUN_SCOPE, RunContext, new_run_context
from atlas_converge.core.run.types import ResourceResult, ResourceStatus, RunResult


class Runner:
    """Engine canônico de convergência (passada principal + adiadas)."""

    def __init__(
        self,
        node: Any,
        collection: Any,
        *,
        registry: Optional[PlatformRegistry] = None,
        ctx: Optional[RunContext] = None,
        guards: Optional[GuardEvaluator] = None,
    ):
        self.node = node
        self.collection = collection
        self.registry = registry or platform_registry()
        self.ctx = ctx or new_run_context()
        self.guards = guards or GuardEvaluator.from_config(self.ctx.config)
        self.delayed: DelayedTable = {}

    # -----------------------------
    # Tabela adiada
    # -----------------------------
    def merge_delayed(self, table: DelayedTable) -> None:
        for subscriber, action_map in table.items():
            current = self.delayed.setdefault(subscriber, {})
            for action, entries in action_map.items():
                current.setdefault(action, []).extend(entries)

    # -----------------------------
    # Logging
    # -----------------------------
    def _log(self, resource: Any, level: str, message: str, **extra: Any) -> None:
        self.ctx.log(resource=str(resource), level=level, message=message, **extra)

    def _log_error(self, resource: Resource, error: BaseException) -> Dict[str, Any]:
        payload = error_payload_from_exception(
            error,
            resource=str(resource),
            source_location=resource.source_location,
        ).to_dict()
        self._log(
            resource,
            "ERROR",
            f"{resource} ({resource.source_location}) had an error: {error}",
            source_location=resource.source_location,
            error=payload,
        )
        return payload

    # -----------------------------
    # Execução
    # -----------------------------
    def _bind_nodes(self) -> List[Resource]:
        """Liga o Node da run aos Resources da coleção e aos assinantes alcançáveis."""
        reached: List[Resource] = []
        seen = set()
        pending = list(self.collection)
        while pending:
            resource = pending.pop(0)
            if id(resource) in seen:
                continue
            seen.add(id(resource))
            reached.append(resource)
            if resource.node is None:
                resource.node = self.node
            for timings in resource.notification_table.values():
                for subscribers in timings.values():
                    pending.extend(subscribers)
        return reached

    def _check_platform(self, resources: List[Resource]) -> None:
        if all(r.explicit_provider is not None for r in resources):
            return
        try:
            platform, version = self.registry.find_platform_and_version(self.node)
        except ConvergeException as e:
            self._log(RUN_SCOPE, "ERROR", str(e), error=error_payload_from_exception(e).to_dict())
            raise
        self._log(RUN_SCOPE, "DEBUG", f"Converging {self.node} on {platform} {version}")

    def _converge_resource(self, resource: Resource) -> ResourceResult:
        self._log(resource, "DEBUG", f"Processing {resource}")

        reason = self.guards.skip_reason(resource)
        if reason is not None:
            self._log(resource, "DEBUG", f"Skipping {resource} due to {reason}")
            return ResourceResult(
                resource=str(resource),
                status=ResourceStatus.SKIPPED,
                summary=f"skipped due to {reason}",
                source_location=resource.source_location,
            )

        for action in resource.actions:
            resource.run_action(action, self.collection, registry=self.registry, ctx=self.ctx)
        self.merge_delayed(resource.collect_delayed())

        return ResourceResult(
            resource=str(resource),
            status=ResourceStatus.CONVERGED,
            summary=f"ran {', '.join(resource.actions)}",
            updated=resource.updated,
            source_location=resource.source_location,
        )

    def _run_delayed(self) -> List[str]:
        fired: List[str] = []
        for subscriber, action_map in self.delayed.items():
            for action, entries in action_map.items():
                for entry in entries:
                    self._log(entry.notifier, "INFO", entry.message)
                try:
                    subscriber.run_action(action, self.collection, registry=self.registry, ctx=self.ctx)
                except Exception as e:
                    self._log_error(subscriber, e)
                    raise
                fired.append(f"{action} -> {subscriber}")
        return fired

    def converge(self) -> RunResult:
        """
        Executa a run de convergência.

        Returns:
            RunResult: `success=True` e um ResourceResult por Resource.

        Raises:
            MissingPlatformInfo: Node sem plataforma/versão (antes de qualquer action).
            ConvergeException: Qualquer falha fatal, já registrada no RunContext.
            Exception: Erros inesperados, também registrados antes de propagar.
        """
        self.registry.freeze()
        self.delayed = {}
        self._check_platform(self._bind_nodes())

        results: List[ResourceResult] = []
        for resource in self.collection:
            try:
                results.append(self._converge_resource(resource))
            except ResourceExecutionError as e:
                payload = self._log_error(resource, e)
                if not resource.ignore_failure:
                    raise
                self.ctx.add_warning(resource=str(resource), message=e.message)
                results.append(
                    ResourceResult(
                        resource=str(resource),
                        status=ResourceStatus.FAILED,
                        summary="failure ignored",
                        updated=resource.updated,
                        source_location=resource.source_location,
                        error=payload,
                    )
                )
            except Exception as e:
                self._log_error(resource, e)
                raise

        fired = self._run_delayed()
        self._log(RUN_SCOPE, "INFO", f"Converged {len(results)} resources")
        return RunResult(success=True, resources=results, delayed=fired)


def converge(node: Any, collection: Any, **kwargs: Any) -> RunResult:
    """Atalho: `Runner(node, collection, **kwargs).converge()`."""
    return Runner(node, collection, **kwargs).converge()
