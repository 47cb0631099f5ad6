# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas Converge.

Este módulo define fixtures reutilizáveis que fornecem:
- configuração mínima e determinística
- contexto de execução controlado (RunContext)
- Node com fatos de plataforma (ubuntu 10.04)
- Providers dummy que registram as chamadas em um journal compartilhado
- Registry isolado, sem estado global

Decisões arquiteturais:
    - Providers dummy utilizam duck typing em vez de herança
    - O journal é uma lista simples, inspecionada pelos testes de ordem
    - O registry de processo é descartado após cada teste
    - Imports do core são realizados de forma lazy

Invariantes:
    - Nenhuma fixture executa comandos externos
    - Nenhuma fixture depende de estado global

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica de domínio
"""

import pytest
from datetime import datetime, timezone


@pytest.fixture(autouse=True)
def _isolated_platform_registry():
    """Descarta o registry de processo após cada teste."""
    yield
    from atlas_converge.core.platform.registry import _reset_platform_registry

    _reset_platform_registry()


@pytest.fixture
def defaults_yaml() -> str:
    """Conteúdo típico de `config.defaults.yaml`."""
    return """\
runner:
  log_level: DEBUG
guards:
  command_timeout: 30
roles:
  source: disk
  path: roles
"""


@pytest.fixture
def local_yaml() -> str:
    """Overrides locais sobre os defaults."""
    return """\
runner:
  log_level: INFO
roles:
  path: /srv/roles
"""


@pytest.fixture
def dummy_config() -> dict:
    return {
        "runner": {"log_level": "DEBUG"},
        "guards": {"command_timeout": None},
    }


@pytest.fixture
def dummy_ctx(dummy_config):
    """
    RunContext determinístico.

    `run_id` e `created_at` são fixos; o nível de log é DEBUG para que
    todos os eventos fiquem disponíveis às asserções.
    """
    from atlas_converge.core.run.context import RunContext

    return RunContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config=dummy_config,
        meta={"source": "pytest"},
    )


@pytest.fixture
def ubuntu_node():
    from atlas_converge.core.node.node import Node

    return Node(
        "web01.example.com",
        normal={"platform": "ubuntu", "platform_version": "10.04"},
    )


@pytest.fixture
def journal() -> list:
    """Registro compartilhado de `(resource, action)` executados."""
    return []


@pytest.fixture
def RecordingProvider(journal):
    """
    Fixture factory de Provider dummy.

    Cada action `action_<nome>` registra `(str(resource), nome)` no
    journal. O valor de retorno (mudança) vem de
    `resource.supports["changes"]` (padrão True). Quando
    `resource.supports["raises"]` é verdadeiro, a action levanta
    RuntimeError depois de registrar a chamada.
    """

    class _RecordingProvider:
        def __init__(self, node, resource, collection=None):
            self.node = node
            self.resource = resource
            self.collection = collection

        def load_current_state(self):
            return {"loaded": True}

        def _record(self, action):
            journal.append((str(self.resource), action))
            if self.resource.supports.get("raises"):
                raise RuntimeError(f"boom in {self.resource}")
            return bool(self.resource.supports.get("changes", True))

        def action_nothing(self, state):
            return False

        def action_run(self, state):
            return self._record("run")

        def action_restart(self, state):
            return self._record("restart")

        def action_reload(self, state):
            return self._record("reload")

    return _RecordingProvider


@pytest.fixture
def ServiceResource():
    """Resource de teste com actions `run`, `restart` e `reload`."""
    from atlas_converge.core.resource.resource import Resource

    class Service(Resource):
        kind = "service"
        allowed_actions = ("nothing", "run", "restart", "reload")
        default_action = "run"

    return Service


@pytest.fixture
def registry(RecordingProvider):
    """Registry isolado com `service` ligado ao Provider dummy."""
    from atlas_converge.core.platform.registry import build_default_registry

    reg = build_default_registry()
    reg.register("service", RecordingProvider)
    return reg
