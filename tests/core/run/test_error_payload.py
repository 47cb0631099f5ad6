# tests/core/run/test_error_payload.py
"""
Testes do mapeamento exceção → ErrorPayload e dos tipos de resultado.
"""

import json

from atlas_converge.core.errors import (
    ENGINE_EXECUTION_ERROR,
    PROVIDER_EXECUTION_ERROR,
    ErrorPayload,
    error_payload_from_exception,
)
from atlas_converge.core.exceptions import (
    ConvergeException,
    GuardEvaluationFailure,
    MissingPlatformInfo,
    ProviderExecutionError,
    ProviderNotFound,
    ResourceExecutionError,
)
from atlas_converge.core.run.types import ResourceResult, ResourceStatus, RunResult


def test_converge_exception_maps_to_its_code():
    exc = ProviderExecutionError(
        message="service[nginx] failed on action restart: boom",
        details={"action": "restart"},
        hint="Verifique a declaração",
    )
    payload = error_payload_from_exception(exc, resource="service[nginx]", source_location="r.py line 7")

    assert isinstance(payload, ErrorPayload)
    assert payload.type == PROVIDER_EXECUTION_ERROR
    assert payload.details == {
        "action": "restart",
        "resource": "service[nginx]",
        "source_location": "r.py line 7",
    }
    assert payload.hint == "Verifique a declaração"
    json.dumps(payload.to_dict())


def test_foreign_exception_maps_to_engine_error():
    payload = error_payload_from_exception(KeyError("x"))
    assert payload.type == ENGINE_EXECUTION_ERROR
    assert payload.details == {"exception_class": "KeyError"}


def test_interceptable_hierarchy():
    """Apenas erros de execução (Provider ou guard) são interceptáveis."""
    assert issubclass(ProviderExecutionError, ResourceExecutionError)
    assert issubclass(GuardEvaluationFailure, ResourceExecutionError)
    assert not issubclass(ProviderNotFound, ResourceExecutionError)
    assert not issubclass(MissingPlatformInfo, ResourceExecutionError)
    assert issubclass(ProviderNotFound, ConvergeException)


def test_exception_str_is_message():
    exc = ProviderNotFound(message="no provider", details={})
    assert str(exc) == "no provider"
    assert {exc}


def test_run_result_by_status():
    ok = ResourceResult(resource="service[a]", status=ResourceStatus.CONVERGED, summary="ran run", updated=True)
    skipped = ResourceResult(resource="service[b]", status=ResourceStatus.SKIPPED, summary="skipped due to only_if")
    result = RunResult(success=True, resources=[ok, skipped])

    assert result.by_status(ResourceStatus.SKIPPED) == [skipped]
    assert ok.to_dict()["status"] == "converged"
    assert ok.to_dict()["updated"] is True
