# tests/core/run/test_run_context_logging.py
"""
Testes do log estruturado do RunContext.

Os testes asseguram que:
- eventos incluem run_id, resource, level, message e timestamp
- extras são anexados ao evento
- eventos abaixo de `runner.log_level` são descartados
- níveis desconhecidos são rejeitados
- warnings são agrupados por Resource
"""

import pytest
from datetime import datetime, timezone

try:
    from atlas_converge.core.run.context import RunContext, new_run_context
except Exception as e:  # noqa: BLE001
    RunContext = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing RunContext. Implement:\n"
            "- src/atlas_converge/core/run/context.py (RunContext, new_run_context)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_log_records_structured_event(dummy_ctx):
    _require_imports()
    dummy_ctx.log(resource="execute[ls]", level="info", message="Processing execute[ls]", source_location="x.py line 3")

    assert len(dummy_ctx.events) == 1
    event = dummy_ctx.events[0]
    assert event["run_id"] == "run-test-001"
    assert event["resource"] == "execute[ls]"
    assert event["level"] == "INFO"
    assert event["message"] == "Processing execute[ls]"
    assert event["source_location"] == "x.py line 3"
    assert "timestamp" in event


def test_events_below_log_level_are_dropped():
    _require_imports()
    ctx = RunContext(
        run_id="run-x",
        created_at=datetime(2026, 1, 16, tzinfo=timezone.utc),
        config={"runner": {"log_level": "WARNING"}},
    )
    ctx.log(resource="run", level="DEBUG", message="noise")
    ctx.log(resource="run", level="INFO", message="noise")
    ctx.log(resource="run", level="ERROR", message="kept")

    assert [e["message"] for e in ctx.events] == ["kept"]
    assert ctx.is_enabled_for("warning") is True
    assert ctx.is_enabled_for("info") is False


def test_unknown_level_raises(dummy_ctx):
    _require_imports()
    with pytest.raises(ValueError):
        dummy_ctx.log(resource="run", level="TRACE", message="x")


def test_warnings_and_events_are_grouped_by_resource(dummy_ctx):
    _require_imports()
    dummy_ctx.add_warning(resource="service[a]", message="ignored failure")
    dummy_ctx.add_warning(resource="service[a]", message="again")
    dummy_ctx.log(resource="service[a]", level="DEBUG", message="m1")
    dummy_ctx.log(resource="service[b]", level="DEBUG", message="m2")

    assert dummy_ctx.warnings == {"service[a]": ["ignored failure", "again"]}
    assert [e["message"] for e in dummy_ctx.events_for("service[b]")] == ["m2"]


def test_new_run_context_is_isolated():
    _require_imports()
    a = new_run_context({"runner": {"log_level": "INFO"}})
    b = new_run_context()

    assert a.run_id != b.run_id
    assert a.run_id.startswith("run-")
    assert a.log_level == "INFO"
    assert b.log_level == "DEBUG"
    assert a.created_at.tzinfo is not None
