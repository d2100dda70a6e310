import json
import logging

import httpx
import pytest

from manvsgod.store.decisions import (
    DecisionStoreError,
    FallbackDecisionStore,
    MemoryDecisionStore,
    ScenarioDecision,
    SheetsDecisionStore,
    SQLiteDecisionStore,
    build_decision_store,
)


def _decision(scenario_id: int = 1, choice: int = 0) -> ScenarioDecision:
    return ScenarioDecision(
        timestamp="2026-01-01T12:00:00.000000Z",
        scenario_id=scenario_id,
        choice=choice,
        probabilities={"choice_a": 60, "choice_b": 40},
    )


def _sheets(handler) -> SheetsDecisionStore:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SheetsDecisionStore("sheet-123", "key-abc", client=client)


def test_scenario_decision_accepts_camel_case_aliases() -> None:
    decision = ScenarioDecision.model_validate({
        "timestamp": "2026-01-01T00:00:00Z",
        "scenarioId": 3,
        "choice": 1,
        "probabilities": {"choiceA": 30, "choiceB": 70},
    })
    assert decision.scenario_id == 3
    assert decision.to_row() == ["2026-01-01T00:00:00Z", 3, 1, 30.0, 70.0]


def test_scenario_decision_rejects_unknown_choice() -> None:
    with pytest.raises(ValueError):
        ScenarioDecision(scenario_id=1, choice=2)


def test_from_row_defaults_missing_probabilities() -> None:
    decision = ScenarioDecision.from_row(["2026-01-01T00:00:00Z", "4", "1"])
    assert decision.scenario_id == 4
    assert decision.probabilities.choice_a == 50


def test_memory_store_keeps_order() -> None:
    store = MemoryDecisionStore()
    store.append(_decision(1))
    store.append(_decision(2))
    assert [d.scenario_id for d in store.read_all()] == [1, 2]


def test_sqlite_store_round_trip(tmp_path) -> None:
    path = tmp_path / "nested" / "decisions.sqlite"
    store = SQLiteDecisionStore(path)
    store.append(_decision(1, 0))
    store.append(_decision(2, 1))

    reopened = SQLiteDecisionStore(path)
    decisions = reopened.read_all()
    assert [(d.scenario_id, d.choice) for d in decisions] == [(1, 0), (2, 1)]
    assert decisions[0].probabilities.choice_a == 60


def test_sheets_append_posts_row() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"updates": {"updatedRows": 1}})

    _sheets(handler).append(_decision(5, 1))

    assert seen["method"] == "POST"
    assert seen["path"].startswith("/v4/spreadsheets/sheet-123/values/")
    assert seen["path"].endswith(":append")
    assert seen["params"] == {"valueInputOption": "RAW", "key": "key-abc"}
    assert seen["body"] == {"values": [["2026-01-01T12:00:00.000000Z", 5, 1, 60.0, 40.0]]}


def test_sheets_read_skips_malformed_rows(caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"values": [
            ["Timestamp", "Scenario", "Choice", "A", "B"],
            ["2026-01-01T00:00:00Z", "1", "0", "55", "45"],
            ["2026-01-01T00:01:00Z", "1"],
            ["2026-01-01T00:02:00Z", "2", "1", "40", "60"],
        ]})

    with caplog.at_level(logging.WARNING, logger="manvsgod"):
        decisions = _sheets(handler).read_all()

    assert [(d.scenario_id, d.choice) for d in decisions] == [(1, 0), (2, 1)]
    assert sum("Skipping malformed decision row" in r.getMessage() for r in caplog.records) == 2


def test_sheets_http_error_raises_store_error() -> None:
    store = _sheets(lambda request: httpx.Response(403, json={"error": "forbidden"}))
    with pytest.raises(DecisionStoreError):
        store.append(_decision())
    with pytest.raises(DecisionStoreError):
        store.read_all()


def test_fallback_store_uses_local_on_primary_failure(caplog) -> None:
    primary = _sheets(lambda request: httpx.Response(500))
    local = MemoryDecisionStore()
    store = FallbackDecisionStore(primary, local)

    with caplog.at_level(logging.ERROR, logger="manvsgod"):
        store.append(_decision(7))

    assert [d.scenario_id for d in local.read_all()] == [7]
    assert [d.scenario_id for d in store.read_all()] == [7]
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_build_store_without_credentials_is_local(config, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="manvsgod"):
        store = build_decision_store(config)
    assert isinstance(store, SQLiteDecisionStore)
    assert "credentials not configured" in caplog.text


def test_build_store_treats_placeholder_key_as_missing(config) -> None:
    config = config.model_copy(update={"google_sheet_id": "sheet", "google_sheets_api_key": "your_api_key_here"})
    assert isinstance(build_decision_store(config), SQLiteDecisionStore)


def test_build_store_with_credentials_wraps_sheets(config) -> None:
    config = config.model_copy(update={"google_sheet_id": "sheet", "google_sheets_api_key": "real-key"})
    store = build_decision_store(config, client=httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200))))
    assert isinstance(store, FallbackDecisionStore)
    assert isinstance(store.primary, SheetsDecisionStore)
    assert isinstance(store.fallback, SQLiteDecisionStore)
