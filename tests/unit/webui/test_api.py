import json
import random
import threading

import httpx
import pytest
from fastapi.testclient import TestClient

from manvsgod.core.chess.puzzles import PuzzleClient
from manvsgod.core.logging.configure import setup_logging
from manvsgod.core.rules import RulesEngine
from manvsgod.store.decisions import MemoryDecisionStore
from manvsgod.webui.app import create_app


START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


@pytest.fixture
def engine(clock) -> RulesEngine:
    return RulesEngine(clock=clock, rng=random.Random(7))


@pytest.fixture
def app(config, engine):
    return create_app(
        config,
        engine=engine,
        store=MemoryDecisionStore(),
        puzzles=PuzzleClient(enabled=False),
    )


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def decision_payload(clock, **overrides) -> dict:
    payload = {
        "actor_id": "player-1",
        "timestamp": clock().isoformat(),
        "level_index": 1,
        "piece_kind": "pawn",
        "position": "e4",
        "chosen_move": "e4e5",
        "bet_amount": 80,
        "suggested_move": "spare",
        "suggested_confidence": 75,
        "followed_suggestion": True,
        "strategic_score": 50,
        "moral_score": 50,
        "outcome": "continue",
    }
    payload.update(overrides)
    return payload


# ============================================
# Health
# ============================================

def test_health_warns_without_sheet_credentials(client) -> None:
    response = client.get("/api/health")
    assert response.status_code == 200

    body = response.json()
    assert body["ok"] is True
    assert body["timestamp"].endswith("Z")

    data = body["data"]
    assert data["status"] == "warn"
    assert data["environment"] == "test"
    assert data["components"]["rules_engine"]["active_rules"] == 6
    assert data["components"]["decision_store"] == {"status": "warn", "backend": "memory"}


# ============================================
# Collective decisions
# ============================================

def test_submit_decision_then_stats(client) -> None:
    response = client.post(
        "/api/submit-decision",
        json={"scenarioId": 3, "choice": 1, "probabilities": {"choiceA": 40, "choiceB": 60}},
    )
    assert response.status_code == 200
    assert response.json()["data"] == {"success": True, "scenario_id": 3}

    stats = client.get("/api/get-stats", params={"scenarioId": 3}).json()["data"]
    assert stats["total_players"] == 1
    assert stats["choice_b_count"] == 1
    assert stats["choice_b_percentage"] == 100

    everything = client.get("/api/get-stats").json()["data"]
    assert [row["scenario_id"] for row in everything] == [3]


def test_stats_for_unplayed_scenario_are_even(client) -> None:
    stats = client.get("/api/get-stats", params={"scenarioId": 42}).json()["data"]
    assert stats["total_players"] == 0
    assert stats["choice_a_percentage"] == 50
    assert stats["choice_b_percentage"] == 50


def test_submit_decision_rejects_bad_choice(client) -> None:
    response = client.post("/api/submit-decision", json={"scenarioId": 3, "choice": 4})
    assert response.status_code == 422
    body = response.json()
    assert body["ok"] is False
    assert body["error_code"] == "VALIDATION_ERROR"
    assert body["details"]["errors"]


# ============================================
# Rules
# ============================================

def test_list_and_get_rules(client) -> None:
    rules = client.get("/api/rules").json()["data"]
    assert rules[0]["id"] == "betting-minimum"
    assert rules[0]["current_value"] == 50

    rule = client.get("/api/rules/gods-authority").json()["data"]
    assert rule["current_value"] == 1.0


def test_unknown_rule_is_not_found(client) -> None:
    response = client.get("/api/rules/nonexistent-id")
    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "NOT_FOUND"
    assert "nonexistent-id" in body["message"]


def test_recorded_decisions_evolve_betting_minimum(client, clock) -> None:
    clock.advance(days=8)

    for _ in range(6):
        data = client.post("/api/rules/decisions", json=decision_payload(clock)).json()["data"]
        assert data["evolutions"] == []

    data = client.post("/api/rules/decisions", json=decision_payload(clock)).json()["data"]
    assert data["total_decisions"] == 7
    assert len(data["evolutions"]) == 1
    event = data["evolutions"][0]
    assert event["rule_id"] == "betting-minimum"
    assert event["previous_value"] == 50
    assert event["new_value"] == 68
    assert event["mutation_kind"] == "recombination"

    assert client.get("/api/rules/betting-minimum").json()["data"]["current_value"] == 68
    history = client.get("/api/rules/history").json()["data"]
    assert [item["rule_id"] for item in history] == ["betting-minimum"]

    stats = client.get("/api/rules/stats").json()["data"]
    assert stats["total_decisions"] == 7
    assert stats["average_bet"] == 80


def test_negative_bet_is_rejected_and_not_recorded(client, engine, clock) -> None:
    response = client.post("/api/rules/decisions", json=decision_payload(clock, bet_amount=-5))
    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"
    assert engine.get_decisions() == []


def test_decision_with_unknown_outcome_fails_validation(client, clock) -> None:
    response = client.post("/api/rules/decisions", json=decision_payload(clock, outcome="draw"))
    assert response.status_code == 422


@pytest.mark.parametrize("field", ["strategic_score", "bet_amount"])
@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_numbers_are_rejected(client, engine, clock, field, value) -> None:
    # The stdlib encoder writes NaN / Infinity tokens, which the request parser accepts
    body = json.dumps(decision_payload(clock, **{field: value}))
    response = client.post("/api/rules/decisions", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 422
    assert engine.get_decisions() == []

    stats = client.get("/api/rules/stats")
    assert stats.status_code == 200
    assert stats.json()["data"]["total_decisions"] == 0


def test_non_finite_moral_weight_is_rejected(client, clock) -> None:
    payload = decision_payload(clock, moral_outcome={"piece_kind": "pawn", "was_captured": False, "moral_weight": 5})
    body = json.dumps(payload).replace('"moral_weight": 5', '"moral_weight": NaN')
    response = client.post("/api/rules/decisions", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 422


def test_reset_restores_seed_values(client, clock) -> None:
    clock.advance(days=8)
    for _ in range(7):
        client.post("/api/rules/decisions", json=decision_payload(clock))

    response = client.post("/api/rules/reset")
    assert response.status_code == 200
    assert client.get("/api/rules/betting-minimum").json()["data"]["current_value"] == 50
    assert client.get("/api/rules/stats").json()["data"]["total_decisions"] == 0


def test_reset_is_forbidden_in_production(config, engine) -> None:
    production = config.model_copy(update={"environment": "production"})
    client = TestClient(create_app(production, engine=engine, store=MemoryDecisionStore(),
                                   puzzles=PuzzleClient(enabled=False)))

    response = client.post("/api/rules/reset")
    assert response.status_code == 403
    assert response.json()["error_code"] == "FORBIDDEN"


# ============================================
# Levels, dilemmas, chess
# ============================================

def test_list_levels_with_game_config(client) -> None:
    data = client.get("/api/levels").json()["data"]
    assert [level["id"] for level in data["levels"]] == [1, 2, 3, 4, 5]
    assert data["config"]["max_score"] == 785
    assert data["config"]["starting_currency"] == 1000


def test_get_enriched_level(client) -> None:
    level = client.get("/api/levels/1").json()["data"]
    assert level["moral_dilemma"]["backstory"]["name"] == "Peasant Tom"
    assert level["god_move"]["suggested_move"] == "spare"
    assert level["chess_problem"]["id"] == "fallback-1"


def test_unknown_level_is_not_found(client) -> None:
    assert client.get("/api/levels/9").status_code == 404
    assert client.get("/api/levels/9/god-bet").status_code == 404
    assert client.post("/api/levels/0/score", json={"choice": 1, "player_bet": 10}).status_code == 404


def test_god_bet_range(client) -> None:
    data = client.get("/api/levels/1/god-bet").json()["data"]
    assert data["level_id"] == 1
    assert 60 <= data["god_bet"] <= 80


def test_score_level(client) -> None:
    data = client.post("/api/levels/1/score", json={"choice": 1, "player_bet": 80, "god_bet": 50}).json()["data"]
    assert data == {"level_id": 1, "score": 103, "god_bet": 50, "ranking": "Novice"}


def test_moral_choice(client) -> None:
    data = client.post("/api/levels/2/moral-choice", json={"choice": 0}).json()["data"]
    assert data["captured"] is True
    assert data["moral_weight"] == 9
    assert data["consequences"]


def test_dilemma_for_piece(client) -> None:
    data = client.get("/api/dilemmas", params={"piece": "knight", "position": "f3", "level": 2}).json()["data"]
    assert data["piece"] == "knight"
    assert set(data["choices"]) == {"capture", "spare"}


def test_moral_score(client) -> None:
    response = client.post(
        "/api/dilemmas/moral-score",
        json={"choices": [{"captured": False, "moral_weight": 8}, {"captured": True, "moral_weight": 2}]},
    )
    assert response.json()["data"] == {"moral_score": 80, "ranking": "Virtuous"}


def test_chess_moves_and_analysis(client) -> None:
    moves = client.get("/api/chess/moves", params={"fen": START_FEN, "square": "e2"}).json()["data"]
    assert moves["piece"] == "P"
    assert moves["moves"] == ["e2e3"]

    analysis = client.get("/api/chess/analyze", params={"fen": START_FEN}).json()["data"]
    assert analysis["evaluation"] == 0
    assert "e2e3" in analysis["legal_moves"]


def test_puzzle_falls_back_when_lichess_disabled(client) -> None:
    data = client.get("/api/chess/puzzle", params={"level": 2}).json()["data"]
    assert data["id"] == "fallback-2"


# ============================================
# Logs and errors
# ============================================

def test_logs_are_tagged_with_request_session(client) -> None:
    response = client.get("/api/levels/9", headers={"X-Session-ID": "player-session", "X-Level-ID": "9"})
    assert response.headers["X-Session-ID"] == "player-session"

    data = client.get("/api/logs", params={"session_id": "player-session"}).json()["data"]
    assert {"error", "warn"} <= {entry["level"] for entry in data["logs"]}
    assert all(entry["level_id"] == 9 for entry in data["logs"])
    assert any("Level not found" in entry["message"] for entry in data["logs"])


def test_clear_logs(client) -> None:
    client.get("/api/levels/9")
    assert client.delete("/api/logs").json()["data"] == {"cleared": True}
    assert client.get("/api/logs", params={"level": "warn"}).json()["data"]["logs"] == []


class BrokenEngine(RulesEngine):
    def get_active_rules(self):
        raise RuntimeError("boom")


def test_unhandled_error_uses_envelope(config) -> None:
    app = create_app(config, engine=BrokenEngine(), store=MemoryDecisionStore(),
                     puzzles=PuzzleClient(enabled=False))
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/rules")
    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "INTERNAL_ERROR"
    assert "debug_info" not in body["details"]


def test_error_form_post_stays_off_the_event_loop(config) -> None:
    posts = []
    loop_threads = []

    def handler(request: httpx.Request) -> httpx.Response:
        posts.append(threading.get_ident())
        return httpx.Response(200)

    app = create_app(config, store=MemoryDecisionStore(), puzzles=PuzzleClient(enabled=False))
    form_config = config.model_copy(update={"error_form_url": "https://example.invalid/formResponse"})
    setup_logging(form_config, store=app.state.log_store, form_client=httpx.Client(transport=httpx.MockTransport(handler)))

    @app.get("/api/boom")
    async def boom():
        loop_threads.append(threading.get_ident())
        raise RuntimeError("boom")

    try:
        response = TestClient(app, raise_server_exceptions=False).get("/api/boom")
    finally:
        # Drains the form queue
        setup_logging(config, store=app.state.log_store)

    assert response.status_code == 500
    assert loop_threads
    assert posts
    assert not set(posts) & set(loop_threads)
