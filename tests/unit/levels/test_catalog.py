import logging
import random

import pytest

from manvsgod.core import levels
from manvsgod.core.chess.puzzles import PuzzleClient


def test_catalog_has_five_levels() -> None:
    all_levels = levels.all_levels()
    assert levels.level_count() == 5
    assert [level.id for level in all_levels] == [1, 2, 3, 4, 5]
    assert [level.base_score for level in all_levels] == [50, 75, 100, 125, 150]
    assert [level.rebellion_bonus for level in all_levels] == [25, 35, 50, 75, 100]


def test_max_score_sums_base_and_rebellion() -> None:
    assert levels.calculate_max_score() == 785


def test_get_level_attaches_dilemma_and_puzzle() -> None:
    level = levels.get_level(1)
    assert level.moral_dilemma["backstory"]["name"] == "Peasant Tom"
    assert level.choice_a == "Capture Peasant Tom"
    assert level.choice_b == "Spare Peasant Tom"
    assert level.consequences.choice_a == "Kills an innocent boy who never wanted to fight."
    assert level.god_move.suggested_move == "spare"
    assert level.god_move.confidence == 95
    assert level.chess_problem["id"] == "fallback-1"
    assert level.available_moves == ["e2e4"]


def test_low_weight_level_suggests_capture() -> None:
    level = levels.get_level(5)
    assert level.god_move.suggested_move == "capture"
    assert level.god_move.confidence == 75


def test_get_level_uses_puzzle_client() -> None:
    level = levels.get_level(3, puzzles=PuzzleClient(enabled=False))
    assert level.chess_problem["id"] == "fallback-3"


def test_get_level_leaves_catalog_untouched() -> None:
    levels.get_level(1)
    assert levels.all_levels()[0].choice_a == "Capture the innocent peasant"


def test_unknown_level_logs_error(caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="manvsgod"):
        assert levels.get_level(99) is None
    assert "Level not found" in caplog.text


def test_level_score_with_rebellion_and_spare() -> None:
    # 50 base + 25 rebellion + 80 // 10 + 2 * 10 for sparing
    assert levels.calculate_level_score(levels.CHOICE_SPARE, 1, 80, 50) == 103


def test_level_score_capture_penalty() -> None:
    # 150 base + 50 // 10 - 5 for capturing
    assert levels.calculate_level_score(levels.CHOICE_CAPTURE, 5, 50, 40) == 150


def test_level_score_unknown_level() -> None:
    assert levels.calculate_level_score(1, 42, 50, 50) == 0


def test_god_bet_ranges() -> None:
    rng = random.Random(11)
    for _ in range(20):
        assert 60 <= levels.calculate_god_bet(1, rng=rng) <= 80
        assert 20 <= levels.calculate_god_bet(5, rng=rng) <= 40
    assert levels.calculate_god_bet(42) == 50


@pytest.mark.parametrize("score, rank", [(300, "Master"), (299, "Expert"), (150, "Adept"), (149, "Novice")])
def test_ranking(score, rank) -> None:
    assert levels.ranking(score) == rank


@pytest.mark.parametrize("score, rank", [(90, "Saint"), (70, "Virtuous"), (50, "Neutral"), (49, "Corrupt")])
def test_moral_ranking(score, rank) -> None:
    assert levels.moral_ranking(score) == rank


def test_validate_chess_move() -> None:
    assert levels.validate_chess_move("e4e5", ["e4e5", "e4d5"])
    assert not levels.validate_chess_move("a2a4", ["e4e5"])


def test_process_moral_choice() -> None:
    result = levels.process_moral_choice(2, levels.CHOICE_CAPTURE)
    assert result.captured is True
    assert result.moral_weight == 9
    assert "utilitarian" in result.philosophical_analysis
    assert levels.process_moral_choice(99, 0) is None
