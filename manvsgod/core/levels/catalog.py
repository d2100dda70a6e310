"""
Level catalog and scoring heuristics

Levels ship as YAML next to this module. ``get_level`` returns an enriched
copy (dilemma, God's move, puzzle); the bundled catalog itself is never
mutated.
"""

from __future__ import annotations

import logging
import random
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel

from manvsgod.core import dilemmas
from manvsgod.core.chess.puzzles import ChessProblem, PuzzleClient, fallback_puzzle
from manvsgod.core.logging.categories import ErrorMessages, LogCategory


logger = logging.getLogger(__name__)


# ============================================
# Game configuration
# ============================================

TOTAL_LEVELS = 5
MAX_SCORE = 500
STARTING_CURRENCY = 1000

RANKING_THRESHOLDS = {"master": 300, "expert": 200, "adept": 150, "novice": 100}
MORAL_THRESHOLDS = {"saint": 90, "virtuous": 70, "neutral": 50, "corrupt": 30}

REBELLION_GAP = 20
CHOICE_CAPTURE = 0
CHOICE_SPARE = 1


# ============================================
# Models
# ============================================

class LevelConsequences(BaseModel):
    choice_a: str
    choice_b: str


class CurrencyCost(BaseModel):
    move_cost: int
    disobedience_penalty: int
    survival_bonus: int


class GodMove(BaseModel):
    suggested_move: str
    confidence: int
    reasoning: str


class MoralChoiceResult(BaseModel):
    captured: bool
    moral_weight: int
    consequences: List[str]
    philosophical_analysis: str


class Level(BaseModel):
    id: int
    title: str
    description: str
    piece: str
    position: str
    board_state: str
    available_moves: List[str]
    choice_a: str
    choice_b: str
    hazard: str
    difficulty: str
    category: str
    philosophical_themes: List[str]
    base_score: int
    rebellion_bonus: int
    probability_intensity: float
    background: str
    consequences: LevelConsequences
    currency_cost: CurrencyCost
    god_move: GodMove
    chess_problem: Optional[Dict[str, Any]] = None
    moral_dilemma: Optional[Dict[str, Any]] = None


@lru_cache(maxsize=1)
def _catalog() -> Dict[int, Level]:
    text = resources.files("manvsgod.core.levels").joinpath("levels.yaml").read_text(encoding="utf-8")
    raw = yaml.safe_load(text) or []
    levels = [Level.model_validate(item) for item in raw]
    return {level.id: level for level in levels}


def _find(level_id: int) -> Optional[Level]:
    return _catalog().get(level_id)


def _dilemma_for(level: Level) -> dilemmas.MoralDilemma:
    return dilemmas.generate(level.piece, level.position, level.id)


# ============================================
# Catalog queries
# ============================================

def get_level(
    level_id: int,
    puzzles: Optional[PuzzleClient] = None,
    rng: Optional[random.Random] = None,
) -> Optional[Level]:
    """
    Load a level enriched with its moral dilemma and chess puzzle.

    Args:
        level_id: Level number (1-based)
        puzzles: Puzzle source; the bundled fallback set when omitted
        rng: Random source for dilemma selection past the fixed levels

    Returns:
        A copy of the level, or None when the id is unknown
    """
    extra = {"category": LogCategory.LEVEL_LOADING, "level_id": level_id}
    logger.info(f"Getting level {level_id}", extra=extra)

    base = _find(level_id)
    if base is None:
        logger.error(ErrorMessages.LEVEL_NOT_FOUND, extra={**extra, "details": {"level_id": level_id}})
        return None

    level = base.model_copy(deep=True)

    try:
        dilemma = dilemmas.generate(level.piece, level.position, level_id, rng=rng)
    except (KeyError, ValueError, OSError) as e:
        logger.warning(
            f"Failed to generate moral dilemma for level {level_id}, using fallback",
            extra={**extra, "details": {"error": str(e)}},
        )
    else:
        weight = dilemma.backstory.moral_weight
        level.moral_dilemma = dilemma.to_dict()
        level.choice_a = dilemma.capture.text
        level.choice_b = dilemma.spare.text
        level.background = dilemma.description
        level.philosophical_themes = list(dilemma.philosophical_themes)
        level.consequences = LevelConsequences(
            choice_a=dilemma.capture.consequences[0],
            choice_b=dilemma.spare.consequences[0],
        )
        level.god_move = GodMove(
            suggested_move="spare" if weight > 5 else "capture",
            confidence=min(95, 50 + weight * 5),
            reasoning=f"Moral weight of {weight}/10 influences the collective wisdom",
        )
        logger.info(
            f"Successfully loaded level {level_id} with moral dilemma",
            extra={**extra, "details": {"title": level.title}},
        )

    try:
        problem: ChessProblem = puzzles.fetch_by_level(level_id) if puzzles else fallback_puzzle(level_id)
    except Exception as e:
        logger.warning(
            f"Failed to fetch chess problem for level {level_id}, using fallback",
            extra={**extra, "details": {"error": str(e)}},
        )
    else:
        level.chess_problem = problem.to_dict()
        level.board_state = problem.fen
        level.available_moves = list(problem.moves)

    return level


def all_levels() -> List[Level]:
    """Bundled levels in id order (copies, not enriched)."""
    return [level.model_copy(deep=True) for _, level in sorted(_catalog().items())]


def level_count() -> int:
    return len(_catalog())


def calculate_max_score() -> int:
    return sum(level.base_score + level.rebellion_bonus for level in _catalog().values())


def ranking(score: float) -> str:
    if score >= RANKING_THRESHOLDS["master"]:
        return "Master"
    if score >= RANKING_THRESHOLDS["expert"]:
        return "Expert"
    if score >= RANKING_THRESHOLDS["adept"]:
        return "Adept"
    return "Novice"


def moral_ranking(moral_score: float) -> str:
    if moral_score >= MORAL_THRESHOLDS["saint"]:
        return "Saint"
    if moral_score >= MORAL_THRESHOLDS["virtuous"]:
        return "Virtuous"
    if moral_score >= MORAL_THRESHOLDS["neutral"]:
        return "Neutral"
    return "Corrupt"


# ============================================
# Scoring
# ============================================

def calculate_level_score(choice: int, level_id: int, player_bet: int, god_bet: int) -> int:
    """
    Points for one level.

    Base score, plus the rebellion bonus when the player's bet strays more
    than 20 from God's, plus a tenth of the bet, plus twice the moral weight
    for sparing or minus the weight for capturing.
    """
    level = _find(level_id)
    if level is None:
        logger.error(
            "Level not found for score calculation",
            extra={"category": LogCategory.GAME_LOGIC, "details": {"level_id": level_id}},
        )
        return 0

    score = level.base_score
    if abs(player_bet - god_bet) > REBELLION_GAP:
        score += level.rebellion_bonus
    score += player_bet // 10

    weight = _dilemma_for(level).backstory.moral_weight
    if choice == CHOICE_CAPTURE:
        score -= weight
    else:
        score += weight * 2

    logger.info(
        "Level score calculated",
        extra={
            "category": LogCategory.GAME_LOGIC,
            "level_id": level_id,
            "details": {"base_score": level.base_score, "final_score": score},
        },
    )
    return score


def calculate_god_bet(level_id: int, rng: Optional[random.Random] = None) -> int:
    """God's confidence for a level: 70 to spare heavy pieces, 30 otherwise, with jitter."""
    level = _find(level_id)
    if level is None:
        logger.warning(
            "Level not found for God bet calculation, using default",
            extra={"category": LogCategory.GAME_LOGIC, "details": {"level_id": level_id}},
        )
        return 50

    weight = _dilemma_for(level).backstory.moral_weight
    confidence = 70 if weight > 5 else 30
    confidence += ((rng or random).random() - 0.5) * 20
    return round(max(10, min(90, confidence)))


def validate_chess_move(move: str, available_moves: List[str]) -> bool:
    is_valid = move in available_moves
    logger.debug(
        "Validated chess move",
        extra={"category": LogCategory.VALIDATION, "details": {"move": move, "is_valid": is_valid}},
    )
    return is_valid


def process_moral_choice(level_id: int, choice: int) -> Optional[MoralChoiceResult]:
    """Consequences of capturing (choice 0) or sparing (choice 1) a level's piece."""
    level = _find(level_id)
    if level is None:
        return None

    captured = choice == CHOICE_CAPTURE
    backstory = _dilemma_for(level).backstory
    return MoralChoiceResult(
        captured=captured,
        moral_weight=backstory.moral_weight,
        consequences=dilemmas.moral_consequences(captured, backstory),
        philosophical_analysis=dilemmas.philosophical_analysis(captured),
    )
