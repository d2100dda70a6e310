"""
Levels API - Level catalog and scoring

GET  /api/levels                  - Level list and game configuration
GET  /api/levels/{id}             - Enriched level (dilemma, God's move, puzzle)
GET  /api/levels/{id}/god-bet     - God's bet for a level
POST /api/levels/{id}/score       - Score a completed level
POST /api/levels/{id}/moral-choice - Consequences of a capture/spare choice
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from manvsgod.core import levels
from manvsgod.core.chess.puzzles import PuzzleClient
from manvsgod.webui.api.deps import get_puzzles
from manvsgod.webui.api.error_envelope import ErrorEnvelope, NotFoundError


router = APIRouter()


class ScoreRequest(BaseModel):
    choice: int = Field(ge=0, le=1, description="0 = capture, 1 = spare")
    player_bet: int = Field(ge=0)
    god_bet: Optional[int] = Field(None, ge=0, description="Computed when omitted")


class MoralChoiceRequest(BaseModel):
    choice: int = Field(ge=0, le=1, description="0 = capture, 1 = spare")


def _require_level(level_id: int) -> None:
    if not 1 <= level_id <= levels.level_count():
        raise NotFoundError("Level", level_id)


@router.get("")
def list_levels():
    return ErrorEnvelope.format_success({
        "levels": [
            {
                "id": level.id,
                "title": level.title,
                "piece": level.piece,
                "difficulty": level.difficulty,
                "base_score": level.base_score,
                "rebellion_bonus": level.rebellion_bonus,
            }
            for level in levels.all_levels()
        ],
        "config": {
            "total_levels": levels.level_count(),
            "max_score": levels.calculate_max_score(),
            "starting_currency": levels.STARTING_CURRENCY,
            "ranking_thresholds": dict(levels.RANKING_THRESHOLDS),
            "moral_thresholds": dict(levels.MORAL_THRESHOLDS),
        },
    })


@router.get("/{level_id}")
def get_level(level_id: int, puzzles: PuzzleClient = Depends(get_puzzles)):
    level = levels.get_level(level_id, puzzles=puzzles)
    if level is None:
        raise NotFoundError("Level", level_id)
    return ErrorEnvelope.format_success(level.model_dump())


@router.get("/{level_id}/god-bet")
def god_bet(level_id: int):
    _require_level(level_id)
    return ErrorEnvelope.format_success({"level_id": level_id, "god_bet": levels.calculate_god_bet(level_id)})


@router.post("/{level_id}/score")
def score_level(level_id: int, request: ScoreRequest):
    _require_level(level_id)
    god = request.god_bet if request.god_bet is not None else levels.calculate_god_bet(level_id)
    score = levels.calculate_level_score(request.choice, level_id, request.player_bet, god)
    return ErrorEnvelope.format_success({
        "level_id": level_id,
        "score": score,
        "god_bet": god,
        "ranking": levels.ranking(score),
    })


@router.post("/{level_id}/moral-choice")
def moral_choice(level_id: int, request: MoralChoiceRequest):
    result = levels.process_moral_choice(level_id, request.choice)
    if result is None:
        raise NotFoundError("Level", level_id)
    return ErrorEnvelope.format_success(result.model_dump())
