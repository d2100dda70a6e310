"""
Dilemmas API - Moral dilemma content

GET  /api/dilemmas             - Dilemma for a piece/square/level
POST /api/dilemmas/moral-score - Moral score and ranking for a set of choices
"""

from typing import List

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from manvsgod.core import dilemmas, levels
from manvsgod.webui.api.error_envelope import ErrorEnvelope


router = APIRouter()


class MoralChoiceItem(BaseModel):
    captured: bool
    moral_weight: int = Field(ge=0, le=10)


class MoralScoreRequest(BaseModel):
    choices: List[MoralChoiceItem]


@router.get("")
def get_dilemma(
    piece: str = Query("pawn"),
    position: str = Query("e4"),
    level: int = Query(1, ge=1),
):
    dilemma = dilemmas.generate(piece, position, level)
    return ErrorEnvelope.format_success(dilemma.to_dict())


@router.post("/moral-score")
def moral_score(request: MoralScoreRequest):
    score = dilemmas.calculate_moral_score([choice.model_dump() for choice in request.choices])
    return ErrorEnvelope.format_success({"moral_score": score, "ranking": levels.moral_ranking(score)})
