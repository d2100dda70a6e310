"""
Chess API - Simplified board queries and puzzles

GET /api/chess/board?fen=           - 8x8 grid
GET /api/chess/moves?fen=&square=   - Candidate moves for one piece
GET /api/chess/analyze?fen=         - Material evaluation and white's moves
GET /api/chess/puzzle[?level=]      - Level puzzle, or the daily puzzle
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from manvsgod.core.chess import board
from manvsgod.core.chess.puzzles import PuzzleClient, fallback_puzzle
from manvsgod.core.logging.categories import LogCategory
from manvsgod.core.logging.guard import run_with_fallback
from manvsgod.webui.api.deps import get_puzzles
from manvsgod.webui.api.error_envelope import ErrorEnvelope


router = APIRouter()


@router.get("/board")
def get_board(fen: str = Query(..., min_length=1)):
    grid = board.parse_board(fen)
    return ErrorEnvelope.format_success({"fen": fen, "board": grid, "evaluation": board.material_balance(grid)})


@router.get("/moves")
def get_moves(fen: str = Query(..., min_length=1), square: str = Query(..., min_length=2, max_length=2)):
    symbol = board.piece_at(fen, square)
    return ErrorEnvelope.format_success({
        "square": square,
        "piece": symbol,
        "piece_name": board.piece_name(symbol) if symbol else None,
        "icon": board.piece_icon(symbol) if symbol else None,
        "moves": board.legal_moves_for(fen, square),
    })


@router.get("/analyze")
def analyze(fen: str = Query(..., min_length=1)):
    return ErrorEnvelope.format_success(board.analyze_position(fen).to_dict())


@router.get("/puzzle")
def get_puzzle(
    level: Optional[int] = Query(None, ge=1),
    puzzles: PuzzleClient = Depends(get_puzzles),
):
    def operation():
        if level is not None:
            return puzzles.fetch_by_level(level)
        return puzzles.fetch_daily()

    problem = run_with_fallback(
        operation,
        LogCategory.NETWORK,
        fallback=fallback_puzzle(level or 1),
        level_id=level,
        action="fetch_puzzle",
    )
    return ErrorEnvelope.format_success(problem.to_dict())
