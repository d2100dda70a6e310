from manvsgod.core.chess.board import (
    ChessPosition,
    analyze_position,
    legal_moves_for,
    parse_board,
    piece_at,
    piece_icon,
    piece_name,
    piece_value,
)
from manvsgod.core.chess.puzzles import ChessProblem, PuzzleClient, fallback_puzzle

__all__ = [
    "ChessPosition",
    "analyze_position",
    "legal_moves_for",
    "parse_board",
    "piece_at",
    "piece_icon",
    "piece_name",
    "piece_value",
    "ChessProblem",
    "PuzzleClient",
    "fallback_puzzle",
]
