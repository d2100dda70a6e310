"""
Simplified board queries for the game's chess scenes.

FEN placement parsing and square naming come from python-chess; move
generation is deliberately naive (no blocking, checks or captures) and
only feeds the UI's move suggestions.

Grid convention: ``grid[row][col]`` with row 0 = rank 8 and col 0 = file a;
empty squares are "".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import chess

from manvsgod.core.logging.categories import LogCategory


logger = logging.getLogger(__name__)

Grid = List[List[str]]

PIECE_VALUES = {"p": 1, "n": 3, "b": 3, "r": 5, "q": 9, "k": 0}

PIECE_NAMES = {
    "P": "White Pawn",
    "N": "White Knight",
    "B": "White Bishop",
    "R": "White Rook",
    "Q": "White Queen",
    "K": "White King",
    "p": "Black Pawn",
    "n": "Black Knight",
    "b": "Black Bishop",
    "r": "Black Rook",
    "q": "Black Queen",
    "k": "Black King",
}

KNIGHT_JUMPS = [(-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1)]


@dataclass
class ChessPosition:
    fen: str
    legal_moves: List[str] = field(default_factory=list)
    evaluation: int = 0
    best_move: str = ""
    piece_to_move: str = "e2"
    phase: str = "opening"

    def to_dict(self) -> dict:
        return {
            "fen": self.fen,
            "legal_moves": list(self.legal_moves),
            "evaluation": self.evaluation,
            "best_move": self.best_move,
            "piece_to_move": self.piece_to_move,
            "phase": self.phase,
        }


def empty_grid() -> Grid:
    return [["" for _ in range(8)] for _ in range(8)]


def parse_board(fen: str) -> Grid:
    """
    Parse the placement field of a FEN into an 8x8 grid.

    A malformed FEN yields an empty grid and a warning.
    """
    placement = fen.split(" ")[0] if isinstance(fen, str) else ""
    try:
        board = chess.BaseBoard(placement)
    except ValueError as e:
        logger.warning(
            f"Unparseable board position: {e}",
            extra={"category": LogCategory.VALIDATION, "details": {"fen": fen}},
        )
        return empty_grid()

    grid = empty_grid()
    for square, piece in board.piece_map().items():
        row, col = to_grid(square)
        grid[row][col] = piece.symbol()
    return grid


def to_grid(square: chess.Square) -> Tuple[int, int]:
    return 7 - chess.square_rank(square), chess.square_file(square)


def grid_square_name(row: int, col: int) -> str:
    return chess.square_name(chess.square(col, 7 - row))


def _parse_square(square: str) -> Optional[chess.Square]:
    try:
        return chess.parse_square(square)
    except (ValueError, TypeError):
        return None


def piece_at(fen: str, square: str) -> str:
    """Piece symbol on ``square`` ("" when empty or not a board square)."""
    parsed = _parse_square(square)
    if parsed is None:
        return ""
    row, col = to_grid(parsed)
    return parse_board(fen)[row][col]


def _on_board(row: int, col: int) -> bool:
    return 0 <= row < 8 and 0 <= col < 8


def _targets(symbol: str, row: int, col: int, grid: Grid) -> List[Tuple[int, int]]:
    kind = symbol.lower()

    if kind == "p":
        # Black pawns walk toward rank 1, white toward rank 8
        direction = 1 if symbol == "p" else -1
        if _on_board(row + direction, col) and not grid[row + direction][col]:
            return [(row + direction, col)]
        return []

    if kind == "r":
        horizontal = [(row, f) for f in range(8) if f != col]
        vertical = [(r, col) for r in range(8) if r != row]
        return horizontal + vertical

    if kind == "n":
        return [
            (row + dr, col + df)
            for df, dr in KNIGHT_JUMPS
            if _on_board(row + dr, col + df)
        ]

    if kind == "b":
        targets = []
        for i in range(1, 8):
            for df, dr in ((i, i), (i, -i), (-i, i), (-i, -i)):
                if _on_board(row + dr, col + df):
                    targets.append((row + dr, col + df))
        return targets

    if kind == "q":
        return [(r, f) for f in range(8) for r in range(8) if (f, r) != (col, row)]

    if kind == "k":
        return [
            (row + dr, col + df)
            for df in (-1, 0, 1)
            for dr in (-1, 0, 1)
            if (df, dr) != (0, 0) and _on_board(row + dr, col + df)
        ]

    return []


def legal_moves_for(fen: str, square: str) -> List[str]:
    """
    Candidate moves for the piece on ``square`` in UCI-like form ("e2e3").

    Simplified: ignores blocking pieces, checks and captures.
    """
    parsed = _parse_square(square)
    if parsed is None:
        return []
    grid = parse_board(fen)
    row, col = to_grid(parsed)
    symbol = grid[row][col]
    if not symbol:
        return []
    name = chess.square_name(parsed)
    return [f"{name}{grid_square_name(r, f)}" for r, f in _targets(symbol, row, col, grid)]


def material_balance(grid: Grid) -> int:
    """White material minus black material."""
    total = 0
    for row in grid:
        for symbol in row:
            if symbol:
                value = PIECE_VALUES.get(symbol.lower(), 0)
                total += value if symbol.isupper() else -value
    return total


def analyze_position(fen: str) -> ChessPosition:
    grid = parse_board(fen)
    moves: List[str] = []
    for row in range(8):
        for col in range(8):
            symbol = grid[row][col]
            if symbol and symbol.isupper():
                moves.extend(legal_moves_for(fen, grid_square_name(row, col)))

    return ChessPosition(
        fen=fen,
        legal_moves=moves,
        evaluation=material_balance(grid),
        best_move=moves[0] if moves else "",
    )


def piece_name(symbol: str) -> str:
    return PIECE_NAMES.get(symbol, "Unknown")


def piece_icon(symbol: str) -> str:
    try:
        return chess.Piece.from_symbol(symbol).unicode_symbol()
    except (ValueError, KeyError):
        return "?"


def piece_value(symbol: str) -> int:
    return PIECE_VALUES.get(symbol.lower(), 0) if symbol else 0
