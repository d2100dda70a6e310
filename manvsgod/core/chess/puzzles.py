"""
Chess puzzle source

Lichess daily/random puzzles over HTTP, with a bundled fallback set used
whenever the API is disabled, unreachable or returns an unexpected payload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

import httpx

from manvsgod.core.logging.categories import LogCategory


logger = logging.getLogger(__name__)

LICHESS_API_BASE = "https://lichess.org/api"
PUZZLE_DAILY = f"{LICHESS_API_BASE}/puzzle/daily"
PUZZLE_RANDOM = f"{LICHESS_API_BASE}/puzzle/random"


@dataclass
class ChessProblem:
    id: str
    fen: str
    moves: List[str]
    rating: int
    themes: List[str] = field(default_factory=list)
    game_url: str = ""
    solution: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fen": self.fen,
            "moves": list(self.moves),
            "rating": self.rating,
            "themes": list(self.themes),
            "game_url": self.game_url,
            "solution": list(self.solution),
        }


_OPENING_FEN = "r1bqkb1r/pppp1ppp/2n2n2/4p3/4P3/3P1N2/PPP2PPP/RNBQKB1R w KQkq - 0 1"

FALLBACK_PUZZLES: List[ChessProblem] = [
    ChessProblem(
        id="fallback-1",
        fen="rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
        moves=["e2e4"],
        rating=1000,
        themes=["opening"],
        solution=["e2e4"],
    ),
    ChessProblem(
        id="fallback-2",
        fen="rnbqkb1r/pppp1ppp/5n2/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 0 1",
        moves=["d2d4"],
        rating=1200,
        themes=["opening", "development"],
        solution=["d2d4"],
    ),
    ChessProblem(
        id="fallback-3",
        fen=_OPENING_FEN,
        moves=["c2c4"],
        rating=1400,
        themes=["opening", "center-control"],
        solution=["c2c4"],
    ),
    ChessProblem(
        id="fallback-4",
        fen=_OPENING_FEN,
        moves=["b1c3"],
        rating=1600,
        themes=["development", "knight"],
        solution=["b1c3"],
    ),
    ChessProblem(
        id="fallback-5",
        fen=_OPENING_FEN,
        moves=["f1c4"],
        rating=1800,
        themes=["development", "bishop"],
        solution=["f1c4"],
    ),
]


def fallback_puzzle(level: int = 1) -> ChessProblem:
    """Bundled puzzle for a level; levels past the set reuse the hardest one."""
    index = max(0, min(level - 1, len(FALLBACK_PUZZLES) - 1))
    source = FALLBACK_PUZZLES[index]
    return replace(
        source,
        moves=list(source.moves),
        themes=list(source.themes),
        solution=list(source.solution),
    )


def parse_lichess_puzzle(data: Dict[str, Any]) -> ChessProblem:
    """Convert a Lichess puzzle payload; raises KeyError/TypeError on unexpected shape."""
    puzzle = data["puzzle"]
    moves = puzzle["moves"]
    if isinstance(moves, str):
        moves = moves.split(" ")
    fen = puzzle.get("fen") or data.get("game", {}).get("fen", "")
    return ChessProblem(
        id=puzzle["id"],
        fen=fen,
        moves=list(moves),
        rating=int(puzzle["rating"]),
        themes=list(puzzle.get("themes") or []),
        game_url=data.get("game", {}).get("url", ""),
        solution=list(moves),
    )


class PuzzleClient:
    """
    Puzzle fetcher.

    Args:
        enabled: When False every fetch returns the bundled fallback
        client: Optional httpx.Client (tests inject a MockTransport client)
    """

    def __init__(self, enabled: bool = True, client: Optional[httpx.Client] = None, timeout: float = 5.0):
        self.enabled = enabled
        self._client = client or httpx.Client(timeout=timeout)

    def _fetch(self, url: str, label: str) -> ChessProblem:
        if not self.enabled:
            return fallback_puzzle()
        try:
            response = self._client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            return parse_lichess_puzzle(response.json())
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(
                f"Error fetching {label} puzzle: {e}",
                extra={"category": LogCategory.NETWORK, "details": {"url": url}},
            )
            return fallback_puzzle()

    def fetch_daily(self) -> ChessProblem:
        return self._fetch(PUZZLE_DAILY, "daily")

    def fetch_random(self) -> ChessProblem:
        return self._fetch(PUZZLE_RANDOM, "random")

    def fetch_by_level(self, level: int) -> ChessProblem:
        # Lichess has no rating filter on these endpoints; levels map to the bundled set
        return fallback_puzzle(level)

    def close(self) -> None:
        self._client.close()
