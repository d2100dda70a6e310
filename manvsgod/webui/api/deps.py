"""Request dependencies resolving the collaborators held on ``app.state``."""

from fastapi import Request

from manvsgod.core.chess.puzzles import PuzzleClient
from manvsgod.core.config import ManVsGodConfig
from manvsgod.core.logging.store import GameLogStore
from manvsgod.core.rules.engine import RulesEngine
from manvsgod.store.decisions import DecisionStore


def get_config(request: Request) -> ManVsGodConfig:
    return request.app.state.config


def get_engine(request: Request) -> RulesEngine:
    return request.app.state.engine


def get_decision_store(request: Request) -> DecisionStore:
    return request.app.state.decision_store


def get_log_store(request: Request) -> GameLogStore:
    return request.app.state.log_store


def get_puzzles(request: Request) -> PuzzleClient:
    return request.app.state.puzzles
