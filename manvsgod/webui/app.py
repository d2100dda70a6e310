"""
FastAPI Application - Man vs God game service

Collaborators (config, rules engine, decision store, log store, puzzle
client) live on ``app.state``; ``create_app`` builds whatever is not
passed in. There is no module-level app instance.

Run with:
    uvicorn manvsgod.webui.app:create_app --factory
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from manvsgod import __version__
from manvsgod.core.chess.puzzles import PuzzleClient
from manvsgod.core.config import ManVsGodConfig, get_config
from manvsgod.core.logging.configure import setup_logging
from manvsgod.core.logging.store import GameLogStore
from manvsgod.core.rules.engine import RulesEngine, build_engine
from manvsgod.store.decisions import DecisionStore, build_decision_store
from manvsgod.webui.api import chess, decisions, dilemmas, health, levels, logs, rules
from manvsgod.webui.api.error_envelope import register_error_handlers
from manvsgod.webui.middleware.log_context import LogContextMiddleware


logger = logging.getLogger(__name__)


def create_app(
    config: Optional[ManVsGodConfig] = None,
    engine: Optional[RulesEngine] = None,
    store: Optional[DecisionStore] = None,
    log_store: Optional[GameLogStore] = None,
    puzzles: Optional[PuzzleClient] = None,
) -> FastAPI:
    """
    Build the game API.

    Args:
        config: Configuration (``get_config()`` when omitted)
        engine: Rules engine (built from config when omitted)
        store: Decision store (Sheets with SQLite fallback, or SQLite alone)
        log_store: Log store the capture handler writes into
        puzzles: Puzzle client (Lichess when enabled in config)
    """
    config = config or get_config()
    log_store = setup_logging(config, store=log_store)

    app = FastAPI(
        title="Man vs God",
        description="Chess moral-choice game backend with a dynamic rules engine",
        version=__version__,
    )

    app.state.config = config
    app.state.log_store = log_store
    app.state.engine = engine or build_engine(config)
    app.state.decision_store = store or build_decision_store(config)
    app.state.puzzles = puzzles or PuzzleClient(enabled=config.lichess_enabled)

    app.add_middleware(LogContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(decisions.router, prefix="/api", tags=["decisions"])
    app.include_router(rules.router, prefix="/api/rules", tags=["rules"])
    app.include_router(levels.router, prefix="/api/levels", tags=["levels"])
    app.include_router(dilemmas.router, prefix="/api/dilemmas", tags=["dilemmas"])
    app.include_router(chess.router, prefix="/api/chess", tags=["chess"])
    app.include_router(logs.router, prefix="/api/logs", tags=["logs"])

    logger.info(
        f"Man vs God API ready (environment={config.environment}, "
        f"store={app.state.decision_store.name})"
    )
    return app
