"""
Health API - Service status

GET /api/health - Get service health
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from manvsgod import __version__
from manvsgod.core.config import ManVsGodConfig
from manvsgod.core.logging.store import GameLogStore
from manvsgod.core.rules.engine import RulesEngine
from manvsgod.core.time import iso_z, utc_now
from manvsgod.store.decisions import DecisionStore
from manvsgod.webui.api.deps import get_config, get_decision_store, get_engine, get_log_store
from manvsgod.webui.api.error_envelope import ErrorEnvelope


router = APIRouter()

_start_time = utc_now()


class HealthStatus(BaseModel):
    """Health status response"""
    status: str  # "ok" | "warn"
    version: str
    environment: str
    uptime_seconds: float
    components: Dict[str, Any]


@router.get("/health")
def get_health(
    config: ManVsGodConfig = Depends(get_config),
    engine: RulesEngine = Depends(get_engine),
    store: DecisionStore = Depends(get_decision_store),
    log_store: GameLogStore = Depends(get_log_store),
):
    """
    Service health

    Reports "warn" when the decision store is running without spreadsheet
    credentials (local fallback only).
    """
    components = {
        "rules_engine": {
            "status": "ok",
            "active_rules": len(engine.get_active_rules()),
            "decisions": len(engine.get_decisions()),
        },
        "decision_store": {
            "status": "ok" if config.has_sheets_credentials else "warn",
            "backend": store.name,
        },
        "logs": {"status": "ok", "entries": len(log_store), "session_id": log_store.session_id},
    }
    overall = "ok" if all(c["status"] == "ok" for c in components.values()) else "warn"

    health = HealthStatus(
        status=overall,
        version=__version__,
        environment=config.environment,
        uptime_seconds=(utc_now() - _start_time).total_seconds(),
        components=components,
    )
    data = health.model_dump()
    data["started_at"] = iso_z(_start_time)
    return ErrorEnvelope.format_success(data)
