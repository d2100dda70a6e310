"""
Logs API - Captured game telemetry

GET    /api/logs - Recent log entries (newest first)
DELETE /api/logs - Clear the in-memory log store
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from manvsgod.core.logging.store import GameLogStore
from manvsgod.webui.api.deps import get_log_store
from manvsgod.webui.api.error_envelope import ErrorEnvelope


router = APIRouter()


@router.get("")
def list_logs(
    level: Optional[str] = Query(None, description="debug | info | warn | error"),
    category: Optional[str] = Query(None),
    session_id: Optional[str] = Query(None),
    level_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    log_store: GameLogStore = Depends(get_log_store),
):
    entries = log_store.query(
        level=level,
        category=category,
        session_id=session_id,
        level_id=level_id,
        limit=limit,
    )
    return ErrorEnvelope.format_success({
        "session_id": log_store.session_id,
        "total": len(log_store),
        "logs": [entry.model_dump() for entry in entries],
    })


@router.delete("")
def clear_logs(log_store: GameLogStore = Depends(get_log_store)):
    log_store.clear()
    return ErrorEnvelope.format_success({"cleared": True})
