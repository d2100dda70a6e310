"""
Rules API - Dynamic rules engine surface

POST /api/rules/decisions - Record a completed turn (may evolve rules)
GET  /api/rules           - Active rules
GET  /api/rules/history   - Global evolution history
GET  /api/rules/stats     - Aggregate player statistics
GET  /api/rules/{rule_id} - One rule
POST /api/rules/reset     - Restore seed values (not available in production)
"""

import logging
from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from manvsgod.core.config import ManVsGodConfig
from manvsgod.core.rules.engine import RulesEngine
from manvsgod.core.rules.models import Decision, MoralOutcome
from manvsgod.core.time import utc_now
from manvsgod.webui.api.deps import get_config, get_engine
from manvsgod.webui.api.error_envelope import APIError, ErrorEnvelope, ForbiddenError, NotFoundError


logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Request Models
# ============================================

class MoralOutcomeRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    piece_kind: str
    was_captured: bool
    moral_weight: int = Field(ge=1, le=10)
    backstory: Optional[str] = None


class DecisionRequest(BaseModel):
    """A completed player turn"""
    model_config = ConfigDict(allow_inf_nan=False)

    actor_id: str = Field(min_length=1)
    timestamp: Optional[datetime] = Field(None, description="Defaults to the time of receipt")
    level_index: int
    piece_kind: str
    position: str
    chosen_move: str
    bet_amount: float = Field(ge=0)
    suggested_move: str
    suggested_confidence: float
    followed_suggestion: bool
    disobedience_cost: float = 0
    strategic_score: float
    moral_score: float
    outcome: Literal["win", "lose", "continue"]
    moral_outcome: Optional[MoralOutcomeRequest] = None
    final_position: Optional[str] = None
    decision_time_ms: Optional[int] = Field(None, ge=0)

    def to_decision(self) -> Decision:
        moral = None
        if self.moral_outcome is not None:
            moral = MoralOutcome(**self.moral_outcome.model_dump())
        fields = self.model_dump(exclude={"moral_outcome", "timestamp"})
        return Decision(timestamp=self.timestamp or utc_now(), moral_outcome=moral, **fields)


# ============================================
# API Endpoints
# ============================================

@router.post("/decisions")
def record_decision(
    request: DecisionRequest,
    engine: RulesEngine = Depends(get_engine),
):
    """
    Record a decision and report the evolutions it triggered

    Returns:
        evolutions: events fired by this decision (usually empty)
        total_decisions: size of the decision log afterwards
    """
    try:
        decision = request.to_decision()
    except ValueError as e:
        raise APIError("VALIDATION_ERROR", str(e), status_code=400) from e

    events = engine.record_decision(decision)
    return ErrorEnvelope.format_success({
        "evolutions": [event.to_dict() for event in events],
        "total_decisions": len(engine.get_decisions()),
    })


@router.get("")
def list_rules(engine: RulesEngine = Depends(get_engine)):
    return ErrorEnvelope.format_success([rule.to_dict() for rule in engine.get_active_rules()])


@router.get("/history")
def evolution_history(engine: RulesEngine = Depends(get_engine)):
    return ErrorEnvelope.format_success([event.to_dict() for event in engine.get_evolution_history()])


@router.get("/stats")
def player_stats(engine: RulesEngine = Depends(get_engine)):
    return ErrorEnvelope.format_success(engine.get_player_stats().to_dict())


@router.post("/reset")
def reset_rules(
    engine: RulesEngine = Depends(get_engine),
    config: ManVsGodConfig = Depends(get_config),
):
    if config.is_production:
        raise ForbiddenError("Rule reset is disabled in production")

    engine.reset_rules()
    logger.warning("Rules reset via API")
    return ErrorEnvelope.format_success({"reset": True})


@router.get("/{rule_id}")
def get_rule(rule_id: str, engine: RulesEngine = Depends(get_engine)):
    rule = engine.get_rule(rule_id)
    if rule is None:
        raise NotFoundError("Rule", rule_id)
    return ErrorEnvelope.format_success(rule.to_dict())
