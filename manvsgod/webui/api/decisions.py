"""
Decisions API - Collective choice log

POST /api/submit-decision - Record one player's scenario choice
GET  /api/get-stats       - Choice statistics (one scenario or all)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from manvsgod.core.logging.categories import LogCategory
from manvsgod.store.decisions import DecisionStore, DecisionStoreError, ScenarioDecision
from manvsgod.store.stats import all_stats, scenario_stats
from manvsgod.webui.api.deps import get_decision_store
from manvsgod.webui.api.error_envelope import ErrorEnvelope, StoreUnavailableError


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/submit-decision")
def submit_decision(
    decision: ScenarioDecision,
    store: DecisionStore = Depends(get_decision_store),
):
    try:
        store.append(decision)
    except DecisionStoreError as e:
        logger.error(
            f"Failed to submit decision: {e}",
            extra={"category": LogCategory.GOOGLE_SHEETS, "details": {"scenario_id": decision.scenario_id}},
        )
        raise StoreUnavailableError("Failed to submit decision") from e

    return ErrorEnvelope.format_success({"success": True, "scenario_id": decision.scenario_id})


@router.get("/get-stats")
def get_stats(
    scenario_id: Optional[int] = Query(None, alias="scenarioId"),
    store: DecisionStore = Depends(get_decision_store),
):
    """
    Scenario statistics

    A store failure yields default stats (50/50, no players) for one
    scenario, or an empty list for all scenarios.
    """
    try:
        decisions = store.read_all()
    except DecisionStoreError as e:
        logger.error(
            f"Error fetching scenario stats: {e}",
            extra={"category": LogCategory.GOOGLE_SHEETS},
        )
        decisions = []

    if scenario_id is not None:
        stats = scenario_stats(decisions, scenario_id)
        return ErrorEnvelope.format_success(stats.model_dump())

    return ErrorEnvelope.format_success([stats.model_dump() for stats in all_stats(decisions)])
