"""Per-scenario choice statistics over stored decisions."""

import math
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from manvsgod.core.time import utc_now_ms
from manvsgod.store.decisions import ScenarioDecision


class ScenarioStats(BaseModel):
    scenario_id: int
    total_players: int = 0
    choice_a_count: int = 0
    choice_b_count: int = 0
    choice_a_percentage: float = 50.0
    choice_b_percentage: float = 50.0


def scenario_stats(decisions: Sequence[ScenarioDecision], scenario_id: int) -> ScenarioStats:
    """Counts and percentages for one scenario; 50/50 when nobody has played it."""
    relevant = [d for d in decisions if d.scenario_id == scenario_id]
    total = len(relevant)
    choice_a = sum(1 for d in relevant if d.choice == 0)
    choice_b = sum(1 for d in relevant if d.choice == 1)

    if total == 0:
        return ScenarioStats(scenario_id=scenario_id)

    return ScenarioStats(
        scenario_id=scenario_id,
        total_players=total,
        choice_a_count=choice_a,
        choice_b_count=choice_b,
        choice_a_percentage=choice_a / total * 100,
        choice_b_percentage=choice_b / total * 100,
    )


def all_stats(decisions: Sequence[ScenarioDecision]) -> List[ScenarioStats]:
    """One entry per distinct scenario id, in first-seen order."""
    scenario_ids = list(dict.fromkeys(d.scenario_id for d in decisions))
    return [scenario_stats(decisions, scenario_id) for scenario_id in scenario_ids]


def calculate_dynamic_probabilities(
    scenario_id: int,
    base_prob: float = 50,
    now_ms: Optional[int] = None,
) -> Dict[str, float]:
    """
    Displayed crowd probabilities with time and per-scenario variation.

    Args:
        scenario_id: Scenario the probabilities are shown for
        base_prob: Starting probability for choice A
        now_ms: Epoch milliseconds (current time when omitted)

    Returns:
        ``{"choice_a": p, "choice_b": 100 - p}`` with p clamped to 10..90
    """
    if now_ms is None:
        now_ms = utc_now_ms()
    time_variation = (now_ms % 10000) / 10000 * 20 - 10
    # fmod keeps the sign of the scenario id
    scenario_variation = math.fmod(scenario_id * 7, 20) - 10
    adjusted = max(10.0, min(90.0, base_prob + time_variation + scenario_variation))
    return {"choice_a": adjusted, "choice_b": 100 - adjusted}
