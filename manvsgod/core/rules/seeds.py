"""Fixed seed set for the rule store."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, NamedTuple

from manvsgod.core.rules.models import Rule, RuleCategory, value_for


class RuleSeed(NamedTuple):
    id: str
    display_name: str
    category: RuleCategory
    base: float
    threshold: float


BETTING_MINIMUM = "betting-minimum"
BETTING_MAXIMUM = "betting-maximum"
MORAL_WEIGHT_BASE = "moral-weight-base"
GODS_AUTHORITY = "gods-authority"
SCORING_STRATEGIC_WEIGHT = "scoring-strategic-weight"
SCORING_MORAL_WEIGHT = "scoring-moral-weight"

SEED_RULES: List[RuleSeed] = [
    RuleSeed(BETTING_MINIMUM, "Minimum Bet Amount", RuleCategory.BETTING, 50, 0.7),
    RuleSeed(BETTING_MAXIMUM, "Maximum Bet Amount", RuleCategory.BETTING, 500, 0.7),
    RuleSeed(MORAL_WEIGHT_BASE, "Base Moral Weight", RuleCategory.MORAL, 5, 0.6),
    RuleSeed(GODS_AUTHORITY, "God's Authority Level", RuleCategory.AUTHORITY, 1.0, 0.8),
    RuleSeed(SCORING_STRATEGIC_WEIGHT, "Strategic Score Weight", RuleCategory.SCORING, 0.5, 0.7),
    RuleSeed(SCORING_MORAL_WEIGHT, "Moral Score Weight", RuleCategory.SCORING, 0.5, 0.7),
]


def seed_rules(now: datetime) -> Dict[str, Rule]:
    """Create the seed rules, keyed by id in seed order."""
    rules: Dict[str, Rule] = {}
    for seed in SEED_RULES:
        base = value_for(seed.category, seed.base)
        rules[seed.id] = Rule(
            id=seed.id,
            display_name=seed.display_name,
            category=seed.category,
            current_value=base,
            base_value=base,
            mutation_threshold=seed.threshold,
            last_evolved_at=now,
        )
    return rules
