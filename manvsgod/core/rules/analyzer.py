"""
Pattern analyzer

Looks at the most recent decisions and nudges rule influence by fixed
steps when aggregate behaviour crosses a threshold:

    betting    average bet > min * 1.5          -> betting-minimum +0.1
               max bet     > max * 0.8          -> betting-maximum +0.1
    moral      spare rate  > 0.7 / < 0.3        -> moral-weight-base +/-0.1
    authority  follow rate > 0.8 / < 0.4        -> gods-authority +/-0.1
    scoring    avg strategic / moral score > 70 -> scoring-* +0.1

Betting and scoring have no decrement path.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from manvsgod.core.rules.models import Decision, Rule
from manvsgod.core.rules.seeds import (
    BETTING_MAXIMUM,
    BETTING_MINIMUM,
    GODS_AUTHORITY,
    MORAL_WEIGHT_BASE,
    SCORING_MORAL_WEIGHT,
    SCORING_STRATEGIC_WEIGHT,
)


INFLUENCE_STEP = 0.1
# Influence is rounded after every nudge so repeated 0.1 steps land on exact thresholds
INFLUENCE_PRECISION = 6

AVERAGE_BET_FACTOR = 1.5
MAX_BET_FACTOR = 0.8
HIGH_SPARE_RATE = 0.7
LOW_SPARE_RATE = 0.3
HIGH_FOLLOW_RATE = 0.8
LOW_FOLLOW_RATE = 0.4
HIGH_SCORE = 70


def average(decisions: Sequence[Decision], attr: str) -> float:
    if not decisions:
        return 0.0
    return sum(getattr(d, attr) for d in decisions) / len(decisions)


def spare_rate(decisions: Sequence[Decision]) -> float:
    """Fraction of decisions with a moral outcome where the piece was spared (0 when none)."""
    moral = [d for d in decisions if d.moral_outcome is not None]
    if not moral:
        return 0.0
    return sum(1 for d in moral if not d.moral_outcome.was_captured) / len(moral)


def follow_rate(decisions: Sequence[Decision]) -> float:
    if not decisions:
        return 0.0
    return sum(1 for d in decisions if d.followed_suggestion) / len(decisions)


def nudge(rule: Optional[Rule], delta: float) -> None:
    if rule is None:
        return
    rule.accumulated_influence = round(rule.accumulated_influence + delta, INFLUENCE_PRECISION)


class PatternAnalyzer:
    """Applies influence nudges to a rule store for one analysis window."""

    def __init__(self, rules: Dict[str, Rule]):
        self.rules = rules

    def analyze(self, window: Sequence[Decision]) -> None:
        if not window:
            return
        self.analyze_betting(window)
        self.analyze_moral(window)
        self.analyze_authority(window)
        self.analyze_scoring(window)

    def analyze_betting(self, window: Sequence[Decision]) -> None:
        avg_bet = average(window, "bet_amount")
        max_bet = max(d.bet_amount for d in window)

        min_rule = self.rules.get(BETTING_MINIMUM)
        max_rule = self.rules.get(BETTING_MAXIMUM)

        if min_rule and avg_bet > min_rule.current_value.number * AVERAGE_BET_FACTOR:
            nudge(min_rule, INFLUENCE_STEP)

        if max_rule and max_bet > max_rule.current_value.number * MAX_BET_FACTOR:
            nudge(max_rule, INFLUENCE_STEP)

    def analyze_moral(self, window: Sequence[Decision]) -> None:
        if not any(d.moral_outcome is not None for d in window):
            return

        rate = spare_rate(window)
        rule = self.rules.get(MORAL_WEIGHT_BASE)
        if rate > HIGH_SPARE_RATE:
            nudge(rule, INFLUENCE_STEP)  # players lean moral
        elif rate < LOW_SPARE_RATE:
            nudge(rule, -INFLUENCE_STEP)  # players lean strategic

    def analyze_authority(self, window: Sequence[Decision]) -> None:
        rate = follow_rate(window)
        rule = self.rules.get(GODS_AUTHORITY)
        if rate > HIGH_FOLLOW_RATE:
            nudge(rule, INFLUENCE_STEP)
        elif rate < LOW_FOLLOW_RATE:
            nudge(rule, -INFLUENCE_STEP)

    def analyze_scoring(self, window: Sequence[Decision]) -> None:
        if average(window, "strategic_score") > HIGH_SCORE:
            nudge(self.rules.get(SCORING_STRATEGIC_WEIGHT), INFLUENCE_STEP)

        if average(window, "moral_score") > HIGH_SCORE:
            nudge(self.rules.get(SCORING_MORAL_WEIGHT), INFLUENCE_STEP)
