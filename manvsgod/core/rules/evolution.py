"""
Evolution trigger and mutator

A rule evolves when its accumulated influence reaches its mutation
threshold and the cooldown since its last evolution has elapsed. The new
value is computed from the rule's *base* value and the influence, then
clamped to the category's range.
"""

from __future__ import annotations

import math
import random
from datetime import datetime, timedelta
from typing import Sequence

from manvsgod.core.rules.models import (
    CATEGORY_BOUNDS,
    Decision,
    EvolutionEvent,
    MutationKind,
    Rule,
    RuleCategory,
    RuleValue,
    value_for,
)


DEFAULT_COOLDOWN = timedelta(days=7)
ESTIMATOR_SAMPLE = 50


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def clamp(x: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, x))


def should_evolve(rule: Rule, now: datetime, cooldown: timedelta = DEFAULT_COOLDOWN) -> bool:
    return (
        rule.accumulated_influence >= rule.mutation_threshold
        and now - rule.last_evolved_at >= cooldown
    )


def calculate_new_value(rule: Rule) -> RuleValue:
    influence = rule.accumulated_influence
    base = rule.base_value.number

    if rule.category is RuleCategory.BETTING:
        return value_for(rule.category, round_half_up(base * (1 + influence * 0.5)))

    if rule.category is RuleCategory.MORAL:
        step = 2
    elif rule.category is RuleCategory.AUTHORITY:
        step = 0.3
    elif rule.category is RuleCategory.SCORING:
        step = 0.2
    else:
        return rule.base_value

    lower, upper = CATEGORY_BOUNDS[rule.category]
    return value_for(rule.category, clamp(base + influence * step, lower, upper))


def determine_mutation_kind(influence: float) -> MutationKind:
    # Order matters: the largest bucket wins
    if influence > 1.5:
        return MutationKind.ADDITION
    if influence > 0.8:
        return MutationKind.MODIFICATION
    if influence < -0.5:
        return MutationKind.REMOVAL
    return MutationKind.RECOMBINATION


# Placeholder estimators: jitter around 0.5, not a statistical measure.
# TODO: replace with per-rule engagement analysis once success_metrics are populated.

def estimate_success_rate(recent: Sequence[Decision], rng: random.Random) -> float:
    if not recent:
        return 0.5
    return 0.5 + (rng.random() - 0.5) * 0.3


def estimate_adoption_rate(recent: Sequence[Decision], rng: random.Random) -> float:
    if not recent:
        return 0.5
    return 0.5 + (rng.random() - 0.5) * 0.4


def evolve_rule(
    rule: Rule,
    decisions: Sequence[Decision],
    now: datetime,
    rng: random.Random,
) -> EvolutionEvent:
    """Apply one evolution to ``rule`` in place and return the event."""
    recent = list(decisions[-ESTIMATOR_SAMPLE:])
    influence = rule.accumulated_influence

    event = EvolutionEvent(
        rule_id=rule.id,
        category=rule.category,
        previous_value=rule.current_value,
        new_value=calculate_new_value(rule),
        trigger_description=f"Player influence: {influence:.2f}",
        influence_at_trigger=influence,
        estimated_success_rate=estimate_success_rate(recent, rng),
        estimated_adoption_rate=estimate_adoption_rate(recent, rng),
        timestamp=now,
        mutation_kind=determine_mutation_kind(influence),
    )

    rule.current_value = event.new_value
    rule.evolution_history.append(event)
    rule.last_evolved_at = now
    rule.accumulated_influence = 0.0

    return event
