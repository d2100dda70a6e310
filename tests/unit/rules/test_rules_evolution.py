import random
from datetime import timedelta

import pytest

from manvsgod.core.rules.evolution import (
    calculate_new_value,
    determine_mutation_kind,
    estimate_adoption_rate,
    estimate_success_rate,
    round_half_up,
    should_evolve,
)
from manvsgod.core.rules.models import MutationKind, Rule, RuleCategory, value_for
from manvsgod.core.rules.seeds import (
    BETTING_MAXIMUM,
    BETTING_MINIMUM,
    GODS_AUTHORITY,
    MORAL_WEIGHT_BASE,
    SCORING_MORAL_WEIGHT,
    seed_rules,
)


@pytest.fixture
def rules(clock):
    return seed_rules(clock())


def _with_influence(rule: Rule, influence: float) -> Rule:
    rule.accumulated_influence = influence
    return rule


def test_round_half_up() -> None:
    assert round_half_up(67.5) == 68
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_betting_value_is_whole_currency(rules) -> None:
    rule = _with_influence(rules[BETTING_MAXIMUM], 0.9)
    value = calculate_new_value(rule)
    assert value.kind == "currency"
    assert value.number == 725


def test_moral_value_is_clamped(rules) -> None:
    assert calculate_new_value(_with_influence(rules[MORAL_WEIGHT_BASE], 1.0)).number == 7
    assert calculate_new_value(_with_influence(rules[MORAL_WEIGHT_BASE], 4.0)).number == 10
    assert calculate_new_value(_with_influence(rules[MORAL_WEIGHT_BASE], -3.0)).number == 1


def test_authority_value_is_clamped(rules) -> None:
    assert calculate_new_value(_with_influence(rules[GODS_AUTHORITY], 1.0)).number == pytest.approx(1.3)
    assert calculate_new_value(_with_influence(rules[GODS_AUTHORITY], 5.0)).number == 2.0
    assert calculate_new_value(_with_influence(rules[GODS_AUTHORITY], -5.0)).number == pytest.approx(0.1)


def test_scoring_value_is_clamped(rules) -> None:
    assert calculate_new_value(_with_influence(rules[SCORING_MORAL_WEIGHT], 1.0)).number == pytest.approx(0.7)
    assert calculate_new_value(_with_influence(rules[SCORING_MORAL_WEIGHT], 3.0)).number == 0.9


def test_new_value_derives_from_base_not_current(rules) -> None:
    rule = rules[BETTING_MINIMUM]
    rule.current_value = value_for(RuleCategory.BETTING, 68)
    _with_influence(rule, 0.7)
    assert calculate_new_value(rule).number == 68


def test_piece_rule_keeps_base_value(clock) -> None:
    base = value_for(RuleCategory.PIECE, 3)
    rule = Rule(
        id="knight-value",
        display_name="Knight Value",
        category=RuleCategory.PIECE,
        current_value=base,
        base_value=base,
        mutation_threshold=0.5,
        last_evolved_at=clock(),
        accumulated_influence=2.0,
    )
    assert calculate_new_value(rule) == base


@pytest.mark.parametrize(
    "influence, kind",
    [
        (1.6, MutationKind.ADDITION),
        (1.5, MutationKind.MODIFICATION),
        (0.9, MutationKind.MODIFICATION),
        (0.8, MutationKind.RECOMBINATION),
        (-0.5, MutationKind.RECOMBINATION),
        (-0.6, MutationKind.REMOVAL),
    ],
)
def test_mutation_kind_buckets(influence, kind) -> None:
    assert determine_mutation_kind(influence) is kind


def test_should_evolve_needs_threshold_and_cooldown(rules, clock) -> None:
    rule = rules[BETTING_MINIMUM]
    later = clock() + timedelta(days=7)

    assert not should_evolve(_with_influence(rule, 0.69), later)
    assert not should_evolve(_with_influence(rule, 0.7), clock() + timedelta(days=6, hours=23))
    assert should_evolve(_with_influence(rule, 0.7), later)


def test_estimators_stay_in_range(make_decision) -> None:
    rng = random.Random(1)
    recent = [make_decision()]
    for _ in range(50):
        assert 0.35 <= estimate_success_rate(recent, rng) <= 0.65
        assert 0.3 <= estimate_adoption_rate(recent, rng) <= 0.7


def test_estimators_default_without_decisions() -> None:
    rng = random.Random(1)
    assert estimate_success_rate([], rng) == 0.5
    assert estimate_adoption_rate([], rng) == 0.5
