"""
Dynamic rules engine.

Usage:
    from manvsgod.core.rules import RulesEngine, Decision

    engine = RulesEngine()
    engine.record_decision(decision)
    engine.get_rule_value("betting-minimum")
"""

from manvsgod.core.rules.engine import RulesEngine, build_engine
from manvsgod.core.rules.models import (
    CurrencyValue,
    Decision,
    DecisionOutcome,
    EvolutionEvent,
    MoralOutcome,
    MutationKind,
    Rule,
    RuleCategory,
    RuleValue,
    StatsSummary,
    WeightValue,
    value_for,
)

__all__ = [
    "RulesEngine",
    "build_engine",
    "CurrencyValue",
    "Decision",
    "DecisionOutcome",
    "EvolutionEvent",
    "MoralOutcome",
    "MutationKind",
    "Rule",
    "RuleCategory",
    "RuleValue",
    "StatsSummary",
    "WeightValue",
    "value_for",
]
