"""
Rules engine data models

- Decision / MoralOutcome: one recorded player turn (immutable)
- RuleValue: CurrencyValue (betting) | WeightValue (moral, authority, scoring, piece)
- Rule: a named, mutable gameplay parameter owned by the engine
- EvolutionEvent: one applied mutation (immutable, append-only)
- StatsSummary: aggregate player statistics
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from numbers import Real
from typing import Any, Dict, List, Optional, Union

from manvsgod.core.time import iso_z


class RuleCategory(str, Enum):
    BETTING = "betting"
    MORAL = "moral"
    AUTHORITY = "authority"
    SCORING = "scoring"
    PIECE = "piece"


class MutationKind(str, Enum):
    ADDITION = "addition"
    MODIFICATION = "modification"
    REMOVAL = "removal"
    RECOMBINATION = "recombination"


class DecisionOutcome(str, Enum):
    WIN = "win"
    LOSE = "lose"
    CONTINUE = "continue"


# ============================================
# Rule values
# ============================================

@dataclass(frozen=True)
class CurrencyValue:
    """Whole-currency amount (betting rules)."""
    amount: int

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValueError(f"Currency amount must be an integer, got {self.amount!r}")

    @property
    def number(self) -> int:
        return self.amount

    @property
    def kind(self) -> str:
        return "currency"


@dataclass(frozen=True)
class WeightValue:
    """Float weight, optionally bounded to [lower, upper]."""
    value: float
    lower: Optional[float] = None
    upper: Optional[float] = None

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, Real):
            raise ValueError(f"Weight must be a number, got {self.value!r}")
        object.__setattr__(self, "value", float(self.value))
        if self.lower is not None and self.value < self.lower:
            raise ValueError(f"Weight {self.value} below lower bound {self.lower}")
        if self.upper is not None and self.value > self.upper:
            raise ValueError(f"Weight {self.value} above upper bound {self.upper}")

    @property
    def number(self) -> float:
        return self.value

    @property
    def kind(self) -> str:
        return "weight"


RuleValue = Union[CurrencyValue, WeightValue]

# (lower, upper) for weight categories; None means unbounded on that side
CATEGORY_BOUNDS = {
    RuleCategory.MORAL: (1.0, 10.0),
    RuleCategory.AUTHORITY: (0.1, 2.0),
    RuleCategory.SCORING: (0.1, 0.9),
    RuleCategory.PIECE: (None, None),
}


def value_for(category: RuleCategory, number: Union[int, float]) -> RuleValue:
    """Build the value variant matching a rule category."""
    category = RuleCategory(category)
    if category is RuleCategory.BETTING:
        if isinstance(number, float) and not number.is_integer():
            raise ValueError(f"Betting rules hold whole currency amounts, got {number}")
        return CurrencyValue(int(number))
    lower, upper = CATEGORY_BOUNDS[category]
    return WeightValue(float(number), lower, upper)


def matches_category(value: RuleValue, category: RuleCategory) -> bool:
    if RuleCategory(category) is RuleCategory.BETTING:
        return isinstance(value, CurrencyValue)
    return isinstance(value, WeightValue)


# ============================================
# Decisions
# ============================================

def _require_str(name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {type(value).__name__}")


def _require_number(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")


@dataclass(frozen=True)
class MoralOutcome:
    """Result of the spare/capture dilemma attached to a turn."""
    piece_kind: str
    was_captured: bool
    moral_weight: int
    backstory: Optional[str] = None

    def __post_init__(self):
        _require_str("piece_kind", self.piece_kind)
        if not isinstance(self.was_captured, bool):
            raise ValueError("was_captured must be a boolean")
        if isinstance(self.moral_weight, bool) or not isinstance(self.moral_weight, int):
            raise ValueError(f"moral_weight must be an integer, got {self.moral_weight!r}")
        if not 1 <= self.moral_weight <= 10:
            raise ValueError(f"moral_weight must be between 1 and 10, got {self.moral_weight}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "piece_kind": self.piece_kind,
            "was_captured": self.was_captured,
            "moral_weight": self.moral_weight,
            "backstory": self.backstory,
        }


@dataclass(frozen=True)
class Decision:
    """
    One completed player turn.

    Shape is validated on construction; an invalid record raises
    ValueError and is never recorded.
    """
    actor_id: str
    timestamp: datetime
    level_index: int
    piece_kind: str
    position: str
    chosen_move: str
    bet_amount: float
    suggested_move: str
    suggested_confidence: float
    followed_suggestion: bool
    disobedience_cost: float
    strategic_score: float
    moral_score: float
    outcome: DecisionOutcome
    moral_outcome: Optional[MoralOutcome] = None
    final_position: Optional[str] = None
    decision_time_ms: Optional[int] = None

    def __post_init__(self):
        _require_str("actor_id", self.actor_id)
        if not self.actor_id:
            raise ValueError("actor_id must not be empty")
        if not isinstance(self.timestamp, datetime):
            raise ValueError("timestamp must be a datetime")
        if self.timestamp.tzinfo is None:
            object.__setattr__(self, "timestamp", self.timestamp.replace(tzinfo=timezone.utc))
        if isinstance(self.level_index, bool) or not isinstance(self.level_index, int):
            raise ValueError(f"level_index must be an integer, got {self.level_index!r}")
        for name in ("piece_kind", "position", "chosen_move", "suggested_move"):
            _require_str(name, getattr(self, name))
        for name in (
            "bet_amount",
            "suggested_confidence",
            "disobedience_cost",
            "strategic_score",
            "moral_score",
        ):
            _require_number(name, getattr(self, name))
        if self.bet_amount < 0:
            raise ValueError("bet_amount must not be negative")
        if not isinstance(self.followed_suggestion, bool):
            raise ValueError("followed_suggestion must be a boolean")
        try:
            object.__setattr__(self, "outcome", DecisionOutcome(self.outcome))
        except ValueError:
            raise ValueError(
                f"Invalid outcome: {self.outcome!r}. Must be one of: win, lose, continue"
            ) from None
        if self.moral_outcome is not None and not isinstance(self.moral_outcome, MoralOutcome):
            raise ValueError("moral_outcome must be a MoralOutcome")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actor_id": self.actor_id,
            "timestamp": iso_z(self.timestamp),
            "level_index": self.level_index,
            "piece_kind": self.piece_kind,
            "position": self.position,
            "chosen_move": self.chosen_move,
            "bet_amount": self.bet_amount,
            "suggested_move": self.suggested_move,
            "suggested_confidence": self.suggested_confidence,
            "followed_suggestion": self.followed_suggestion,
            "disobedience_cost": self.disobedience_cost,
            "moral_outcome": self.moral_outcome.to_dict() if self.moral_outcome else None,
            "strategic_score": self.strategic_score,
            "moral_score": self.moral_score,
            "outcome": self.outcome.value,
            "final_position": self.final_position,
            "decision_time_ms": self.decision_time_ms,
        }


# ============================================
# Rules and evolution events
# ============================================

@dataclass(frozen=True)
class EvolutionEvent:
    rule_id: str
    category: RuleCategory
    previous_value: RuleValue
    new_value: RuleValue
    trigger_description: str
    influence_at_trigger: float
    estimated_success_rate: float
    estimated_adoption_rate: float
    timestamp: datetime
    mutation_kind: MutationKind

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "category": self.category.value,
            "previous_value": self.previous_value.number,
            "new_value": self.new_value.number,
            "trigger_description": self.trigger_description,
            "influence_at_trigger": self.influence_at_trigger,
            "estimated_success_rate": self.estimated_success_rate,
            "estimated_adoption_rate": self.estimated_adoption_rate,
            "timestamp": iso_z(self.timestamp),
            "mutation_kind": self.mutation_kind.value,
        }


@dataclass
class SuccessMetrics:
    engagement: float = 0.0
    strategic_depth: float = 0.0
    moral_complexity: float = 0.0
    satisfaction: float = 0.0


@dataclass
class Rule:
    """
    Mutable gameplay parameter.

    Only the engine mutates a Rule; callers receive snapshot copies.
    """
    id: str
    display_name: str
    category: RuleCategory
    current_value: RuleValue
    base_value: RuleValue
    mutation_threshold: float
    last_evolved_at: datetime
    accumulated_influence: float = 0.0
    evolution_history: List[EvolutionEvent] = field(default_factory=list)
    active: bool = True
    success_metrics: SuccessMetrics = field(default_factory=SuccessMetrics)

    def __post_init__(self):
        self.category = RuleCategory(self.category)
        for name in ("current_value", "base_value"):
            if not matches_category(getattr(self, name), self.category):
                raise ValueError(
                    f"Rule {self.id}: {name} {getattr(self, name)!r} does not match category {self.category.value}"
                )

    def snapshot(self) -> "Rule":
        return Rule(
            id=self.id,
            display_name=self.display_name,
            category=self.category,
            current_value=self.current_value,
            base_value=self.base_value,
            mutation_threshold=self.mutation_threshold,
            last_evolved_at=self.last_evolved_at,
            accumulated_influence=self.accumulated_influence,
            evolution_history=list(self.evolution_history),
            active=self.active,
            success_metrics=SuccessMetrics(**vars(self.success_metrics)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.display_name,
            "category": self.category.value,
            "value_kind": self.current_value.kind,
            "current_value": self.current_value.number,
            "base_value": self.base_value.number,
            "accumulated_influence": self.accumulated_influence,
            "mutation_threshold": self.mutation_threshold,
            "last_evolved_at": iso_z(self.last_evolved_at),
            "evolution_history": [event.to_dict() for event in self.evolution_history],
            "active": self.active,
            "success_metrics": vars(self.success_metrics).copy(),
        }


@dataclass(frozen=True)
class StatsSummary:
    total_decisions: int
    average_bet: float
    follow_rate: float
    spare_rate: float
    average_strategic_score: float
    average_moral_score: float

    @classmethod
    def empty(cls) -> "StatsSummary":
        return cls(
            total_decisions=0,
            average_bet=0.0,
            follow_rate=0.0,
            spare_rate=0.0,
            average_strategic_score=0.0,
            average_moral_score=0.0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_decisions": self.total_decisions,
            "average_bet": self.average_bet,
            "follow_rate": self.follow_rate,
            "spare_rate": self.spare_rate,
            "average_strategic_score": self.average_strategic_score,
            "average_moral_score": self.average_moral_score,
        }
