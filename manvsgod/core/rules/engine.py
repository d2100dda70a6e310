"""
Dynamic rules engine

Tracks player decisions and evolves gameplay rules from collective
behaviour. One engine instance is owned by its caller (a web app, a CLI
run, a test); there is no process-wide instance.

Flow of record_decision():
    append decision -> analyze last N decisions -> check every active rule
    -> evolve the ones past threshold and cooldown

All operations hold one re-entrant lock, so concurrent request handlers
serialise on the engine.
"""

from __future__ import annotations

import logging
import random
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Union

from manvsgod.core.config import ManVsGodConfig
from manvsgod.core.logging.categories import LogCategory
from manvsgod.core.rules.analyzer import PatternAnalyzer, average, follow_rate, spare_rate
from manvsgod.core.rules.evolution import DEFAULT_COOLDOWN, evolve_rule, should_evolve
from manvsgod.core.rules.models import Decision, EvolutionEvent, Rule, StatsSummary
from manvsgod.core.rules.seeds import seed_rules
from manvsgod.core.time import utc_now


logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 100


class RulesEngine:
    """
    In-memory rule store, decision log and evolution history.

    Args:
        clock: Callable returning the current aware UTC datetime
        cooldown: Minimum time between two evolutions of one rule
        window_size: Number of recent decisions the analyzer looks at
        rng: Random source for the placeholder success/adoption estimators
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        window_size: int = DEFAULT_WINDOW_SIZE,
        rng: Optional[random.Random] = None,
    ):
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        self._clock = clock
        self.cooldown = cooldown
        self.window_size = window_size
        self._rng = rng or random.Random()

        self._lock = threading.RLock()
        self._rules: Dict[str, Rule] = seed_rules(clock())
        self._analyzer = PatternAnalyzer(self._rules)
        self._decisions: List[Decision] = []
        self._history: List[EvolutionEvent] = []

    # ============================================
    # Ingestion
    # ============================================

    def record_decision(self, decision: Decision) -> List[EvolutionEvent]:
        """
        Record one decision, then analyze and evolve.

        Returns:
            Evolution events fired by this call (usually empty)
        """
        if not isinstance(decision, Decision):
            raise TypeError(f"Expected Decision, got {type(decision).__name__}")

        with self._lock:
            self._decisions.append(decision)
            self._analyzer.analyze(self._decisions[-self.window_size:])
            return self._check_evolution_triggers()

    def _check_evolution_triggers(self) -> List[EvolutionEvent]:
        now = self._clock()
        fired: List[EvolutionEvent] = []
        for rule in self._rules.values():
            if not rule.active or not should_evolve(rule, now, self.cooldown):
                continue
            event = evolve_rule(rule, self._decisions, now, self._rng)
            self._history.append(event)
            fired.append(event)
            logger.info(
                f"Rule {rule.id} evolved {event.previous_value.number} -> "
                f"{event.new_value.number} ({event.mutation_kind.value})",
                extra={"category": LogCategory.RULES_ENGINE, "details": event.to_dict()},
            )
        return fired

    # ============================================
    # Reporting (read-only)
    # ============================================

    def get_rule_value(self, rule_id: str) -> Optional[Union[int, float]]:
        with self._lock:
            rule = self._rules.get(rule_id)
            return rule.current_value.number if rule else None

    def get_rule(self, rule_id: str) -> Optional[Rule]:
        with self._lock:
            rule = self._rules.get(rule_id)
            return rule.snapshot() if rule else None

    def get_active_rules(self) -> List[Rule]:
        with self._lock:
            return [rule.snapshot() for rule in self._rules.values() if rule.active]

    def get_evolution_history(self) -> List[EvolutionEvent]:
        with self._lock:
            return list(self._history)

    def get_decisions(self) -> List[Decision]:
        with self._lock:
            return list(self._decisions)

    def get_player_stats(self) -> StatsSummary:
        """Aggregate over the full decision log (not the analysis window)."""
        with self._lock:
            decisions = list(self._decisions)

        if not decisions:
            return StatsSummary.empty()

        return StatsSummary(
            total_decisions=len(decisions),
            average_bet=average(decisions, "bet_amount"),
            follow_rate=follow_rate(decisions),
            spare_rate=spare_rate(decisions),
            average_strategic_score=average(decisions, "strategic_score"),
            average_moral_score=average(decisions, "moral_score"),
        )

    # ============================================
    # Test support
    # ============================================

    def reset_rules(self) -> None:
        """Restore every rule to its seeded state and clear decisions and history."""
        with self._lock:
            # last_evolved_at is kept, so the cooldown carries across a reset
            for rule in self._rules.values():
                rule.current_value = rule.base_value
                rule.accumulated_influence = 0.0
                rule.evolution_history = []
            self._history = []
            self._decisions = []
            logger.info("Rules reset to base values", extra={"category": LogCategory.RULES_ENGINE})


def build_engine(config: ManVsGodConfig, **kwargs) -> RulesEngine:
    """Construct an engine from configuration (keyword arguments override)."""
    kwargs.setdefault("cooldown", timedelta(days=config.rules_cooldown_days))
    kwargs.setdefault("window_size", config.rules_analysis_window)
    return RulesEngine(**kwargs)
