from manvsgod.store.decisions import (
    ChoiceProbabilities,
    DecisionStore,
    DecisionStoreError,
    FallbackDecisionStore,
    MemoryDecisionStore,
    ScenarioDecision,
    SheetsDecisionStore,
    SQLiteDecisionStore,
    build_decision_store,
)
from manvsgod.store.stats import (
    ScenarioStats,
    all_stats,
    calculate_dynamic_probabilities,
    scenario_stats,
)

__all__ = [
    "ChoiceProbabilities",
    "DecisionStore",
    "DecisionStoreError",
    "FallbackDecisionStore",
    "MemoryDecisionStore",
    "ScenarioDecision",
    "SheetsDecisionStore",
    "SQLiteDecisionStore",
    "build_decision_store",
    "ScenarioStats",
    "all_stats",
    "calculate_dynamic_probabilities",
    "scenario_stats",
]
