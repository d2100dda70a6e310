from manvsgod.core.levels.catalog import (
    CHOICE_CAPTURE,
    CHOICE_SPARE,
    MAX_SCORE,
    MORAL_THRESHOLDS,
    RANKING_THRESHOLDS,
    STARTING_CURRENCY,
    TOTAL_LEVELS,
    Level,
    MoralChoiceResult,
    all_levels,
    calculate_god_bet,
    calculate_level_score,
    calculate_max_score,
    get_level,
    level_count,
    moral_ranking,
    process_moral_choice,
    ranking,
    validate_chess_move,
)

__all__ = [
    "CHOICE_CAPTURE",
    "CHOICE_SPARE",
    "MAX_SCORE",
    "MORAL_THRESHOLDS",
    "RANKING_THRESHOLDS",
    "STARTING_CURRENCY",
    "TOTAL_LEVELS",
    "Level",
    "MoralChoiceResult",
    "all_levels",
    "calculate_god_bet",
    "calculate_level_score",
    "calculate_max_score",
    "get_level",
    "level_count",
    "moral_ranking",
    "process_moral_choice",
    "ranking",
    "validate_chess_move",
]
