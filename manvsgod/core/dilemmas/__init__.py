from manvsgod.core.dilemmas.generator import (
    DilemmaChoice,
    MoralDilemma,
    PieceBackstory,
    calculate_moral_score,
    generate,
    get_backstory,
    load_backstories,
    moral_consequences,
    philosophical_analysis,
)

__all__ = [
    "DilemmaChoice",
    "MoralDilemma",
    "PieceBackstory",
    "calculate_moral_score",
    "generate",
    "get_backstory",
    "load_backstories",
    "moral_consequences",
    "philosophical_analysis",
]
