"""
Moral dilemma generator

Turns a chess scene (piece, square, level) into a spare-or-capture
dilemma built from a bundled piece backstory.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, List, Optional, Sequence

import yaml


# Levels 1-6 always meet the same character; later levels draw at random
LEVEL_BACKSTORIES = {
    1: "innocent-pawn",
    2: "young-knight",
    3: "old-knight",
    4: "refusing-knight",
    5: "killing-queen",
    6: "former-enemy-bishop",
}
DEFAULT_BACKSTORY = "innocent-pawn"

PHILOSOPHICAL_THEMES = [
    "Utilitarianism vs Deontology",
    "Individual vs Collective Good",
    "Justice vs Mercy",
    "Short-term vs Long-term Consequences",
    "Forgiveness vs Revenge",
    "Past vs Present Priorities",
]


@dataclass(frozen=True)
class PieceBackstory:
    key: str
    piece: str
    position: str
    name: str
    age: int
    role: str
    backstory: str
    moral_weight: int
    capture_consequence: str
    spare_consequence: str
    family: Dict[str, Any] = field(default_factory=dict)
    good_deeds: List[str] = field(default_factory=list)
    bad_deeds: List[str] = field(default_factory=list)
    current_threat: str = ""
    future_potential: str = ""

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "PieceBackstory":
        past = data.get("past_actions") or {}
        return cls(
            key=key,
            piece=data["piece"],
            position=data["position"],
            name=data["name"],
            age=int(data["age"]),
            role=data["role"],
            backstory=data["backstory"],
            moral_weight=int(data["moral_weight"]),
            capture_consequence=data["consequences"]["capture"],
            spare_consequence=data["consequences"]["spare"],
            family=dict(data.get("family") or {}),
            good_deeds=list(past.get("good") or []),
            bad_deeds=list(past.get("bad") or []),
            current_threat=data.get("current_threat", ""),
            future_potential=data.get("future_potential", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "piece": self.piece,
            "position": self.position,
            "name": self.name,
            "age": self.age,
            "role": self.role,
            "backstory": self.backstory,
            "moral_weight": self.moral_weight,
            "consequences": {"capture": self.capture_consequence, "spare": self.spare_consequence},
            "family": dict(self.family),
            "past_actions": {"good": list(self.good_deeds), "bad": list(self.bad_deeds)},
            "current_threat": self.current_threat,
            "future_potential": self.future_potential,
        }


@dataclass(frozen=True)
class DilemmaChoice:
    text: str
    consequences: List[str]
    moral: int  # moral cost (capture) or benefit (spare)
    strategic: int  # strategic benefit (capture) or cost (spare)


@dataclass(frozen=True)
class MoralDilemma:
    id: str
    title: str
    description: str
    piece: str
    position: str
    backstory: PieceBackstory
    capture: DilemmaChoice
    spare: DilemmaChoice
    philosophical_themes: List[str]
    difficulty: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "piece": self.piece,
            "position": self.position,
            "backstory": self.backstory.to_dict(),
            "choices": {
                "capture": {
                    "text": self.capture.text,
                    "consequences": list(self.capture.consequences),
                    "moral_cost": self.capture.moral,
                    "strategic_benefit": self.capture.strategic,
                },
                "spare": {
                    "text": self.spare.text,
                    "consequences": list(self.spare.consequences),
                    "moral_benefit": self.spare.moral,
                    "strategic_cost": self.spare.strategic,
                },
            },
            "philosophical_themes": list(self.philosophical_themes),
            "difficulty": self.difficulty,
        }


@lru_cache(maxsize=1)
def load_backstories() -> Dict[str, PieceBackstory]:
    """Bundled backstories keyed by slug (parsed once)."""
    text = resources.files("manvsgod.core.dilemmas").joinpath("backstories.yaml").read_text(encoding="utf-8")
    raw = yaml.safe_load(text) or {}
    return {key: PieceBackstory.from_dict(key, data) for key, data in raw.items()}


def get_backstory(key: str) -> Optional[PieceBackstory]:
    return load_backstories().get(key)


def difficulty_for(level: int) -> str:
    if level <= 2:
        return "easy"
    if level <= 3:
        return "medium"
    if level <= 4:
        return "hard"
    return "extreme"


def backstory_key_for(level: int, rng: Optional[random.Random] = None) -> str:
    if level in LEVEL_BACKSTORIES:
        return LEVEL_BACKSTORIES[level]
    return (rng or random).choice(sorted(load_backstories()))


def generate(
    piece_kind: str,
    position: str,
    level_index: int,
    rng: Optional[random.Random] = None,
) -> MoralDilemma:
    """
    Build the dilemma for a chess scene.

    The backstory depends on the level only; piece and position feed the id.
    """
    backstories = load_backstories()
    backstory = backstories.get(backstory_key_for(level_index, rng)) or backstories[DEFAULT_BACKSTORY]
    weight = backstory.moral_weight

    return MoralDilemma(
        id=f"dilemma-{level_index}-{piece_kind}-{position}",
        title=f"The {backstory.role}'s Choice",
        description=f"You face {backstory.name}, {backstory.backstory}",
        piece=backstory.piece,
        position=backstory.position,
        backstory=backstory,
        capture=DilemmaChoice(
            text=f"Capture {backstory.name}",
            consequences=[
                backstory.capture_consequence,
                "You gain a tactical advantage",
                "You may lose moral standing",
            ],
            moral=weight,
            strategic=10 - weight,
        ),
        spare=DilemmaChoice(
            text=f"Spare {backstory.name}",
            consequences=[
                backstory.spare_consequence,
                "You maintain your honor",
                "You may face strategic consequences",
            ],
            moral=weight,
            strategic=weight,
        ),
        philosophical_themes=list(PHILOSOPHICAL_THEMES),
        difficulty=difficulty_for(level_index),
    )


def calculate_moral_score(choices: Sequence[Dict[str, Any]]) -> float:
    """
    Weighted share of spared pieces, 0-100.

    Args:
        choices: items with ``captured`` (bool) and ``moral_weight`` (int)

    Returns:
        50 when the total weight is zero
    """
    total_weight = sum(choice["moral_weight"] for choice in choices)
    if total_weight <= 0:
        return 50.0
    spared = sum(choice["moral_weight"] for choice in choices if not choice["captured"])
    return spared / total_weight * 100


def moral_consequences(captured: bool, backstory: PieceBackstory) -> List[str]:
    if captured:
        return [
            backstory.capture_consequence,
            "You chose tactical advantage over moral considerations",
            "Your reputation may suffer",
            "You may face guilt or regret",
        ]
    return [
        backstory.spare_consequence,
        "You chose moral principles over tactical advantage",
        "Your honor is preserved",
        "You may face strategic consequences",
    ]


def philosophical_analysis(captured: bool) -> str:
    if captured:
        return (
            "This choice reflects utilitarian thinking - maximizing overall benefit by "
            "eliminating a threat, even at moral cost. However, it may violate deontological "
            "principles of treating individuals as ends rather than means."
        )
    return (
        "This choice reflects deontological thinking - upholding moral principles regardless "
        "of consequences. However, it may lead to greater overall harm if the spared piece "
        "causes more damage later."
    )
