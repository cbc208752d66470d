"""
Scoring output: per-rule impact factors and the bounded overall score.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

GREEN_THRESHOLD = 70
YELLOW_THRESHOLD = 40


class ScoreColor(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


def color_for(overall: int) -> ScoreColor:
    if overall >= GREEN_THRESHOLD:
        return ScoreColor.GREEN
    if overall >= YELLOW_THRESHOLD:
        return ScoreColor.YELLOW
    return ScoreColor.RED


@dataclass(frozen=True)
class ImpactFactor:
    ingredient: str
    impact: int
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"ingredient": self.ingredient, "impact": self.impact, "reason": self.reason}


@dataclass(frozen=True)
class HealthScore:
    overall: int
    color: ScoreColor
    factors: list[ImpactFactor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall,
            "color": self.color.value,
            "factors": [f.to_dict() for f in self.factors],
        }
