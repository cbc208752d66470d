from .ingredient import IngredientRecord, IngredientSource, IngredientOrigin, clamp_score
from .health_score import HealthScore, ImpactFactor, ScoreColor, color_for

__all__ = [
    "IngredientRecord",
    "IngredientSource",
    "IngredientOrigin",
    "clamp_score",
    "HealthScore",
    "ImpactFactor",
    "ScoreColor",
    "color_for",
]
