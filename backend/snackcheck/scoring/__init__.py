from .calculator import BASE_SCORE, analyze_ingredient, calculate_score
from .rules import SCORING_RULES, ScoringRule, scoring_rule

__all__ = [
    "BASE_SCORE",
    "analyze_ingredient",
    "calculate_score",
    "SCORING_RULES",
    "ScoringRule",
    "scoring_rule",
]
