"""
Health score calculator. Pure and deterministic: no I/O, no shared state.

overall = clamp(100 + sum of every rule's deltas over every record, 0, 100)
The sum is literal (not averaged over ingredient count), so input order and
list length affect the score only through the deltas themselves.
"""
from typing import List, Optional, Sequence

from snackcheck.models.health_score import HealthScore, ImpactFactor, color_for
from snackcheck.models.ingredient import IngredientRecord
from snackcheck.scoring.rules import SCORING_RULES, ScoringRule

BASE_SCORE = 100


def analyze_ingredient(
    record: IngredientRecord,
    rules: Optional[Sequence[ScoringRule]] = None,
) -> List[ImpactFactor]:
    """All non-zero factors the rules produce for one record, in rule order."""
    factors: List[ImpactFactor] = []
    for rule in SCORING_RULES if rules is None else rules:
        factors.extend(f for f in rule(record) if f.impact != 0)
    return factors


def calculate_score(
    records: Sequence[IngredientRecord],
    rules: Optional[Sequence[ScoringRule]] = None,
) -> HealthScore:
    factors: List[ImpactFactor] = []
    for record in records:
        factors.extend(analyze_ingredient(record, rules))
    overall = BASE_SCORE + sum(f.impact for f in factors)
    overall = max(0, min(100, overall))
    return HealthScore(overall=overall, color=color_for(overall), factors=factors)
