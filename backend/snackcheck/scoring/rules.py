"""
Health scoring rules.

Each rule is a pure function IngredientRecord -> list[ImpactFactor], registered
with @scoring_rule and evaluated independently of every other rule; the
calculator sums whatever they return. Name matching is case-insensitive.

Weights:
  organic                   +10
  whole grain               +5
  natural (not artificial)  +2
  artificial                -5 per occurrence, -15 once for dyes/colorings
  additive class            preservative -5, coloring -5, moderate_risk -5, high_risk -15
  trans fat                 -20
"""
import re
from typing import Callable, List

from snackcheck.additives import COLORING, HIGH_RISK, MODERATE_RISK, PRESERVATIVE
from snackcheck.models.health_score import ImpactFactor
from snackcheck.models.ingredient import IngredientRecord

ScoringRule = Callable[[IngredientRecord], List[ImpactFactor]]

SCORING_RULES: List[ScoringRule] = []

ORGANIC_BONUS = 10
WHOLE_GRAIN_BONUS = 5
NATURAL_BONUS = 2
ARTIFICIAL_PENALTY = -5
ARTIFICIAL_DYE_PENALTY = -15
TRANS_FAT_PENALTY = -20
ADDITIVE_CLASS_PENALTIES = {
    PRESERVATIVE: -5,
    COLORING: -5,
    MODERATE_RISK: -5,
    HIGH_RISK: -15,
}
# Below this nutrition score, additive reasons also mention low nutritional value.
LOW_NUTRITION_SCORE = 40

_WHOLE_GRAIN = re.compile(r"whole grain|whole wheat|\boats\b|brown rice|quinoa|barley")
_DYE = re.compile(r"\bdye|\bcolou?r|\blake\b|fd&c|\b(?:red|yellow|blue|green)\s*(?:no\.?\s*)?\d+")
_TRANS_FAT = re.compile(r"trans[\s-]?fat|partially hydrogenated")

_ADDITIVE_REASONS = {
    PRESERVATIVE: "Chemical preservative may cause sensitivities",
    COLORING: "Food coloring adds no nutritional value",
    MODERATE_RISK: "Food additive with moderate health concerns",
    HIGH_RISK: "Food additive with significant health concerns",
}


def scoring_rule(fn: ScoringRule) -> ScoringRule:
    """Register a rule; registration order is the order factors appear per ingredient."""
    SCORING_RULES.append(fn)
    return fn


def _name(record: IngredientRecord) -> str:
    return record.name.lower()


def _factor(record: IngredientRecord, impact: int, reason: str) -> ImpactFactor:
    return ImpactFactor(ingredient=record.name, impact=impact, reason=reason)


def _is_low_nutrition(record: IngredientRecord) -> bool:
    return record.nutrition_score is not None and record.nutrition_score < LOW_NUTRITION_SCORE


@scoring_rule
def organic_rule(record: IngredientRecord) -> List[ImpactFactor]:
    if "organic" in _name(record):
        return [_factor(record, ORGANIC_BONUS, "Organic ingredient with reduced chemical exposure")]
    return []


@scoring_rule
def whole_grain_rule(record: IngredientRecord) -> List[ImpactFactor]:
    if _WHOLE_GRAIN.search(_name(record)):
        return [_factor(record, WHOLE_GRAIN_BONUS, "Whole grain provides fiber and nutrients")]
    return []


@scoring_rule
def natural_rule(record: IngredientRecord) -> List[ImpactFactor]:
    name = _name(record)
    if "natural" in name and "artificial" not in name:
        return [_factor(record, NATURAL_BONUS, "Natural ingredient with minimal processing")]
    return []


@scoring_rule
def artificial_rule(record: IngredientRecord) -> List[ImpactFactor]:
    name = _name(record)
    occurrences = name.count("artificial")
    if not occurrences:
        return []
    if _DYE.search(name) or record.additive_class == COLORING:
        return [_factor(record, ARTIFICIAL_DYE_PENALTY, "Artificial dye linked to health concerns")]
    return [
        _factor(record, ARTIFICIAL_PENALTY, "Artificial additive with potential health concerns")
        for _ in range(occurrences)
    ]


@scoring_rule
def additive_class_rule(record: IngredientRecord) -> List[ImpactFactor]:
    penalty = ADDITIVE_CLASS_PENALTIES.get(record.additive_class or "")
    if penalty is None:
        return []
    reason = _ADDITIVE_REASONS[record.additive_class]
    if _is_low_nutrition(record):
        reason += "; low nutritional value"
    return [_factor(record, penalty, reason)]


@scoring_rule
def trans_fat_rule(record: IngredientRecord) -> List[ImpactFactor]:
    if _TRANS_FAT.search(_name(record)):
        return [_factor(record, TRANS_FAT_PENALTY, "Trans fats increase risk of heart disease")]
    return []
