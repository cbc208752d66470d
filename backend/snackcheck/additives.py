"""
Known food additives and the class tag each one carries on an IngredientRecord.
Matching is on the normalized ingredient name (whole phrase or E-number).
"""
import re
from typing import Optional

from snackcheck.normalization import normalize_ingredient_key

PRESERVATIVE = "preservative"
COLORING = "coloring"
HIGH_RISK = "high_risk"
MODERATE_RISK = "moderate_risk"

ADDITIVE_CLASSES = frozenset({PRESERVATIVE, COLORING, HIGH_RISK, MODERATE_RISK})

# Checked in order; first phrase found in the name wins.
_KNOWN_ADDITIVES: list[tuple[str, str]] = [
    # Synthetic dyes and additives with the strongest health concerns
    ("red dye", HIGH_RISK),
    ("red 40", HIGH_RISK),
    ("allura red", HIGH_RISK),
    ("yellow 5", HIGH_RISK),
    ("tartrazine", HIGH_RISK),
    ("yellow 6", HIGH_RISK),
    ("sunset yellow", HIGH_RISK),
    ("sodium nitrite", HIGH_RISK),
    ("potassium bromate", HIGH_RISK),
    ("brominated vegetable oil", HIGH_RISK),
    ("bha", HIGH_RISK),
    ("tbhq", MODERATE_RISK),
    ("bht", MODERATE_RISK),
    ("sodium nitrate", MODERATE_RISK),
    ("monosodium glutamate", MODERATE_RISK),
    ("msg", MODERATE_RISK),
    ("carrageenan", MODERATE_RISK),
    ("aspartame", MODERATE_RISK),
    ("blue 1", COLORING),
    ("blue 2", COLORING),
    ("caramel color", COLORING),
    ("annatto", COLORING),
    ("carmine", COLORING),
    ("titanium dioxide", COLORING),
    ("sodium benzoate", PRESERVATIVE),
    ("potassium benzoate", PRESERVATIVE),
    ("potassium sorbate", PRESERVATIVE),
    ("sorbic acid", PRESERVATIVE),
    ("calcium propionate", PRESERVATIVE),
    ("sodium metabisulfite", PRESERVATIVE),
    ("sulfur dioxide", PRESERVATIVE),
    ("citric acid", PRESERVATIVE),
]

_E_NUMBER = re.compile(r"\be\s?(\d{3})[a-z]?\b")


def _class_for_e_number(number: int) -> Optional[str]:
    if 100 <= number < 200:
        return COLORING
    if 200 <= number < 300:
        return PRESERVATIVE
    return None


def classify_additive(name: str) -> Optional[str]:
    """Return the additive class for a recognized additive name, else None."""
    key = normalize_ingredient_key(name)
    if not key:
        return None
    for phrase, additive_class in _KNOWN_ADDITIVES:
        if re.search(r"\b" + re.escape(phrase) + r"\b", key):
            return additive_class
    match = _E_NUMBER.search(key)
    if match:
        return _class_for_e_number(int(match.group(1)))
    return None


def coerce_additive_class(value: Optional[str]) -> Optional[str]:
    """Map a free-text class from an external source onto the known set, or drop it."""
    if not value:
        return None
    v = re.sub(r"[\s\-]+", "_", value.strip().lower())
    if v in ADDITIVE_CLASSES:
        return v
    if v in ("color", "colour", "colouring", "dye"):
        return COLORING
    return None
