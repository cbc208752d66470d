"""
Resolved representation of one ingredient, as produced by the resolver tiers.
"""
from dataclasses import dataclass, replace
from typing import Literal, Optional, get_args

IngredientSource = Literal["cache", "openfoodfacts", "ai"]
# Tier that first produced a record's data; "seed" marks curated offline entries.
IngredientOrigin = Literal["seed", "openfoodfacts", "ai"]

VALID_SOURCES = frozenset(get_args(IngredientSource))
VALID_ORIGINS = frozenset(get_args(IngredientOrigin))


def clamp_score(value: Optional[float]) -> Optional[int]:
    if value is None:
        return None
    return max(0, min(100, int(round(value))))


@dataclass(frozen=True)
class IngredientRecord:
    name: str
    source: IngredientSource
    explanation: str
    nutrition_score: Optional[int] = None
    additive_class: Optional[str] = None
    origin: Optional[IngredientOrigin] = None

    def __post_init__(self) -> None:
        if self.source not in VALID_SOURCES:
            raise ValueError(f"invalid ingredient source: {self.source!r}")
        if self.origin is not None and self.origin not in VALID_ORIGINS:
            raise ValueError(f"invalid ingredient origin: {self.origin!r}")
        if not self.explanation or not self.explanation.strip():
            raise ValueError(f"empty explanation for ingredient {self.name!r}")
        # frozen: go through object.__setattr__ to store the clamped score
        object.__setattr__(self, "nutrition_score", clamp_score(self.nutrition_score))

    @property
    def provenance(self) -> str:
        """Tier that actually produced the data, even when served from cache."""
        return self.origin or self.source

    def as_cached(self) -> "IngredientRecord":
        return replace(self, source="cache", origin=self.origin or _origin_for(self.source))

    def renamed(self, name: str) -> "IngredientRecord":
        return self if name == self.name else replace(self, name=name)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "source": self.source,
            "nutrition_score": self.nutrition_score,
            "additive_class": self.additive_class,
            "explanation": self.explanation,
            "origin": self.origin,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "IngredientRecord":
        return cls(
            name=d["name"],
            source=d["source"],
            explanation=d["explanation"],
            nutrition_score=d.get("nutrition_score"),
            additive_class=d.get("additive_class"),
            origin=d.get("origin"),
        )


def _origin_for(source: str) -> Optional[IngredientOrigin]:
    if source == "cache":
        return None
    return source  # type: ignore[return-value]
