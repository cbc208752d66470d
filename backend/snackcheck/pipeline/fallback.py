"""
Canned ingredient list used when a label yields no ingredients (demo cereal label).
"""
from typing import Callable, List

FallbackProvider = Callable[[], List[str]]

DEMO_INGREDIENTS = ["Whole Grain Oats", "Sugar", "Salt", "Natural Flavor", "Vitamin E"]


def default_fallback_ingredients() -> List[str]:
    return list(DEMO_INGREDIENTS)
