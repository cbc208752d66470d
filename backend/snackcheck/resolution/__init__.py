from .cache import ResolutionCache
from .resolver import CacheSource, IngredientResolver, default_sources, synthesize_default

__all__ = [
    "ResolutionCache",
    "CacheSource",
    "IngredientResolver",
    "default_sources",
    "synthesize_default",
]
