"""
External resolution tiers: Open Food Facts (nutrition database) and Ollama (AI inference).
"""
from .base import ResolutionSource
from .open_food_facts import OpenFoodFactsSource, fetch_open_food_facts
from .ai_inference import AIInferenceSource, infer_ingredient

__all__ = [
    "ResolutionSource",
    "OpenFoodFactsSource",
    "fetch_open_food_facts",
    "AIInferenceSource",
    "infer_ingredient",
]
