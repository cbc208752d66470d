"""
Curated records for common label ingredients, seeded into every new resolution
cache so offline scans still get informative explanations.
"""
from typing import Optional

from snackcheck.models.ingredient import IngredientRecord

# (name, nutrition_score, additive_class, explanation)
_COMMON: list[tuple[str, int, Optional[str], str]] = [
    ("water", 100, None, "Essential for hydration and bodily functions. No calories or additives."),
    ("sugar", 30, None, "Added sweetener that provides quick energy but contributes to tooth decay and blood sugar spikes in excess."),
    ("salt", 40, None, "Sodium chloride used for flavor and preservation. Essential in small amounts; excess intake can raise blood pressure."),
    ("wheat flour", 60, None, "Refined grain that provides carbohydrates and some protein."),
    ("vegetable oil", 50, None, "Source of fats; nutritional quality varies by oil type."),
    ("milk", 75, None, "Dairy product, source of protein and calcium."),
    ("eggs", 85, None, "High-quality protein source."),
    ("natural flavor", 70, None, "Flavoring compounds derived from natural sources like fruits, vegetables or spices."),
    ("artificial flavor", 45, None, "Synthetic compounds created to mimic natural flavors."),
    ("citric acid", 80, "preservative", "Natural preservative and flavor enhancer derived from citrus fruits."),
    ("vitamin c", 95, None, "Essential vitamin and antioxidant that supports immune function."),
    ("corn syrup", 25, None, "Processed glucose sweetener with little nutritional value."),
    ("high fructose corn syrup", 20, None, "Highly processed sweetener linked to obesity and metabolic issues when consumed regularly."),
    ("monosodium glutamate", 35, "moderate_risk", "Flavor enhancer that adds umami taste; some people report sensitivity."),
    ("soy lecithin", 65, None, "Emulsifier derived from soybeans."),
    ("baking soda", 80, None, "Leavening agent, sodium bicarbonate."),
    ("vanilla extract", 85, None, "Natural flavoring from vanilla beans."),
    ("cocoa powder", 80, None, "Processed cocoa beans, source of antioxidants."),
    ("almonds", 90, None, "Tree nuts, high in healthy fats and protein."),
    ("oats", 85, None, "Whole grain, high in fiber."),
    ("rice", 70, None, "Grain, source of carbohydrates."),
    ("tomatoes", 90, None, "Vegetable, high in lycopene and vitamins."),
    ("onions", 85, None, "Vegetable, source of antioxidants."),
    ("garlic", 90, None, "Aromatic vegetable with health benefits."),
    ("olive oil", 85, None, "Healthy monounsaturated fat source."),
    ("cheese", 65, None, "Dairy product, source of protein and calcium."),
    ("chicken", 85, None, "Lean protein source."),
    ("beef", 70, None, "Red meat, source of protein and iron."),
    ("carrots", 90, None, "Root vegetable, high in beta-carotene."),
    ("potatoes", 75, None, "Starchy vegetable, source of potassium."),
    ("lemon juice", 85, None, "Citrus juice, source of vitamin C."),
    ("honey", 60, None, "Natural sweetener with trace nutrients."),
    ("yeast", 80, None, "Leavening agent, source of B vitamins."),
    ("vinegar", 75, None, "Acidic condiment used for flavor and preservation."),
    ("paprika", 85, None, "Spice from peppers, source of antioxidants."),
    ("black pepper", 85, None, "Common spice used for flavor."),
    ("cinnamon", 90, None, "Spice with antioxidant properties."),
    ("ginger", 90, None, "Root spice with anti-inflammatory properties."),
    ("turmeric", 95, None, "Spice with strong anti-inflammatory compounds."),
    ("basil", 90, None, "Herb with antioxidant properties."),
    ("spinach", 95, None, "Leafy green, high in iron and vitamins."),
    ("broccoli", 95, None, "Cruciferous vegetable, high in nutrients."),
    ("apple", 85, None, "Fruit, source of fiber and antioxidants."),
    ("banana", 80, None, "Fruit, source of potassium and energy."),
    ("strawberry", 90, None, "Berry, high in vitamin C and antioxidants."),
    ("avocado", 90, None, "Fruit, high in healthy monounsaturated fats."),
    ("salmon", 95, None, "Fish, high in omega-3 fatty acids."),
    ("quinoa", 90, None, "Seed grain, complete protein source."),
]


def common_ingredient_records() -> list[IngredientRecord]:
    return [
        IngredientRecord(
            name=name,
            source="cache",
            origin="seed",
            nutrition_score=score,
            additive_class=additive_class,
            explanation=explanation,
        )
        for name, score, additive_class, explanation in _COMMON
    ]
