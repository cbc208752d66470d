from .ingredient_extractor import extract_ingredients, strip_label_prefix

__all__ = ["extract_ingredients", "strip_label_prefix"]
