"""
Deterministic key for cache lookup. No fuzzy or substring matching.
"""
import re


def normalize_ingredient_key(text: str) -> str:
    """
    Lowercase, trim, drop label asterisks and periods, collapse whitespace.
    'Sugar*' and '  SUGAR ' share the key 'sugar'.
    """
    if not text or not isinstance(text, str):
        return ""
    t = text.lower().strip()
    t = t.replace("*", "").replace(".", "")
    t = re.sub(r"\s+", " ", t)
    return t.strip()
