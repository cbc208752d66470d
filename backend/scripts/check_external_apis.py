#!/usr/bin/env python3
"""
Check if the external resolution tiers (Open Food Facts, Ollama inference) answer.
Run from backend: python scripts/check_external_apis.py
Exit 0 if at least one tier works; 1 if both fail or both are disabled.
"""
import sys
from pathlib import Path
from typing import Tuple

# Add backend to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from snackcheck.errors import SourceMiss

# Short timeout for health check
HEALTH_TIMEOUT = 8
PROBE_INGREDIENT = "sugar"


def check_open_food_facts() -> Tuple[bool, str]:
    """Return (success, message)."""
    from snackcheck.external_apis.open_food_facts import fetch_open_food_facts
    try:
        record = fetch_open_food_facts(PROBE_INGREDIENT, timeout=HEALTH_TIMEOUT)
    except SourceMiss as e:
        return False, str(e)
    if record is not None:
        return True, f"ok (nutrition_score={record.nutrition_score})"
    return False, "no result"


def check_ai_inference() -> Tuple[bool, str]:
    """Return (success, message)."""
    from snackcheck.external_apis.ai_inference import infer_ingredient
    try:
        record = infer_ingredient(PROBE_INGREDIENT, timeout=HEALTH_TIMEOUT)
    except SourceMiss as e:
        return False, str(e)
    if record is not None:
        return True, f"ok (nutrition_score={record.nutrition_score})"
    return False, "model reported ingredient as unknown"


def main() -> int:
    from snackcheck.config import get_ai_inference_enabled, get_open_food_facts_enabled
    print("Checking external resolution tiers...")

    off_ok, off_msg = False, "disabled (OPEN_FOOD_FACTS_ENABLED=false)"
    if get_open_food_facts_enabled():
        off_ok, off_msg = check_open_food_facts()
    print(f"  Open Food Facts: {'OK' if off_ok else 'FAIL'} - {off_msg}")

    ai_ok, ai_msg = False, "disabled (AI_INFERENCE_ENABLED=false)"
    if get_ai_inference_enabled():
        ai_ok, ai_msg = check_ai_inference()
    print(f"  AI inference:    {'OK' if ai_ok else 'FAIL'} - {ai_msg}")

    if off_ok or ai_ok:
        print("At least one tier is working.")
        return 0
    print("All configured tiers failed or none enabled.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
