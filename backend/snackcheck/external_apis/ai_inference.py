"""
AI-inference tier: ask a local Ollama model to explain an ingredient.

The model returns a small JSON object which is validated before it becomes a
record. Anything unparseable or flagged unknown is a miss, never a guess.
"""
import json
import logging
from typing import Optional

import requests
from pydantic import BaseModel, Field, ValidationError, field_validator

from snackcheck.additives import classify_additive, coerce_additive_class
from snackcheck.config import get_ollama_model, get_ollama_url, DEFAULT_AI_TIMEOUT_FRACTION
from snackcheck.errors import SourceMiss, TimeoutExceeded
from snackcheck.external_apis.base import ResolutionSource
from snackcheck.external_apis.http_retry import post_with_retries
from snackcheck.models.ingredient import IngredientRecord

logger = logging.getLogger(__name__)

TIER = "ai"

_SYSTEM_PROMPT = """You explain food ingredients to shoppers reading a product label.
Answer ONLY with a JSON object with these keys:
  "explanation": one or two plain-English sentences on what the ingredient is and its health effect,
  "nutrition_score": integer 0-100 (100 = very healthy, 0 = harmful), or null if you do not know,
  "additive_class": one of "preservative", "coloring", "high_risk", "moderate_risk", or null if it is not a food additive,
  "known": false if you do not recognize the ingredient, otherwise true.
No other text."""


class AIIngredientSchema(BaseModel):
    explanation: str = Field(min_length=1)
    nutrition_score: Optional[float] = None
    additive_class: Optional[str] = None
    known: bool = True

    @field_validator("explanation")
    @classmethod
    def _strip_explanation(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("explanation is blank")
        return v


def _context_hint(name: str) -> str:
    if classify_additive(name):
        return "This appears to be a food additive or preservative."
    return "This appears to be a natural food ingredient."


def build_prompt(name: str) -> str:
    return f'Ingredient: "{name.strip()}". {_context_hint(name)}\nJSON:'


def parse_ai_response(name: str, generated: str) -> Optional[IngredientRecord]:
    """Validate the model's JSON; None when the model says it does not know."""
    try:
        parsed = AIIngredientSchema.model_validate(json.loads(generated))
    except (json.JSONDecodeError, ValidationError) as e:
        raise SourceMiss(TIER, name, f"malformed_response:{type(e).__name__}") from e
    if not parsed.known:
        return None
    additive_class = coerce_additive_class(parsed.additive_class) or classify_additive(name)
    return IngredientRecord(
        name=name,
        source=TIER,
        origin=TIER,
        nutrition_score=parsed.nutrition_score,
        additive_class=additive_class,
        explanation=parsed.explanation,
    )


def infer_ingredient(
    name: str,
    timeout: float = 10,
    deadline: Optional[float] = None,
) -> Optional[IngredientRecord]:
    if not name or not name.strip():
        return None
    resp, err = post_with_retries(
        get_ollama_url(),
        timeout,
        deadline=deadline,
        json_body={
            "model": get_ollama_model(),
            "prompt": build_prompt(name),
            "system": _SYSTEM_PROMPT,
            "stream": False,
            "format": "json",
            "options": {"temperature": 0.0, "num_predict": 200},
        },
        max_retries=1,
    )
    if err is not None:
        logger.warning("AI_INFERENCE ollama call failed name=%s error=%s", name, err)
        if "timed out" in err.lower() or "deadline" in err.lower():
            raise TimeoutExceeded(TIER, name, timeout)
        raise SourceMiss(TIER, name, f"error:{err[:80]}")
    try:
        resp.raise_for_status()
        generated = resp.json().get("response", "")
    except (requests.RequestException, ValueError, AttributeError) as e:
        raise SourceMiss(TIER, name, f"error:{type(e).__name__}") from e

    record = parse_ai_response(name, generated or "")
    if record is None:
        logger.info("AI_INFERENCE unknown ingredient name=%s", name)
    else:
        logger.info(
            "AI_INFERENCE success name=%s score=%s additive_class=%s",
            name, record.nutrition_score, record.additive_class,
        )
    return record


class AIInferenceSource(ResolutionSource):
    tier = TIER

    def __init__(self, timeout_fraction: float = DEFAULT_AI_TIMEOUT_FRACTION):
        self.timeout_fraction = timeout_fraction

    def try_resolve(self, name, timeout=None, deadline=None):
        return infer_ingredient(name, timeout=timeout or 10, deadline=deadline)
