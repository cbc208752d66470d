"""
Open Food Facts connector (no key required), the nutrition-database tier.
Search: https://world.openfoodfacts.org/cgi/search.pl?search_terms=...&json=1
"""
import logging
from typing import Optional

import requests

from snackcheck.additives import classify_additive
from snackcheck.config import get_open_food_facts_url, DEFAULT_DB_TIMEOUT_FRACTION
from snackcheck.errors import SourceMiss, TimeoutExceeded
from snackcheck.external_apis.base import ResolutionSource
from snackcheck.external_apis.http_retry import get_with_retries
from snackcheck.models.ingredient import IngredientRecord

logger = logging.getLogger(__name__)

TIER = "openfoodfacts"

NUTRITION_GRADE_SCORES = {"a": 90, "b": 75, "c": 60, "d": 40, "e": 20}
DEFAULT_NUTRITION_SCORE = 50
# Products carrying additive tags never score above this.
ADDITIVE_SCORE_CAP = 60


def product_to_record(product: dict, query: str) -> IngredientRecord:
    """Map the best OFF product for a search to a record for the queried ingredient."""
    grade = (product.get("nutrition_grades") or product.get("nutriscore_grade") or "").strip().lower()
    score = NUTRITION_GRADE_SCORES.get(grade, DEFAULT_NUTRITION_SCORE)
    if product.get("additives_tags"):
        score = min(score, ADDITIVE_SCORE_CAP)
    product_name = (product.get("product_name") or product.get("product_name_en") or "").strip()
    explanation = f"Information from OpenFoodFacts database based on products containing {query}"
    if product_name:
        explanation += f" (e.g. {product_name[:80]})"
    if grade in NUTRITION_GRADE_SCORES:
        explanation += f"; typical Nutri-Score grade {grade.upper()}"
    return IngredientRecord(
        name=query,
        source=TIER,
        origin=TIER,
        nutrition_score=score,
        additive_class=classify_additive(query),
        explanation=explanation + ".",
    )


def fetch_open_food_facts(
    ingredient_query: str,
    timeout: float = 10,
    deadline: Optional[float] = None,
) -> Optional[IngredientRecord]:
    """
    Search Open Food Facts. Returns a record, or None when the search has no products.
    Raises TimeoutExceeded / SourceMiss when the API cannot be reached or answers badly.
    """
    if not ingredient_query or not ingredient_query.strip():
        return None

    query = ingredient_query.strip()[:200]
    params = {
        "search_terms": query,
        "search_simple": 1,
        "action": "process",
        "json": 1,
        "page_size": 5,
    }
    resp, err = get_with_retries(get_open_food_facts_url(), timeout, deadline=deadline, params=params)
    if err is not None:
        logger.warning("OPEN_FOOD_FACTS API fetch failed after retries query=%s error=%s", query, err)
        if "timed out" in err.lower() or "deadline" in err.lower():
            raise TimeoutExceeded(TIER, query, timeout)
        raise SourceMiss(TIER, query, f"error:{err[:80]}")
    try:
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("OPEN_FOOD_FACTS API response error query=%s error=%s", query, e)
        raise SourceMiss(TIER, query, f"error:{type(e).__name__}") from e

    products = data.get("products") if isinstance(data, dict) else None
    if not products:
        logger.info("OPEN_FOOD_FACTS no results query=%s", query)
        return None

    record = product_to_record(products[0], query)
    logger.info(
        "OPEN_FOOD_FACTS success query=%s score=%s additive_class=%s",
        query, record.nutrition_score, record.additive_class,
    )
    return record


class OpenFoodFactsSource(ResolutionSource):
    tier = TIER

    def __init__(self, timeout_fraction: float = DEFAULT_DB_TIMEOUT_FRACTION):
        self.timeout_fraction = timeout_fraction

    def try_resolve(self, name, timeout=None, deadline=None):
        return fetch_open_food_facts(name, timeout=timeout or 10, deadline=deadline)
