"""
Ingredient resolver: walk the tier chain (cache -> nutrition database -> AI
inference) and fall back to a synthesized record, so resolve() always returns.
"""
import logging
import time
from typing import Optional, Sequence

from snackcheck.config import ScanConfig, get_ai_inference_enabled, get_open_food_facts_enabled
from snackcheck.errors import SourceMiss, TimeoutExceeded
from snackcheck.external_apis.ai_inference import AIInferenceSource
from snackcheck.external_apis.base import ResolutionSource
from snackcheck.external_apis.open_food_facts import OpenFoodFactsSource
from snackcheck.models.ingredient import IngredientRecord
from snackcheck.resolution.cache import ResolutionCache

logger = logging.getLogger(__name__)

DEFAULT_EXPLANATION = "{name} is a food ingredient with unknown health impact"


def synthesize_default(name: str) -> IngredientRecord:
    """Last tier: no score, AI provenance, generic explanation."""
    display = name.strip() or "This ingredient"
    return IngredientRecord(
        name=name,
        source="ai",
        nutrition_score=None,
        explanation=DEFAULT_EXPLANATION.format(name=display),
    )


class CacheSource(ResolutionSource):
    """Synchronous first tier backed by the session's ResolutionCache."""

    tier = "cache"

    def __init__(self, cache: ResolutionCache):
        self.cache = cache

    def try_resolve(self, name, timeout=None, deadline=None):
        record = self.cache.get(name)
        if record is None:
            return None
        logger.debug("RESOLVE cache_hit name=%s origin=%s", name, record.provenance)
        return record.as_cached()


def default_sources(config: ScanConfig) -> list[ResolutionSource]:
    """External tiers in order, honoring the enable switches."""
    sources: list[ResolutionSource] = []
    if get_open_food_facts_enabled():
        sources.append(OpenFoodFactsSource(timeout_fraction=config.db_timeout_fraction))
    if get_ai_inference_enabled():
        sources.append(AIInferenceSource(timeout_fraction=config.ai_timeout_fraction))
    return sources


class IngredientResolver:
    """
    Resolve one ingredient name to exactly one IngredientRecord.

    The cache tier always runs first; `sources` are the external tiers after it.
    Each external tier gets min(fraction * budget, time left before deadline), where
    budget is the caller's per-scan budget or else the configured total.
    Successful external results are written back to the cache. Tier failures of
    any kind are logged and treated as a miss.
    """

    def __init__(
        self,
        cache: ResolutionCache,
        sources: Optional[Sequence[ResolutionSource]] = None,
        config: Optional[ScanConfig] = None,
    ):
        self.cache = cache
        self.config = config or ScanConfig()
        external = list(default_sources(self.config) if sources is None else sources)
        self.sources: list[ResolutionSource] = [CacheSource(cache)] + external

    def _tier_timeout(
        self,
        source: ResolutionSource,
        deadline: Optional[float],
        budget: Optional[float] = None,
    ) -> Optional[float]:
        if source.timeout_fraction is None:
            return None
        total = budget if budget is not None and budget > 0 else self.config.total_budget
        timeout = total * source.timeout_fraction
        if deadline is not None:
            timeout = min(timeout, deadline - time.monotonic())
        return timeout

    def resolve(
        self,
        name: str,
        deadline: Optional[float] = None,
        budget: Optional[float] = None,
    ) -> IngredientRecord:
        """Never raises; returns the synthesized default when every tier misses."""
        for source in self.sources:
            timeout = self._tier_timeout(source, deadline, budget)
            try:
                if timeout is not None and timeout <= 0:
                    raise TimeoutExceeded(source.tier, name)
                record = source.try_resolve(name, timeout=timeout, deadline=deadline)
                if record is not None and not isinstance(record, IngredientRecord):
                    raise SourceMiss(source.tier, name, f"invalid_record:{type(record).__name__}")
            except SourceMiss as e:
                logger.warning("RESOLVE tier_miss name=%s tier=%s reason=%s", name, source.tier, e.reason)
                continue
            except Exception as e:
                logger.warning(
                    "RESOLVE tier_error name=%s tier=%s error=%s: %s",
                    name, source.tier, type(e).__name__, e,
                )
                continue
            if record is None:
                logger.info("RESOLVE tier_unknown name=%s tier=%s", name, source.tier)
                continue
            if record.source != "cache":
                self.cache.put(name, record)
            logger.debug("RESOLVE resolved name=%s tier=%s", name, source.tier)
            return record.renamed(name)

        logger.info("RESOLVE exhausted name=%s using synthesized default", name)
        return synthesize_default(name)
