"""
Scan pipeline: extract -> resolve (concurrent) -> score -> result.

Stages run in order; each can take a recovered path (fallback ingredient list,
synthesized records for lookups still running at the deadline) that is noted in
ScanResult.recovered_stages. Only PipelineExhausted escapes run().
"""
import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence

from snackcheck.config import ScanConfig, load_scan_config
from snackcheck.errors import ExtractionError, PipelineExhausted
from snackcheck.external_apis.base import ResolutionSource
from snackcheck.models.health_score import HealthScore
from snackcheck.models.ingredient import IngredientRecord
from snackcheck.parsing.ingredient_extractor import extract_ingredients
from snackcheck.pipeline.fallback import FallbackProvider, default_fallback_ingredients
from snackcheck.resolution.cache import ResolutionCache
from snackcheck.resolution.resolver import IngredientResolver, synthesize_default
from snackcheck.scoring.calculator import calculate_score

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    EXTRACTING = "extracting"
    RESOLVING = "resolving"
    SCORING = "scoring"
    DONE = "done"


@dataclass
class ScanResult:
    health_score: HealthScore
    records: List[IngredientRecord]
    raw_text: str = ""
    ingredient_names: List[str] = field(default_factory=list)
    used_fallback_ingredients: bool = False
    recovered_stages: List[str] = field(default_factory=list)
    processing_time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "raw_text": self.raw_text,
            "ingredient_names": list(self.ingredient_names),
            "ingredients": [r.to_dict() for r in self.records],
            "health_score": self.health_score.to_dict(),
            "used_fallback_ingredients": self.used_fallback_ingredients,
            "recovered_stages": list(self.recovered_stages),
            "processing_time": round(self.processing_time, 4),
        }


class PipelineOrchestrator:
    """
    Runs scans against one session's ResolutionCache. The cache is passed in
    explicitly; two orchestrators share lookups only if given the same cache.
    """

    def __init__(
        self,
        cache: ResolutionCache,
        config: Optional[ScanConfig] = None,
        sources: Optional[Sequence[ResolutionSource]] = None,
        fallback_provider: FallbackProvider = default_fallback_ingredients,
    ):
        self.cache = cache
        self.config = config or load_scan_config()
        self.resolver = IngredientResolver(cache, sources=sources, config=self.config)
        self._fallback_provider = fallback_provider

    def run(self, raw_text: str, budget: Optional[float] = None) -> ScanResult:
        """
        Score one label. `budget` (seconds) overrides the configured total budget;
        the call returns within it unless an external call ignores its timeout.
        """
        started = time.monotonic()
        total = budget if budget is not None and budget > 0 else self.config.total_budget
        deadline = started + total
        recovered: List[str] = []

        stage = PipelineStage.EXTRACTING
        names, used_fallback = self._extract(raw_text)
        if used_fallback:
            recovered.append(stage.value)

        stage = PipelineStage.RESOLVING
        logger.info("PIPELINE stage=%s count=%d budget=%.2fs", stage.value, len(names), total)
        records, timed_out = self._resolve_all(names, deadline, total)
        if timed_out:
            recovered.append(stage.value)

        stage = PipelineStage.SCORING
        try:
            score = calculate_score(records)
        except Exception as e:
            raise PipelineExhausted(stage.value, detail=f"{type(e).__name__}: {e}") from e

        elapsed = time.monotonic() - started
        logger.info(
            "PIPELINE stage=%s overall=%d color=%s factors=%d elapsed=%.3fs recovered=%s",
            PipelineStage.DONE.value, score.overall, score.color.value,
            len(score.factors), elapsed, recovered,
        )
        return ScanResult(
            health_score=score,
            records=records,
            raw_text=raw_text or "",
            ingredient_names=names,
            used_fallback_ingredients=used_fallback,
            recovered_stages=recovered,
            processing_time=elapsed,
        )

    def _extract(self, raw_text: str) -> tuple[List[str], bool]:
        try:
            return extract_ingredients(raw_text), False
        except ExtractionError as e:
            names = list(self._fallback_provider())
            logger.warning("PIPELINE extraction_failed error=%s fallback_count=%d", e, len(names))
            return names, True

    def _resolve_all(
        self, names: List[str], deadline: float, budget: float,
    ) -> tuple[List[IngredientRecord], int]:
        """
        Fan out one resolve per name, fan in by position. Lookups still running at
        the deadline are replaced by synthesized records; the threads are not waited on.
        """
        if not names:
            return [], 0
        pool = ThreadPoolExecutor(
            max_workers=min(self.config.max_workers, len(names)),
            thread_name_prefix="resolve",
        )
        try:
            futures: List[Future] = [pool.submit(self.resolver.resolve, name, deadline, budget) for name in names]
            wait(futures, timeout=max(0.0, deadline - time.monotonic()))
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        records: List[IngredientRecord] = []
        timed_out = 0
        for name, future in zip(names, futures):
            # queued lookups were cancelled by shutdown; running ones are simply not done
            if future.cancelled() or not future.done():
                timed_out += 1
                logger.warning("PIPELINE resolve_deadline name=%s using synthesized default", name)
                records.append(synthesize_default(name))
                continue
            try:
                records.append(future.result())
            except Exception as e:
                raise PipelineExhausted(
                    PipelineStage.RESOLVING.value, ingredient=name, detail=f"{type(e).__name__}: {e}",
                ) from e
        return records, timed_out
