"""
Pipeline orchestrator: extraction fallback, concurrent resolution, deadline handling.
"""
import threading
import time
from unittest.mock import MagicMock

import pytest

from snackcheck.config import ScanConfig
from snackcheck.errors import PipelineExhausted
from snackcheck.external_apis.base import ResolutionSource
from snackcheck.models import IngredientRecord
from snackcheck.models.health_score import ScoreColor
from snackcheck.pipeline import DEMO_INGREDIENTS, PipelineOrchestrator
from snackcheck.resolution.cache import ResolutionCache


class SlowSource(ResolutionSource):
    """Database-like tier that sleeps per name; delay may depend on the name."""

    tier = "openfoodfacts"

    def __init__(self, delays=None, default_delay=0.0, score=60):
        self.delays = delays or {}
        self.default_delay = default_delay
        self.score = score
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def try_resolve(self, name, timeout=None, deadline=None):
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            time.sleep(self.delays.get(name, self.default_delay))
        finally:
            with self._lock:
                self.active -= 1
        return IngredientRecord(
            name=name,
            source=self.tier,
            origin=self.tier,
            nutrition_score=self.score,
            explanation=f"{name} from the nutrition database",
        )


def _orchestrator(sources, budget=5.0, workers=8, cache=None):
    cache = cache if cache is not None else ResolutionCache(seed=False)
    return PipelineOrchestrator(cache, config=ScanConfig(total_budget=budget, max_workers=workers), sources=sources)


def test_records_keep_label_order_despite_uneven_latency():
    source = SlowSource(delays={"Inulin": 0.3, "Pectin": 0.0, "Guar Gum": 0.15})
    result = _orchestrator([source]).run("Ingredients: Inulin, Pectin, Guar Gum")
    assert [r.name for r in result.records] == ["Inulin", "Pectin", "Guar Gum"]
    assert result.ingredient_names == ["Inulin", "Pectin", "Guar Gum"]
    assert all(r.source == "openfoodfacts" for r in result.records)
    assert result.recovered_stages == []


def test_lookups_run_concurrently():
    source = SlowSource(default_delay=0.2)
    started = time.monotonic()
    result = _orchestrator([source]).run("Inulin, Pectin, Guar Gum, Agar")
    elapsed = time.monotonic() - started
    assert len(result.records) == 4
    assert source.max_active > 1
    assert elapsed < 0.7


def test_worker_limit_respected():
    source = SlowSource(default_delay=0.05)
    _orchestrator([source], workers=2).run("Inulin, Pectin, Guar Gum, Agar, Xanthan Gum")
    assert source.max_active <= 2


def test_empty_text_uses_fallback_list():
    result = _orchestrator([]).run("")
    assert result.used_fallback_ingredients is True
    assert result.ingredient_names == DEMO_INGREDIENTS
    assert [r.name for r in result.records] == DEMO_INGREDIENTS
    assert "extracting" in result.recovered_stages
    assert 0 <= result.health_score.overall <= 100


def test_custom_fallback_provider():
    cache = ResolutionCache(seed=False)
    orchestrator = PipelineOrchestrator(cache, config=ScanConfig(), sources=[], fallback_provider=lambda: ["Water"])
    result = orchestrator.run("   ")
    assert result.ingredient_names == ["Water"]


def test_deadline_replaces_slow_lookups_with_defaults():
    source = SlowSource(delays={"Inulin": 0.0, "Pectin": 1.5})
    started = time.monotonic()
    result = _orchestrator([source], budget=0.3).run("Inulin, Pectin")
    elapsed = time.monotonic() - started
    assert elapsed < 1.0
    inulin, pectin = result.records
    assert inulin.source == "openfoodfacts"
    assert pectin.source == "ai"
    assert pectin.nutrition_score is None
    assert "resolving" in result.recovered_stages


def test_budget_argument_overrides_config():
    source = SlowSource(default_delay=1.5)
    started = time.monotonic()
    result = _orchestrator([source], budget=30.0).run("Inulin", budget=0.2)
    assert time.monotonic() - started < 1.0
    assert result.records[0].source == "ai"


def test_all_tiers_down_still_scores():
    class DownSource(ResolutionSource):
        tier = "openfoodfacts"

        def try_resolve(self, name, timeout=None, deadline=None):
            raise ConnectionError("network unreachable")

    result = _orchestrator([DownSource()]).run("Inulin, Trans Fat")
    assert [r.source for r in result.records] == ["ai", "ai"]
    assert result.health_score.overall == 80
    assert result.health_score.color == ScoreColor.GREEN


def test_resolver_crash_surfaces_pipeline_exhausted():
    orchestrator = _orchestrator([])
    orchestrator.resolver = MagicMock()
    orchestrator.resolver.resolve.side_effect = RuntimeError("invariant broken")
    with pytest.raises(PipelineExhausted) as exc:
        orchestrator.run("Inulin")
    assert exc.value.stage == "resolving"
    assert exc.value.ingredient == "Inulin"


def test_shared_cache_reused_across_runs():
    cache = ResolutionCache(seed=False)
    first = _orchestrator([SlowSource()], cache=cache).run("Inulin")
    second = _orchestrator([SlowSource()], cache=cache).run("Inulin")
    assert first.records[0].source == "openfoodfacts"
    assert second.records[0].source == "cache"


def test_seeded_label_scores_from_cache():
    result = _orchestrator([], cache=ResolutionCache()).run("Ingredients: Water, Sugar, Salt")
    assert [r.source for r in result.records] == ["cache", "cache", "cache"]
    assert result.health_score.overall == 100


def test_to_dict_shape():
    d = _orchestrator([]).run("Trans Fat").to_dict()
    assert d["ingredient_names"] == ["Trans Fat"]
    assert d["health_score"]["overall"] == 80
    assert d["health_score"]["color"] == "green"
    assert d["ingredients"][0]["source"] == "ai"
    assert d["used_fallback_ingredients"] is False


class TimeoutRecordingSource(ResolutionSource):
    """Answers 'unknown' and remembers the timeout it was given."""

    def __init__(self, tier, timeout_fraction):
        self.tier = tier
        self.timeout_fraction = timeout_fraction
        self.timeouts = []

    def try_resolve(self, name, timeout=None, deadline=None):
        self.timeouts.append(timeout)
        return None


def test_run_budget_is_split_across_tiers():
    """A per-run budget below the configured one still gives each tier only its share."""
    db = TimeoutRecordingSource("openfoodfacts", 0.5)
    ai = TimeoutRecordingSource("ai", 0.4)
    result = _orchestrator([db, ai], budget=5.0).run("Inulin", budget=1.0)
    assert len(db.timeouts) == 1 and len(ai.timeouts) == 1
    assert 0 < db.timeouts[0] <= 0.5
    assert 0 < ai.timeouts[0] <= 0.4
    assert result.records[0].nutrition_score is None
