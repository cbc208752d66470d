"""
Resolution cache: normalization, provenance precedence, TTL, eviction, seeding.
"""
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from snackcheck.models import IngredientRecord
from snackcheck.normalization import normalize_ingredient_key
from snackcheck.resolution.cache import ResolutionCache


def _rec(name, source="openfoodfacts", score=60):
    return IngredientRecord(
        name=name,
        source=source,
        origin=source,
        explanation=f"{name} from {source}",
        nutrition_score=score,
    )


def test_normalize_ingredient_key():
    assert normalize_ingredient_key("  SUGAR* ") == "sugar"
    assert normalize_ingredient_key("Vitamin  E.") == "vitamin e"
    assert normalize_ingredient_key("") == ""
    assert normalize_ingredient_key(None) == ""


def test_put_then_get_uses_normalized_key():
    cache = ResolutionCache(seed=False)
    assert cache.put("Cane Sugar", _rec("Cane Sugar"))
    assert cache.get("  cane   SUGAR ").name == "Cane Sugar"
    assert "cane sugar" in cache
    assert cache.get("cane") is None


def test_higher_provenance_not_overwritten_by_ai():
    cache = ResolutionCache(seed=False)
    cache.put("Maltodextrin", _rec("Maltodextrin", "openfoodfacts", 40))
    kept = cache.put("Maltodextrin", _rec("Maltodextrin", "ai", 10))
    assert kept is False
    assert cache.get("maltodextrin").origin == "openfoodfacts"


def test_database_result_overwrites_ai():
    cache = ResolutionCache(seed=False)
    cache.put("Maltodextrin", _rec("Maltodextrin", "ai", 10))
    assert cache.put("Maltodextrin", _rec("Maltodextrin", "openfoodfacts", 40))
    assert cache.get("maltodextrin").nutrition_score == 40


def test_seeded_entries_present_and_marked():
    cache = ResolutionCache()
    water = cache.get("Water")
    assert water is not None
    assert water.source == "cache"
    assert water.origin == "seed"
    assert water.nutrition_score == 100
    stats = cache.stats()
    assert stats["seeded_entries"] == stats["total_entries"] > 0


def test_seed_not_replaced_by_external_tier():
    cache = ResolutionCache()
    assert cache.put("Water", _rec("Water", "ai", 5)) is False
    assert cache.get("water").nutrition_score == 100


def test_entries_expire_after_ttl():
    cache = ResolutionCache(ttl_seconds=60, seed=False)
    with patch("snackcheck.resolution.cache.time") as mock_time:
        mock_time.time.return_value = 1000.0
        cache.put("Inulin", _rec("Inulin"))
        mock_time.time.return_value = 1059.0
        assert cache.get("inulin") is not None
        mock_time.time.return_value = 1061.0
        assert cache.get("inulin") is None
    assert len(cache) == 0


def test_seeded_entries_never_expire():
    cache = ResolutionCache(ttl_seconds=1)
    with patch("snackcheck.resolution.cache.time") as mock_time:
        mock_time.time.return_value = 10 ** 9
        assert cache.get("salt") is not None


def test_oldest_entry_evicted_when_full():
    cache = ResolutionCache(max_entries=2, seed=False)
    with patch("snackcheck.resolution.cache.time") as mock_time:
        for i, name in enumerate(["Inulin", "Pectin", "Guar Gum"]):
            mock_time.time.return_value = 1000.0 + i
            cache.put(name, _rec(name))
        assert len(cache) == 2
        assert cache.get("inulin") is None
        assert cache.get("pectin") is not None
        assert cache.get("guar gum") is not None


def test_stats_count_hits_and_misses():
    cache = ResolutionCache(seed=False)
    cache.put("Pectin", _rec("Pectin"))
    cache.get("pectin")
    cache.get("pectin")
    cache.get("agar")
    stats = cache.stats()
    assert stats["hits"] == 2
    assert stats["misses"] == 1
    assert stats["total_entries"] == 1
    assert stats["seeded_entries"] == 0


def test_clear_restores_seed_only():
    cache = ResolutionCache()
    seeded = len(cache)
    cache.put("Pectin", _rec("Pectin"))
    assert len(cache) == seeded + 1
    cache.clear()
    assert len(cache) == seeded
    assert cache.get("pectin") is None
    assert cache.get("water") is not None


def test_separate_caches_do_not_share_entries():
    a = ResolutionCache(seed=False)
    b = ResolutionCache(seed=False)
    a.put("Pectin", _rec("Pectin"))
    assert b.get("pectin") is None


def test_seed_larger_than_bound_still_caches_resolved_records():
    """Seeded entries do not use up max_entries."""
    cache = ResolutionCache(max_entries=10)
    assert len(cache) > 10
    assert cache.put("Inulin", _rec("Inulin"))
    assert cache.get("inulin") is not None
    assert cache.get("water") is not None


def test_bound_applies_to_resolved_entries_with_seed_present():
    cache = ResolutionCache(max_entries=2)
    seeded = len(cache)
    with patch("snackcheck.resolution.cache.time") as mock_time:
        for i, name in enumerate(["Inulin", "Pectin", "Guar Gum"]):
            mock_time.time.return_value = 1000.0 + i
            cache.put(name, _rec(name))
        assert len(cache) == seeded + 2
        assert cache.get("inulin") is None
        assert cache.get("guar gum") is not None
        assert cache.stats()["seeded_entries"] == seeded


def test_concurrent_writers_keep_cache_consistent():
    """Many threads writing and reading the same and different keys."""
    cache = ResolutionCache(seed=False)
    shared = ["Inulin", "INULIN ", "inulin*"]

    def work(i):
        name = shared[i % len(shared)]
        tier = "ai" if i % 2 else "openfoodfacts"
        cache.put(name, _rec(name, tier, score=i % 100))
        cache.put(f"Gum {i % 20}", _rec(f"Gum {i % 20}", tier))
        record = cache.get("inulin")
        assert record is not None
        return record

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(work, range(400)))

    assert len(results) == 400
    assert len(cache) == 21
    final = cache.get("inulin")
    assert final.origin == "openfoodfacts"
    stats = cache.stats()
    assert stats["total_entries"] == 21
    assert stats["hits"] == 401
    assert stats["misses"] == 0
