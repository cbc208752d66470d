"""
Scan budget, external tier switches, and cache sizing.
All values are read lazily from the environment so tests can patch them.
"""
import os
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# --- Defaults ---
DEFAULT_TOTAL_BUDGET = 5.0
DEFAULT_DB_TIMEOUT_FRACTION = 0.5
DEFAULT_AI_TIMEOUT_FRACTION = 0.4
DEFAULT_MAX_WORKERS = 8
DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60
DEFAULT_CACHE_MAX_ENTRIES = 1000
DEFAULT_MAX_SESSIONS = 100


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("CONFIG invalid float %s=%r, using default %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("CONFIG invalid int %s=%r, using default %s", name, raw, default)
        return default


def _clamp_fraction(value: float, default: float) -> float:
    if value <= 0:
        return default
    return min(value, 1.0)


@dataclass(frozen=True)
class ScanConfig:
    """Latency budget for one scan and the share of it each external tier may use."""
    total_budget: float = DEFAULT_TOTAL_BUDGET
    db_timeout_fraction: float = DEFAULT_DB_TIMEOUT_FRACTION
    ai_timeout_fraction: float = DEFAULT_AI_TIMEOUT_FRACTION
    max_workers: int = DEFAULT_MAX_WORKERS

    @property
    def db_timeout(self) -> float:
        return self.total_budget * self.db_timeout_fraction

    @property
    def ai_timeout(self) -> float:
        return self.total_budget * self.ai_timeout_fraction


def load_scan_config() -> ScanConfig:
    budget = _env_float("SCAN_TOTAL_BUDGET_SECONDS", DEFAULT_TOTAL_BUDGET)
    if budget <= 0:
        logger.warning("CONFIG non-positive scan budget %s, using default", budget)
        budget = DEFAULT_TOTAL_BUDGET
    return ScanConfig(
        total_budget=budget,
        db_timeout_fraction=_clamp_fraction(
            _env_float("SCAN_DB_TIMEOUT_FRACTION", DEFAULT_DB_TIMEOUT_FRACTION),
            DEFAULT_DB_TIMEOUT_FRACTION,
        ),
        ai_timeout_fraction=_clamp_fraction(
            _env_float("SCAN_AI_TIMEOUT_FRACTION", DEFAULT_AI_TIMEOUT_FRACTION),
            DEFAULT_AI_TIMEOUT_FRACTION,
        ),
        max_workers=max(1, _env_int("SCAN_MAX_WORKERS", DEFAULT_MAX_WORKERS)),
    )


# --- External APIs (lazy read from env) ---
def get_open_food_facts_enabled() -> bool:
    return _env_flag("OPEN_FOOD_FACTS_ENABLED", "true")


def get_open_food_facts_url() -> str:
    return os.environ.get("OPEN_FOOD_FACTS_URL", "https://world.openfoodfacts.org/cgi/search.pl")


def get_ai_inference_enabled() -> bool:
    return _env_flag("AI_INFERENCE_ENABLED", "true")


# --- LLM / Ollama ---
def get_ollama_url() -> str:
    return os.environ.get("OLLAMA_API_URL", "http://localhost:11434/api/generate")


def get_ollama_model() -> str:
    return os.environ.get("OLLAMA_MODEL", "llama3.2:3b")


# --- Resolution cache ---
def get_cache_ttl_seconds() -> float:
    return _env_float("RESOLUTION_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)


def get_cache_max_entries() -> int:
    return max(1, _env_int("RESOLUTION_CACHE_MAX_ENTRIES", DEFAULT_CACHE_MAX_ENTRIES))


# --- HTTP sessions ---
def get_max_sessions() -> int:
    return max(1, _env_int("SCAN_MAX_SESSIONS", DEFAULT_MAX_SESSIONS))


# --- Startup logging ---
def log_config() -> None:
    scan = load_scan_config()
    logger.info(
        "CONFIG: budget=%.2fs db_fraction=%.2f ai_fraction=%.2f workers=%d "
        "off_enabled=%s ai_enabled=%s ollama_model=%s cache_ttl=%ds cache_max=%d max_sessions=%d",
        scan.total_budget, scan.db_timeout_fraction, scan.ai_timeout_fraction,
        scan.max_workers, get_open_food_facts_enabled(), get_ai_inference_enabled(),
        get_ollama_model(), int(get_cache_ttl_seconds()), get_cache_max_entries(),
        get_max_sessions(),
    )
