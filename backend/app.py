"""
SnackCheck FastAPI application.

Endpoints:
    GET    /              Health check
    POST   /scan          Label text -> ingredients -> resolution -> health score
    GET    /cache/stats   Resolution cache statistics for a session
    DELETE /cache         Reset a session's resolution cache
"""
import logging
import threading
from collections import OrderedDict
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Load env vars
load_dotenv(Path(__file__).parent / ".env")

from snackcheck.config import get_max_sessions, log_config, load_scan_config
from snackcheck.errors import PipelineExhausted
from snackcheck.pipeline.orchestrator import PipelineOrchestrator
from snackcheck.resolution.cache import ResolutionCache

# Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize App
app = FastAPI(title="SnackCheck Scan API")
log_config()

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

DEFAULT_SESSION = "default"

# One cache + orchestrator per session id, least recently used dropped first.
_sessions: "OrderedDict[str, PipelineOrchestrator]" = OrderedDict()
_sessions_lock = threading.Lock()


def _session_key(session_id: Optional[str]) -> str:
    return (session_id or DEFAULT_SESSION).strip() or DEFAULT_SESSION


def get_orchestrator(session_id: Optional[str] = None) -> PipelineOrchestrator:
    key = _session_key(session_id)
    with _sessions_lock:
        orchestrator = _sessions.get(key)
        if orchestrator is not None:
            _sessions.move_to_end(key)
            return orchestrator
        orchestrator = PipelineOrchestrator(ResolutionCache(), config=load_scan_config())
        _sessions[key] = orchestrator
        limit = get_max_sessions()
        while len(_sessions) > limit:
            dropped, _ = _sessions.popitem(last=False)
            logger.info("SESSION evicted session_id=%s", dropped)
        logger.info("SESSION created session_id=%s sessions=%d", key, len(_sessions))
        return orchestrator


def find_orchestrator(session_id: Optional[str] = None) -> Optional[PipelineOrchestrator]:
    """Existing session only; never creates one."""
    with _sessions_lock:
        return _sessions.get(_session_key(session_id))


# --- Request/Response Models ---
class ScanRequest(BaseModel):
    raw_text: str = ""
    session_id: Optional[str] = None
    budget_seconds: Optional[float] = Field(default=None, gt=0, le=60)


class ImpactFactorOut(BaseModel):
    ingredient: str
    impact: int
    reason: str


class HealthScoreOut(BaseModel):
    overall: int
    color: str
    factors: List[ImpactFactorOut]


class IngredientOut(BaseModel):
    name: str
    source: str
    nutrition_score: Optional[int] = None
    additive_class: Optional[str] = None
    explanation: str
    origin: Optional[str] = None


class ScanResponse(BaseModel):
    raw_text: str
    ingredient_names: List[str]
    ingredients: List[IngredientOut]
    health_score: HealthScoreOut
    used_fallback_ingredients: bool
    recovered_stages: List[str]
    processing_time: float


# --- Endpoints ---

@app.get("/")
def health_check():
    return {"status": "ok", "service": "SnackCheck Scan API"}


@app.post("/scan", response_model=ScanResponse)
def scan_label(request: ScanRequest):
    """Extract -> resolve -> score. Always returns a score unless an internal invariant breaks."""
    logger.info("Scan request chars=%d session_id=%s", len(request.raw_text), request.session_id)
    orchestrator = get_orchestrator(request.session_id)
    try:
        result = orchestrator.run(request.raw_text, budget=request.budget_seconds)
    except PipelineExhausted as e:
        logger.error("Scan failed stage=%s ingredient=%s: %s", e.stage, e.ingredient, e, exc_info=True)
        raise HTTPException(
            status_code=500,
            detail={"error": "pipeline_exhausted", "stage": e.stage, "ingredient": e.ingredient},
        )
    logger.info(
        "Scan overall=%d color=%s ingredients=%d fallback=%s",
        result.health_score.overall, result.health_score.color.value,
        len(result.records), result.used_fallback_ingredients,
    )
    return result.to_dict()


def _require_session(session_id: Optional[str]) -> PipelineOrchestrator:
    orchestrator = find_orchestrator(session_id)
    if orchestrator is None:
        raise HTTPException(status_code=404, detail={"error": "unknown_session", "session_id": _session_key(session_id)})
    return orchestrator


@app.get("/cache/stats")
def cache_stats(session_id: Optional[str] = None):
    return _require_session(session_id).cache.stats()


@app.delete("/cache")
def clear_cache(session_id: Optional[str] = None):
    orchestrator = _require_session(session_id)
    orchestrator.cache.clear()
    logger.info("Cache cleared session_id=%s", _session_key(session_id))
    return {"status": "cleared", "stats": orchestrator.cache.stats()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
