from .orchestrator import PipelineOrchestrator, PipelineStage, ScanResult
from .fallback import DEMO_INGREDIENTS, default_fallback_ingredients

__all__ = [
    "PipelineOrchestrator",
    "PipelineStage",
    "ScanResult",
    "DEMO_INGREDIENTS",
    "default_fallback_ingredients",
]
