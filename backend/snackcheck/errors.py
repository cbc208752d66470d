"""
Error taxonomy for the scan pipeline.

Only PipelineExhausted is allowed to reach callers of the orchestrator;
everything else is absorbed where it is raised (extractor fallback, tier miss).
"""
from typing import Optional


class SnackCheckError(Exception):
    """Base class for scan pipeline errors."""


class ExtractionError(SnackCheckError):
    """Raw label text held no usable ingredient tokens."""


class SourceMiss(SnackCheckError):
    """A resolution tier had no answer for one ingredient."""

    def __init__(self, tier: str, name: str, reason: str = "no_result"):
        super().__init__(f"{tier} miss for {name!r}: {reason}")
        self.tier = tier
        self.name = name
        self.reason = reason


class TimeoutExceeded(SourceMiss):
    """A tier ran out of its share of the scan budget; handled as a miss."""

    def __init__(self, tier: str, name: str, timeout: Optional[float] = None):
        reason = "budget_exhausted" if timeout is None else f"timeout_after={timeout:.2f}s"
        super().__init__(tier, name, reason)
        self.timeout = timeout


class PipelineExhausted(SnackCheckError):
    """Internal invariant violation; the one hard failure a scan can surface."""

    def __init__(self, stage: str, ingredient: Optional[str] = None, detail: str = ""):
        msg = f"pipeline exhausted at stage={stage}"
        if ingredient is not None:
            msg += f" ingredient={ingredient!r}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.stage = stage
        self.ingredient = ingredient
        self.detail = detail
