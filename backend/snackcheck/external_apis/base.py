"""
Common interface for resolution tiers.
"""
from abc import ABC, abstractmethod
from typing import Optional

from snackcheck.models.ingredient import IngredientRecord


class ResolutionSource(ABC):
    """
    One tier of the resolution chain. try_resolve returns a record on success and
    None for a plain 'unknown'; it may raise SourceMiss/TimeoutExceeded or any
    transport error, all of which the resolver treats as a miss.

    timeout_fraction is this tier's share of the total scan budget; None means the
    tier is synchronous and never waits on I/O.
    """

    tier: str = "source"
    timeout_fraction: Optional[float] = None

    @abstractmethod
    def try_resolve(
        self,
        name: str,
        timeout: Optional[float] = None,
        deadline: Optional[float] = None,
    ) -> Optional[IngredientRecord]:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tier={self.tier!r})"
