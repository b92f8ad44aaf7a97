"""Ordered attempt-and-test chain for fallback searches."""

from typing import Callable, Generic, List, Optional, TypeVar
from sunsync_bridge.core.logging import get_logger

_log = get_logger("core.fallback")
T = TypeVar("T")


class FallbackChain(Generic[T]):
    """Try candidates in order and stop at the first one that passes its test."""

    def __init__(self, name: str, steps: List[dict]):
        """Initialize fallback chain.

        Args:
            name: Chain name used in log lines
            steps: List of dicts with keys:
                - name: Step name
                - fn: Callable returning a result, or None when the step
                  has nothing to offer
                - test: Optional predicate deciding whether the result
                  is acceptable (defaults to "not None")
        """
        self.name = name
        self._steps = steps
        self.attempted: List[str] = []

    def call(self) -> Optional[T]:
        """Run steps in order; return the first accepted result, else None."""
        self.attempted = []
        for step in self._steps:
            self.attempted.append(step["name"])
            result = step["fn"]()
            if result is None:
                _log.debug("Step skipped", chain=self.name, step=step["name"])
                continue
            test: Callable[[T], bool] = step.get("test") or (lambda r: True)
            if test(result):
                _log.debug("Step accepted", chain=self.name, step=step["name"])
                return result
            _log.debug("Step rejected", chain=self.name, step=step["name"])
        _log.debug("Chain exhausted", chain=self.name, tried=len(self.attempted))
        return None
