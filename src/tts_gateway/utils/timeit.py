"""
Timing utilities.

    with timeit("synthesis") as t:
        audio = await speech.convert(ssml, fmt)
    print(f"Took {t.timing.seconds:.3f}s")

Uses time.perf_counter(). A plain (non-async) context manager is enough
around awaited calls: wall-clock time includes the suspension.
"""
from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter
from typing import Any, Dict, Optional


@dataclass
class Timing:
    """
    Attributes:
        name: What was timed.
        seconds: Duration in seconds.
        meta: Optional extra context.
    """
    name: str
    seconds: float
    meta: Optional[Dict[str, Any]] = None


class timeit:
    """Context manager timing a block; result in ``.timing`` after exit."""

    def __init__(self, name: str, meta: Optional[Dict[str, Any]] = None):
        self.name = name
        self.meta = meta
        self._t0: float | None = None
        self.timing: Timing | None = None

    def __enter__(self) -> "timeit":
        self._t0 = perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._t0 is not None
        self.timing = Timing(name=self.name, seconds=perf_counter() - self._t0, meta=self.meta)

    @property
    def seconds(self) -> float:
        """Elapsed seconds; live while inside the block."""
        if self.timing is not None:
            return self.timing.seconds
        if self._t0 is None:
            return 0.0
        return perf_counter() - self._t0
