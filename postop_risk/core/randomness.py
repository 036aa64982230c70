"""
Injectable random sources.

The engine has exactly two non-deterministic outputs: the confidence level of
a risk assessment and the day-to-day variance of the temporal projection.
Both draw from a ``RandomSource`` handed in by the caller, so tests can pin
them with a fixed sequence.
"""
from __future__ import annotations

from typing import Optional, Protocol

import numpy as np


class RandomSource(Protocol):
    def random(self) -> float:
        """Return a float in [0, 1)."""
        ...


class NumpyRandomSource:
    """Production source backed by numpy's PCG64 generator."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(seed)

    def random(self) -> float:
        return float(self._rng.random())


def bounded(source: RandomSource, low: float, high: float) -> float:
    """Draw uniformly from [low, high) using ``source``."""
    return low + source.random() * (high - low)
