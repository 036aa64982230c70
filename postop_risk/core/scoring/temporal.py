"""
Temporal adjustment.

Symptom and inflammation findings mean different things depending on how long
ago the surgery was: some pain at six hours is expected, the same pain after a
week is not.
"""
from __future__ import annotations

from typing import Optional

from postop_risk.core.assessment import TimeSinceSurgery, TimeUnit

DEFAULT_HOURS_SINCE_SURGERY = 48.0
DEFAULT_ELAPSED_LABEL = "2 days"

EARLY_WINDOW_HOURS = 24      # < 24 h: early findings expected
STANDARD_WINDOW_HOURS = 72   # 24–72 h: standard weighting
PERSISTENT_AFTER_HOURS = 168  # > 7 days: persistent findings weigh more

EARLY_MULTIPLIER = 0.7
STANDARD_MULTIPLIER = 1.0
PERSISTENT_MULTIPLIER = 1.2


def hours_since_surgery(elapsed: Optional[TimeSinceSurgery]) -> float:
    if elapsed is None:
        return DEFAULT_HOURS_SINCE_SURGERY
    if elapsed.unit == TimeUnit.HOURS:
        return elapsed.value
    return elapsed.value * 24


def temporal_multiplier(hours: float) -> float:
    if hours < EARLY_WINDOW_HOURS:
        return EARLY_MULTIPLIER
    if hours <= STANDARD_WINDOW_HOURS:
        return STANDARD_MULTIPLIER
    if hours > PERSISTENT_AFTER_HOURS:
        return PERSISTENT_MULTIPLIER
    return STANDARD_MULTIPLIER


def describe_elapsed(elapsed: Optional[TimeSinceSurgery]) -> str:
    """Human-readable elapsed time, e.g. ``"1 days"`` or ``"36 hours"``."""
    if elapsed is None:
        return DEFAULT_ELAPSED_LABEL
    value = elapsed.value
    shown = str(int(value)) if float(value).is_integer() else repr(float(value))
    return f"{shown} {elapsed.unit.value}"
