"""
Pytest Configuration and Fixtures

Shared fixtures for risk engine tests.
"""
import itertools
from pathlib import Path
import sys
from typing import Iterable

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from postop_risk.core.assessment import (  # noqa: E402
    Assessment,
    ClinicalMeasurements,
    ComplianceLevel,
    Demographics,
    DiabetesControl,
    PostOperativeSymptoms,
    SystemicHistory,
    TimeSinceSurgery,
    TimeUnit,
)


class FixedRandomSource:
    """Replays a fixed sequence of values in [0, 1), cycling when exhausted."""

    def __init__(self, values: Iterable[float] = (0.5,)):
        self.values = list(values)
        self._cycle = itertools.cycle(self.values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return next(self._cycle)


@pytest.fixture
def fixed_random() -> FixedRandomSource:
    """Midpoint source: confidence 85, zero projection variance."""
    return FixedRandomSource([0.5])


@pytest.fixture
def high_risk_assessment() -> Assessment:
    """Elderly, poorly controlled diabetic, severe pain, raised IOP, poor compliance, day 1."""
    return Assessment(
        demographics=Demographics(age=75),
        systemic_history=SystemicHistory(diabetes_control=DiabetesControl.POOR),
        post_operative_symptoms=PostOperativeSymptoms(pain_level=8),
        clinical_measurements=ClinicalMeasurements(intraocular_pressure=26),
        compliance_score=ComplianceLevel.POOR,
        time_since_surgery=TimeSinceSurgery(value=1, unit=TimeUnit.DAYS),
    )


@pytest.fixture
def empty_assessment() -> Assessment:
    return Assessment()


@pytest.fixture
def random_source_factory():
    """Build fixed-sequence random sources inside a test."""
    return FixedRandomSource
