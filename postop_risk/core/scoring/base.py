"""
Risk Scoring: Base Types

Output contracts of the scoring engine. Everything here is immutable: a
RiskAssessment is created once per scoring call and never merged.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

# Score bands (exclusive upper bound)
LOW_RISK_CEILING = 30
MEDIUM_RISK_CEILING = 60

MIN_RISK_SCORE = 5
MAX_RISK_SCORE = 100


class RiskCategory(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FollowUpPriority(str, Enum):
    """
    Scheduling urgency derived from the final score.

    ROUTINE – standard post-operative visits
    EARLY   – bring the next visit forward
    URGENT  – see the patient as soon as possible
    """
    ROUTINE = "routine"
    EARLY = "early"
    URGENT = "urgent"


class FactorAxis(str, Enum):
    """Which contribution bucket a fired rule adds its points to."""
    CLINICAL = "clinical"
    BEHAVIORAL = "behavioral"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (10.5 → 11, -2.5 → -2)."""
    return int(math.floor(value + 0.5))


def categorize(score: float) -> RiskCategory:
    if score < LOW_RISK_CEILING:
        return RiskCategory.LOW
    if score < MEDIUM_RISK_CEILING:
        return RiskCategory.MEDIUM
    return RiskCategory.HIGH


def follow_up_priority(score: float) -> FollowUpPriority:
    if score < LOW_RISK_CEILING:
        return FollowUpPriority.ROUTINE
    if score < MEDIUM_RISK_CEILING:
        return FollowUpPriority.EARLY
    return FollowUpPriority.URGENT


@dataclass(frozen=True)
class RiskFactor:
    """A labelled point contribution toward the total risk score."""
    label: str
    contribution: float

    def to_dict(self) -> dict:
        return {"label": self.label, "contribution": self.contribution}


@dataclass(frozen=True)
class RiskAssessment:
    """Result of one scoring call."""
    overall_risk_score: int
    risk_category: RiskCategory
    confidence_level: int
    clinical_contribution: int
    behavioral_contribution: int
    media_contribution: int
    follow_up_priority: FollowUpPriority
    doctor_override_applied: bool = False
    # Descending by contribution, at most five entries
    top_risk_factors: Tuple[RiskFactor, ...] = field(default_factory=tuple)
    explanation_notes: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "overall_risk_score": self.overall_risk_score,
            "risk_category": self.risk_category.value,
            "confidence_level": self.confidence_level,
            "clinical_contribution": self.clinical_contribution,
            "behavioral_contribution": self.behavioral_contribution,
            "media_contribution": self.media_contribution,
            "top_risk_factors": [f.to_dict() for f in self.top_risk_factors],
            "follow_up_priority": self.follow_up_priority.value,
            "doctor_override_applied": self.doctor_override_applied,
            "explanation_notes": list(self.explanation_notes),
        }
