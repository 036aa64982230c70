"""
Temporal Risk Projection

Projects a base risk score forward over the standard post-operative review
days. Each day decays the previous day's (unrounded) risk and adds a small
random variance, so the trajectory is chained rather than recomputed from the
base score each time.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from postop_risk.core.randomness import NumpyRandomSource, RandomSource
from postop_risk.core.scoring.base import round_half_up

PROJECTION_DAYS: Tuple[int, ...] = (0, 1, 3, 7, 14)
DECAY_MODIFIERS: Tuple[float, ...] = (1.0, 0.95, 0.85, 0.7, 0.5)

PROJECTED_MIN = 5
PROJECTED_MAX = 95
VARIANCE_SPAN = 10  # variance ∈ [-5, 5)

# Baseline symptom levels on day 0 (0-10 scales)
BASE_PAIN = 5
BASE_REDNESS = 6
BASE_SWELLING = 4
SYMPTOM_JITTER = 2

VISUAL_BLUR_UNTIL_DAY = 3
DISCHARGE_UNTIL_DAY = 2
PHOTOPHOBIA_UNTIL_DAY = 7


@dataclass(frozen=True)
class SymptomSnapshot:
    pain_level: int
    redness_level: int
    swelling_level: int
    visual_blur: bool
    discharge: bool
    photophobia: bool

    def to_dict(self) -> dict:
        return {
            "pain_level": self.pain_level,
            "redness_level": self.redness_level,
            "swelling_level": self.swelling_level,
            "visual_blur": self.visual_blur,
            "discharge": self.discharge,
            "photophobia": self.photophobia,
        }


@dataclass(frozen=True)
class TemporalDataPoint:
    day: int
    risk_score: int
    clinical_contribution: int
    media_contribution: int
    symptoms: SymptomSnapshot

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "risk_score": self.risk_score,
            "clinical_contribution": self.clinical_contribution,
            "media_contribution": self.media_contribution,
            "symptoms": self.symptoms.to_dict(),
        }


class TemporalProjector:
    """Five-point forward risk trajectory."""

    def __init__(self, random_source: Optional[RandomSource] = None):
        self.random_source = random_source or NumpyRandomSource()

    def project(self, base_risk_score: float) -> List[TemporalDataPoint]:
        rng = self.random_source
        points: List[TemporalDataPoint] = []
        current = float(base_risk_score)

        for day, modifier in zip(PROJECTION_DAYS, DECAY_MODIFIERS):
            variance = (rng.random() - 0.5) * VARIANCE_SPAN
            risk = max(PROJECTED_MIN, min(PROJECTED_MAX, current * modifier + variance))

            clinical = round_half_up(risk * (0.5 + rng.random() * 0.3))
            media = round_half_up(risk * (0.1 + rng.random() * 0.2))
            symptoms = SymptomSnapshot(
                pain_level=max(0, round_half_up(BASE_PAIN * modifier + rng.random() * SYMPTOM_JITTER)),
                redness_level=max(0, round_half_up(BASE_REDNESS * modifier + rng.random() * SYMPTOM_JITTER)),
                swelling_level=max(0, round_half_up(BASE_SWELLING * modifier + rng.random() * SYMPTOM_JITTER)),
                visual_blur=day < VISUAL_BLUR_UNTIL_DAY,
                discharge=day < DISCHARGE_UNTIL_DAY,
                photophobia=day < PHOTOPHOBIA_UNTIL_DAY,
            )

            points.append(TemporalDataPoint(
                day=day,
                risk_score=round_half_up(risk),
                clinical_contribution=clinical,
                media_contribution=media,
                symptoms=symptoms,
            ))
            current = risk

        return points
