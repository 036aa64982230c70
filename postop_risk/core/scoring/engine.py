"""
Risk Scoring Engine

Turns an Assessment into a RiskAssessment: deterministic point accumulation
from the factor catalog, followed by multiplicative adjustments.

Order of operations:
    1. temporal multiplier from time since surgery (scales symptom points)
    2. catalog points → clinical / behavioral scores
    3. media contribution  (overallMediaRisk × 0.3)
    4. follow-up trend     (−5 / +12)
    5. compliance          (× 1.0 / 1.15 / 1.35)
    6. doctor override     (× 1.25 / 0.75)
    7. clamp to [5, 100] and round

Two factors are reported in addition to the points they describe: the media
factor duplicates the media contribution already in the total, and the
compliance factor is computed from the post-multiplication total without being
fed back into it. Both are part of the scoring contract.

Usage:
    from postop_risk.core.scoring import RiskScoringEngine

    engine = RiskScoringEngine()
    risk = engine.score(assessment)
    print(risk.overall_risk_score, risk.risk_category)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from postop_risk.core.assessment import Assessment, ComplianceLevel, DoctorOverride, FollowUpTrend
from postop_risk.core.randomness import NumpyRandomSource, RandomSource, bounded
from .base import (
    MAX_RISK_SCORE,
    MIN_RISK_SCORE,
    FactorAxis,
    RiskAssessment,
    RiskFactor,
    categorize,
    follow_up_priority,
    round_half_up,
)
from .catalog import evaluate_catalog
from .temporal import describe_elapsed, hours_since_surgery, temporal_multiplier

logger = logging.getLogger(__name__)

MEDIA_WEIGHT = 0.3
MEDIA_ABNORMAL_THRESHOLD = 50  # raw overallMediaRisk, > 50

IMPROVING_TREND_ADJUSTMENT = -5
WORSENING_TREND_ADJUSTMENT = 12

COMPLIANCE_MULTIPLIERS = {
    ComplianceLevel.GOOD: 1.0,
    ComplianceLevel.MODERATE: 1.15,
    ComplianceLevel.POOR: 1.35,
}
POOR_COMPLIANCE_FACTOR_SHARE = 0.35

OVERRIDE_MULTIPLIERS = {
    DoctorOverride.ACCEPT: 1.0,
    DoctorOverride.INCREASE: 1.25,
    DoctorOverride.DECREASE: 0.75,
}

CONFIDENCE_MIN = 75
CONFIDENCE_MAX = 95
TOP_FACTOR_LIMIT = 5

POOR_COMPLIANCE_NOTE = "Low compliance can worsen outcomes even in otherwise low-risk patients."
OVERRIDE_NOTES = {
    DoctorOverride.INCREASE: "Doctor override applied: risk increased.",
    DoctorOverride.DECREASE: "Doctor override applied: risk decreased.",
}


@dataclass
class _Tally:
    """Working state of a single scoring call."""
    clinical: float = 0.0
    behavioral: float = 0.0
    media: float = 0.0
    total: float = 0.0
    factors: List[RiskFactor] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    override_applied: bool = False


class RiskScoringEngine:
    """
    Rule-weighted complication risk scorer.

    Stateless apart from the injected random source, which is only used for
    the confidence level.
    """

    def __init__(self, random_source: Optional[RandomSource] = None):
        self.random_source = random_source or NumpyRandomSource()

    def score(self, assessment: Assessment) -> RiskAssessment:
        """
        Score one assessment.

        Never raises for a well-formed Assessment; absent sections simply
        contribute nothing.
        """
        tally = self._tally(assessment)

        overall = round_half_up(min(MAX_RISK_SCORE, max(MIN_RISK_SCORE, tally.total)))
        # sorted() is stable: ties keep the order in which factors were pushed
        top_factors = sorted(tally.factors, key=lambda f: f.contribution, reverse=True)[:TOP_FACTOR_LIMIT]
        confidence = round_half_up(bounded(self.random_source, CONFIDENCE_MIN, CONFIDENCE_MAX))

        risk = RiskAssessment(
            overall_risk_score=overall,
            risk_category=categorize(overall),
            confidence_level=confidence,
            clinical_contribution=round_half_up(tally.clinical),
            behavioral_contribution=round_half_up(tally.behavioral),
            media_contribution=round_half_up(tally.media),
            follow_up_priority=follow_up_priority(overall),
            doctor_override_applied=tally.override_applied,
            top_risk_factors=tuple(top_factors),
            explanation_notes=tuple(tally.notes),
        )
        logger.info(
            "RiskScoringEngine: assessment scored",
            extra={
                "score": risk.overall_risk_score,
                "category": risk.risk_category.value,
                "factors": len(tally.factors),
                "override": risk.doctor_override_applied,
            },
        )
        return risk

    def score_many(self, assessments: Iterable[Assessment]) -> List[RiskAssessment]:
        return [self.score(a) for a in assessments]

    def pre_clamp_total(self, assessment: Assessment) -> float:
        """The total after every adjustment, before clamping and rounding."""
        return self._tally(assessment).total

    # ── Internals ────────────────────────────────────────────────────────

    def _tally(self, assessment: Assessment) -> _Tally:
        tally = _Tally()

        hours = hours_since_surgery(assessment.time_since_surgery)
        multiplier = temporal_multiplier(hours)
        logger.debug(f"RiskScoringEngine: {hours:g} h since surgery → temporal multiplier {multiplier}")

        for rule in evaluate_catalog(assessment, multiplier):
            if rule.axis == FactorAxis.BEHAVIORAL:
                tally.behavioral += rule.points
            else:
                tally.clinical += rule.points
            tally.factors.append(RiskFactor(rule.label, rule.points))
            logger.debug(f"RiskScoringEngine: fired '{rule.label}' (+{rule.points}, {rule.axis.value})")

        media = assessment.media_analysis
        raw_media = media.overall_media_risk if media is not None else 0
        tally.media = raw_media * MEDIA_WEIGHT
        if raw_media > MEDIA_ABNORMAL_THRESHOLD:
            tally.factors.append(RiskFactor("Visual AI detected abnormalities", tally.media))

        tally.total = tally.clinical + tally.behavioral + tally.media

        if assessment.follow_up_trend == FollowUpTrend.IMPROVING:
            tally.total += IMPROVING_TREND_ADJUSTMENT
        elif assessment.follow_up_trend == FollowUpTrend.WORSENING:
            tally.total += WORSENING_TREND_ADJUSTMENT
            tally.factors.append(RiskFactor("Worsening follow-up trend", WORSENING_TREND_ADJUSTMENT))

        tally.total *= COMPLIANCE_MULTIPLIERS[assessment.compliance_score]
        if assessment.compliance_score == ComplianceLevel.POOR:
            tally.factors.append(
                RiskFactor("Poor patient compliance", round_half_up(tally.total * POOR_COMPLIANCE_FACTOR_SHARE))
            )
            tally.notes.append(POOR_COMPLIANCE_NOTE)

        tally.notes.append(
            f"Findings interpreted in context of {describe_elapsed(assessment.time_since_surgery)} post-surgery."
        )

        override = assessment.doctor_risk_override
        if override != DoctorOverride.ACCEPT:
            tally.total *= OVERRIDE_MULTIPLIERS[override]
            tally.override_applied = True
            tally.notes.append(OVERRIDE_NOTES[override])

        return tally
