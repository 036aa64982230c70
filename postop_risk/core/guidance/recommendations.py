"""
Care Recommendations

Maps a RiskAssessment (plus a few raw assessment fields) to a bounded,
prioritised list of care recommendations.

Generation order is fixed and the list is never re-sorted:
    a. high-risk base items (antibiotic prophylaxis, daily follow-up)
    b. factor-specific items, in top-factor order
    c. compliance support
    d. corneal edema management
    e. inflammation control
    f. lubricating therapy
    g. activity restrictions
Anything past the sixth item is dropped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from postop_risk.core.assessment import (
    Assessment,
    ComplianceLevel,
    EdemaSeverity,
    InflammationGrade,
    SurgeryComplexity,
)
from postop_risk.core.scoring.base import RiskAssessment, RiskCategory

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 6


class RecommendationPriority(str, Enum):
    ROUTINE = "routine"
    IMPORTANT = "important"
    URGENT = "urgent"


@dataclass(frozen=True)
class CareRecommendation:
    category: str
    recommendation: str
    rationale: str
    priority: RecommendationPriority

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "recommendation": self.recommendation,
            "rationale": self.rationale,
            "priority": self.priority.value,
        }


def _antibiotic_prophylaxis() -> CareRecommendation:
    return CareRecommendation(
        category="Antibiotic Prophylaxis",
        recommendation=(
            "Consider broad-spectrum topical antibiotic therapy (e.g., fluoroquinolone class) "
            "to prevent endophthalmitis risk."
        ),
        rationale=(
            "Elevated risk profile warrants prophylactic antimicrobial coverage "
            "to prevent bacterial colonization."
        ),
        priority=RecommendationPriority.URGENT,
    )


def _daily_follow_up() -> CareRecommendation:
    return CareRecommendation(
        category="Follow-up Schedule",
        recommendation="Schedule daily follow-up examinations for the first 72 hours post-operatively.",
        rationale="High-risk patients require close monitoring to detect early signs of complications.",
        priority=RecommendationPriority.URGENT,
    )


def _factor_recommendations(label: str, category: RiskCategory) -> List[CareRecommendation]:
    """Recommendations triggered by one top risk factor label (substring match)."""
    recs = []
    if "diabetes" in label:
        recs.append(CareRecommendation(
            category="Glycemic Optimization",
            recommendation="Coordinate with endocrinology for perioperative glycemic control optimization.",
            rationale="Poor glycemic control significantly increases infection risk and impairs wound healing.",
            priority=(
                RecommendationPriority.URGENT if category == RiskCategory.HIGH
                else RecommendationPriority.IMPORTANT
            ),
        ))
    if "pressure" in label or "IOP" in label:
        recs.append(CareRecommendation(
            category="IOP Management",
            recommendation="Initiate topical IOP-lowering agents (prostaglandin analog or beta-blocker class).",
            rationale=(
                "Elevated intraocular pressure requires pharmacological management "
                "to prevent optic nerve damage."
            ),
            priority=RecommendationPriority.URGENT,
        ))
    if "pain" in label:
        recs.append(CareRecommendation(
            category="Pain Management",
            recommendation="Prescribe topical NSAID drops for inflammation and pain control.",
            rationale="Severe pain may indicate significant inflammation requiring anti-inflammatory intervention.",
            priority=RecommendationPriority.IMPORTANT,
        ))
    if "discharge" in label or "redness" in label:
        recs.append(CareRecommendation(
            category="Anti-inflammatory Therapy",
            recommendation="Consider topical corticosteroid therapy to manage post-operative inflammation.",
            rationale="Clinical signs suggest inflammatory response requiring targeted intervention.",
            priority=RecommendationPriority.IMPORTANT,
        ))
    return recs


def _compliance_support() -> CareRecommendation:
    return CareRecommendation(
        category="Compliance Support",
        recommendation=(
            "Implement structured medication reminders and simplified drop regimen. "
            "Consider caregiver involvement."
        ),
        rationale="Poor compliance significantly increases complication risk and requires proactive intervention.",
        priority=RecommendationPriority.URGENT,
    )


def _edema_management(severity: EdemaSeverity) -> CareRecommendation:
    severe = severity == EdemaSeverity.SEVERE
    return CareRecommendation(
        category="Corneal Edema Management",
        recommendation=(
            "Initiate hypertonic saline drops (5% NaCl) and consider topical corticosteroid "
            "to reduce corneal swelling."
        ),
        rationale=(
            f"{'Severe' if severe else 'Moderate'} corneal edema may delay visual recovery "
            "and requires active management."
        ),
        priority=RecommendationPriority.URGENT if severe else RecommendationPriority.IMPORTANT,
    )


def _inflammation_control(grade: InflammationGrade) -> CareRecommendation:
    return CareRecommendation(
        category="Inflammation Control",
        recommendation=(
            f"Intensify topical corticosteroid regimen for grade {grade.value} anterior chamber "
            "inflammation. Consider hourly dosing."
        ),
        rationale=(
            "Significant post-operative inflammation requires aggressive anti-inflammatory "
            "therapy to prevent complications."
        ),
        priority=(
            RecommendationPriority.URGENT if grade == InflammationGrade.GRADE_3
            else RecommendationPriority.IMPORTANT
        ),
    )


def _lubricating_therapy() -> CareRecommendation:
    return CareRecommendation(
        category="Lubricating Therapy",
        recommendation="Prescribe preservative-free artificial tears for ocular surface protection.",
        rationale="Post-operative ocular surface requires lubrication to promote healing and comfort.",
        priority=RecommendationPriority.ROUTINE,
    )


def _activity_restrictions() -> CareRecommendation:
    return CareRecommendation(
        category="Activity Restrictions",
        recommendation=(
            "Advise strict activity limitations: no heavy lifting, bending, or strenuous "
            "exercise for 2 weeks."
        ),
        rationale="Complex surgery requires extended healing time with minimized physical stress.",
        priority=RecommendationPriority.IMPORTANT,
    )


class CareRecommendationGenerator:
    """Stateless; safe to share across requests."""

    def recommend(self, assessment: Assessment, risk: RiskAssessment) -> List[CareRecommendation]:
        recs: List[CareRecommendation] = []

        if risk.risk_category == RiskCategory.HIGH:
            recs.append(_antibiotic_prophylaxis())
            recs.append(_daily_follow_up())

        for factor in risk.top_risk_factors:
            recs.extend(_factor_recommendations(factor.label, risk.risk_category))

        if assessment.compliance_score == ComplianceLevel.POOR:
            recs.append(_compliance_support())

        measurements = assessment.clinical_measurements
        edema: Optional[EdemaSeverity] = measurements.corneal_edema_severity if measurements else None
        if edema in (EdemaSeverity.MODERATE, EdemaSeverity.SEVERE):
            recs.append(_edema_management(edema))

        grade: Optional[InflammationGrade] = measurements.inflammation_grade if measurements else None
        if grade in (InflammationGrade.GRADE_2, InflammationGrade.GRADE_3):
            recs.append(_inflammation_control(grade))

        recs.append(_lubricating_therapy())

        surgery = assessment.surgery_details
        if surgery is not None and surgery.complexity == SurgeryComplexity.COMPLEX:
            recs.append(_activity_restrictions())

        if len(recs) > MAX_RECOMMENDATIONS:
            logger.debug(
                f"CareRecommendationGenerator: dropping {len(recs) - MAX_RECOMMENDATIONS} "
                f"of {len(recs)} recommendation(s) over the limit"
            )
        return recs[:MAX_RECOMMENDATIONS]
