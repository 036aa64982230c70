"""
Factor Catalog: post-operative complication rules

Static (condition → points → label) rules, one evaluator per assessment
section.

Design principles:
  - Each evaluator is pure: (section, temporal_multiplier) → List[FiredRule]
  - Points are module-level constants so they can be reviewed / tuned
    without hunting through logic.
  - A field that is absent never fires a rule.
  - Symptom and inflammation points scale with the temporal multiplier and
    are rounded half-up before accumulation; everything else is raw points.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from postop_risk.core.assessment import (
    Assessment,
    ChamberReaction,
    ClinicalMeasurements,
    CornealClarity,
    Demographics,
    DiabetesControl,
    EdemaSeverity,
    HypertensionSeverity,
    InflammationGrade,
    IntraoperativeComplication,
    OcularHistory,
    PostOperativeSymptoms,
    SmokingStatus,
    SurgeonExperience,
    SurgeryComplexity,
    SurgeryDetails,
    SystemicHistory,
    WoundIntegrity,
)
from .base import FactorAxis, round_half_up

# ── Demographics ─────────────────────────────────────────────────────────────
AGE_ADVANCED = 70            # > 70
AGE_ELEVATED = 60            # > 60
AGE_ADVANCED_POINTS = 15
AGE_ELEVATED_POINTS = 8
SMOKING_POINTS = 12          # behavioral

# ── Systemic history ─────────────────────────────────────────────────────────
DIABETES_POOR_POINTS = 20
DIABETES_MODERATE_POINTS = 10
HYPERTENSION_SEVERE_POINTS = 12
IMMUNOCOMPROMISED_POINTS = 18
STEROID_POINTS = 10

# ── Ocular history ───────────────────────────────────────────────────────────
PREVIOUS_COMPLICATIONS_POINTS = 15
MULTIPLE_SURGERIES = 2       # > 2
MULTIPLE_SURGERIES_POINTS = 8

# ── Surgery details ──────────────────────────────────────────────────────────
COMPLEX_SURGERY_POINTS = 15
JUNIOR_SURGEON_POINTS = 5
INTRAOPERATIVE_COMPLICATIONS: Dict[IntraoperativeComplication, Tuple[int, str]] = {
    IntraoperativeComplication.POSTERIOR_CAPSULE_RUPTURE: (22, "Posterior capsule rupture"),
    IntraoperativeComplication.VITREOUS_LOSS: (25, "Vitreous loss during surgery"),
    IntraoperativeComplication.ZONULAR_WEAKNESS: (15, "Zonular weakness"),
}

# ── Post-operative symptoms (0-10 scales) ────────────────────────────────────
PAIN_SEVERE = 7              # > 7
PAIN_MODERATE = 4            # > 4
PAIN_SEVERE_POINTS = 15      # × temporal
PAIN_MODERATE_POINTS = 8     # × temporal
REDNESS_SIGNIFICANT = 6      # > 6
REDNESS_POINTS = 12          # × temporal
SWELLING_NOTABLE = 6         # > 6
SWELLING_POINTS = 10         # × temporal
VISUAL_BLUR_POINTS = 8
DISCHARGE_POINTS = 12

# ── Clinical measurements ────────────────────────────────────────────────────
IOP_ELEVATED = 25            # mmHg, > 25
IOP_BORDERLINE = 21          # mmHg, > 21
IOP_ELEVATED_POINTS = 18
IOP_BORDERLINE_POINTS = 10
OPAQUE_CORNEA_POINTS = 15
WOUND_CONCERN_POINTS = 20
CHAMBER_REACTION_POINTS = 15
SIGNIFICANT_CHAMBER_REACTIONS = (ChamberReaction.MODERATE, ChamberReaction.SEVERE)
INFLAMMATION_POINTS: Dict[InflammationGrade, int] = {   # × temporal
    InflammationGrade.GRADE_0: 0,
    InflammationGrade.GRADE_1: 5,
    InflammationGrade.GRADE_2: 12,
    InflammationGrade.GRADE_3: 22,
}
EDEMA_POINTS: Dict[EdemaSeverity, int] = {
    EdemaSeverity.NONE: 0,
    EdemaSeverity.MILD: 4,
    EdemaSeverity.MODERATE: 12,
    EdemaSeverity.SEVERE: 20,
}


@dataclass(frozen=True)
class FiredRule:
    """One catalog rule that matched the assessment."""
    label: str
    points: int
    axis: FactorAxis = FactorAxis.CLINICAL


@dataclass(frozen=True)
class CatalogEntry:
    """Reference description of a rule, for display and auditing."""
    section: str
    field: str
    condition: str
    points: int
    label: str
    axis: FactorAxis = FactorAxis.CLINICAL
    temporal: bool = False

    def to_dict(self) -> dict:
        return {
            "section": self.section,
            "field": self.field,
            "condition": self.condition,
            "points": self.points,
            "label": self.label,
            "axis": self.axis.value,
            "temporal": self.temporal,
        }


def _scaled(points: int, multiplier: float) -> int:
    return round_half_up(points * multiplier)


# ── Section evaluators ───────────────────────────────────────────────────────

def evaluate_demographics(section: Demographics, multiplier: float) -> List[FiredRule]:
    fired = []
    if section.age is not None:
        if section.age > AGE_ADVANCED:
            fired.append(FiredRule("Advanced age (>70)", AGE_ADVANCED_POINTS))
        elif section.age > AGE_ELEVATED:
            fired.append(FiredRule("Age 60-70", AGE_ELEVATED_POINTS))
    if section.smoking_status == SmokingStatus.CURRENT:
        fired.append(FiredRule("Active smoking", SMOKING_POINTS, FactorAxis.BEHAVIORAL))
    return fired


def evaluate_systemic_history(section: SystemicHistory, multiplier: float) -> List[FiredRule]:
    fired = []
    if section.diabetes_control == DiabetesControl.POOR:
        fired.append(FiredRule("Poorly controlled diabetes", DIABETES_POOR_POINTS))
    elif section.diabetes_control == DiabetesControl.MODERATE:
        fired.append(FiredRule("Moderately controlled diabetes", DIABETES_MODERATE_POINTS))
    if section.hypertension_severity == HypertensionSeverity.SEVERE:
        fired.append(FiredRule("Severe hypertension", HYPERTENSION_SEVERE_POINTS))
    if section.immunocompromised:
        fired.append(FiredRule("Immunocompromised status", IMMUNOCOMPROMISED_POINTS))
    if section.steroid_use:
        fired.append(FiredRule("Long-term steroid use", STEROID_POINTS))
    return fired


def evaluate_ocular_history(section: OcularHistory, multiplier: float) -> List[FiredRule]:
    fired = []
    if section.previous_complications:
        fired.append(FiredRule("Previous post-operative complications", PREVIOUS_COMPLICATIONS_POINTS))
    if section.previous_surgeries is not None and section.previous_surgeries > MULTIPLE_SURGERIES:
        fired.append(FiredRule("Multiple previous eye surgeries", MULTIPLE_SURGERIES_POINTS))
    return fired


def evaluate_surgery_details(section: SurgeryDetails, multiplier: float) -> List[FiredRule]:
    fired = []
    if section.complexity == SurgeryComplexity.COMPLEX:
        fired.append(FiredRule("Complex surgical procedure", COMPLEX_SURGERY_POINTS))
    complication = INTRAOPERATIVE_COMPLICATIONS.get(section.intraoperative_complication_type)
    if complication is not None:
        points, label = complication
        fired.append(FiredRule(label, points))
    if section.surgeon_experience == SurgeonExperience.JUNIOR:
        fired.append(FiredRule("Junior surgeon", JUNIOR_SURGEON_POINTS))
    return fired


def evaluate_symptoms(section: PostOperativeSymptoms, multiplier: float) -> List[FiredRule]:
    fired = []
    pain = section.pain_level
    if pain is not None:
        if pain > PAIN_SEVERE:
            fired.append(FiredRule("Severe post-operative pain", _scaled(PAIN_SEVERE_POINTS, multiplier)))
        elif pain > PAIN_MODERATE:
            fired.append(FiredRule("Moderate post-operative pain", _scaled(PAIN_MODERATE_POINTS, multiplier)))
    if section.redness_level is not None and section.redness_level > REDNESS_SIGNIFICANT:
        fired.append(FiredRule("Significant ocular redness", _scaled(REDNESS_POINTS, multiplier)))
    if section.swelling_level is not None and section.swelling_level > SWELLING_NOTABLE:
        fired.append(FiredRule("Notable periocular swelling", _scaled(SWELLING_POINTS, multiplier)))
    if section.visual_blur:
        fired.append(FiredRule("Visual blur reported", VISUAL_BLUR_POINTS))
    if section.discharge:
        fired.append(FiredRule("Ocular discharge present", DISCHARGE_POINTS))
    return fired


def evaluate_measurements(section: ClinicalMeasurements, multiplier: float) -> List[FiredRule]:
    fired = []
    iop = section.intraocular_pressure
    if iop is not None:
        if iop > IOP_ELEVATED:
            fired.append(FiredRule("Elevated intraocular pressure", IOP_ELEVATED_POINTS))
        elif iop > IOP_BORDERLINE:
            fired.append(FiredRule("Borderline IOP", IOP_BORDERLINE_POINTS))
    if section.corneal_clarity == CornealClarity.OPAQUE:
        fired.append(FiredRule("Opaque cornea", OPAQUE_CORNEA_POINTS))
    if section.wound_integrity == WoundIntegrity.CONCERN:
        fired.append(FiredRule("Wound integrity concern", WOUND_CONCERN_POINTS))
    if section.anterior_chamber_reaction in SIGNIFICANT_CHAMBER_REACTIONS:
        fired.append(FiredRule("Significant anterior chamber reaction", CHAMBER_REACTION_POINTS))

    grade = section.inflammation_grade
    if grade is not None:
        points = _scaled(INFLAMMATION_POINTS[grade], multiplier)
        if points > 0:
            fired.append(FiredRule(f"Inflammation grade {grade.value}", points))

    edema = section.corneal_edema_severity
    if edema is not None and EDEMA_POINTS[edema] > 0:
        fired.append(FiredRule(f"Corneal edema ({edema.value})", EDEMA_POINTS[edema]))
    return fired


# ── Registry: section accessor → evaluator, in accumulation order ─────────────
SectionEvaluator = Callable[[object, float], List[FiredRule]]

_SECTION_EVALUATORS: Tuple[Tuple[Callable[[Assessment], Optional[object]], SectionEvaluator], ...] = (
    (lambda a: a.demographics, evaluate_demographics),
    (lambda a: a.systemic_history, evaluate_systemic_history),
    (lambda a: a.ocular_history, evaluate_ocular_history),
    (lambda a: a.surgery_details, evaluate_surgery_details),
    (lambda a: a.post_operative_symptoms, evaluate_symptoms),
    (lambda a: a.clinical_measurements, evaluate_measurements),
)


def evaluate_catalog(assessment: Assessment, multiplier: float) -> List[FiredRule]:
    """Evaluate every present section, in catalog order."""
    fired: List[FiredRule] = []
    for accessor, evaluator in _SECTION_EVALUATORS:
        section = accessor(assessment)
        if section is None:
            continue
        fired.extend(evaluator(section, multiplier))
    return fired


# ── Reference table ──────────────────────────────────────────────────────────
CATALOG: Tuple[CatalogEntry, ...] = (
    CatalogEntry("demographics", "age", "> 70", AGE_ADVANCED_POINTS, "Advanced age (>70)"),
    CatalogEntry("demographics", "age", "> 60", AGE_ELEVATED_POINTS, "Age 60-70"),
    CatalogEntry("demographics", "smokingStatus", "current", SMOKING_POINTS, "Active smoking",
                 axis=FactorAxis.BEHAVIORAL),
    CatalogEntry("systemicHistory", "diabetesControl", "poor", DIABETES_POOR_POINTS,
                 "Poorly controlled diabetes"),
    CatalogEntry("systemicHistory", "diabetesControl", "moderate", DIABETES_MODERATE_POINTS,
                 "Moderately controlled diabetes"),
    CatalogEntry("systemicHistory", "hypertensionSeverity", "severe", HYPERTENSION_SEVERE_POINTS,
                 "Severe hypertension"),
    CatalogEntry("systemicHistory", "immunocompromised", "true", IMMUNOCOMPROMISED_POINTS,
                 "Immunocompromised status"),
    CatalogEntry("systemicHistory", "steroidUse", "true", STEROID_POINTS, "Long-term steroid use"),
    CatalogEntry("ocularHistory", "previousComplications", "true", PREVIOUS_COMPLICATIONS_POINTS,
                 "Previous post-operative complications"),
    CatalogEntry("ocularHistory", "previousSurgeries", "> 2", MULTIPLE_SURGERIES_POINTS,
                 "Multiple previous eye surgeries"),
    CatalogEntry("surgeryDetails", "complexity", "complex", COMPLEX_SURGERY_POINTS,
                 "Complex surgical procedure"),
    *(
        CatalogEntry("surgeryDetails", "intraoperativeComplicationType", kind.value, points, label)
        for kind, (points, label) in INTRAOPERATIVE_COMPLICATIONS.items()
    ),
    CatalogEntry("surgeryDetails", "surgeonExperience", "junior", JUNIOR_SURGEON_POINTS, "Junior surgeon"),
    CatalogEntry("postOperativeSymptoms", "painLevel", "> 7", PAIN_SEVERE_POINTS,
                 "Severe post-operative pain", temporal=True),
    CatalogEntry("postOperativeSymptoms", "painLevel", "> 4", PAIN_MODERATE_POINTS,
                 "Moderate post-operative pain", temporal=True),
    CatalogEntry("postOperativeSymptoms", "rednessLevel", "> 6", REDNESS_POINTS,
                 "Significant ocular redness", temporal=True),
    CatalogEntry("postOperativeSymptoms", "swellingLevel", "> 6", SWELLING_POINTS,
                 "Notable periocular swelling", temporal=True),
    CatalogEntry("postOperativeSymptoms", "visualBlur", "true", VISUAL_BLUR_POINTS, "Visual blur reported"),
    CatalogEntry("postOperativeSymptoms", "discharge", "true", DISCHARGE_POINTS, "Ocular discharge present"),
    CatalogEntry("clinicalMeasurements", "intraocularPressure", "> 25", IOP_ELEVATED_POINTS,
                 "Elevated intraocular pressure"),
    CatalogEntry("clinicalMeasurements", "intraocularPressure", "> 21", IOP_BORDERLINE_POINTS,
                 "Borderline IOP"),
    CatalogEntry("clinicalMeasurements", "cornealClarity", "opaque", OPAQUE_CORNEA_POINTS, "Opaque cornea"),
    CatalogEntry("clinicalMeasurements", "woundIntegrity", "concern", WOUND_CONCERN_POINTS,
                 "Wound integrity concern"),
    CatalogEntry("clinicalMeasurements", "anteriorChamberReaction", "moderate | severe",
                 CHAMBER_REACTION_POINTS, "Significant anterior chamber reaction"),
    *(
        CatalogEntry("clinicalMeasurements", "inflammationGrade", grade.value, points,
                     f"Inflammation grade {grade.value}", temporal=True)
        for grade, points in INFLAMMATION_POINTS.items() if points > 0
    ),
    *(
        CatalogEntry("clinicalMeasurements", "cornealEdemaSeverity", severity.value, points,
                     f"Corneal edema ({severity.value})")
        for severity, points in EDEMA_POINTS.items() if points > 0
    ),
)
