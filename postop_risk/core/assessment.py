"""
Assessment Input Model

Typed, immutable representation of a structured post-operative eye-surgery
assessment. Every section is optional and every field inside a section is
optional: an absent value contributes nothing to the risk score.

JSON payloads use camelCase keys (``smokingStatus``); Python code uses the
snake_case attribute names. Both are accepted when validating.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# ── Enumerations ─────────────────────────────────────────────────────────────

class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class SmokingStatus(str, Enum):
    NEVER = "never"
    FORMER = "former"
    CURRENT = "current"


class Residence(str, Enum):
    URBAN = "urban"
    RURAL = "rural"


class DiabetesControl(str, Enum):
    WELL_CONTROLLED = "well-controlled"
    MODERATE = "moderate"
    POOR = "poor"


class HypertensionSeverity(str, Enum):
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class SurgeryType(str, Enum):
    CATARACT = "cataract"
    LASIK = "lasik"
    GLAUCOMA = "glaucoma"
    RETINAL = "retinal"


class SurgeryComplexity(str, Enum):
    ROUTINE = "routine"
    MODERATE = "moderate"
    COMPLEX = "complex"


class SurgeonExperience(str, Enum):
    JUNIOR = "junior"
    EXPERIENCED = "experienced"
    EXPERT = "expert"


class IntraoperativeComplication(str, Enum):
    NONE = "none"
    POSTERIOR_CAPSULE_RUPTURE = "posterior-capsule-rupture"
    ZONULAR_WEAKNESS = "zonular-weakness"
    VITREOUS_LOSS = "vitreous-loss"


class CornealClarity(str, Enum):
    CLEAR = "clear"
    MILD_HAZE = "mild-haze"
    MODERATE_HAZE = "moderate-haze"
    OPAQUE = "opaque"


class WoundIntegrity(str, Enum):
    INTACT = "intact"
    MINOR_ISSUE = "minor-issue"
    CONCERN = "concern"


class ChamberReaction(str, Enum):
    NONE = "none"
    TRACE = "trace"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class InflammationGrade(str, Enum):
    GRADE_0 = "0"
    GRADE_1 = "1+"
    GRADE_2 = "2+"
    GRADE_3 = "3+"


class EdemaSeverity(str, Enum):
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class ComplianceLevel(str, Enum):
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"


class TimeUnit(str, Enum):
    HOURS = "hours"
    DAYS = "days"


class FollowUpTrend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    WORSENING = "worsening"


class DoctorOverride(str, Enum):
    ACCEPT = "accept"
    INCREASE = "increase"
    DECREASE = "decrease"


# ── Sections ─────────────────────────────────────────────────────────────────

class Demographics(_Schema):
    age: Optional[float] = None
    gender: Optional[Gender] = None
    smoking_status: Optional[SmokingStatus] = None
    occupational_exposure: Optional[str] = None
    residence: Optional[Residence] = None


class SystemicHistory(_Schema):
    diabetes_duration: Optional[float] = None
    diabetes_control: Optional[DiabetesControl] = None
    hypertension_severity: Optional[HypertensionSeverity] = None
    autoimmune: Optional[bool] = None
    immunocompromised: Optional[bool] = None
    steroid_use: Optional[bool] = None


class OcularHistory(_Schema):
    previous_surgeries: Optional[int] = None
    chronic_conditions: Optional[List[str]] = None
    previous_complications: Optional[bool] = None
    contact_lens_use: Optional[bool] = None


class SurgeryDetails(_Schema):
    surgery_type: Optional[SurgeryType] = None
    complexity: Optional[SurgeryComplexity] = None
    duration: Optional[float] = None  # minutes
    surgeon_experience: Optional[SurgeonExperience] = None
    intraoperative_complication_type: Optional[IntraoperativeComplication] = None


class PostOperativeSymptoms(_Schema):
    """Patient-reported symptoms; levels are on a 0-10 scale."""
    pain_level: Optional[float] = None
    redness_level: Optional[float] = None
    swelling_level: Optional[float] = None
    visual_blur: Optional[bool] = None
    discharge: Optional[bool] = None
    photophobia: Optional[bool] = None


class ClinicalMeasurements(_Schema):
    intraocular_pressure: Optional[float] = None  # mmHg
    corneal_clarity: Optional[CornealClarity] = None
    wound_integrity: Optional[WoundIntegrity] = None
    anterior_chamber_reaction: Optional[ChamberReaction] = None
    inflammation_grade: Optional[InflammationGrade] = None
    corneal_edema_severity: Optional[EdemaSeverity] = None


class AdditionalInputs(_Schema):
    """Vitals captured alongside the assessment. Recorded, not scored."""
    blood_pressure_systolic: Optional[float] = None
    blood_pressure_diastolic: Optional[float] = None
    blood_sugar: Optional[float] = None


class MediaAnalysis(_Schema):
    """Visual findings produced by the external eye-image analysis service."""
    redness_score: int = 0
    edema_score: int = 0
    discharge_pattern_score: int = 0
    abnormal_cues: List[str] = Field(default_factory=list)
    overall_media_risk: int = 0


class TimeSinceSurgery(_Schema):
    value: float
    unit: TimeUnit = TimeUnit.HOURS


Section = Union[
    Demographics,
    SystemicHistory,
    OcularHistory,
    SurgeryDetails,
    PostOperativeSymptoms,
    ClinicalMeasurements,
    AdditionalInputs,
]

# Section type → Assessment attribute holding it
_SECTION_ATTRS = {
    Demographics: "demographics",
    SystemicHistory: "systemic_history",
    OcularHistory: "ocular_history",
    SurgeryDetails: "surgery_details",
    PostOperativeSymptoms: "post_operative_symptoms",
    ClinicalMeasurements: "clinical_measurements",
    AdditionalInputs: "additional_inputs",
}

SECTION_TYPES = tuple(_SECTION_ATTRS)


class Assessment(_Schema):
    """
    A sparse post-operative assessment.

    Absent sections mean "contributes zero". Top-level policy fields fall back
    to their defaults when omitted or null.
    """
    demographics: Optional[Demographics] = None
    systemic_history: Optional[SystemicHistory] = None
    ocular_history: Optional[OcularHistory] = None
    surgery_details: Optional[SurgeryDetails] = None
    post_operative_symptoms: Optional[PostOperativeSymptoms] = None
    clinical_measurements: Optional[ClinicalMeasurements] = None
    additional_inputs: Optional[AdditionalInputs] = None
    media_analysis: Optional[MediaAnalysis] = None

    compliance_score: ComplianceLevel = ComplianceLevel.GOOD
    time_since_surgery: Optional[TimeSinceSurgery] = None
    follow_up_trend: FollowUpTrend = FollowUpTrend.STABLE
    doctor_risk_override: DoctorOverride = DoctorOverride.ACCEPT

    @field_validator("compliance_score", "follow_up_trend", "doctor_risk_override", mode="before")
    @classmethod
    def _null_means_default(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    # ── Typed updates ────────────────────────────────────────────────────

    def section(self, section_type: type) -> Optional[Section]:
        """Return the section of the given type, or None if absent."""
        return getattr(self, _section_attr(section_type))

    def with_section(self, section: Section) -> "Assessment":
        """Return a copy with the section of ``type(section)`` replaced."""
        return self.model_copy(update={_section_attr(type(section)): section})

    def without_section(self, section_type: type) -> "Assessment":
        return self.model_copy(update={_section_attr(section_type): None})

    def with_media(self, media: Optional[MediaAnalysis]) -> "Assessment":
        return self.model_copy(update={"media_analysis": media})

    def with_override(self, override: DoctorOverride) -> "Assessment":
        return self.model_copy(update={"doctor_risk_override": DoctorOverride(override)})


def _section_attr(section_type: type) -> str:
    try:
        return _SECTION_ATTRS[section_type]
    except KeyError:
        raise TypeError(f"{section_type!r} is not an assessment section") from None
