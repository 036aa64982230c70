"""
Unit Tests for Intake Adapters

Tests for media-analysis parsing, extracted-report parsing and merging,
and typed section updates on the assessment model.
"""
import json

import pytest

from postop_risk.core.assessment import (
    Assessment,
    ClinicalMeasurements,
    ComplianceLevel,
    Demographics,
    DiabetesControl,
    DoctorOverride,
    FollowUpTrend,
    MediaAnalysis,
    SmokingStatus,
    SurgeryDetails,
    SystemicHistory,
    TimeUnit,
)
from postop_risk.core.intake import (
    extract_json_object,
    merge_assessments,
    parse_extracted_report,
    parse_media_analysis,
)
from postop_risk.core.scoring import RiskScoringEngine


@pytest.fixture
def media_payload() -> dict:
    return {
        "rednessScore": 72,
        "edemaScore": 41,
        "dischargePatternScore": 18,
        "cornealClarityScore": 80,
        "woundIntegrityScore": 90,
        "overallMediaRisk": 55,
        "abnormalCues": ["Significant conjunctival injection detected"],
        "clinicalSummary": "Marked conjunctival injection.",
        "urgencyLevel": "important",
        "confidenceLevel": 78,
    }


@pytest.fixture
def extraction_payload() -> dict:
    return {
        "demographics": {"age": 68, "gender": None, "smokingStatus": "current", "residence": None},
        "systemicHistory": {"diabetesControl": "poor", "immunocompromised": None},
        "surgeryDetails": {"surgeryType": "cataract", "complexity": "not-a-level"},
        "clinicalMeasurements": {"intraocularPressure": 24, "inflammationGrade": "2+"},
        "additionalInputs": {"bloodSugar": 182, "bloodPressureSystolic": None},
        "complianceScore": None,
        "timeSinceSurgery": {"value": 3, "unit": "days"},
        "followUpTrend": "worsening",
        "extractionConfidence": 72,
        "extractionNotes": "Vitals and IOP found; symptoms missing.",
    }


class TestAssessmentModel:

    def test_accepts_camel_case_json(self):
        assessment = Assessment.model_validate({
            "demographics": {"age": 75, "smokingStatus": "current"},
            "complianceScore": "poor",
            "timeSinceSurgery": {"value": 1, "unit": "days"},
        })
        assert assessment.demographics.smoking_status == SmokingStatus.CURRENT
        assert assessment.compliance_score == ComplianceLevel.POOR
        assert assessment.time_since_surgery.unit == TimeUnit.DAYS

    def test_defaults(self):
        assessment = Assessment.model_validate({"complianceScore": None})
        assert assessment.compliance_score == ComplianceLevel.GOOD
        assert assessment.follow_up_trend == FollowUpTrend.STABLE
        assert assessment.doctor_risk_override == DoctorOverride.ACCEPT
        assert assessment.time_since_surgery is None

    def test_is_immutable(self):
        assessment = Assessment()
        with pytest.raises(Exception):
            assessment.compliance_score = ComplianceLevel.POOR

    def test_with_section_replaces_by_type(self):
        assessment = Assessment(demographics=Demographics(age=50))
        updated = assessment.with_section(Demographics(age=80))
        assert updated.demographics.age == 80
        assert assessment.demographics.age == 50
        assert updated.section(Demographics).age == 80

    def test_without_section(self):
        assessment = Assessment(surgery_details=SurgeryDetails(complexity="complex"))
        assert assessment.without_section(SurgeryDetails).surgery_details is None

    def test_unknown_section_type_rejected(self):
        with pytest.raises(TypeError):
            Assessment().with_section(MediaAnalysis())

    def test_with_override_coerces_value(self):
        assert Assessment().with_override("decrease").doctor_risk_override == DoctorOverride.DECREASE


class TestMediaParsing:

    def test_dict_payload(self, media_payload):
        media = parse_media_analysis(media_payload)
        assert media == MediaAnalysis(
            redness_score=72,
            edema_score=41,
            discharge_pattern_score=18,
            abnormal_cues=["Significant conjunctival injection detected"],
            overall_media_risk=55,
        )

    def test_json_wrapped_in_markdown(self, media_payload):
        text = "Here is the analysis:\n```json\n" + json.dumps(media_payload) + "\n```"
        assert parse_media_analysis(text).overall_media_risk == 55

    def test_scores_are_clamped_and_rounded(self, media_payload):
        media_payload.update({"rednessScore": 140, "edemaScore": -3, "overallMediaRisk": 61.6})
        media = parse_media_analysis(media_payload)
        assert media.redness_score == 100
        assert media.edema_score == 0
        assert media.overall_media_risk == 62

    def test_half_scores_round_up(self, media_payload, fixed_random):
        media_payload["overallMediaRisk"] = 50.5
        media = parse_media_analysis(media_payload)
        assert media.overall_media_risk == 51

        risk = RiskScoringEngine(fixed_random).score(Assessment().with_media(media))
        assert "Visual AI detected abnormalities" in [f.label for f in risk.top_risk_factors]

    @pytest.mark.parametrize("payload", [
        None,
        "no json here",
        "{not valid json}",
        {"error": "Rate limit exceeded. Please try again in a moment."},
        {"rednessScore": 30},
        {"overallMediaRisk": "high"},
        {"overallMediaRisk": 40, "abnormalCues": "not a list"},
    ])
    def test_unusable_payloads_mean_no_media(self, payload):
        assert parse_media_analysis(payload) is None

    def test_extract_json_object_ignores_arrays(self):
        assert extract_json_object("[1, 2]") is None
        assert extract_json_object('prefix {"a": 1} suffix') == {"a": 1}


class TestExtractedReport:

    def test_parse_keeps_valid_fields_and_drops_invalid(self, extraction_payload):
        report = parse_extracted_report(extraction_payload)

        assert report.confidence == 72
        assert report.notes == "Vitals and IOP found; symptoms missing."
        assert report.assessment.demographics.age == 68
        assert report.assessment.systemic_history.diabetes_control == DiabetesControl.POOR
        assert report.assessment.surgery_details.surgery_type.value == "cataract"
        assert report.assessment.surgery_details.complexity is None
        assert "surgeryDetails.complexity" in report.dropped_fields
        assert report.assessment.additional_inputs.blood_sugar == 182
        assert report.compliance_score is None
        assert report.follow_up_trend == FollowUpTrend.WORSENING
        assert report.time_since_surgery.value == 3

    def test_unparseable_report(self):
        report = parse_extracted_report({
            "extractionConfidence": 0,
            "extractionNotes": "Could not parse report. Please enter data manually.",
        })
        assert report.confidence == 0
        assert report.assessment == Assessment()

    @pytest.mark.parametrize("raw", [True, "72", None])
    def test_non_numeric_confidence_is_zero(self, raw):
        assert parse_extracted_report({"extractionConfidence": raw}).confidence == 0

    def test_incomplete_time_is_ignored(self):
        report = parse_extracted_report({"timeSinceSurgery": {"value": None, "unit": "days"}})
        assert report.time_since_surgery is None

    def test_non_null_extracted_field_wins(self, extraction_payload):
        base = Assessment(
            demographics=Demographics(age=60, gender="female"),
            systemic_history=SystemicHistory(diabetes_control="well-controlled", immunocompromised=True),
            clinical_measurements=ClinicalMeasurements(intraocular_pressure=18, wound_integrity="intact"),
            compliance_score=ComplianceLevel.MODERATE,
            doctor_risk_override=DoctorOverride.INCREASE,
        )
        merged = merge_assessments(base, parse_extracted_report(extraction_payload))

        assert merged.demographics.age == 68
        assert merged.demographics.gender.value == "female"
        assert merged.demographics.smoking_status == SmokingStatus.CURRENT
        assert merged.systemic_history.diabetes_control == DiabetesControl.POOR
        assert merged.systemic_history.immunocompromised is True
        assert merged.clinical_measurements.intraocular_pressure == 24
        assert merged.clinical_measurements.wound_integrity.value == "intact"
        assert merged.additional_inputs.blood_sugar == 182
        # Absent in the extraction → keep current value
        assert merged.compliance_score == ComplianceLevel.MODERATE
        assert merged.follow_up_trend == FollowUpTrend.WORSENING
        assert merged.time_since_surgery.unit == TimeUnit.DAYS
        assert merged.doctor_risk_override == DoctorOverride.INCREASE

    def test_merge_into_empty_assessment(self, extraction_payload):
        merged = merge_assessments(Assessment(), parse_extracted_report(extraction_payload))
        assert merged.demographics.age == 68
        assert merged.ocular_history is None
