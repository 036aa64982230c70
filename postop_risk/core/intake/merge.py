"""
Report extraction intake and merge.

A scanned or uploaded clinical report is read by an external extraction
service that returns a partially-populated assessment (nulls for anything it
could not read) plus a confidence score. Values it did read are merged into
the assessment being edited: a non-null extracted field wins, everything else
keeps its current value.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from postop_risk.core.assessment import (
    SECTION_TYPES,
    Assessment,
    ComplianceLevel,
    FollowUpTrend,
    TimeSinceSurgery,
)
from postop_risk.utils import get_logger

logger = get_logger(__name__)

# Invalid fields are removed and validation retried; bound the retries
_MAX_VALIDATION_PASSES = 5


@dataclass(frozen=True)
class ExtractedReport:
    """What the extraction service could read from a report."""
    assessment: Assessment
    confidence: int = 0
    notes: str = ""
    compliance_score: Optional[ComplianceLevel] = None
    follow_up_trend: Optional[FollowUpTrend] = None
    time_since_surgery: Optional[TimeSinceSurgery] = None
    dropped_fields: Sequence[str] = ()


def _drop_path(data: Dict[str, Any], loc: Sequence[Any]) -> Optional[str]:
    """Delete the section field (or whole section) an error points at."""
    path = [part for part in loc[:2] if isinstance(part, str)]
    if not path:
        return None
    container: Any = data
    for part in path[:-1]:
        if not isinstance(container, dict):
            return None
        container = container.get(part, container.get(to_camel(part)))
    if not isinstance(container, dict):
        return None
    for key in (path[-1], to_camel(path[-1])):
        if key in container:
            del container[key]
            return ".".join(path[:-1] + [key])
    return None


def _copy_sections(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: (dict(v) if isinstance(v, dict) else v) for k, v in payload.items()}


def _lenient_enum(enum_type, raw: Any):
    if raw is None:
        return None
    try:
        return enum_type(raw)
    except ValueError:
        logger.warning(f"Extracted report: ignoring invalid {enum_type.__name__} value {raw!r}")
        return None


def _lenient_confidence(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return 0
    return int(raw)


def _lenient_time(raw: Any) -> Optional[TimeSinceSurgery]:
    if not isinstance(raw, dict) or raw.get("value") is None or raw.get("unit") is None:
        return None
    try:
        return TimeSinceSurgery.model_validate(raw)
    except ValidationError:
        logger.warning(f"Extracted report: ignoring invalid timeSinceSurgery {raw!r}")
        return None


def parse_extracted_report(payload: Dict[str, Any]) -> ExtractedReport:
    """
    Parse an extraction-service payload.

    Fields with invalid values are dropped individually instead of
    rejecting the whole report.
    """
    data = _copy_sections(payload)
    confidence = data.pop("extractionConfidence", None)
    notes = data.pop("extractionNotes", None)
    compliance = _lenient_enum(ComplianceLevel, data.pop("complianceScore", None))
    trend = _lenient_enum(FollowUpTrend, data.pop("followUpTrend", None))
    elapsed = _lenient_time(data.pop("timeSinceSurgery", None))
    data.pop("doctorRiskOverride", None)  # a clinician decision, never extracted

    dropped = []
    assessment = None
    for _ in range(_MAX_VALIDATION_PASSES):
        try:
            assessment = Assessment.model_validate(data)
            break
        except ValidationError as exc:
            removed = [_drop_path(data, err["loc"]) for err in exc.errors()]
            removed = [r for r in removed if r]
            if not removed:
                break
            dropped.extend(removed)
    if assessment is None:
        logger.warning("Extracted report could not be validated; using an empty assessment")
        assessment = Assessment()
    if dropped:
        logger.warning(f"Extracted report: dropped invalid field(s) {', '.join(dropped)}")

    return ExtractedReport(
        assessment=assessment,
        confidence=_lenient_confidence(confidence),
        notes=notes if isinstance(notes, str) else "",
        compliance_score=compliance,
        follow_up_trend=trend,
        time_since_surgery=elapsed,
        dropped_fields=tuple(dropped),
    )


def _merge_section(current: Optional[BaseModel], extracted: Optional[BaseModel]) -> Optional[BaseModel]:
    if extracted is None:
        return current
    if current is None:
        return extracted
    updates = {
        name: getattr(extracted, name)
        for name in type(extracted).model_fields
        if getattr(extracted, name) is not None
    }
    return current.model_copy(update=updates)


def merge_assessments(base: Assessment, extracted: ExtractedReport) -> Assessment:
    """Merge extracted values into ``base``; non-null extracted fields win."""
    merged = base
    for section_type in SECTION_TYPES:
        section = _merge_section(base.section(section_type), extracted.assessment.section(section_type))
        if section is not None:
            merged = merged.with_section(section)

    updates: Dict[str, Any] = {}
    if extracted.compliance_score is not None:
        updates["compliance_score"] = extracted.compliance_score
    if extracted.follow_up_trend is not None:
        updates["follow_up_trend"] = extracted.follow_up_trend
    if extracted.time_since_surgery is not None:
        updates["time_since_surgery"] = extracted.time_since_surgery
    if updates:
        merged = merged.model_copy(update=updates)
    return merged
