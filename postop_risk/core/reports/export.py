"""
Exportable risk report.

Bundles an assessment and everything derived from it into one plain,
JSON-serialisable document for download or hand-off to reporting systems.
"""
from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from postop_risk.core.assessment import Assessment, MediaAnalysis
from postop_risk.core.guidance.recommendations import CareRecommendation
from postop_risk.core.projection import TemporalDataPoint
from postop_risk.core.scoring.base import RiskAssessment
from postop_risk.utils import ExportError, get_logger

logger = get_logger(__name__)


def new_report_id() -> str:
    return f"RPT-{uuid.uuid4().hex[:12].upper()}"


def report_filename(report_id: str) -> str:
    return f"patient-risk-report-{report_id}.json"


def build_report(
    assessment: Assessment,
    risk: RiskAssessment,
    recommendations: Sequence[CareRecommendation],
    projection: Sequence[TemporalDataPoint] = (),
    media: Optional[MediaAnalysis] = None,
    explanation: str = "",
    human_confirmed: bool = False,
    report_id: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Assemble the export document.

    ``media`` defaults to the assessment's own media analysis.
    """
    media = media if media is not None else assessment.media_analysis
    report_id = report_id or new_report_id()
    generated_at = generated_at or datetime.now(timezone.utc)

    report = {
        "report_id": report_id,
        "timestamp": generated_at.isoformat(),
        "assessment": assessment.model_dump(mode="json", by_alias=True, exclude_none=True),
        "risk_assessment": risk.to_dict(),
        "media_analysis": media.model_dump(mode="json", by_alias=True) if media else None,
        "recommendations": [r.to_dict() for r in recommendations],
        "temporal_projection": [p.to_dict() for p in projection],
        "explanation": explanation,
        "human_confirmed": human_confirmed,
    }
    logger.info(f"Built export report {report_id} (score={risk.overall_risk_score})")
    return report


def report_to_json(report: Dict[str, Any]) -> str:
    try:
        return json.dumps(report, indent=2)
    except (TypeError, ValueError) as exc:
        raise ExportError(
            f"Report is not JSON-serialisable: {exc}",
            report_id=str(report.get("report_id", "unknown")),
        ) from exc
