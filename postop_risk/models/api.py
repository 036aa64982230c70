"""
Request / response schemas for the HTTP API.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from postop_risk.core.assessment import Assessment


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EvaluateRequest(_Request):
    """Score an assessment and derive everything from the score."""
    assessment: Assessment
    image_base64: Optional[str] = None
    simplified: bool = False


class ExplainRequest(_Request):
    assessment: Assessment
    simplified: bool = False


class ProjectRequest(_Request):
    base_risk_score: float = Field(..., ge=0, le=100)


class ExportRequest(_Request):
    assessment: Assessment
    human_confirmed: bool = False
    simplified: bool = False


class ExtractRequest(_Request):
    file_base64: str
    file_type: str = "image"
    base_assessment: Optional[Assessment] = None


class EvaluationResponse(BaseModel):
    risk_assessment: Dict[str, Any]
    recommendations: List[Dict[str, Any]]
    explanation: str
    temporal_projection: List[Dict[str, Any]]
    media_analysis: Optional[Dict[str, Any]] = None


class ExplanationResponse(BaseModel):
    explanation: str
    simplified: bool
    overall_risk_score: int


class ExtractionResponse(BaseModel):
    assessment: Dict[str, Any]
    extraction_confidence: int
    extraction_notes: str
    dropped_fields: List[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
    uptime_seconds: float
    vision_enabled: bool
