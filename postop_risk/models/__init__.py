from .api import (
    EvaluateRequest,
    EvaluationResponse,
    ExplainRequest,
    ExplanationResponse,
    ExportRequest,
    ExtractRequest,
    ExtractionResponse,
    HealthResponse,
    ProjectRequest,
)

__all__ = [
    "EvaluateRequest",
    "EvaluationResponse",
    "ExplainRequest",
    "ExplanationResponse",
    "ExportRequest",
    "ExtractRequest",
    "ExtractionResponse",
    "HealthResponse",
    "ProjectRequest",
]
