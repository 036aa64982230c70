"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    RiskEngineError,
    AssessmentInputError,
    MediaAnalysisError,
    ReportExtractionError,
    ExportError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "RiskEngineError",
    "AssessmentInputError",
    "MediaAnalysisError",
    "ReportExtractionError",
    "ExportError",
]
