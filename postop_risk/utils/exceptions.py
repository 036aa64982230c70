"""
Custom Exception Hierarchy

Structured error types for the risk engine and its collaborators.
The scoring core itself never raises for well-typed input; these are used
at the edges (intake, external services, export, API).
"""
from typing import Optional, Dict, Any


class RiskEngineError(Exception):
    """Base exception for all risk engine errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class AssessmentInputError(RiskEngineError):
    """Assessment payload could not be turned into an Assessment."""

    def __init__(
        self,
        message: str,
        section: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="ASSESSMENT_INPUT_ERROR",
            details={"section": section, **(details or {})}
        )
        self.section = section


class MediaAnalysisError(RiskEngineError):
    """Errors from the external eye-image analysis service."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="MEDIA_ANALYSIS_ERROR",
            details={"status_code": status_code, **(details or {})}
        )
        self.status_code = status_code


class ReportExtractionError(RiskEngineError):
    """Errors from the external report-extraction service."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="REPORT_EXTRACTION_ERROR",
            details={"status_code": status_code, **(details or {})}
        )
        self.status_code = status_code


class ExportError(RiskEngineError):
    """Errors while building an exportable report."""

    def __init__(
        self,
        message: str,
        report_id: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="EXPORT_ERROR",
            details={"report_id": report_id, **(details or {})}
        )
        self.report_id = report_id
