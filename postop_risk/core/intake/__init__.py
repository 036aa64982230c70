"""
Intake adapters for values produced by external collaborators
(image analysis, report extraction).
"""
from .media import extract_json_object, parse_media_analysis
from .merge import ExtractedReport, merge_assessments, parse_extracted_report

__all__ = [
    "extract_json_object",
    "parse_media_analysis",
    "ExtractedReport",
    "merge_assessments",
    "parse_extracted_report",
]
