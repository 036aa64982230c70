"""
Report export.
"""
from .export import build_report, new_report_id, report_filename, report_to_json

__all__ = ["build_report", "new_report_id", "report_filename", "report_to_json"]
