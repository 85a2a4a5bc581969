"""
Report rendering.
"""

from src.output.report import EMPTY_REPORT_MESSAGE, ReportGenerator, format_duration, format_score_bar

__all__ = ["EMPTY_REPORT_MESSAGE", "ReportGenerator", "format_duration", "format_score_bar"]
