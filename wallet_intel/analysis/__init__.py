"""Aggregation, scoring and insight engine."""
from .report_builder import assemble_quick_summary, assemble_report

__all__ = ["assemble_report", "assemble_quick_summary"]
