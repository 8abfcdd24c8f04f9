"""Backends for ILM report output (text, JSON)."""

from .report_generator import ReportFormat, generate_report, save_report_file, issue_to_dict

__all__ = ["ReportFormat", "generate_report", "save_report_file", "issue_to_dict"]
