"""
Issue report generator for ILM.

Renders the issues of one or more files for people or for tools.

Supports multiple formats:
    - TEXT: One line per issue, grouped in file order
    - JSON: A machine-readable document with an issue count
"""

import json
from enum import Enum
from typing import Any, Dict, List, Sequence

from ilm.check import Issue


class ReportFormat(Enum):
    """Output formats for issue reports."""
    TEXT = "text"
    JSON = "json"


_PRIORITY_MARKS = {
    "higher": "↑↑",
    "high": "↑",
    "normal": "→",
    "low": "↓",
    "ignore": "↓↓",
}


def _location(issue: Issue) -> str:
    if issue.line_no is None:
        return issue.filename
    return f"{issue.filename}:{issue.line_no}"


def issue_to_dict(issue: Issue) -> Dict[str, Any]:
    return {
        "check": issue.check,
        "category": issue.category,
        "priority": issue.priority,
        "filename": issue.filename,
        "line_no": issue.line_no,
        "message": issue.message,
    }


def generate_report(issues: Sequence[Issue], fmt: ReportFormat = ReportFormat.TEXT) -> str:
    """
    Render issues.

    Args:
        issues: Issues, already ordered by file then line
        fmt: Output format (TEXT, JSON)

    Returns:
        The rendered report
    """
    if fmt == ReportFormat.JSON:
        return json.dumps(
            {"count": len(issues), "issues": [issue_to_dict(i) for i in issues]},
            indent=2,
        )

    lines: List[str] = []
    for issue in issues:
        mark = _PRIORITY_MARKS.get(issue.priority, "")
        category = issue.category[:1].upper()
        lines.append(f"[{category}] {mark} {_location(issue)} {issue.message} ({issue.check})")

    if issues:
        lines.append("")
    noun = "issue" if len(issues) == 1 else "issues"
    lines.append(f"{len(issues)} {noun} found.")

    return "\n".join(lines)


def save_report_file(issues: Sequence[Issue], filename: str, fmt: ReportFormat = ReportFormat.TEXT) -> None:
    """
    Render issues and save them to a file.

    Args:
        issues: Issues to report
        filename: Output file path
        fmt: Output format
    """
    report = generate_report(issues, fmt=fmt)
    with open(filename, 'w', encoding="utf-8") as f:
        f.write(report)
        f.write("\n")


__all__ = ["ReportFormat", "generate_report", "save_report_file", "issue_to_dict"]
