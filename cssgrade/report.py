"""Report rendering for a GradeReport: CSV record, Markdown feedback, JSON."""

from __future__ import annotations

import csv
import io
import json
import logging
import os
from pathlib import Path
from typing import Any

from .catalog.engine import TaskResult
from .scoring import GradeReport, Status

logger = logging.getLogger(__name__)

# Downstream consumers parse this exact column order. Do not change.
CSV_HEADER = ["student_username", "obtained_marks", "total_marks", "status"]

STATUS_TEXT = {
    Status.ON_TIME: "on time",
    Status.LATE: "late",
    Status.NO_SUBMISSION: "no gradable submission",
}


def grade_csv(report: GradeReport) -> str:
    """Header plus exactly one data row."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerow([report.student_id, report.total_marks, report.max_marks, int(report.status)])
    return buf.getvalue()


def _task_to_dict(task: TaskResult) -> dict[str, Any]:
    return {
        "id": task.task_id,
        "name": task.name,
        "earned": task.earned_marks,
        "max": task.max_marks,
        "satisfied": task.satisfied_count,
        "total": task.total_count,
        "requirements": [
            {"label": o.label, "satisfied": o.satisfied, "hint": o.hint}
            for o in task.outcomes
        ],
    }


def report_to_dict(report: GradeReport) -> dict[str, Any]:
    """Convert a GradeReport to a JSON-serializable dict."""
    return {
        "student": report.student_id,
        "total": report.total_marks,
        "max": report.max_marks,
        "status": int(report.status),
        "status_text": STATUS_TEXT[report.status],
        "submission": {
            "present": report.submission_present,
            "late": report.is_late,
            "marks": report.submission_marks,
            "max": report.submission_max,
            "stylesheet": report.stylesheet,
            "commit_time": report.commit_time,
            "due": report.due,
        },
        "catalog": report.catalog,
        "tasks": [_task_to_dict(t) for t in report.task_results],
    }


def _submission_line(report: GradeReport) -> str:
    if not report.submission_present:
        return f"No gradable stylesheet found: submission marks = 0/{report.submission_max}."
    if report.is_late:
        return f"Late submission detected via latest commit time: {report.submission_marks}/{report.submission_max}."
    return f"On-time submission via latest commit time: {report.submission_marks}/{report.submission_max}."


def _feedback_lines(task: TaskResult, report: GradeReport) -> list[str]:
    if not report.submission_present:
        return ["- ❌ No stylesheet was found, so this task could not be checked."]

    lines = []
    for outcome in task.outcomes:
        if outcome.satisfied:
            lines.append(f"- ✅ `{outcome.label}`")
        else:
            lines.append(f"- ❌ `{outcome.label}`")
            if outcome.hint:
                lines.append(f"  - {outcome.hint}")
    if not task.outcomes:
        lines.append("- ⚠️ This task has no checks configured; it was scored 0.")
    return lines


def render_markdown(report: GradeReport, title: str = "Lab 3-2 More CSS") -> str:
    """Render human-readable feedback.

    Output depends only on the report, so reruns on the same input are
    byte-identical.
    """
    stylesheet = f"`{report.stylesheet}`" if report.stylesheet else "none"
    lines = [
        f"# {title} | Autograding Summary",
        "",
        f"- Student: `{report.student_id}`",
        f"- Stylesheet: {stylesheet}",
        f"- {_submission_line(report)}",
        f"- Latest commit: `{report.commit_time}`",
        f"- Due: `{report.due or 'n/a'}`",
        f"- Status: **{int(report.status)}** (0=on time, 1=late, 2=no gradable submission or nothing implemented)",
        "",
        "## Marks Breakdown",
        "",
        "| Item | Marks |",
        "|------|------:|",
    ]
    for task in report.task_results:
        lines.append(f"| {task.task_id}: {task.name} | {task.earned_marks}/{task.max_marks} |")
    lines.append(f"| Submission | {report.submission_marks}/{report.submission_max} |")
    lines += [
        "",
        "## Total Marks",
        "",
        f"**{report.total_marks} / {report.max_marks}**",
        "",
        "## Detailed Feedback (Implemented vs Missed)",
    ]
    for task in report.task_results:
        lines.append("")
        lines.append(f"### {task.task_id}: {task.name}")
        lines.extend(_feedback_lines(task, report))

    if report.status == Status.NO_SUBMISSION and report.submission_present:
        lines += [
            "",
            "⚠️ **Status=2:** Your submission was detected, but none of the required "
            "selectors/properties for the lab tasks were found.",
        ]

    return "\n".join(lines) + "\n"


def write_reports(report: GradeReport, artifacts_dir: Path, env: dict[str, str] | None = None) -> dict[str, Path]:
    """Write grade.csv, grade.json and feedback/README.md.

    Also appends the Markdown to $GITHUB_STEP_SUMMARY when it is set; a
    summary that cannot be written is logged and left out of the result.
    """
    env = dict(os.environ) if env is None else env
    feedback_dir = artifacts_dir / "feedback"
    feedback_dir.mkdir(parents=True, exist_ok=True)

    markdown = render_markdown(report)
    paths = {
        "csv": artifacts_dir / "grade.csv",
        "json": artifacts_dir / "grade.json",
        "feedback": feedback_dir / "README.md",
    }
    paths["csv"].write_text(grade_csv(report), encoding="utf-8")
    paths["json"].write_text(json.dumps(report_to_dict(report), indent=2) + "\n", encoding="utf-8")
    paths["feedback"].write_text(markdown, encoding="utf-8")

    summary_path = env.get("GITHUB_STEP_SUMMARY")
    if summary_path:
        try:
            with open(summary_path, "a", encoding="utf-8") as f:
                f.write(markdown)
        except OSError as e:
            logger.warning(f"Could not append to step summary {summary_path}: {e}")
        else:
            paths["step_summary"] = Path(summary_path)

    return paths
