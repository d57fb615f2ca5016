"""Grade command implementation."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..catalog import CatalogDef, evaluate_catalog, resolve_catalog
from ..config import GraderConfig
from ..report import STATUS_TEXT, report_to_dict, write_reports
from ..scoring import GradeReport, Status, score
from ..stylesheet import parse
from ..submission import (
    CommitTimestampProvider,
    GitCommitProvider,
    is_late,
    read_stylesheet,
    resolve_stylesheet,
    resolve_student_id,
)

logger = logging.getLogger(__name__)


def grade_submission(
    submission_dir: Path,
    config: GraderConfig,
    *,
    catalog: CatalogDef | None = None,
    provider: CommitTimestampProvider | None = None,
    student_id: str | None = None,
    env: Mapping[str, str] | None = None,
) -> GradeReport:
    """Grade one submission directory.

    Args:
        submission_dir: Directory holding the student's work
        config: Run configuration (due date, catalog, filenames)
        catalog: Pre-loaded catalog; defaults to `config.catalog`
        provider: Commit timestamp source; defaults to `git log` in submission_dir
        student_id: Explicit student id; defaults to environment resolution
        env: Environment used for student id resolution

    Returns:
        The GradeReport. Missing input never raises; it grades as status 2.
    """
    catalog = catalog or resolve_catalog(config.catalog)
    provider = provider or GitCommitProvider(submission_dir)

    stylesheet_path = resolve_stylesheet(submission_dir, config.default_filename, config.entry_html)
    css_text = read_stylesheet(stylesheet_path)
    present = bool(css_text and css_text.strip())
    if stylesheet_path is None:
        logger.warning("No stylesheet found in %s", submission_dir)
    elif not present:
        logger.warning("Stylesheet %s is empty", stylesheet_path)

    rules = parse(css_text or "")
    task_results = evaluate_catalog(rules, catalog)

    commit_time = provider.latest_commit_time()
    late = is_late(commit_time, config.due)

    stylesheet_ref = None
    if stylesheet_path is not None:
        try:
            stylesheet_ref = stylesheet_path.relative_to(submission_dir).as_posix()
        except ValueError:
            stylesheet_ref = stylesheet_path.as_posix()

    return score(
        task_results,
        submission_present=present,
        is_late=late,
        student_id=student_id or resolve_student_id(env),
        submission=catalog.submission,
        stylesheet=stylesheet_ref,
        commit_time=commit_time.isoformat() if commit_time else None,
        due=config.due.isoformat(),
        catalog=f"{catalog.catalog_id}@v{catalog.version}",
    )


def run_grade(
    submission_dir: Path,
    config: GraderConfig,
    *,
    student_id: str | None = None,
    output_json: bool = False,
    write: bool = True,
    provider: CommitTimestampProvider | None = None,
) -> int:
    """Grade a submission, write artifacts, and print a summary.

    Returns:
        Exit code. Always 0 once a report exists: the pipeline needs a result
        file every run, even a pessimistic one.
    """
    console = Console(stderr=True)

    console.print(f"Grading {submission_dir} with catalog {config.catalog}...", style="dim")
    report = grade_submission(submission_dir, config, provider=provider, student_id=student_id)

    if write:
        try:
            paths = write_reports(report, config.artifacts_dir)
        except OSError as e:
            logger.error(f"Could not write grade artifacts to {config.artifacts_dir}: {e}")
        else:
            for kind, path in paths.items():
                console.print(f"  wrote {kind}: {path}", style="dim")

    if output_json:
        print(json.dumps(report_to_dict(report), indent=2))
    else:
        _print_human_output(console, report)

    return 0


def _print_human_output(console: Console, report: GradeReport) -> None:
    table = Table(title=f"Grade for {escape(report.student_id)}")
    table.add_column("Item", style="cyan")
    table.add_column("Checks", justify="right")
    table.add_column("Marks", justify="right")

    for task in report.task_results:
        style = "green" if task.earned_marks == task.max_marks else ("yellow" if task.earned_marks else "red")
        table.add_row(
            escape(f"{task.task_id}: {task.name}"),
            f"{task.satisfied_count}/{task.total_count}",
            f"[{style}]{task.earned_marks}/{task.max_marks}[/]",
        )
    table.add_row("Submission", "", f"{report.submission_marks}/{report.submission_max}")
    console.print(table)

    if report.status == Status.ON_TIME:
        status_style = "bold green"
    elif report.status == Status.LATE:
        status_style = "yellow"
    else:
        status_style = "bold red"

    console.print()
    console.print(f"Total: {report.total_marks}/{report.max_marks}", style="bold")
    console.print(f"Status: {int(report.status)} ({STATUS_TEXT[report.status]})", style=status_style)
