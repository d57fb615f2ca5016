from __future__ import annotations

import csv
import io
import json
from pathlib import Path

from cssgrade.catalog import evaluate_catalog
from cssgrade.report import CSV_HEADER, grade_csv, render_markdown, report_to_dict, write_reports
from cssgrade.scoring import score
from cssgrade.stylesheet import parse


def _todo1_report(catalog, **kwargs):
    rules = parse(":root { --brand: #000; --card: #fff; --muted: #999; } * { box-sizing: border-box; }")
    return score(evaluate_catalog(rules, catalog), submission_present=True, is_late=False, student_id="jdoe", **kwargs)


def test_grade_csv_is_stable(catalog) -> None:
    text = grade_csv(_todo1_report(catalog))
    assert text == "student_username,obtained_marks,total_marks,status\njdoe,30,100,0\n"
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == CSV_HEADER
    assert len(rows) == 2


def test_grade_csv_quotes_awkward_ids(catalog) -> None:
    report = score([], submission_present=False, is_late=False, student_id="doe, jane")
    rows = list(csv.reader(io.StringIO(grade_csv(report))))
    assert rows[1] == ["doe, jane", "0", "100", "2"]


def test_markdown_lists_implemented_and_missing(catalog) -> None:
    md = render_markdown(_todo1_report(catalog))
    assert "| TODO 1: CSS Variables + Global Box-Sizing Reset | 10/10 |" in md
    assert "| Submission | 20/20 |" in md
    assert "**30 / 100**" in md
    assert "- ✅ `:root { --brand }`" in md
    assert "- ❌ `.tagline { color }`" in md
    assert "Missing rule for selector `.tagline`" in md
    assert "Status=2" not in md


def test_markdown_status_two_notice(catalog) -> None:
    report = score(evaluate_catalog(parse(".x { color: red }"), catalog), submission_present=True, is_late=True)
    md = render_markdown(report)
    assert "Late submission detected" in md
    assert "**Status=2:**" in md


def test_markdown_without_submission(catalog) -> None:
    report = score(evaluate_catalog([], catalog), submission_present=False, is_late=False)
    md = render_markdown(report)
    assert "No gradable stylesheet found" in md
    assert "No stylesheet was found" in md
    assert "Status=2:" not in md


def test_render_is_deterministic(catalog) -> None:
    assert render_markdown(_todo1_report(catalog)) == render_markdown(_todo1_report(catalog))


def test_report_to_dict(catalog) -> None:
    data = report_to_dict(_todo1_report(catalog, commit_time="2025-10-01T10:00:00+00:00"))
    assert data["total"] == 30
    assert data["status"] == 0
    assert data["submission"]["commit_time"] == "2025-10-01T10:00:00+00:00"
    assert [t["id"] for t in data["tasks"]][:2] == ["TODO 1", "TODO 2"]
    assert data["tasks"][0]["requirements"][0] == {"label": ":root { --brand }", "satisfied": True, "hint": None}
    json.dumps(data)


def test_write_reports(tmp_path: Path, catalog) -> None:
    summary = tmp_path / "summary.md"
    summary.write_text("previous\n", encoding="utf-8")
    paths = write_reports(_todo1_report(catalog), tmp_path / "artifacts", env={"GITHUB_STEP_SUMMARY": str(summary)})

    assert (tmp_path / "artifacts" / "grade.csv").read_text(encoding="utf-8").endswith("jdoe,30,100,0\n")
    assert (tmp_path / "artifacts" / "feedback" / "README.md").exists()
    assert json.loads((tmp_path / "artifacts" / "grade.json").read_text(encoding="utf-8"))["total"] == 30
    assert summary.read_text(encoding="utf-8").startswith("previous\n# Lab 3-2")
    assert paths["step_summary"] == summary


def test_write_reports_without_step_summary(tmp_path: Path, catalog) -> None:
    paths = write_reports(_todo1_report(catalog), tmp_path, env={})
    assert "step_summary" not in paths


def test_unwritable_step_summary_is_skipped(tmp_path: Path, catalog, caplog) -> None:
    summary_dir = tmp_path / "summary"
    summary_dir.mkdir()
    paths = write_reports(_todo1_report(catalog), tmp_path / "artifacts", env={"GITHUB_STEP_SUMMARY": str(summary_dir)})

    assert "step_summary" not in paths
    assert (tmp_path / "artifacts" / "grade.csv").read_text(encoding="utf-8").endswith("jdoe,30,100,0\n")
    assert "Could not append to step summary" in caplog.text
