"""Final score and status for one submission."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence

from .catalog.engine import TaskResult
from .catalog.schema import SubmissionMarks

MAX_TOTAL = 100


class Status(IntEnum):
    ON_TIME = 0
    LATE = 1
    NO_SUBMISSION = 2  # missing/empty stylesheet, or nothing implemented


@dataclass(frozen=True)
class GradeReport:
    """Immutable result of one grading run."""

    student_id: str
    task_results: tuple[TaskResult, ...]
    submission_marks: int
    submission_max: int
    total_marks: int
    status: Status
    submission_present: bool
    is_late: bool
    stylesheet: str | None = None
    commit_time: str = "unknown"
    due: str | None = None
    catalog: str | None = None
    max_marks: int = MAX_TOTAL

    @property
    def task_marks(self) -> int:
        return sum(t.earned_marks for t in self.task_results)

    @property
    def nothing_implemented(self) -> bool:
        return self.submission_present and all(t.satisfied_count == 0 for t in self.task_results)


def score(
    task_results: Sequence[TaskResult],
    *,
    submission_present: bool,
    is_late: bool,
    student_id: str = "student",
    submission: SubmissionMarks | None = None,
    stylesheet: str | None = None,
    commit_time: str | None = None,
    due: str | None = None,
    catalog: str | None = None,
) -> GradeReport:
    """Combine task results with the submission component.

    Without a gradable submission every task is forced to 0 marks, whatever
    the evaluator produced. A submission that satisfies no requirement at all
    reports status 2, but still earns the lateness-based submission marks.
    """
    marks = submission or SubmissionMarks()

    if not submission_present:
        results = tuple(dataclasses.replace(t, earned_marks=0) for t in task_results)
        submission_marks = 0
        status = Status.NO_SUBMISSION
    else:
        results = tuple(task_results)
        submission_marks = marks.late if is_late else marks.on_time
        status = Status.LATE if is_late else Status.ON_TIME
        if all(t.satisfied_count == 0 for t in results):
            status = Status.NO_SUBMISSION

    total = min(MAX_TOTAL, sum(t.earned_marks for t in results) + submission_marks)

    return GradeReport(
        student_id=student_id,
        task_results=results,
        submission_marks=submission_marks,
        submission_max=marks.maximum,
        total_marks=total,
        status=status,
        submission_present=submission_present,
        is_late=is_late,
        stylesheet=stylesheet,
        commit_time=commit_time or "unknown",
        due=due,
        catalog=catalog,
    )
