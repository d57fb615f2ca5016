from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..stylesheet.parser import StyleRule
from .predicates import evaluate
from .schema import CatalogDef, Requirement, TaskDef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequirementOutcome:
    label: str
    satisfied: bool
    matched_rule_found: bool
    hint: str | None = None


@dataclass(frozen=True)
class TaskResult:
    """Per-task grading outcome."""

    task_id: str
    name: str
    earned_marks: int
    max_marks: int
    satisfied_count: int
    total_count: int
    outcomes: tuple[RequirementOutcome, ...] = field(default_factory=tuple)

    @property
    def missing(self) -> list[RequirementOutcome]:
        return [o for o in self.outcomes if not o.satisfied]

    @property
    def implemented(self) -> list[RequirementOutcome]:
        return [o for o in self.outcomes if o.satisfied]


def round_half_up(numerator: int, denominator: int) -> int:
    """Round numerator/denominator to the nearest int, ties up (non-negative inputs)."""
    return (2 * numerator + denominator) // (2 * denominator)


def task_marks(max_marks: int, satisfied: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(max_marks * satisfied, total)


def _outcome(rules: list[StyleRule], requirement: Requirement) -> RequirementOutcome:
    result = evaluate(rules, requirement)
    hint = None
    if not result.satisfied:
        if result.matched_rule_found:
            hint = requirement.hint
        else:
            hint = f"Missing rule for selector `{requirement.selector}`. {requirement.hint or ''}".strip()
    return RequirementOutcome(
        label=requirement.label,
        satisfied=result.satisfied,
        matched_rule_found=result.matched_rule_found,
        hint=hint,
    )


def evaluate_task(
    rules: list[StyleRule],
    task: TaskDef,
    aliases: dict[str, tuple[str, ...]] | None = None,
) -> TaskResult:
    """Evaluate every requirement of a task and score it."""
    requirements = task.requirements(rules, aliases or {})
    if not requirements:
        logger.warning("Catalog task %r has no requirements; scoring it 0", task.id)

    outcomes = tuple(_outcome(rules, req) for req in requirements)
    satisfied = sum(1 for o in outcomes if o.satisfied)

    return TaskResult(
        task_id=task.id,
        name=task.name,
        earned_marks=task_marks(task.max_marks, satisfied, len(outcomes)),
        max_marks=task.max_marks,
        satisfied_count=satisfied,
        total_count=len(outcomes),
        outcomes=outcomes,
    )


def evaluate_catalog(rules: list[StyleRule], catalog: CatalogDef) -> list[TaskResult]:
    """Evaluate all catalog tasks in catalog order."""
    results = [evaluate_task(rules, task, catalog.aliases) for task in catalog.tasks]
    logger.debug(
        "Evaluated %d task(s) from %s v%d against %d rule(s)",
        len(results),
        catalog.catalog_id,
        catalog.version,
        len(rules),
    )
    return results
