"""Grading catalog: requirements as data, predicates as code."""

from .engine import RequirementOutcome, TaskResult, evaluate_catalog, evaluate_task
from .load import available_catalogs, load_builtin_catalog, load_catalog, resolve_catalog
from .predicates import Evaluation, evaluate
from .schema import CatalogDef, CheckDef, Requirement, RequirementKind, TaskDef

__all__ = [
    "CatalogDef",
    "CheckDef",
    "Evaluation",
    "Requirement",
    "RequirementKind",
    "RequirementOutcome",
    "TaskDef",
    "TaskResult",
    "available_catalogs",
    "evaluate",
    "evaluate_catalog",
    "evaluate_task",
    "load_builtin_catalog",
    "load_catalog",
    "resolve_catalog",
]
