from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from ..errors import CatalogError
from ..stylesheet.parser import StyleRule, normalize_selector, selectors


CheckKind = Literal["properties", "any-of", "variables", "rule-exists"]

ROOT_SELECTOR = ":root"


class RequirementKind(str, Enum):
    RULE_EXISTS = "rule-exists"
    PROPERTY_PRESENT = "property-present"
    ANY_OF_PROPERTIES = "any-of-properties"
    VARIABLE_DEFINED = "variable-defined"


@dataclass(frozen=True)
class Requirement:
    """One atomic pass/fail expectation against a selector."""

    label: str
    kind: RequirementKind
    selector: str
    properties: tuple[str, ...] = ()
    hint: str | None = None

    def __post_init__(self) -> None:
        if self.kind is not RequirementKind.RULE_EXISTS and not self.properties:
            raise CatalogError(f"Requirement {self.label!r} ({self.kind.value}) needs at least one property name")


@dataclass(frozen=True)
class CheckDef:
    kind: CheckKind
    selectors: tuple[str, ...] = ()
    selector_pattern: str | None = None
    properties: tuple[str, ...] = ()
    label: str | None = None

    def resolve_selectors(self, rules: list[StyleRule]) -> list[str]:
        """Listed selectors, then any parsed selectors matching the pattern."""
        resolved = [normalize_selector(s) for s in self.selectors]
        if self.selector_pattern:
            pattern = re.compile(self.selector_pattern)
            discovered = sorted(s for s in selectors(rules) if pattern.fullmatch(s))
            resolved.extend(s for s in discovered if s not in resolved)
        return resolved

    def expand(self, rules: list[StyleRule], aliases: dict[str, tuple[str, ...]]) -> list[Requirement]:
        if self.kind == "variables":
            return [
                Requirement(
                    label=f"{ROOT_SELECTOR} {{ --{name} }}",
                    kind=RequirementKind.VARIABLE_DEFINED,
                    selector=ROOT_SELECTOR,
                    properties=(name,),
                    hint=f"Define the custom property `--{name}` inside `{ROOT_SELECTOR}`.",
                )
                for name in self.properties
            ]

        requirements: list[Requirement] = []
        for selector in self.resolve_selectors(rules):
            if self.kind == "rule-exists":
                requirements.append(
                    Requirement(
                        label=f"{selector} {{ }}",
                        kind=RequirementKind.RULE_EXISTS,
                        selector=selector,
                        hint=f"Add a rule for `{selector}`.",
                    )
                )
            elif self.kind == "any-of":
                names = " OR ".join(self.properties)
                requirements.append(
                    Requirement(
                        label=f"{selector} {{ {self.label or 'any-of'}: {names} }}",
                        kind=RequirementKind.ANY_OF_PROPERTIES,
                        selector=selector,
                        properties=self.properties,
                        hint=f"Declare one of {names} inside `{selector}`.",
                    )
                )
            else:
                for prop in self.properties:
                    accepted = (prop, *aliases.get(prop, ()))
                    kind = (
                        RequirementKind.ANY_OF_PROPERTIES if len(accepted) > 1 else RequirementKind.PROPERTY_PRESENT
                    )
                    requirements.append(
                        Requirement(
                            label=f"{selector} {{ {prop} }}",
                            kind=kind,
                            selector=selector,
                            properties=accepted,
                            hint=f"Declare `{prop}` inside `{selector}`.",
                        )
                    )
        return requirements


@dataclass(frozen=True)
class TaskDef:
    id: str
    name: str
    max_marks: int
    checks: tuple[CheckDef, ...] = ()

    def requirements(self, rules: list[StyleRule], aliases: dict[str, tuple[str, ...]]) -> list[Requirement]:
        result: list[Requirement] = []
        for check in self.checks:
            result.extend(check.expand(rules, aliases))
        return result


@dataclass(frozen=True)
class SubmissionMarks:
    on_time: int = 20
    late: int = 10

    @property
    def maximum(self) -> int:
        return max(self.on_time, self.late)


@dataclass(frozen=True)
class CatalogDef:
    catalog_id: str
    version: int
    description: str | None = None
    aliases: dict[str, tuple[str, ...]] = field(default_factory=dict)
    tasks: tuple[TaskDef, ...] = ()
    submission: SubmissionMarks = field(default_factory=SubmissionMarks)

    @property
    def task_marks(self) -> int:
        return sum(t.max_marks for t in self.tasks)
