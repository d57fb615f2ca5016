from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..stylesheet.matcher import has_any_property, has_custom_property, has_property
from ..stylesheet.parser import StyleRule, find_rules
from .schema import ROOT_SELECTOR, Requirement, RequirementKind


@dataclass(frozen=True)
class Evaluation:
    satisfied: bool
    matched_rule_found: bool


PredicateFn = Callable[[list[StyleRule], Requirement], bool]


def predicate_rule_exists(matched: list[StyleRule], requirement: Requirement) -> bool:
    return bool(matched)


def predicate_property_present(matched: list[StyleRule], requirement: Requirement) -> bool:
    prop = requirement.properties[0]
    return any(has_property(r.declarations, prop) for r in matched)


def predicate_any_of_properties(matched: list[StyleRule], requirement: Requirement) -> bool:
    return any(has_any_property(r.declarations, requirement.properties) for r in matched)


def predicate_variable_defined(matched: list[StyleRule], requirement: Requirement) -> bool:
    name = requirement.properties[0]
    return any(has_custom_property(r.declarations, name) for r in matched)


PREDICATES: dict[RequirementKind, PredicateFn] = {
    RequirementKind.RULE_EXISTS: predicate_rule_exists,
    RequirementKind.PROPERTY_PRESENT: predicate_property_present,
    RequirementKind.ANY_OF_PROPERTIES: predicate_any_of_properties,
    RequirementKind.VARIABLE_DEFINED: predicate_variable_defined,
}


def evaluate(rules: list[StyleRule], requirement: Requirement) -> Evaluation:
    """Check one requirement against parsed rules.

    Selector matching is exact string equality after normalization. Custom
    property definitions are only looked up on `:root`.
    """
    selector = ROOT_SELECTOR if requirement.kind is RequirementKind.VARIABLE_DEFINED else requirement.selector
    matched = find_rules(rules, selector)
    if not matched:
        return Evaluation(satisfied=False, matched_rule_found=False)

    fn = PREDICATES[requirement.kind]
    return Evaluation(satisfied=fn(matched, requirement), matched_rule_found=True)
