"""Stylesheet parsing and property matching."""

from .matcher import has_any_property, has_custom_property, has_property
from .parser import StyleRule, find_rules, normalize_selector, parse, selectors, strip_comments

__all__ = [
    "StyleRule",
    "parse",
    "find_rules",
    "normalize_selector",
    "selectors",
    "strip_comments",
    "has_property",
    "has_any_property",
    "has_custom_property",
]
