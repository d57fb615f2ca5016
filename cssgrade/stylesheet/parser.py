"""Flat stylesheet parsing: selector / declaration-block pairs.

This is a scan over top-level blocks, not a CSS parser. At-rules and nested
rules are out of scope: an `@media (...) {` prelude has no closing brace before
the next `{`, so it is dropped and the blocks inside it are read as if they
were top-level rules. Unbalanced input is never an error; unmatched spans are
skipped, and a block left unclosed by the next `{` is dropped. When no `;`
separates the unclosed declarations from the next selector, that selector is
lost with them: `.a { color: red .b { ... }` yields neither `.a` nor `.b`.
"""

import re
from dataclasses import dataclass

COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)

# One or more non-brace chars, `{`, non-brace chars, `}`
BLOCK_PATTERN = re.compile(r"([^{}]+)\{([^{}]*)\}")

WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class StyleRule:
    """A single (selector, declaration block) pair."""

    selector: str
    declarations: str

    def __str__(self) -> str:
        return f"{self.selector} {{ {self.declarations} }}"


def strip_comments(css_text: str) -> str:
    """Remove `/* ... */` comments, including multi-line ones."""
    return COMMENT_PATTERN.sub("", css_text)


def normalize_selector(selector: str) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    return WHITESPACE_PATTERN.sub(" ", selector).strip().lower()


def normalize_declarations(body: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", body).strip().lower()


def parse(css_text: str) -> list[StyleRule]:
    """Parse stylesheet text into a flat list of StyleRules.

    A selector list (`h1, h2 { ... }`) expands into one rule per selector,
    all sharing the same declaration text.

    Returns:
        Rules in source order. Empty or unparseable text yields [].
    """
    if not css_text:
        return []

    css = strip_comments(css_text)
    rules: list[StyleRule] = []

    for match in BLOCK_PATTERN.finditer(css):
        selector_text, body = match.group(1), match.group(2)
        # Text before a `;` belongs to an unclosed block or an `@import`.
        selector_text = selector_text.rsplit(";", 1)[-1]
        declarations = normalize_declarations(body)
        for piece in selector_text.split(","):
            selector = normalize_selector(piece)
            if selector:
                rules.append(StyleRule(selector=selector, declarations=declarations))

    return rules


def find_rules(rules: list[StyleRule], selector_query: str) -> list[StyleRule]:
    """Return rules whose selector equals the normalized query exactly."""
    query = normalize_selector(selector_query)
    return [r for r in rules if r.selector == query]


def selectors(rules: list[StyleRule]) -> list[str]:
    """Distinct selectors in first-seen order."""
    seen = set()
    result = []
    for rule in rules:
        if rule.selector not in seen:
            seen.add(rule.selector)
            result.append(rule.selector)
    return result
