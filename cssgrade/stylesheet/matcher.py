"""Property presence checks over normalized declaration text.

Only property names are inspected. `color: <anything>` satisfies a `color`
check; values are never looked at.
"""

import re
from functools import lru_cache
from typing import Iterable


@lru_cache(maxsize=256)
def _property_pattern(name: str) -> re.Pattern[str]:
    # Name must start the text or follow `;`, `{` or whitespace, so `color`
    # does not match inside `background-color`.
    return re.compile(rf"(?:^|[;{{\s]){re.escape(name.strip())}\s*:", re.IGNORECASE)


def has_property(declarations: str, name: str) -> bool:
    """True if `name:` is declared in the block."""
    if not name or not name.strip():
        return False
    return _property_pattern(name.lower()).search(declarations) is not None


def has_any_property(declarations: str, names: Iterable[str]) -> bool:
    """True if any of the alias names is declared."""
    return any(has_property(declarations, n) for n in names)


def has_custom_property(declarations: str, name: str) -> bool:
    """True if the custom property `--name` is defined.

    Accepts `brand` or `--brand`.
    """
    bare = name.strip().lstrip("-")
    if not bare:
        return False
    return has_property(declarations, f"--{bare}")
