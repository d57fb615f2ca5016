from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from ..errors import CatalogError
from .schema import CheckDef, CatalogDef, SubmissionMarks, TaskDef

DATA_DIR = Path(__file__).parent / "data"

CHECK_KINDS = ("properties", "any-of", "variables", "rule-exists")


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _str_list(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return ()
    return tuple(str(v).strip().lower() for v in value if str(v).strip())


def _int_field(raw: dict[str, Any], key: str, default: int, where: str) -> int:
    value = raw.get(key, default)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise CatalogError(f"{where}: {key} must be an integer, got {value!r}")
    if value < 0:
        raise CatalogError(f"{where}: {key} must be >= 0")
    return value


def _load_check(raw: dict[str, Any], where: str) -> CheckDef:
    kind = str(raw.get("kind", "properties")).strip() or "properties"
    if kind not in CHECK_KINDS:
        raise CatalogError(f"{where}: unknown check kind {kind!r}")

    selector_list = _str_list(raw.get("selectors")) or _str_list(raw.get("selector"))
    pattern = raw.get("selector_pattern")
    pattern_str = str(pattern) if isinstance(pattern, str) and pattern.strip() else None
    if pattern_str is not None:
        try:
            re.compile(pattern_str)
        except re.error as e:
            raise CatalogError(f"{where}: invalid selector_pattern {pattern_str!r}: {e}") from e

    if kind == "variables":
        names = tuple(n.lstrip("-") for n in _str_list(raw.get("names")))
        if not names:
            raise CatalogError(f"{where}: variables check needs 'names'")
        return CheckDef(kind="variables", properties=names)

    if not selector_list and pattern_str is None:
        raise CatalogError(f"{where}: check needs 'selector', 'selectors' or 'selector_pattern'")

    properties = _str_list(raw.get("properties"))
    if kind != "rule-exists" and not properties:
        raise CatalogError(f"{where}: {kind} check needs 'properties'")

    label = raw.get("label")
    return CheckDef(
        kind=kind,  # type: ignore[arg-type]
        selectors=selector_list,
        selector_pattern=pattern_str,
        properties=properties,
        label=str(label) if isinstance(label, str) else None,
    )


def parse_catalog(data: dict[str, Any]) -> CatalogDef:
    """Build a CatalogDef from decoded TOML data.

    Rules are data, evaluation is code: nothing here inspects a stylesheet.
    """
    catalog_id = str(data.get("catalog_id", "")).strip()
    if not catalog_id:
        raise CatalogError("catalog_id is required")

    try:
        version = int(data.get("version", 0))
    except (TypeError, ValueError) as e:
        raise CatalogError("version must be a positive integer") from e
    if version <= 0:
        raise CatalogError("version must be a positive integer")

    aliases = {
        str(prop).strip().lower(): _str_list(names)
        for prop, names in _coerce_dict(data.get("aliases")).items()
    }

    submission_raw = _coerce_dict(data.get("submission"))
    submission = SubmissionMarks(
        on_time=_int_field(submission_raw, "on_time", 20, "submission"),
        late=_int_field(submission_raw, "late", 10, "submission"),
    )

    tasks: list[TaskDef] = []
    seen_ids: set[str] = set()
    for index, raw in enumerate(data.get("tasks", [])):
        if not isinstance(raw, dict):
            continue

        task_id = str(raw.get("id", "")).strip()
        if not task_id:
            raise CatalogError(f"tasks[{index}]: id is required")
        if task_id in seen_ids:
            raise CatalogError(f"tasks[{index}]: duplicate task id {task_id!r}")
        seen_ids.add(task_id)

        max_marks = _int_field(raw, "marks", 0, task_id)

        checks = tuple(
            _load_check(c, f"{task_id} check {i + 1}")
            for i, c in enumerate(raw.get("checks", []))
            if isinstance(c, dict)
        )

        tasks.append(
            TaskDef(
                id=task_id,
                name=str(raw.get("name", task_id)),
                max_marks=max_marks,
                checks=checks,
            )
        )

    return CatalogDef(
        catalog_id=catalog_id,
        version=version,
        description=(str(data.get("description")) if isinstance(data.get("description"), str) else None),
        aliases=aliases,
        tasks=tuple(tasks),
        submission=submission,
    )


def load_catalog(path: Path) -> CatalogDef:
    """Load a grading catalog from TOML."""
    import tomllib

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise CatalogError(f"Failed to parse catalog TOML {path}: {e}") from e

    return parse_catalog(data)


def available_catalogs() -> list[str]:
    """Names of the catalogs shipped with the package."""
    return sorted(p.stem for p in DATA_DIR.glob("*.toml"))


def load_builtin_catalog(name: str) -> CatalogDef:
    path = DATA_DIR / f"{name}.toml"
    if not path.exists():
        raise CatalogError(f"Unknown catalog {name!r}. Available: {', '.join(available_catalogs())}")
    return load_catalog(path)


def resolve_catalog(ref: str | Path) -> CatalogDef:
    """Load a catalog by builtin name or by filesystem path."""
    path = Path(ref)
    if path.suffix == ".toml" or path.exists():
        return load_catalog(path)
    return load_builtin_catalog(str(ref))
