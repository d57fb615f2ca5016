from __future__ import annotations

from pathlib import Path

import pytest

from cssgrade.catalog import (
    CatalogDef,
    RequirementKind,
    available_catalogs,
    load_builtin_catalog,
    load_catalog,
    resolve_catalog,
)
from cssgrade.catalog.schema import Requirement
from cssgrade.errors import CatalogError
from cssgrade.stylesheet import parse


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_builtin_catalog_shape(catalog: CatalogDef) -> None:
    assert "lab-3-2" in available_catalogs()
    assert catalog.catalog_id == "lab-3-2"
    assert catalog.version >= 1
    assert [t.id for t in catalog.tasks] == [f"TODO {i}" for i in range(1, 9)]
    assert all(t.max_marks == 10 for t in catalog.tasks)
    assert catalog.task_marks == 80
    assert catalog.submission.on_time == 20
    assert catalog.submission.late == 10


def test_builtin_catalog_aliases(catalog: CatalogDef) -> None:
    assert catalog.aliases["width"] == ("max-width", "min-width", "inline-size")
    assert "background-color" in catalog.aliases["background"]


def test_every_builtin_task_has_requirements(catalog: CatalogDef) -> None:
    for task in catalog.tasks:
        assert task.requirements([], catalog.aliases), task.id


def test_todo1_expands_to_variables_and_reset(catalog: CatalogDef) -> None:
    reqs = catalog.tasks[0].requirements([], catalog.aliases)
    assert [r.kind for r in reqs] == [RequirementKind.VARIABLE_DEFINED] * 3 + [RequirementKind.PROPERTY_PRESENT]
    assert [r.properties for r in reqs[:3]] == [("brand",), ("card",), ("muted",)]
    assert reqs[3].selector == "*"


def test_properties_check_uses_alias_groups(catalog: CatalogDef) -> None:
    box = catalog.tasks[5].requirements([], catalog.aliases)
    width = next(r for r in box if r.label == ".box { width }")
    assert width.kind is RequirementKind.ANY_OF_PROPERTIES
    assert width.properties == ("width", "max-width", "min-width", "inline-size")

    padding = next(r for r in box if r.label == ".box { padding }")
    assert padding.kind is RequirementKind.PROPERTY_PRESENT
    assert padding.properties == ("padding",)


def test_box_variants_are_discovered_from_stylesheet(catalog: CatalogDef) -> None:
    todo6 = catalog.tasks[5]
    base = todo6.requirements([], catalog.aliases)
    assert sum(1 for r in base if r.selector.startswith(".b") and r.selector != ".box") == 3

    rules = parse(".b3 { color: red } .b10 { border: 0 } .b4 { border: 0 } .b1:hover { color: red }")
    variants = [r.selector for r in todo6.requirements(rules, catalog.aliases) if r.label.endswith("border-style }")]
    assert variants == [".b1", ".b2", ".b3", ".b10", ".b4"]


def test_load_catalog_from_toml(tmp_path: Path) -> None:
    path = tmp_path / "mini.toml"
    _write(
        path,
        """
catalog_id = "mini"
version = 1

[aliases]
width = ["max-width"]

[[tasks]]
id = "T1"
name = "Only task"
marks = 5
checks = [
  { kind = "rule-exists", selectors = [".a", ".b"] },
  { kind = "properties", selector = ".a", properties = ["width", "color"] },
]
""",
    )
    catalog = load_catalog(path)
    assert catalog.catalog_id == "mini"
    reqs = catalog.tasks[0].requirements([], catalog.aliases)
    assert [r.kind for r in reqs] == [
        RequirementKind.RULE_EXISTS,
        RequirementKind.RULE_EXISTS,
        RequirementKind.ANY_OF_PROPERTIES,
        RequirementKind.PROPERTY_PRESENT,
    ]
    assert resolve_catalog(path).catalog_id == "mini"


@pytest.mark.parametrize(
    "body, message",
    [
        ('version = 1\n', "catalog_id"),
        ('catalog_id = "x"\nversion = 0\n', "version"),
        ('catalog_id = "x"\nversion = 1\n[[tasks]]\nname = "no id"\n', "id is required"),
        (
            'catalog_id = "x"\nversion = 1\n[[tasks]]\nid = "T"\nchecks = [{ kind = "magic", selector = ".a" }]\n',
            "unknown check kind",
        ),
        (
            'catalog_id = "x"\nversion = 1\n[[tasks]]\nid = "T"\nchecks = [{ kind = "properties", selector = ".a" }]\n',
            "needs 'properties'",
        ),
        (
            'catalog_id = "x"\nversion = 1\n[[tasks]]\nid = "T"\nchecks = [{ kind = "any-of", properties = ["a"] }]\n',
            "selector",
        ),
        ('catalog_id = "x"\nversion = 1\n[[tasks]]\nid = "T"\n[[tasks]]\nid = "T"\n', "duplicate"),
        ("catalog_id = = broken", "Failed to parse"),
        ('catalog_id = "x"\nversion = 1\n[[tasks]]\nid = "T"\nmarks = "ten"\n', "T: marks must be an integer"),
        ('catalog_id = "x"\nversion = 1\n[[tasks]]\nid = "T"\nmarks = 7.5\n', "T: marks must be an integer"),
        ('catalog_id = "x"\nversion = 1\n[[tasks]]\nid = "T"\nmarks = -1\n', "T: marks must be >= 0"),
        ('catalog_id = "x"\nversion = 1\n[submission]\nlate = "ten"\n', "submission: late must be an integer"),
        ('catalog_id = "x"\nversion = 1\n[submission]\non_time = true\n', "submission: on_time must be an integer"),
    ],
)
def test_malformed_catalogs_raise(tmp_path: Path, body: str, message: str) -> None:
    path = tmp_path / "bad.toml"
    _write(path, body)
    with pytest.raises(CatalogError, match=message):
        load_catalog(path)


def test_unknown_builtin_catalog() -> None:
    with pytest.raises(CatalogError, match="Unknown catalog"):
        load_builtin_catalog("lab-9-9")


def test_requirement_without_properties_is_rejected() -> None:
    with pytest.raises(CatalogError):
        Requirement(label="x", kind=RequirementKind.PROPERTY_PRESENT, selector=".a")
    Requirement(label="x", kind=RequirementKind.RULE_EXISTS, selector=".a")
