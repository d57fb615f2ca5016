import pytest

from cssgrade.stylesheet import has_any_property, has_custom_property, has_property


@pytest.mark.parametrize(
    "declarations",
    ["color: red;", "  color:red", "COLOR: red", "margin: 0; color: red", "margin:0;color:red", "color : red"],
)
def test_has_property_matches(declarations):
    assert has_property(declarations, "color")


@pytest.mark.parametrize(
    "declarations",
    ["background-color: red;", "border-color: red; text-color-x: 1", "color-scheme: dark", "colorx: 1", ""],
)
def test_has_property_respects_name_boundaries(declarations):
    assert not has_property(declarations, "color")


def test_has_property_ignores_values():
    assert has_property("width: ;", "width")
    assert has_property("width: totally-invalid!!", "width")


def test_has_property_needs_colon():
    assert not has_property("color red;", "color")


def test_has_property_query_is_case_insensitive():
    assert has_property("background-color: red", "Background-Color")


def test_has_property_escapes_name():
    assert not has_property("ab: 1", "a.")


def test_has_any_property_alias_sets():
    aliases = ["background", "background-color"]
    assert has_any_property("background: red;", aliases)
    assert has_any_property("background-color: red;", aliases)
    assert has_any_property("background: red; background-color: blue;", aliases)
    assert not has_any_property("background-image: url(x)", aliases)
    assert not has_any_property("color: red", [])


def test_has_custom_property():
    decls = "--brand: #000; --card: #fff;"
    assert has_custom_property(decls, "brand")
    assert has_custom_property(decls, "--card")
    assert not has_custom_property(decls, "muted")
    assert not has_custom_property("--brand-dark: #000", "brand")
    assert not has_custom_property("color: var(--brand);", "brand")
