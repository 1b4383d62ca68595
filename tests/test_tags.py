import re

from tagmark.core.models import TagSpec
from tagmark.core.tags import TagRegistry, escape_tag, normalize_style


def test_escape_tag_metacharacters():
    assert escape_tag("TODO") == "TODO"
    assert escape_tag("*") == r"\*"
    assert escape_tag("?") == r"\?"
    assert escape_tag("(x)") == r"\(x\)"
    assert escape_tag("a|b") == r"a\|b"


def test_escape_tag_forward_slashes():
    assert escape_tag("//") == r"\/\/"
    assert re.fullmatch(escape_tag("//"), "//")


def test_escaped_tags_match_literally():
    for tag in ["!", "?", "*", "$x^", "[note]", "a.b", "c++", "\\d"]:
        pattern = re.compile(escape_tag(tag))
        assert pattern.fullmatch(tag), tag


def test_shorthand_styles_fill_missing_properties():
    spec = TagSpec(tags=("TODO",), bold=True, italic=True, underline=True, strikethrough=True)
    style = normalize_style(spec)

    assert style["fontWeight"] == "bold"
    assert style["fontStyle"] == "italic"
    assert style["textDecoration"] == "underline line-through"


def test_shorthand_never_overrides_explicit_style():
    spec = TagSpec(
        tags=("TODO",),
        style={"fontWeight": "300", "fontStyle": "normal", "textDecoration": "overline"},
        bold=True,
        italic=True,
        underline=True,
    )
    style = normalize_style(spec)

    assert style["fontWeight"] == "300"
    assert style["fontStyle"] == "normal"
    assert style["textDecoration"] == "overline"


def test_normalize_style_does_not_touch_spec():
    spec = TagSpec(tags=("TODO",), style={"color": "#fff"}, bold=True)
    normalize_style(spec)
    assert "fontWeight" not in spec.style


def test_registry_preserves_order_and_allocates_one_style_each():
    calls = []

    def factory(style, label):
        calls.append(label)
        return f"handle-{label}"

    registry = TagRegistry(
        [TagSpec(tags=("TODO", "FIXME")), TagSpec(tags=("!",)), TagSpec(tags=("NOTE",))],
        factory,
    )

    assert [tag.label for tag in registry] == ["TODO", "!", "NOTE"]
    assert calls == ["TODO", "!", "NOTE"]
    assert [tag.decoration for tag in registry] == ["handle-TODO", "handle-!", "handle-NOTE"]

    registry.escaped_identities()
    registry.lookup("todo")
    assert len(calls) == 3


def test_lookup_is_case_insensitive_and_first_wins():
    registry = TagRegistry([TagSpec(tags=("todo",)), TagSpec(tags=("TODO", "FIXME"))])
    first, second = registry.tags

    assert registry.lookup("ToDo") is first
    assert registry.lookup("fixme") is second
    assert registry.lookup("NOTE") is None


def test_synonyms_share_one_bucket():
    registry = TagRegistry([TagSpec(tags=("TODO", "FIXME"))])
    tag = registry.tags[0]

    assert tag.matches("todo")
    assert tag.matches("FIXME")
    assert registry.escaped_identities() == ["TODO", "FIXME"]


def test_empty_identity_is_tolerated():
    registry = TagRegistry([TagSpec(tags=("",)), TagSpec(tags=("", "TODO"))])
    broken, partial = registry.tags

    assert not broken.can_match
    assert broken.escaped_tags == ()
    assert partial.tags == ("TODO",)
    assert registry.escaped_identities() == ["TODO"]
    assert registry.lookup("") is None


def test_clear_empties_buckets_in_place():
    registry = TagRegistry([TagSpec(tags=("TODO",))])
    tag = registry.tags[0]
    bucket = tag.ranges
    bucket.append(object())

    assert registry.has_ranges()
    registry.clear()

    assert not registry.has_ranges()
    assert tag.ranges is bucket
