import pytest

from tagmark.core.errors import GrammarError
from tagmark.core.grammar import LANGUAGE_GRAMMARS, GrammarResolver, supported_languages
from tagmark.core.models import CommentGrammar, TagSpec
from tagmark.core.tags import TagRegistry
from tagmark.services.settings import HighlightSettings


def make_resolver(tags=("TODO",), **settings):
    registry = TagRegistry([TagSpec(tags=tuple(tags))])
    return GrammarResolver(HighlightSettings(**settings), registry)


def test_table_is_read_only():
    with pytest.raises(TypeError):
        LANGUAGE_GRAMMARS["brainfuck"] = LANGUAGE_GRAMMARS["c"]


def test_supported_languages_lists_table():
    languages = supported_languages()
    assert "python" in languages
    assert "plaintext" in languages
    assert languages == sorted(languages)


def test_resolve_c_style():
    grammar = make_resolver().resolve("javascript")

    assert grammar.supported
    assert grammar.delimiters == ("//",)
    assert (grammar.block_start, grammar.block_end) == ("/*", "*/")
    assert grammar.single_line_enabled
    assert grammar.block_enabled
    assert not grammar.use_doc_style_blocks
    assert not grammar.ignore_first_line


def test_resolve_python_ignores_first_line():
    grammar = make_resolver().resolve("python")

    assert grammar.delimiters == ("#",)
    assert grammar.block_start == '"""'
    assert grammar.ignore_first_line


def test_resolve_multiple_delimiters():
    assert make_resolver().resolve("stata").delimiters == ("//", "*")


def test_unknown_language_is_unsupported():
    grammar = make_resolver().resolve("klingon")

    assert grammar == CommentGrammar.unsupported("klingon")
    assert not grammar.supported
    assert not grammar.single_line_enabled
    assert not grammar.block_enabled


def test_language_ids_are_case_sensitive():
    resolver = make_resolver()
    assert resolver.resolve("COBOL").supported
    assert not resolver.resolve("cobol").supported


def test_plain_text_needs_both_flags():
    assert not make_resolver().resolve("plaintext").supported
    assert not make_resolver(highlight_plain_text=True, single_line_comments=False).resolve("plaintext").supported

    grammar = make_resolver(highlight_plain_text=True).resolve("plaintext")
    assert grammar.supported
    assert grammar.plain_text
    assert grammar.single_line_enabled
    assert not grammar.block_enabled


def test_doc_style_only_for_listed_capable_languages():
    resolver = make_resolver(doc_style_languages=frozenset({"java", "python"}))

    assert resolver.resolve("java").use_doc_style_blocks
    assert not resolver.resolve("kotlin").use_doc_style_blocks
    assert not resolver.resolve("python").use_doc_style_blocks


def test_multiline_setting_disables_blocks():
    grammar = make_resolver(multiline_comments=False).resolve("c")
    matchers = make_resolver(multiline_comments=False).compile(grammar)

    assert not grammar.block_enabled
    assert matchers.single_line is not None
    assert matchers.block is None
    assert matchers.block_tag is None


def test_language_without_block_comments():
    resolver = make_resolver()
    matchers = resolver.compile(resolver.resolve("ruby"))

    assert matchers.single_line is not None
    assert matchers.block is None


def test_single_line_setting_disables_line_pattern():
    resolver = make_resolver(single_line_comments=False)
    matchers = resolver.compile(resolver.resolve("c"))

    assert matchers.single_line is None
    assert matchers.block is not None


def test_unsupported_language_compiles_nothing(monkeypatch):
    resolver = make_resolver()

    def fail(*args):
        raise AssertionError("pattern compiled for unsupported language")

    monkeypatch.setattr(GrammarResolver, "_compile_pattern", staticmethod(fail))

    grammar, matchers = resolver.matchers_for("klingon")
    assert not grammar.supported
    assert matchers.is_empty


def test_no_usable_tags_compiles_nothing():
    resolver = make_resolver(tags=("",))
    assert resolver.compile(resolver.resolve("c")).is_empty


def test_single_line_pattern_is_case_insensitive():
    resolver = make_resolver()
    pattern = resolver.compile(resolver.resolve("c")).single_line

    match = pattern.search("x = 1; // todo: later")
    assert match.group("tag") == "todo"
    assert match.group("body") == "todo: later"


def test_block_pattern_is_non_greedy():
    resolver = make_resolver()
    pattern = resolver.compile(resolver.resolve("c")).block

    blocks = [m.group(0) for m in pattern.finditer("/* a */ x /* b */")]
    assert blocks == ["/* a */", " /* b */"]


def test_doc_style_block_uses_fixed_opener():
    resolver = make_resolver(doc_style_languages=frozenset({"css"}))
    matchers = resolver.compile(resolver.resolve("css"))

    assert matchers.block.search("/** doc */")
    assert not matchers.block.search("/* plain */")


def test_matchers_are_cached_per_language():
    resolver = make_resolver()
    first = resolver.matchers_for("c")

    assert resolver.matchers_for("c") is first
    assert resolver.matchers_for("python") is not first


def test_tag_change_invalidates_cache():
    resolver = make_resolver()
    grammar, matchers = resolver.matchers_for("c")
    assert matchers.single_line.search("// FIXME") is None

    resolver.update(registry=TagRegistry([TagSpec(tags=("FIXME",))]))
    _, recompiled = resolver.matchers_for("c")

    assert recompiled is not matchers
    assert recompiled.single_line.search("// FIXME") is not None


def test_settings_change_invalidates_cache():
    resolver = make_resolver()
    grammar, _ = resolver.matchers_for("java")
    assert not grammar.use_doc_style_blocks

    resolver.update(settings=HighlightSettings(doc_style_languages=frozenset({"java"})))
    grammar, _ = resolver.matchers_for("java")
    assert grammar.use_doc_style_blocks


class _BrokenRegistry:
    def escaped_identities(self):
        return ["(unclosed"]


def test_invalid_pattern_fails_fast():
    resolver = GrammarResolver(HighlightSettings(), _BrokenRegistry())

    with pytest.raises(GrammarError) as info:
        resolver.compile(resolver.resolve("c"))

    assert info.value.language_id == "c"


@pytest.mark.parametrize("doc_style", [False, True])
def test_every_table_entry_compiles(doc_style):
    languages = frozenset(LANGUAGE_GRAMMARS) if doc_style else frozenset()
    resolver = GrammarResolver(
        HighlightSettings(highlight_plain_text=True, doc_style_languages=languages),
        TagRegistry(HighlightSettings().tags),
    )

    for language_id in LANGUAGE_GRAMMARS:
        grammar, matchers = resolver.matchers_for(language_id)
        assert grammar.supported, language_id
        assert matchers.single_line is not None, language_id
        assert (matchers.block is not None) == grammar.block_enabled, language_id
