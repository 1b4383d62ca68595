"""
Comment grammar resolution and pattern compilation.

Provides:
- The static table of per-language comment syntax
- Resolution of a language identifier under the current settings
- Compilation of a grammar and the tag registry into matchers
- Per-language caching of compiled matchers
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping, Optional, Pattern, TYPE_CHECKING

from tagmark.core.errors import GrammarError
from tagmark.core.models import CommentGrammar, CompiledMatchers, GrammarTemplate
from tagmark.core.tags import TagRegistry

if TYPE_CHECKING:
    from tagmark.services.settings import HighlightSettings


# =============================================================================
# Language Table
# =============================================================================

_C_STYLE = GrammarTemplate(
    delimiters=('//',), block_start='/*', block_end='*/', doc_style_capable=True
)
_HASH = GrammarTemplate(delimiters=('#',))
_MARKUP = GrammarTemplate(delimiters=('<!--',), block_start='<!--', block_end='-->')
_DOUBLE_DASH = GrammarTemplate(delimiters=('--',))
_HASKELL_STYLE = GrammarTemplate(delimiters=('--',), block_start='{-', block_end='-}')
_APOSTROPHE = GrammarTemplate(delimiters=("'",))
_SEMICOLON = GrammarTemplate(delimiters=(';',))
_PERCENT = GrammarTemplate(delimiters=('%',))


def _build_table() -> Mapping[str, GrammarTemplate]:
    table: dict[str, GrammarTemplate] = {}

    def register(template: GrammarTemplate, *language_ids: str) -> None:
        for language_id in language_ids:
            table[language_id] = template

    register(
        GrammarTemplate(delimiters=('//',), block_start='////', block_end='////'),
        'asciidoc',
    )
    register(
        _C_STYLE,
        'al', 'apex', 'c', 'cpp', 'csharp', 'dart', 'flax', 'fsharp', 'go',
        'groovy', 'haxe', 'java', 'javascript', 'javascriptreact', 'jsonc',
        'kotlin', 'less', 'objective-c', 'objective-cpp', 'objectpascal',
        'pascal', 'php', 'rust', 'scala', 'sass', 'scss', 'shaderlab',
        'stylus', 'swift', 'typescript', 'typescriptreact', 'verilog', 'vue',
    )
    register(
        GrammarTemplate(delimiters=('//', '*'), block_start='/*', block_end='*/',
                        doc_style_capable=True),
        'stata',
    )
    register(
        GrammarTemplate(delimiters=('*',), block_start='/*', block_end='*/',
                        doc_style_capable=True),
        'SAS',
    )
    register(
        GrammarTemplate(delimiters=('/*',), block_start='/*', block_end='*/',
                        doc_style_capable=True),
        'css',
    )
    register(
        GrammarTemplate(delimiters=('#',), block_start='/*', block_end='*/',
                        doc_style_capable=True),
        'terraform',
    )
    register(
        _HASH,
        'coffeescript', 'dockerfile', 'gdscript', 'graphql', 'julia',
        'makefile', 'perl', 'perl6', 'puppet', 'r', 'ruby', 'shellscript',
        'yaml',
    )
    register(GrammarTemplate(delimiters=('#',), ignore_first_line=True), 'tcl')
    register(
        GrammarTemplate(delimiters=('#',), block_start='"""', block_end='"""',
                        ignore_first_line=True),
        'elixir', 'python',
    )
    register(
        GrammarTemplate(delimiters=('#',), block_start='<#', block_end='#>'),
        'powershell',
    )
    register(
        GrammarTemplate(delimiters=('#',), block_start='#[', block_end=']#'),
        'nim',
    )
    register(
        GrammarTemplate(delimiters=('{#',), block_start='{#', block_end='#}'),
        'twig',
    )
    register(_MARKUP, 'html', 'markdown', 'svg', 'xml')
    register(
        GrammarTemplate(delimiters=('<!---',), block_start='<!---', block_end='--->'),
        'cfml',
    )
    register(_DOUBLE_DASH, 'ada', 'hive-sql', 'pig', 'plsql', 'sql')
    register(
        GrammarTemplate(delimiters=('--',), block_start='--[[', block_end=']]'),
        'lua',
    )
    register(_HASKELL_STYLE, 'elm', 'haskell')
    register(_APOSTROPHE, 'brightscript', 'diagram', 'vb')  # PlantUML is 'diagram'
    register(_SEMICOLON, 'clojure', 'lisp', 'racket')
    register(_PERCENT, 'bibtex', 'erlang', 'latex', 'matlab')
    register(GrammarTemplate(delimiters=('c',)), 'fortran-modern')
    register(GrammarTemplate(delimiters=('*>',)), 'COBOL')
    register(
        GrammarTemplate(delimiters=('\\',), block_start='"', block_end='"'),
        'genstat',
    )
    register(GrammarTemplate(plain_text=True), 'plaintext')

    return MappingProxyType(table)


LANGUAGE_GRAMMARS: Mapping[str, GrammarTemplate] = _build_table()

# Fixed delimiters of documentation-style blocks
DOC_BLOCK_START = '/**'
DOC_BLOCK_END = '*/'


def supported_languages() -> list[str]:
    """Language identifiers with a known comment grammar."""
    return sorted(LANGUAGE_GRAMMARS)


# =============================================================================
# Resolver
# =============================================================================

class GrammarResolver:
    """
    Resolves comment grammars and compiles their matchers.

    Compiled matchers are cached per language identifier. The cache holds
    patterns built from one settings/registry snapshot; `update()` drops it.
    """

    def __init__(
        self,
        settings: 'HighlightSettings',
        registry: TagRegistry,
        table: Mapping[str, GrammarTemplate] = LANGUAGE_GRAMMARS
    ):
        self._settings = settings
        self._registry = registry
        self._table = table
        self._cache: dict[str, tuple[CommentGrammar, CompiledMatchers]] = {}

    @property
    def registry(self) -> TagRegistry:
        return self._registry

    @property
    def settings(self) -> 'HighlightSettings':
        return self._settings

    def update(
        self,
        settings: Optional['HighlightSettings'] = None,
        registry: Optional[TagRegistry] = None
    ) -> None:
        """Swap in new settings and/or registry and invalidate the cache."""
        if settings is not None:
            self._settings = settings
        if registry is not None:
            self._registry = registry
        self.invalidate()

    def invalidate(self) -> None:
        if self._cache:
            logging.debug(f"GrammarResolver - Dropping {len(self._cache)} cached matcher set(s)")
        self._cache.clear()

    def resolve(self, language_id: str) -> CommentGrammar:
        """Resolve the comment grammar of a language under the current settings."""
        template = self._table.get(language_id)
        if template is None:
            return CommentGrammar.unsupported(language_id)

        settings = self._settings

        if template.plain_text:
            if not (settings.highlight_plain_text and settings.single_line_comments):
                return CommentGrammar.unsupported(language_id)
            return CommentGrammar(
                language_id=language_id,
                plain_text=True,
                single_line_enabled=True,
            )

        if not template.delimiters:
            return CommentGrammar.unsupported(language_id)

        use_doc_style = (
            template.doc_style_capable
            and language_id in settings.doc_style_languages
        )

        return CommentGrammar(
            language_id=language_id,
            delimiters=template.delimiters,
            block_start=template.block_start,
            block_end=template.block_end,
            use_doc_style_blocks=use_doc_style,
            ignore_first_line=template.ignore_first_line,
            single_line_enabled=settings.single_line_comments,
            block_enabled=settings.multiline_comments and template.block_start is not None,
        )

    def compile(self, grammar: CommentGrammar) -> CompiledMatchers:
        """
        Compile the matchers for a grammar against the current registry.

        Unsupported grammars, and registries without a usable identity,
        produce empty matchers without compiling anything.
        """
        if not grammar.supported:
            return CompiledMatchers()

        identities = self._registry.escaped_identities()
        if not identities:
            logging.debug("GrammarResolver - No usable tag identities, nothing to compile")
            return CompiledMatchers()

        alternation = '|'.join(identities)

        single_line: Optional[Pattern[str]] = None
        if grammar.single_line_enabled:
            if grammar.plain_text:
                expression = r'^[ \t]*(?P<body>(?P<tag>' + alternation + r')[^\r\n]*)'
                flags = re.IGNORECASE | re.MULTILINE
            else:
                delimiters = '|'.join(re.escape(d) for d in grammar.delimiters)
                expression = (
                    r'(?:' + delimiters + r')+[ \t]*'
                    r'(?P<body>(?P<tag>' + alternation + r')[^\r\n]*)'
                )
                flags = re.IGNORECASE
            single_line = self._compile_pattern(grammar, expression, flags)

        if not grammar.block_enabled or grammar.plain_text:
            return CompiledMatchers(single_line=single_line)

        if grammar.use_doc_style_blocks:
            lead = r'[ \t]*\*[ \t]*'
            start, end = DOC_BLOCK_START, DOC_BLOCK_END
        else:
            lead = r'[ \t]*'
            start, end = grammar.block_start, grammar.block_end

        if start is None or end is None:
            return CompiledMatchers(single_line=single_line)

        block_tag_expression = (
            r'^(?P<lead>' + lead + r')(?P<tag>' + alternation + r')'
            r'[ :]*(?:[^*/\r\n][^\r\n]*|(?=[\r\n]|$))'
        )
        block_expression = (
            r'(?:^|[ \t])(?:' + re.escape(start) + r'\s)+'
            r'[\s\S]*?' + re.escape(end)
        )

        return CompiledMatchers(
            single_line=single_line,
            block=self._compile_pattern(grammar, block_expression, re.MULTILINE),
            block_tag=self._compile_pattern(
                grammar, block_tag_expression, re.IGNORECASE | re.MULTILINE
            ),
        )

    def matchers_for(self, language_id: str) -> tuple[CommentGrammar, CompiledMatchers]:
        """Resolve and compile, reusing cached matchers for known languages."""
        cached = self._cache.get(language_id)
        if cached is not None:
            return cached

        grammar = self.resolve(language_id)
        matchers = self.compile(grammar)
        if grammar.supported:
            logging.debug(f"GrammarResolver - Compiled matchers for '{language_id}'")
        else:
            logging.debug(f"GrammarResolver - Language '{language_id}' is not supported")

        self._cache[language_id] = (grammar, matchers)
        return grammar, matchers

    @staticmethod
    def _compile_pattern(grammar: CommentGrammar, expression: str, flags: int) -> Pattern[str]:
        try:
            return re.compile(expression, flags)
        except re.error as e:
            raise GrammarError(grammar.language_id, expression, str(e)) from e
