"""
Comment tag recognition engine.

Provides functionality for:
- Tag registry construction and identity escaping
- Per-language comment grammar resolution
- Pattern compilation and buffer scanning
"""

from tagmark.core.errors import GrammarError, SettingsError, TagMarkError
from tagmark.core.grammar import GrammarResolver, LANGUAGE_GRAMMARS, supported_languages
from tagmark.core.models import (
    CommentGrammar,
    CompiledMatchers,
    GrammarTemplate,
    MatchRange,
    TagDefinition,
    TagSpec,
)
from tagmark.core.scanner import Scanner, TagRenderer, TagScanContext
from tagmark.core.tags import TagRegistry, escape_tag, normalize_style

__all__ = [
    # Errors
    'TagMarkError',
    'GrammarError',
    'SettingsError',
    # Models
    'CommentGrammar',
    'CompiledMatchers',
    'GrammarTemplate',
    'MatchRange',
    'TagDefinition',
    'TagSpec',
    # Registry
    'TagRegistry',
    'escape_tag',
    'normalize_style',
    # Grammar
    'GrammarResolver',
    'LANGUAGE_GRAMMARS',
    'supported_languages',
    # Scanning
    'Scanner',
    'TagRenderer',
    'TagScanContext',
]
