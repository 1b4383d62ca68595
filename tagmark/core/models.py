"""
Core data models for the comment tag engine.

This module defines the data structures shared by the registry, the
grammar resolver and the scanner:
- Tag configuration and tag records
- Match ranges
- Comment grammars and their compiled matchers

All models are designed to be:
- UI-agnostic (styles and style handles are opaque here)
- Immutable where practical (only tag buckets change after creation)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Pattern


# =============================================================================
# Tag Models
# =============================================================================

@dataclass(frozen=True)
class TagSpec:
    """
    One tag entry as it comes from configuration.

    A single entry may carry several identity strings that share one style.
    """
    tags: tuple[str, ...]
    style: Mapping[str, Any] = field(default_factory=dict)

    # Shorthand style options, folded into `style` by the registry
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TagSpec':
        """
        Build a spec from an editor-style entry.

        `tag` may be a string or a list of strings. Every other key except the
        shorthand booleans is kept as part of the style descriptor.
        """
        raw_tags = data.get('tag', ())
        if isinstance(raw_tags, str):
            raw_tags = (raw_tags,)
        elif not isinstance(raw_tags, (list, tuple)):
            raw_tags = ()

        shorthand = ('bold', 'italic', 'underline', 'strikethrough')
        style = {
            key: value for key, value in data.items()
            if key != 'tag' and key not in shorthand
        }

        return cls(
            tags=tuple(raw_tags),
            style=style,
            bold=bool(data.get('bold', False)),
            italic=bool(data.get('italic', False)),
            underline=bool(data.get('underline', False)),
            strikethrough=bool(data.get('strikethrough', False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the editor-style entry."""
        data: dict[str, Any] = {
            'tag': self.tags[0] if len(self.tags) == 1 else list(self.tags),
        }
        data.update(self.style)
        for name in ('bold', 'italic', 'underline', 'strikethrough'):
            if getattr(self, name):
                data[name] = True
        return data


@dataclass(frozen=True)
class MatchRange:
    """
    A span of buffer text attributed to one tag.

    Offsets are character offsets into the scanned text, end exclusive.
    """
    start: int
    end: int

    def slice(self, text: str) -> str:
        """Return the covered text."""
        return text[self.start:self.end]


@dataclass(eq=False)
class TagDefinition:
    """
    A normalized tag ready for scanning.

    Identity strings are matched case-insensitively. Synonyms share the
    single style handle and the single `ranges` bucket.
    """
    tags: tuple[str, ...]           # Identity strings, empty ones removed
    escaped_tags: tuple[str, ...]   # Regex-safe forms of `tags`
    style: Mapping[str, Any]        # Normalized style descriptor
    decoration: Any = None          # Renderer-owned style handle
    ranges: list[MatchRange] = field(default_factory=list)

    _folded: frozenset[str] = field(default=frozenset(), init=False, repr=False)

    def __post_init__(self):
        self._folded = frozenset(tag.casefold() for tag in self.tags)

    @property
    def label(self) -> str:
        """Display name: the first identity string."""
        return self.tags[0] if self.tags else ''

    @property
    def can_match(self) -> bool:
        """False for tags whose configuration had no usable identity."""
        return bool(self.tags)

    def matches(self, token: str) -> bool:
        """Case-insensitive identity check."""
        return token.casefold() in self._folded


# =============================================================================
# Grammar Models
# =============================================================================

@dataclass(frozen=True)
class GrammarTemplate:
    """Static comment syntax of one language family."""
    delimiters: tuple[str, ...] = ()
    block_start: Optional[str] = None
    block_end: Optional[str] = None
    ignore_first_line: bool = False
    plain_text: bool = False
    doc_style_capable: bool = False  # May be switched to `/** */` matching


@dataclass(frozen=True)
class CommentGrammar:
    """
    Comment grammar resolved for one language under the current settings.

    A grammar is replaced on language change, never mutated.
    """
    language_id: str
    delimiters: tuple[str, ...] = ()
    block_start: Optional[str] = None
    block_end: Optional[str] = None
    use_doc_style_blocks: bool = False
    ignore_first_line: bool = False
    plain_text: bool = False

    # Gated by configuration as well as by the language
    single_line_enabled: bool = False
    block_enabled: bool = False

    @classmethod
    def unsupported(cls, language_id: str) -> 'CommentGrammar':
        """Grammar that disables all scanning."""
        return cls(language_id=language_id)

    @property
    def supported(self) -> bool:
        return bool(self.delimiters) or self.plain_text


@dataclass(frozen=True)
class CompiledMatchers:
    """
    Patterns compiled from one grammar and one tag registry snapshot.

    Each pattern is None when the grammar or settings disable that pass.
    """
    single_line: Optional[Pattern[str]] = None
    block: Optional[Pattern[str]] = None
    block_tag: Optional[Pattern[str]] = None

    @property
    def is_empty(self) -> bool:
        return self.single_line is None and self.block is None
