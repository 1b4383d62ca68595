"""
Buffer scanner for comment tags.

Runs compiled matchers over buffer text and fills the tag buckets:
- Single-line pass over line comments (or line starts in plain text)
- Block pass over block comments, matching tag lines inside each block
- Per-buffer scan context that ties grammar, matchers and renderer together

Matching is textual. Comment delimiters inside string literals are
treated as real comments.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence

from tagmark.core.grammar import GrammarResolver
from tagmark.core.models import (
    CommentGrammar,
    CompiledMatchers,
    MatchRange,
    TagDefinition,
)
from tagmark.core.tags import TagRegistry


class TagRenderer(Protocol):
    """Host side of the engine: owns styling and painting."""

    def create_style(self, style: dict[str, Any], label: str) -> Any:
        """Allocate a paintable style handle for one tag."""
        ...

    def apply(self, decoration: Any, ranges: Sequence[MatchRange]) -> None:
        """Paint the ranges of one tag. Called once per tag per pass."""
        ...


class Scanner:
    """Stateless scanning passes. Results go into the tag buckets."""

    def scan(
        self,
        text: str,
        grammar: CommentGrammar,
        matchers: CompiledMatchers,
        registry: TagRegistry
    ) -> int:
        """
        Run both passes over the text.

        Returns:
            Number of ranges added to the buckets
        """
        if not grammar.supported or matchers.is_empty:
            return 0

        found = self.find_single_line_comments(text, grammar, matchers, registry)
        found += self.find_block_comments(text, matchers, registry)
        return found

    def find_single_line_comments(
        self,
        text: str,
        grammar: CommentGrammar,
        matchers: CompiledMatchers,
        registry: TagRegistry
    ) -> int:
        pattern = matchers.single_line
        if pattern is None:
            return 0

        found = 0
        for match in pattern.finditer(text):
            # Shebang or encoding line at the very top of the buffer
            if grammar.ignore_first_line and match.start() == 0:
                continue

            tag = registry.lookup(match.group('tag'))
            if tag is None:
                continue

            tag.ranges.append(MatchRange(match.start('body'), match.end('body')))
            found += 1

        return found

    def find_block_comments(
        self,
        text: str,
        matchers: CompiledMatchers,
        registry: TagRegistry
    ) -> int:
        block_pattern = matchers.block
        tag_pattern = matchers.block_tag
        if block_pattern is None or tag_pattern is None:
            return 0

        found = 0
        for block in block_pattern.finditer(text):
            offset = block.start()

            # `^` must anchor at the block's own first line too
            for line in tag_pattern.finditer(block.group(0)):
                tag = registry.lookup(line.group('tag'))
                if tag is None:
                    continue

                tag.ranges.append(MatchRange(offset + line.start('tag'), offset + line.end()))
                found += 1

        return found


class TagScanContext:
    """
    Scan state of one buffer.

    Holds the active grammar and matchers. Each `update()` is a full
    scan-then-render pass; buckets are empty again when it returns.
    """

    def __init__(
        self,
        resolver: GrammarResolver,
        renderer: Optional[TagRenderer] = None,
        language_id: Optional[str] = None
    ):
        self._resolver = resolver
        self._renderer = renderer
        self._scanner = Scanner()
        self._language_id: Optional[str] = None
        self._grammar: CommentGrammar = CommentGrammar.unsupported('')
        self._matchers: CompiledMatchers = CompiledMatchers()

        if language_id is not None:
            self.set_language(language_id)

    @property
    def language_id(self) -> Optional[str]:
        return self._language_id

    @property
    def grammar(self) -> CommentGrammar:
        return self._grammar

    @property
    def matchers(self) -> CompiledMatchers:
        return self._matchers

    @property
    def supported(self) -> bool:
        return self._grammar.supported

    @property
    def tags(self) -> Sequence[TagDefinition]:
        return self._resolver.registry.tags

    def set_language(self, language_id: str) -> CommentGrammar:
        """Switch the active language and load its matchers."""
        self._language_id = language_id
        self._grammar, self._matchers = self._resolver.matchers_for(language_id)
        return self._grammar

    def reload(self) -> None:
        """Re-resolve the current language after a configuration change."""
        if self._language_id is not None:
            self.set_language(self._language_id)

    def scan(self, text: str) -> int:
        """Fill the tag buckets from the text without rendering."""
        self._resolver.registry.clear()
        return self._scanner.scan(text, self._grammar, self._matchers, self._resolver.registry)

    def update(self, text: str) -> int:
        """Scan the text, hand every bucket to the renderer and clear it."""
        found = self.scan(text)
        logging.debug(f"TagScanContext - {found} tag range(s) in '{self._language_id}'")
        self.render()
        return found

    def render(self) -> None:
        for tag in self.tags:
            if self._renderer is not None:
                self._renderer.apply(tag.decoration, list(tag.ranges))
            tag.ranges.clear()
