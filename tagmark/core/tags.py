"""
Tag registry.

Turns configured tag entries into TagDefinition records:
- Shorthand style options folded into the style descriptor
- Identity strings escaped for use inside patterns
- One renderer style handle allocated per tag
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence

from tagmark.core.models import TagDefinition, TagSpec


# Characters escaped in tag identities. `]` and `}` are literal on their own.
_TAG_METACHARACTERS = re.compile(r'([()\[{*+.$^\\|?])')

StyleFactory = Callable[[dict[str, Any], str], Any]


def escape_tag(tag: str) -> str:
    """Escape a tag identity so it matches literally inside a pattern."""
    return _TAG_METACHARACTERS.sub(r'\\\1', tag).replace('/', '\\/')


def normalize_style(spec: TagSpec) -> dict[str, Any]:
    """
    Fold shorthand options into the richer style properties.

    Explicit `fontWeight`, `fontStyle` and `textDecoration` always win over
    the shorthand booleans.
    """
    style = dict(spec.style)

    if not style.get('fontWeight') and spec.bold:
        style['fontWeight'] = 'bold'

    if not style.get('fontStyle') and spec.italic:
        style['fontStyle'] = 'italic'

    if not style.get('textDecoration'):
        decorations = []
        if spec.underline:
            decorations.append('underline')
        if spec.strikethrough:
            decorations.append('line-through')
        style['textDecoration'] = ' '.join(decorations)

    return style


class TagRegistry:
    """
    Ordered collection of tag definitions.

    Order is the configuration order. Entries with overlapping identities
    stay independent; lookups return the first definition that matches.
    """

    def __init__(
        self,
        specs: Iterable[TagSpec],
        style_factory: Optional[StyleFactory] = None
    ):
        self._style_factory = style_factory
        self._tags: list[TagDefinition] = [
            self._build(index, spec) for index, spec in enumerate(specs)
        ]

    def _build(self, index: int, spec: TagSpec) -> TagDefinition:
        identities = []
        for tag in spec.tags:
            if not isinstance(tag, str) or not tag:
                logging.warning(f"TagRegistry - Ignoring empty or invalid identity {tag!r} in tag #{index}")
                continue
            identities.append(tag)

        if not identities:
            logging.warning(f"TagRegistry - Tag #{index} has no usable identity and will never match")

        style = normalize_style(spec)
        label = identities[0] if identities else ''
        decoration = self._style_factory(style, label) if self._style_factory else None

        return TagDefinition(
            tags=tuple(identities),
            escaped_tags=tuple(escape_tag(tag) for tag in identities),
            style=style,
            decoration=decoration,
        )

    def __iter__(self) -> Iterator[TagDefinition]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    @property
    def tags(self) -> Sequence[TagDefinition]:
        return tuple(self._tags)

    def escaped_identities(self) -> list[str]:
        """All escaped identity strings, in registry order."""
        return [escaped for tag in self._tags for escaped in tag.escaped_tags]

    def lookup(self, token: str) -> Optional[TagDefinition]:
        """Resolve a matched token to the first definition that owns it."""
        for tag in self._tags:
            if tag.matches(token):
                return tag
        return None

    def has_ranges(self) -> bool:
        return any(tag.ranges for tag in self._tags)

    def clear(self) -> None:
        """Empty every bucket in place."""
        for tag in self._tags:
            tag.ranges.clear()
