"""
Headless tag report.

A renderer that collects tag hits as line/column records instead of
painting them, used by the command line report mode.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from tagmark.core.models import MatchRange


@dataclass(frozen=True)
class TagHit:
    """One tagged comment located in a buffer."""
    tag: str
    line: int       # 1-based
    column: int     # 1-based
    text: str

    def format(self, path: str = '') -> str:
        location = f"{path}:{self.line}:{self.column}" if path else f"{self.line}:{self.column}"
        return f"{location}: {self.tag} {self.text}"


class TextPositions:
    """Offset to line/column translation for one text snapshot."""

    def __init__(self, text: str):
        self._text = text
        self._line_starts = [0]
        for index, char in enumerate(text):
            if char == '\n':
                self._line_starts.append(index + 1)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def position_at(self, offset: int) -> tuple[int, int]:
        """0-based (line, column) of an offset, clamped to the text."""
        offset = max(0, min(offset, len(self._text)))
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return line, offset - self._line_starts[line]


class ReportRenderer:
    """
    Renderer that records hits instead of painting.

    The style handle of a tag is its label.
    """

    def __init__(self):
        self.hits: list[TagHit] = []
        self._text = ''
        self._positions: Optional[TextPositions] = None

    def begin(self, text: str) -> None:
        """Set the text snapshot that the next ranges refer to."""
        self._text = text
        self._positions = TextPositions(text)

    def create_style(self, style: dict[str, Any], label: str) -> Any:
        return label

    def apply(self, decoration: Any, ranges: Sequence[MatchRange]) -> None:
        if self._positions is None:
            return

        for match_range in ranges:
            line, column = self._positions.position_at(match_range.start)
            self.hits.append(TagHit(
                tag=str(decoration),
                line=line + 1,
                column=column + 1,
                text=match_range.slice(self._text).rstrip(),
            ))

    def sorted_hits(self) -> list[TagHit]:
        return sorted(self.hits, key=lambda hit: (hit.line, hit.column))
