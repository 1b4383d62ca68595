"""
Qt renderer for comment tags.

Provides:
- Text formats built from tag style descriptors
- Painting of tag ranges as extra selections on a plain text editor
- Translation of Python string offsets to Qt document positions
"""

from __future__ import annotations

import bisect
from typing import Any, Optional, Sequence

from PyQt6.QtGui import QColor, QFont, QTextCharFormat, QTextCursor
from PyQt6.QtWidgets import QPlainTextEdit, QTextEdit

from tagmark.core.models import MatchRange


def _parse_color(value: Any) -> Optional[QColor]:
    if not isinstance(value, str) or not value or value.lower() == 'transparent':
        return None
    color = QColor(value)
    return color if color.isValid() else None


def format_from_style(style: dict[str, Any]) -> QTextCharFormat:
    """
    Build a QTextCharFormat from a tag style descriptor.

    Understands `color`, `backgroundColor`, `fontWeight`, `fontStyle` and
    `textDecoration` (underline, line-through). Other keys are ignored.
    """
    fmt = QTextCharFormat()

    color = _parse_color(style.get('color'))
    if color is not None:
        fmt.setForeground(color)

    background = _parse_color(style.get('backgroundColor'))
    if background is not None:
        fmt.setBackground(background)

    weight = style.get('fontWeight')
    if weight == 'bold' or (isinstance(weight, (int, str)) and str(weight).isdigit() and int(weight) >= 600):
        fmt.setFontWeight(QFont.Weight.Bold)

    if style.get('fontStyle') in ('italic', 'oblique'):
        fmt.setFontItalic(True)

    decoration = style.get('textDecoration') or ''
    if isinstance(decoration, str):
        if 'underline' in decoration:
            fmt.setFontUnderline(True)
        if 'line-through' in decoration:
            fmt.setFontStrikeOut(True)

    return fmt


class QtPositions:
    """
    Maps string offsets to QTextDocument positions.

    Qt counts UTF-16 code units, so every character outside the BMP before
    an offset shifts the position by one.
    """

    def __init__(self, text: str):
        self._astral = [i for i, char in enumerate(text) if ord(char) > 0xFFFF]

    def to_qt(self, offset: int) -> int:
        if not self._astral:
            return offset
        return offset + bisect.bisect_left(self._astral, offset)


class QtTagRenderer:
    """
    Paints tag ranges on a QPlainTextEdit.

    Style handles are QTextCharFormat objects. Each tag's ranges replace
    that tag's previous selections.
    """

    def __init__(self, editor: QPlainTextEdit):
        self._editor = editor
        self._positions = QtPositions('')
        self._selections: dict[int, list[QTextEdit.ExtraSelection]] = {}

    def begin(self, text: str) -> None:
        """Set the text snapshot that the next ranges refer to."""
        self._positions = QtPositions(text)

    def create_style(self, style: dict[str, Any], label: str) -> QTextCharFormat:
        return format_from_style(style)

    def apply(self, decoration: QTextCharFormat, ranges: Sequence[MatchRange]) -> None:
        selections = []
        document = self._editor.document()

        for match_range in ranges:
            cursor = QTextCursor(document)
            cursor.setPosition(self._positions.to_qt(match_range.start))
            cursor.setPosition(
                self._positions.to_qt(match_range.end),
                QTextCursor.MoveMode.KeepAnchor
            )

            selection = QTextEdit.ExtraSelection()
            selection.cursor = cursor
            selection.format = decoration
            selections.append(selection)

        self._selections[id(decoration)] = selections
        self._editor.setExtraSelections(self.selections())

    def selections(self) -> list[QTextEdit.ExtraSelection]:
        return [selection for group in self._selections.values() for selection in group]

    def clear(self) -> None:
        self._selections.clear()
        self._editor.setExtraSelections([])
