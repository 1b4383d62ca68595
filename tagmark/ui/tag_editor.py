"""
Plain text editor with comment tag highlighting.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QTimer, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QPlainTextEdit, QWidget

from tagmark.core.grammar import GrammarResolver
from tagmark.core.languages import language_for_file
from tagmark.core.scanner import TagScanContext
from tagmark.core.tags import TagRegistry
from tagmark.services.file_io import FileIOService
from tagmark.services.settings import HighlightSettings
from tagmark.ui.tag_renderer import QtTagRenderer


class TagEditor(QPlainTextEdit):
    """
    Editor that highlights tagged comments.

    Edits are coalesced: a rescan runs once typing pauses for
    `rescan_delay_ms`. Language switches rescan immediately.
    """

    language_changed = pyqtSignal(str, bool)  # language id, supported
    scan_finished = pyqtSignal(int)           # number of tag ranges

    def __init__(
        self,
        settings: Optional[HighlightSettings] = None,
        parent: Optional[QWidget] = None,
        rescan_delay_ms: int = 200
    ):
        super().__init__(parent)

        self._settings = settings or HighlightSettings()
        self._renderer = QtTagRenderer(self)
        self._resolver = GrammarResolver(self._settings, self._build_registry(self._settings))
        self._context = TagScanContext(self._resolver, self._renderer)
        self._file_io = FileIOService()
        self._path: Optional[Path] = None

        self._rescan_timer = QTimer(self)
        self._rescan_timer.setSingleShot(True)
        self._rescan_timer.setInterval(rescan_delay_ms)
        self._rescan_timer.timeout.connect(self.rescan)

        font = QFont("Consolas", 10)
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.setFont(font)
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)

        self.textChanged.connect(self._rescan_timer.start)

    def _build_registry(self, settings: HighlightSettings) -> TagRegistry:
        return TagRegistry(settings.tags, self._renderer.create_style)

    @property
    def context(self) -> TagScanContext:
        return self._context

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def set_language(self, language_id: str) -> None:
        """Switch the comment grammar and rescan."""
        grammar = self._context.set_language(language_id)
        logging.info(f"TagEditor - Language set to '{language_id}' (supported: {grammar.supported})")
        self.language_changed.emit(language_id, grammar.supported)
        self.rescan()

    def apply_settings(self, settings: HighlightSettings) -> None:
        """Rebuild tags and matchers from new settings."""
        self._settings = settings
        self._renderer.clear()
        self._resolver.update(settings, self._build_registry(settings))
        self._context.reload()
        self.rescan()

    def load_file(self, path: Path | str, language_id: Optional[str] = None) -> bool:
        """
        Load a file and highlight it.

        Returns:
            False if the file could not be read as text
        """
        path = Path(path)
        result = self._file_io.read_source(path)
        if not result.success:
            logging.error(f"TagEditor - Failed to open {path}: {result.error}")
            return False

        self._path = path

        # Suppress the debounced rescan for the programmatic load
        self.blockSignals(True)
        self.setPlainText(result.content)
        self.blockSignals(False)

        self.set_language(language_id or language_for_file(path))
        return True

    def rescan(self) -> None:
        """Run a scan pass over the current text now."""
        self._rescan_timer.stop()
        text = self.toPlainText()
        self._renderer.begin(text)
        found = self._context.update(text)
        self.scan_finished.emit(found)
