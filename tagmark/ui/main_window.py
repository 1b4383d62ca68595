"""
Main application window.

Provides the primary UI container with:
- Menu bar
- Toolbar with a language selector
- Tag editor as the central widget
- Status bar
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import pyqtSlot
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QToolBar, QComboBox,
    QFileDialog, QMessageBox, QLabel,
)

from tagmark.core.grammar import supported_languages
from tagmark.services.settings import HighlightSettings, SettingsManager
from tagmark.ui.tag_editor import TagEditor


class MainWindow(QMainWindow):
    """
    Main application window.

    Hosts one TagEditor and keeps it in sync with the settings file.
    """

    def __init__(
        self,
        settings_manager: Optional[SettingsManager] = None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self._settings_manager = settings_manager or SettingsManager()
        self._settings_manager.add_observer(self._on_settings_changed)

        self.editor = TagEditor(self._settings_manager.settings, self)
        self.setCentralWidget(self.editor)

        self._language_label = QLabel()
        self._count_label = QLabel()

        self._setup_actions()
        self._setup_toolbar()
        self._setup_statusbar()

        self.editor.language_changed.connect(self._on_language_changed)
        self.editor.scan_finished.connect(self._on_scan_finished)

        # Start with the language shown in the selector
        self.editor.set_language(self._language_combo.currentText())

        self.resize(1000, 700)
        self._update_title()

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def _setup_actions(self) -> None:
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self._open_file_dialog)
        file_menu.addAction(open_action)

        reload_action = QAction("&Reload Settings", self)
        reload_action.setShortcut(QKeySequence("F5"))
        reload_action.triggered.connect(self.reload_settings)
        file_menu.addAction(reload_action)

        file_menu.addSeparator()

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def _setup_toolbar(self) -> None:
        toolbar = QToolBar("Language", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self._language_combo = QComboBox(self)
        self._language_combo.addItems(supported_languages())
        self._language_combo.setCurrentText('plaintext')
        self._language_combo.currentTextChanged.connect(self.editor.set_language)
        toolbar.addWidget(QLabel(" Language: "))
        toolbar.addWidget(self._language_combo)

    def _setup_statusbar(self) -> None:
        status = self.statusBar()
        status.addWidget(self._language_label)
        status.addPermanentWidget(self._count_label)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def open_file(self, path: Path | str, language_id: Optional[str] = None) -> bool:
        if not self.editor.load_file(path, language_id):
            QMessageBox.warning(self, "Open File", f"Could not open {path} as text.")
            return False

        # Keep the selector in step without triggering a second switch
        self._language_combo.blockSignals(True)
        self._language_combo.setCurrentText(self.editor.context.language_id or '')
        self._language_combo.blockSignals(False)

        self._update_title()
        return True

    @pyqtSlot()
    def _open_file_dialog(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open File")
        if path:
            self.open_file(path)

    @pyqtSlot()
    def reload_settings(self) -> None:
        self._settings_manager.reload()

    def _on_settings_changed(self, settings: Optional[HighlightSettings]) -> None:
        if settings is None:
            return
        logging.info(f"MainWindow - Applying settings with {len(settings.tags)} tag(s)")
        self.editor.apply_settings(settings)

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    @pyqtSlot(str, bool)
    def _on_language_changed(self, language_id: str, supported: bool) -> None:
        suffix = '' if supported else ' (no tag highlighting)'
        self._language_label.setText(f"{language_id}{suffix}")

    @pyqtSlot(int)
    def _on_scan_finished(self, count: int) -> None:
        self._count_label.setText(f"{count} tag(s)")

    def _update_title(self) -> None:
        path = self.editor.path
        self.setWindowTitle(f"{path.name} - TagMark" if path else "TagMark")
