"""
PyQt6 user interface.

Provides the tag editor widget, its renderer and the main window.
"""

from tagmark.ui.main_window import MainWindow
from tagmark.ui.tag_editor import TagEditor
from tagmark.ui.tag_renderer import QtTagRenderer

__all__ = [
    'MainWindow',
    'TagEditor',
    'QtTagRenderer',
]
