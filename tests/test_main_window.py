import json

import pytest

pytest.importorskip("PyQt6")

from tagmark.core.models import TagSpec
from tagmark.services.settings import SettingsManager
from tagmark.ui.main_window import MainWindow


def write_settings(path, **data):
    path.write_text(json.dumps(data), encoding="utf-8")


def selected_text(window):
    return [s.cursor.selectedText() for s in window.editor.extraSelections()]


@pytest.fixture
def settings_path(tmp_path):
    path = tmp_path / "settings.json"
    write_settings(path, highlightPlainText=True, tags=[{"tag": "TODO"}])
    return path


@pytest.fixture
def window(qapp, settings_path):
    widget = MainWindow(SettingsManager(settings_path))
    yield widget
    widget.close()
    widget.deleteLater()


def test_starts_with_selected_language(window):
    assert window.editor.context.language_id == "plaintext"
    assert window._language_label.text() == "plaintext"


def test_typed_plain_text_is_highlighted_without_a_file(window):
    window.editor.setPlainText("TODO buy milk\n")
    window.editor.rescan()

    assert selected_text(window) == ["TODO buy milk"]
    assert window._count_label.text() == "1 tag(s)"


def test_language_selector_switches_editor(window):
    window.editor.setPlainText("// TODO fix\n")

    window._language_combo.setCurrentText("c")

    assert window.editor.context.language_id == "c"
    assert selected_text(window) == ["TODO fix"]


def test_open_file_syncs_selector(window, tmp_path):
    source = tmp_path / "tool.py"
    source.write_text("x = 1\n# todo: later\n", encoding="utf-8")

    assert window.open_file(source)

    assert window._language_combo.currentText() == "python"
    assert window.windowTitle() == "tool.py - TagMark"
    assert selected_text(window) == ["todo: later"]


def test_reload_settings_becomes_current(window, settings_path):
    window.editor.setPlainText("HACK here\nTODO there\n")
    write_settings(settings_path, highlightPlainText=True, tags=[{"tag": "HACK"}])

    window.reload_settings()

    assert selected_text(window) == ["HACK here"]

    # A plain save must not write the previous tags back
    manager = window._settings_manager
    assert manager.settings.tags == [TagSpec(tags=("HACK",))]
    assert manager.save()
    assert json.loads(settings_path.read_text(encoding="utf-8"))["tags"] == [{"tag": "HACK"}]
