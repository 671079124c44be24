"""Tests for the main window wiring and persisted settings."""

import pytest
from PyQt6.QtCore import QSettings

import main
from utils.syntax_highlighter import HighlightError, OutputMode, StyledText

pytestmark = pytest.mark.usefixtures("qapp")


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = str(tmp_path / "settings.ini")
    monkeypatch.setattr(main, "QSettings", lambda org, app: QSettings(path, QSettings.Format.IniFormat))
    return path


@pytest.fixture
def window(settings_path):
    window = main.HighlighterWindow()
    yield window
    window.close()


def test_defaults(window):
    assert window.mode_combo.currentData() == OutputMode.HTML.value
    assert window.language_combo.currentData() == "swift"
    assert not window.json_checkbox.isChecked()
    assert window.input_edit.placeholderText() == "Enter Swift code to begin highlighting"
    assert window.copy_button.text() == "Copy Result (Ctrl+Shift+C)"


def test_typing_and_highlighting_shows_html_source(window):
    window.input_edit.setPlainText("    let x = 1")
    window.highlight_button.click()

    shown = window.result_viewer.toPlainText()
    assert shown.startswith("<pre>\n<code>\n")
    assert '<span class="' in shown
    assert window.view_model.input_text == "    let x = 1"


def test_switching_to_styled_text_rehighlights(window):
    window.input_edit.setPlainText("  let x = 1")
    window.select_output_mode(OutputMode.STYLED_TEXT)

    assert isinstance(window.view_model.highlighted_text, StyledText)
    assert window.result_viewer.toPlainText() == "let x = 1"


def test_json_checkbox_updates_view_model(window):
    window.json_checkbox.setChecked(True)
    assert window.view_model.is_json_compatible


def test_language_selection_updates_placeholder(window):
    window.select_language("python")
    assert window.view_model.language == "python"
    assert window.input_edit.placeholderText() == "Enter Python code to begin highlighting"


def test_copied_message_updates_button(window):
    window.view_model.copiedMessageChanged.emit(True)
    assert window.copy_button.text() == "Copied!"
    window.view_model.copiedMessageChanged.emit(False)
    assert window.copy_button.text() == "Copy Result (Ctrl+Shift+C)"


def test_failure_is_reported(window):
    window.input_edit.setPlainText("let x")

    def broken_render(text, mode):
        raise HighlightError("boom")

    window.view_model.highlighter.render = broken_render

    window.highlight()

    assert "boom" in window.result_viewer.toPlainText()
    assert window.status_bar.currentMessage() == "Highlighting failed"


def test_copy_disabled_while_error_is_shown(window):
    window.input_edit.setPlainText("let x")
    window.highlight()
    assert window.copy_button.isEnabled()

    original_render = window.view_model.highlighter.render

    def broken_render(text, mode):
        raise HighlightError("boom")

    window.view_model.highlighter.render = broken_render
    window.highlight()
    assert not window.copy_button.isEnabled()

    window.view_model.highlighter.render = original_render
    window.highlight()
    assert window.copy_button.isEnabled()


def test_settings_use_own_organisation():
    assert main.ORG_NAME == "CodeHighlighter"


def test_load_file_picks_language(window, tmp_path):
    source = tmp_path / "script.py"
    source.write_text("def f():\n    return 1\n", encoding="utf-8")

    window.load_file(str(source))

    assert window.language_combo.currentData() == "python"
    assert window.input_edit.toPlainText() == "def f():\n    return 1\n"


def test_load_missing_file_reports(window, tmp_path):
    window.load_file(str(tmp_path / "missing.swift"))
    assert window.status_bar.currentMessage() == "Could not open missing.swift"
    assert window.input_edit.toPlainText() == ""


def test_settings_round_trip(settings_path):
    first = main.HighlighterWindow()
    first.select_output_mode(OutputMode.STYLED_TEXT)
    first.select_language("rust")
    first.json_checkbox.setChecked(True)
    first.saveSettings()
    first.close()

    second = main.HighlighterWindow()
    try:
        assert second.view_model.output_mode is OutputMode.STYLED_TEXT
        assert second.view_model.language == "rust"
        assert second.view_model.is_json_compatible
    finally:
        second.close()
