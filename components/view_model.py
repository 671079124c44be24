"""
View model for Code Highlighter
Holds the editor state and publishes changes through Qt signals.
"""

import logging

from PyQt6.QtCore import QObject, QMimeData, QTimer, pyqtSignal
from PyQt6.QtWidgets import QApplication

from utils.highlight_pipeline import highlight
from utils.syntax_highlighter import (
    DEFAULT_LANGUAGE, HighlightError, OutputMode, PygmentsHighlighter, StyledText,
)

COPIED_MESSAGE_MS = 1000


class HighlightViewModel(QObject):
    """
    State container for the highlighter window.

    Args:
        highlighter: Object with a render(text, mode) method. Defaults to a
            Pygments highlighter for the default language.
        highlighter_factory: Builds the highlighter for a language when the
            language changes. Called with the lexer alias.
    """
    highlightedTextChanged = pyqtSignal(object)  # StyledText or str
    outputModeChanged = pyqtSignal(object)       # OutputMode
    copiedMessageChanged = pyqtSignal(bool)
    highlightFailed = pyqtSignal(str)

    def __init__(self, highlighter=None, highlighter_factory=PygmentsHighlighter, parent=None):
        super().__init__(parent)
        self.output_mode = OutputMode.HTML
        self.input_text = ""
        self.highlighted_text = StyledText()
        self.is_showing_copied_message = False
        self.is_json_compatible = False
        self.has_error = False
        self.language = DEFAULT_LANGUAGE
        self.highlighter_factory = highlighter_factory
        self.highlighter = highlighter or highlighter_factory(self.language)

        self.copy_message_timer = QTimer(self)
        self.copy_message_timer.setSingleShot(True)
        self.copy_message_timer.setInterval(COPIED_MESSAGE_MS)
        self.copy_message_timer.timeout.connect(self._hide_copied_message)

    def set_input_text(self, text: str):
        self.input_text = text

    def set_json_compatible(self, enabled: bool):
        self.is_json_compatible = enabled

    def set_language(self, language: str):
        if language == self.language:
            return
        self.language = language
        self.highlighter = self.highlighter_factory(language)
        logging.info(f"Highlight language set to '{language}'")

    def set_output_mode(self, mode: OutputMode):
        if mode == self.output_mode:
            return
        self.output_mode = mode
        self.outputModeChanged.emit(mode)
        # Pass the new value along so the highlight can't read a stale mode
        self.highlight_text(mode)

    def highlight_text(self, output_mode: OutputMode | None = None) -> bool:
        """
        Highlight the current input and publish the result.

        Returns:
            bool: False if highlighting failed. The previous result is kept but
                can't be copied until a highlight succeeds.
        """
        if not self.input_text:
            self._set_highlighted_text(StyledText())
            return True

        mode = output_mode or self.output_mode
        try:
            result = highlight(self.input_text, mode, self.is_json_compatible, self.highlighter)
        except HighlightError as e:
            logging.error(f"Highlighting failed: {e}")
            self.has_error = True
            self.highlightFailed.emit(str(e))
            return False

        self._set_highlighted_text(result)
        return True

    def copy_result(self, clipboard=None):
        """Copy the current result to the clipboard and flash the copied message."""
        if self.has_error:
            logging.warning("Nothing to copy while the last highlight failed")
            return
        if clipboard is None:
            clipboard = QApplication.clipboard()

        clipboard.clear()
        if isinstance(self.highlighted_text, StyledText):
            mime_data = QMimeData()
            mime_data.setHtml(self.highlighted_text.to_html())
            mime_data.setText(self.highlighted_text.to_plain_text())
            clipboard.setMimeData(mime_data)
        else:
            clipboard.setText(self.highlighted_text)

        self.is_showing_copied_message = True
        self.copiedMessageChanged.emit(True)
        # Restarting supersedes a timer that is still running
        self.copy_message_timer.start()

    def _hide_copied_message(self):
        self.is_showing_copied_message = False
        self.copiedMessageChanged.emit(False)

    def _set_highlighted_text(self, result):
        self.has_error = False
        self.highlighted_text = result
        self.highlightedTextChanged.emit(result)
