import sys
import os
import logging
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QPlainTextEdit, QStatusBar, QVBoxLayout, QHBoxLayout,
    QWidget, QPushButton, QCheckBox, QComboBox, QLabel,
)
from PyQt6.QtGui import QAction, QColor, QFont, QKeySequence, QPalette
from PyQt6.QtCore import Qt, QSettings, QTimer

from components.result_viewer import ResultViewer
from components.view_model import HighlightViewModel
from utils.syntax_highlighter import (
    DEFAULT_FONT_FAMILY, DEFAULT_LANGUAGE, LANGUAGES, OutputMode, language_for_file,
)


# --- Configuration ---
APP_NAME = "Code Highlighter"
ORG_NAME = "CodeHighlighter"
DEFAULT_ENCODING = 'utf-8'
STATUS_MESSAGE_MS = 3000

HIGHLIGHT_SHORTCUT = QKeySequence(Qt.Modifier.CTRL | Qt.Key.Key_Return)
COPY_SHORTCUT = QKeySequence(Qt.Modifier.CTRL | Qt.Modifier.SHIFT | Qt.Key.Key_C)

# --- Logging Setup ---
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


# --- Main Application ---
class HighlighterWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.settings = QSettings(ORG_NAME, APP_NAME)
        self.view_model = HighlightViewModel(parent=self)

        # Atom One Dark theme color scheme
        self.colors = {
            "black": "#282c34",      # One Dark background
            "black2": "#21252b",     # Darker background variant
            "white": "#abb2bf",      # One Dark main text color
            "gray2": "#2c313c",      # One Dark sidebar/UI color
            "gray3": "#3e4451",      # One Dark border/inactive color
            "gray4": "#5c6370",      # One Dark comment/muted text
            "blue": "#61afef",       # One Dark blue
            "blue2": "#528bff",      # One Dark bright blue accent
            "green": "#98c379",      # One Dark green
            "red": "#e06c75",        # One Dark red
            "selection": "#3e4451",  # One Dark selection color
            "hover": "#353b45",      # One Dark hover background
            "border": "#3e4451",     # One Dark border color
        }

        self.initUI()
        self.loadSettings()

    def initUI(self):
        self.setWindowTitle(APP_NAME)
        self.setGeometry(100, 100, 800, 700)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(12, 12, 12, 12)

        # Options row
        options_layout = QHBoxLayout()
        self.mode_combo = QComboBox()
        for mode in OutputMode:
            self.mode_combo.addItem(mode.description, mode.value)
        options_layout.addWidget(self.mode_combo)

        self.language_combo = QComboBox()
        for display, alias in LANGUAGES.items():
            self.language_combo.addItem(display, alias)
        options_layout.addWidget(self.language_combo)

        options_layout.addStretch(1)
        self.json_checkbox = QCheckBox("JSON Compatible")
        options_layout.addWidget(self.json_checkbox)
        layout.addLayout(options_layout)

        # Source input
        self.input_edit = QPlainTextEdit()
        self.input_edit.setFont(QFont(DEFAULT_FONT_FAMILY, 12))
        layout.addWidget(self.input_edit, 1)

        self.highlight_button = QPushButton("Highlight (Ctrl+Enter)")
        layout.addWidget(self.highlight_button)

        # Result
        self.result_viewer = ResultViewer(self.colors)
        layout.addWidget(self.result_viewer, 1)

        self.copy_button = QPushButton()
        layout.addWidget(self.copy_button)
        self.update_copy_button(False)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.language_label = QLabel()
        self.status_bar.addPermanentWidget(self.language_label)

        # Shortcuts live on window-level actions so they work from any widget
        highlight_action = QAction(self)
        highlight_action.setShortcut(HIGHLIGHT_SHORTCUT)
        highlight_action.triggered.connect(self.highlight)
        self.addAction(highlight_action)

        copy_action = QAction(self)
        copy_action.setShortcut(COPY_SHORTCUT)
        copy_action.triggered.connect(self.copy_result)
        self.addAction(copy_action)

        # Connections
        self.highlight_button.clicked.connect(self.highlight)
        self.copy_button.clicked.connect(self.copy_result)
        self.input_edit.textChanged.connect(self.on_text_changed)
        self.mode_combo.currentIndexChanged.connect(self.on_mode_changed)
        self.language_combo.currentIndexChanged.connect(self.on_language_changed)
        self.json_checkbox.toggled.connect(self.view_model.set_json_compatible)

        self.view_model.highlightedTextChanged.connect(self.result_viewer.update_content)
        self.view_model.highlightedTextChanged.connect(self.on_result_changed)
        self.view_model.copiedMessageChanged.connect(self.update_copy_button)
        self.view_model.highlightFailed.connect(self.on_highlight_failed)

        self.setupTheme()
        self.update_language_labels()

    def setupTheme(self):
        """Apply One Dark theme."""
        palette = QPalette()
        palette.setColor(QPalette.ColorRole.Window, QColor(self.colors["black"]))
        palette.setColor(QPalette.ColorRole.WindowText, QColor(self.colors["white"]))
        palette.setColor(QPalette.ColorRole.Base, QColor(self.colors["black"]))
        palette.setColor(QPalette.ColorRole.Text, QColor(self.colors["white"]))
        palette.setColor(QPalette.ColorRole.Button, QColor(self.colors["gray2"]))
        palette.setColor(QPalette.ColorRole.ButtonText, QColor(self.colors["white"]))
        palette.setColor(QPalette.ColorRole.Highlight, QColor(self.colors["selection"]))
        palette.setColor(QPalette.ColorRole.HighlightedText, QColor(self.colors["white"]))
        palette.setColor(QPalette.ColorRole.PlaceholderText, QColor(self.colors["gray4"]))

        QApplication.instance().setPalette(palette)

        style = f"""
            QMainWindow {{
                background-color: {self.colors["black"]};
            }}

            /* Source editor */
            QPlainTextEdit {{
                background-color: {self.colors["black2"]};
                color: {self.colors["white"]};
                border: 1px solid {self.colors["border"]};
                padding: 4px;
                selection-background-color: {self.colors["selection"]};
                selection-color: {self.colors["white"]};
            }}

            QPushButton {{
                background-color: {self.colors["blue"]};
                border: none;
                color: white;
                padding: 6px 14px;
                font-weight: normal;
                min-width: 60px;
            }}
            QPushButton:hover {{
                background-color: {self.colors["blue2"]};
            }}
            QPushButton:pressed {{
                background-color: {self.colors["gray3"]};
            }}
            QPushButton:disabled {{
                background-color: {self.colors["gray3"]};
                color: {self.colors["gray4"]};
            }}

            QComboBox {{
                background-color: {self.colors["gray3"]};
                border: 1px solid {self.colors["border"]};
                color: {self.colors["white"]};
                padding: 4px 8px;
                min-width: 110px;
            }}
            QComboBox QAbstractItemView {{
                background-color: {self.colors["gray2"]};
                color: {self.colors["white"]};
                selection-background-color: {self.colors["hover"]};
            }}

            QCheckBox {{
                color: {self.colors["white"]};
                spacing: 8px;
            }}
            QCheckBox::indicator {{
                width: 13px;
                height: 13px;
                background-color: {self.colors["gray3"]};
                border: 1px solid {self.colors["border"]};
            }}
            QCheckBox::indicator:checked {{
                background-color: {self.colors["blue"]};
                border-color: {self.colors["blue"]};
            }}

            QStatusBar {{
                background-color: {self.colors["gray2"]};
                border-top: 1px solid {self.colors["gray3"]};
                color: {self.colors["gray4"]};
            }}
            QStatusBar QLabel {{
                color: {self.colors["gray4"]};
                padding: 3px 16px;
                font-size: 12px;
            }}
        """
        QApplication.instance().setStyleSheet(style)

    # --- Actions ---
    def highlight(self):
        if self.view_model.highlight_text():
            self.status_bar.clearMessage()

    def copy_result(self):
        self.view_model.copy_result()

    def on_text_changed(self):
        self.view_model.set_input_text(self.input_edit.toPlainText())

    def on_mode_changed(self, index):
        self.view_model.set_output_mode(OutputMode(self.mode_combo.itemData(index)))

    def on_language_changed(self, index):
        self.view_model.set_language(self.language_combo.itemData(index))
        self.update_language_labels()

    def on_result_changed(self, result):
        self.copy_button.setEnabled(True)

    def on_highlight_failed(self, message):
        self.result_viewer.show_error(message, "Highlighting Failed")
        self.copy_button.setEnabled(False)
        self.status_bar.showMessage("Highlighting failed", STATUS_MESSAGE_MS)

    # --- UI Updates ---
    def update_copy_button(self, copied):
        self.copy_button.setText("Copied!" if copied else "Copy Result (Ctrl+Shift+C)")

    def update_language_labels(self):
        display_name = self.language_combo.currentText()
        self.input_edit.setPlaceholderText(f"Enter {display_name} code to begin highlighting")
        self.language_label.setText(display_name)

    def select_language(self, alias):
        index = self.language_combo.findData(alias)
        if index >= 0:
            self.language_combo.setCurrentIndex(index)

    def select_output_mode(self, mode):
        index = self.mode_combo.findData(mode.value)
        if index >= 0:
            self.mode_combo.setCurrentIndex(index)

    # --- Files ---
    def load_file(self, file_path):
        """Load a source file into the input box."""
        logging.info(f"Loading '{file_path}' with encoding '{DEFAULT_ENCODING}'")
        try:
            with open(file_path, 'r', encoding=DEFAULT_ENCODING, errors='replace') as f:
                content = f.read()
        except OSError as e:
            logging.error(f"Could not load '{file_path}': {e}")
            self.status_bar.showMessage(f"Could not open {os.path.basename(file_path)}", STATUS_MESSAGE_MS)
            return

        language = language_for_file(file_path)
        if language:
            self.select_language(language)
        self.input_edit.setPlainText(content)
        self.status_bar.showMessage(f"Loaded {os.path.basename(file_path)}", STATUS_MESSAGE_MS)

    # --- Settings ---
    def loadSettings(self):
        if geom := self.settings.value("geometry"):
            self.restoreGeometry(geom)

        try:
            mode = OutputMode(self.settings.value("outputMode", OutputMode.HTML.value))
        except ValueError:
            mode = OutputMode.HTML
        self.select_output_mode(mode)

        self.json_checkbox.setChecked(self.settings.value("jsonCompatible", False, type=bool))
        self.select_language(self.settings.value("language", DEFAULT_LANGUAGE))

    def saveSettings(self):
        self.settings.setValue("geometry", self.saveGeometry())
        self.settings.setValue("outputMode", self.view_model.output_mode.value)
        self.settings.setValue("jsonCompatible", self.view_model.is_json_compatible)
        self.settings.setValue("language", self.view_model.language)

    # --- Events ---
    def closeEvent(self, event):
        self.view_model.copy_message_timer.stop()
        self.saveSettings()
        event.accept()


def main():
    app = QApplication(sys.argv)
    app.setOrganizationName(ORG_NAME)
    app.setApplicationName(APP_NAME)

    window = HighlighterWindow()
    window.show()

    # Handle command line file
    if len(sys.argv) > 1 and os.path.isfile(sys.argv[1]):
        QTimer.singleShot(100, lambda: window.load_file(sys.argv[1]))

    sys.exit(app.exec())

if __name__ == '__main__':
    main()
