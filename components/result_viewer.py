"""
Result Viewer module for Code Highlighter
Displays highlighted output as styled text or as selectable HTML source.
"""

import html

from PyQt6.QtGui import QTextCursor
from PyQt6.QtWidgets import QTextBrowser

from utils.syntax_highlighter import StyledText


class ResultViewer(QTextBrowser):
    """
    Read-only viewer for highlight results.
    Styled text keeps its character formats; HTML output is shown as literal source.
    """

    def __init__(self, colors):
        super().__init__()
        self.colors = colors
        self.setOpenLinks(False)
        self.setup_style()
        self.show_empty_message()

    def setup_style(self):
        """Apply the dark viewer styling"""
        style = f"""
            QTextBrowser {{
                font-family: 'Consolas', 'Menlo', 'Courier New', monospace;
                font-size: 13px;
                color: {self.colors["white"]};
                background-color: {self.colors["black"]};
                border: 1px solid {self.colors["border"]};
                padding: 12px;
            }}

            QScrollBar:vertical {{
                background: {self.colors["black"]};
                width: 14px;
                border: none;
            }}

            QScrollBar::handle:vertical {{
                background: {self.colors["gray3"]};
                min-height: 30px;
                border: none;
            }}

            QScrollBar::handle:vertical:hover {{
                background: {self.colors["gray4"]};
            }}

            QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical,
            QScrollBar::add-page:vertical, QScrollBar::sub-page:vertical {{
                background: none;
                border: none;
            }}
        """
        self.setStyleSheet(style)

    def update_content(self, result):
        """Show a highlight result (StyledText or HTML string)"""
        if not result:
            self.show_empty_message()
            return

        self.clear()
        if isinstance(result, StyledText):
            result.write_to(self.textCursor())
        else:
            self.setPlainText(result)
        self.moveCursor(QTextCursor.MoveOperation.Start)

    def show_empty_message(self):
        """Show the placeholder shown before anything was highlighted"""
        message = "<p style='color: #858585;'>Highlighted code will appear here...</p>"
        self.setHtml(message)

    def show_error(self, error_message: str, error_type: str = "Error"):
        """Show standardized error message"""
        error_html = f"""
        <div style="color: {self.colors['red']}; background-color: rgba(244, 135, 113, 0.1);
                    padding: 10px; border-radius: 2px; font-family: 'Segoe UI', sans-serif;">
            <h3>⚠ {error_type}</h3>
            <p>{html.escape(error_message)}</p>
        </div>
        """
        self.setHtml(error_html)
