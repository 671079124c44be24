"""
Syntax highlighter backend for Code Highlighter
Wraps Pygments and turns its token stream into Qt styled text or HTML markup.
"""

import os
import logging
import platform
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Protocol, Union

from PyQt6.QtGui import QTextCharFormat, QColor, QFont, QTextCursor, QTextDocument
from pygments import highlight as pygments_highlight
from pygments.formatter import Formatter
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.token import _TokenType
from pygments.util import ClassNotFound


DEFAULT_LANGUAGE = "swift"
DEFAULT_STYLE = "one-dark"
DEFAULT_FONT_FAMILY = 'Consolas' if platform.system() == 'Windows' else 'Menlo'
DEFAULT_FONT_SIZE = 12

# Display name -> Pygments alias
LANGUAGES = {
    'Swift': 'swift',
    'Objective-C': 'objective-c',
    'Python': 'python',
    'JavaScript': 'javascript',
    'TypeScript': 'typescript',
    'Kotlin': 'kotlin',
    'Java': 'java',
    'C': 'c',
    'C++': 'cpp',
    'C#': 'csharp',
    'Go': 'go',
    'Rust': 'rust',
    'Ruby': 'ruby',
    'HTML': 'html',
    'CSS': 'css',
    'JSON': 'json',
    'XML': 'xml',
    'PowerShell': 'powershell',
    'Bash': 'bash',
    'Batch': 'batch',
}

EXTENSION_LANGUAGES = {
    '.swift': 'swift',
    '.m': 'objective-c', '.mm': 'objective-c', '.h': 'objective-c',
    '.py': 'python', '.pyw': 'python', '.pyi': 'python',
    '.js': 'javascript', '.jsx': 'javascript', '.mjs': 'javascript', '.cjs': 'javascript',
    '.ts': 'typescript', '.tsx': 'typescript',
    '.kt': 'kotlin', '.kts': 'kotlin',
    '.java': 'java',
    '.c': 'c',
    '.cpp': 'cpp', '.cc': 'cpp', '.hpp': 'cpp',
    '.cs': 'csharp',
    '.go': 'go',
    '.rs': 'rust',
    '.rb': 'ruby',
    '.html': 'html', '.htm': 'html',
    '.css': 'css',
    '.json': 'json',
    '.xml': 'xml',
    '.ps1': 'powershell', '.psm1': 'powershell', '.psd1': 'powershell',
    '.sh': 'bash', '.bash': 'bash', '.zsh': 'bash', '.ksh': 'bash',
    '.bat': 'batch', '.cmd': 'batch',
}


class HighlightError(Exception):
    """Raised when source text could not be highlighted."""


class OutputMode(Enum):
    HTML = "html"
    STYLED_TEXT = "styled_text"

    @property
    def description(self) -> str:
        if self is OutputMode.HTML:
            return "HTML"
        return "Styled Text"


@dataclass(frozen=True)
class Theme:
    """Fixed visual configuration used for styled text output."""
    style_name: str = DEFAULT_STYLE
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: int = DEFAULT_FONT_SIZE


DEFAULT_THEME = Theme()


@dataclass
class StyledRun:
    text: str
    token_type: _TokenType
    fmt: QTextCharFormat


@dataclass
class StyledText:
    """
    Highlighted text as an ordered sequence of runs.
    Each run carries a slice of the text plus the character format to draw it with.
    """
    runs: List[StyledRun] = field(default_factory=list)

    def __iter__(self) -> Iterator[StyledRun]:
        return iter(self.runs)

    def __len__(self) -> int:
        return len(self.runs)

    def __bool__(self) -> bool:
        return bool(self.runs)

    def to_plain_text(self) -> str:
        return ''.join(run.text for run in self.runs)

    def write_to(self, cursor: QTextCursor):
        """Insert every run at the cursor position using its own format."""
        for run in self.runs:
            cursor.insertText(run.text, run.fmt)

    def to_document(self) -> QTextDocument:
        document = QTextDocument()
        self.write_to(QTextCursor(document))
        return document

    def to_html(self) -> str:
        return self.to_document().toHtml()


class Highlighter(Protocol):
    """Capability that tokenizes source text into the requested representation."""

    def render(self, text: str, mode: OutputMode) -> Union[StyledText, str]:
        ...


class QtFormatter(Formatter):
    """
    Pygments formatter translating token types into QTextCharFormats.
    Runs are produced by build_runs() rather than written to a file.
    """

    def __init__(self, theme: Theme = DEFAULT_THEME, **options):
        try:
            options.setdefault('style', get_style_by_name(theme.style_name))
        except ClassNotFound as e:
            raise HighlightError(f"Unknown highlight style '{theme.style_name}'") from e
        super().__init__(**options)
        self.theme = theme
        self.formats = {}

    def format_for(self, token_type: _TokenType) -> QTextCharFormat:
        """Gets or creates the cached format for a token type."""
        if token_type not in self.formats:
            style_def = self.style.style_for_token(token_type)
            fmt = QTextCharFormat()
            fmt.setFontFamilies([self.theme.font_family])
            fmt.setFontFixedPitch(True)
            fmt.setFontPointSize(self.theme.font_size)
            if style_def['color']:
                fmt.setForeground(QColor(f"#{style_def['color']}"))
            if style_def['bgcolor']:
                fmt.setBackground(QColor(f"#{style_def['bgcolor']}"))
            if style_def['bold']:
                fmt.setFontWeight(QFont.Weight.Bold)
            if style_def['italic']:
                fmt.setFontItalic(True)
            if style_def['underline']:
                fmt.setFontUnderline(True)
            self.formats[token_type] = fmt
        return self.formats[token_type]

    def build_runs(self, tokensource: Iterable) -> StyledText:
        runs = []
        for token_type, value in tokensource:
            if not value:
                continue
            # Adjacent tokens of the same type share one run
            if runs and runs[-1].token_type is token_type:
                runs[-1].text += value
            else:
                runs.append(StyledRun(value, token_type, self.format_for(token_type)))
        return StyledText(runs)


class PygmentsHighlighter:
    """
    Highlighter backed by Pygments.

    Args:
        language (str): Pygments lexer alias, e.g. 'swift' or 'python'.
        theme (Theme): Style used for styled text output.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE, theme: Theme = DEFAULT_THEME):
        self.language = language
        self.theme = theme

    def _get_lexer(self):
        try:
            # Line comments only match up to a newline, so the lexer keeps ensurenl on
            return get_lexer_by_name(self.language, stripnl=False)
        except ClassNotFound as e:
            raise HighlightError(f"No lexer found for language '{self.language}'") from e

    def render(self, text: str, mode: OutputMode) -> Union[StyledText, str]:
        lexer = self._get_lexer()
        if mode is OutputMode.STYLED_TEXT:
            formatter = QtFormatter(self.theme)
            styled = formatter.build_runs(lexer.get_tokens(text))
            if not text.endswith("\n"):
                _drop_added_newline(styled)
            return styled
        if mode is OutputMode.HTML:
            fragment = pygments_highlight(text, lexer, HtmlFormatter(nowrap=True))
            # The lexer terminates the last line even when the text doesn't
            if fragment.endswith("\n") and not text.endswith("\n"):
                fragment = fragment[:-1]
            return fragment
        raise ValueError(f"Unsupported output mode: {mode!r}")


def _drop_added_newline(styled: StyledText):
    """Remove the newline the lexer appended after the last token."""
    if not styled.runs or not styled.runs[-1].text.endswith("\n"):
        return
    last = styled.runs[-1]
    last.text = last.text[:-1]
    if not last.text:
        styled.runs.pop()


def language_for_file(filepath: Optional[str]) -> Optional[str]:
    """
    Get the Pygments alias for a file based on its extension.

    Returns:
        str | None: The lexer alias, or None when the extension is not known.
    """
    if not filepath:
        return None
    _, ext = os.path.splitext(filepath)
    language = EXTENSION_LANGUAGES.get(ext.lower())
    logging.debug(f"Language for '{filepath}': {language}")
    return language
