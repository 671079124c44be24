"""Shared pytest fixtures for Code Highlighter tests."""

from __future__ import annotations

import os

import pytest

# Must be set before the first QApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from utils.syntax_highlighter import OutputMode, StyledText  # noqa: E402


@pytest.fixture(scope="session")
def qapp() -> QApplication:
    """Single QApplication shared by every Qt test."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


class FakeHighlighter:
    """Stands in for the Pygments highlighter and records every call."""

    def __init__(self, html: str = "", styled=None, error: Exception | None = None):
        self.html = html
        self.styled = styled
        self.error = error
        self.calls: list[tuple] = []

    def render(self, text, mode):
        self.calls.append((text, mode))
        if self.error is not None:
            raise self.error
        if mode is OutputMode.STYLED_TEXT:
            return self.styled if self.styled is not None else StyledText()
        return self.html


@pytest.fixture
def fake_highlighter():
    return FakeHighlighter
