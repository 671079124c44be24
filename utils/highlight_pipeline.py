"""
Highlight pipeline for Code Highlighter
Normalizes pasted source, delegates to a highlighter and encodes the result
as styled text or as an HTML code block.
"""

import logging
from typing import Optional, Union

from utils.syntax_highlighter import (
    Highlighter, HighlightError, OutputMode, PygmentsHighlighter, StyledText,
)

HighlightResult = Union[StyledText, str]

# HTML code block templates
HTML_TEMPLATE = "<pre>\n<code>\n{code}\n</code>\n</pre>"
JSON_HTML_TEMPLATE = "<pre><br><code>{code}</code><br></pre>"


def normalize(source: str) -> str:
    """
    Strip leading and trailing whitespace from every line.

    Indentation is removed as well, even where the language depends on it.
    Blank lines are kept as empty lines.
    """
    return "\n".join(line.strip() for line in source.split("\n"))


def wrap_html(fragment: str) -> str:
    return HTML_TEMPLATE.format(code=fragment)


def escape_for_json(fragment: str) -> str:
    """Make an HTML fragment safe to paste into a JSON string value."""
    # Quotes first, then newlines
    escaped = fragment.replace('"', '\\"')
    escaped = escaped.replace("\n", "<br>")
    return JSON_HTML_TEMPLATE.format(code=escaped)


def highlight(source: str, mode: OutputMode, json_compatible: bool = False,
              highlighter: Optional[Highlighter] = None) -> HighlightResult:
    """
    Highlight source text.

    Args:
        source (str): Raw text from the user, may be empty.
        mode (OutputMode): Representation to produce.
        json_compatible (bool): Escape HTML output for use inside a JSON string.
            Ignored for styled text.
        highlighter (Highlighter | None): Collaborator doing the tokenizing.
            Defaults to a Pygments highlighter for Swift.

    Returns:
        StyledText | str: Styled text runs, or the HTML code block.

    Raises:
        ValueError: If mode is not an OutputMode.
        HighlightError: If the highlighter failed or returned an unusable result.
    """
    if not isinstance(mode, OutputMode):
        raise ValueError(f"Unsupported output mode: {mode!r}")

    if not source:
        return StyledText() if mode is OutputMode.STYLED_TEXT else ""

    text = normalize(source)
    if highlighter is None:
        highlighter = PygmentsHighlighter()

    logging.debug(f"Highlighting {len(text)} characters as {mode.description}")
    try:
        result = highlighter.render(text, mode)
    except HighlightError:
        raise
    except Exception as e:
        logging.error(f"Highlighter failed: {e}")
        raise HighlightError(f"Highlighter failed: {e}") from e

    if mode is OutputMode.STYLED_TEXT:
        if not isinstance(result, StyledText):
            raise HighlightError(f"Highlighter returned {type(result).__name__}, expected styled text")
        return result

    if not isinstance(result, str):
        raise HighlightError(f"Highlighter returned {type(result).__name__}, expected HTML")
    if json_compatible:
        return escape_for_json(result)
    return wrap_html(result)
