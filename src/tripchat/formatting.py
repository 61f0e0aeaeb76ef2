"""Markdown rendering for assistant-authored text.

Only display text reaches these functions; the command token is always
stripped beforehand.
"""

from markdown_it import MarkdownIt
from rich.markdown import Markdown

# Raw HTML in assistant text is escaped rather than passed through
_html_renderer = MarkdownIt("commonmark", {"html": False, "linkify": False}).enable("table")


def render_html(text: str) -> str:
    """Render markdown to sanitized HTML."""
    return _html_renderer.render(text)


def render_markdown(text: str) -> Markdown:
    """Render markdown for the terminal."""
    return Markdown(text)
