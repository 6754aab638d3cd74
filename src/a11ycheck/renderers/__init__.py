"""
Renderers for a11ycheck.

Output formatters for audit reports: terminal, Markdown, JSON.
"""

from a11ycheck.renderers.json_renderer import JsonRenderer
from a11ycheck.renderers.markdown import MarkdownRenderer
from a11ycheck.renderers.terminal import TerminalRenderer

__all__ = [
    "JsonRenderer",
    "MarkdownRenderer",
    "TerminalRenderer",
]
