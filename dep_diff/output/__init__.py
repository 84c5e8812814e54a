"""Output formatters for DepDiff."""

from .formatters import (
    BaseFormatter,
    HtmlFormatter,
    JSONFormatter,
    MarkdownFormatter,
    TextFormatter,
    get_formatter,
    group_changes,
)

__all__ = [
    "BaseFormatter",
    "HtmlFormatter",
    "JSONFormatter",
    "MarkdownFormatter",
    "TextFormatter",
    "get_formatter",
    "group_changes",
]
