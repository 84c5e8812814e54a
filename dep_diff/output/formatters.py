"""Output formatters for DepDiff results."""

import json
from abc import ABC, abstractmethod
from html import escape
from typing import Any, Callable, Dict, List, Tuple

from ..core.diff import PackageChange, PackageChangeType, ResolutionDiff

NO_CHANGES_MESSAGE = "No dependency changes"

# Group key and heading, in report order
CHANGE_GROUPS: List[Tuple[str, str]] = [
    ("major", "Major Updates"),
    ("minor", "Minor Updates"),
    ("patch", "Patch Updates"),
    ("added", "Added Packages"),
    ("removed", "Removed Packages"),
    ("downgraded", "Downgraded Packages"),
]


def group_changes(changes: List[PackageChange]) -> Dict[str, List[PackageChange]]:
    """Group changes for display.

    Upgrades are split by bucket; downgrades of every bucket share one group.

    Args:
        changes: Changes of one dependency group

    Returns:
        Mapping of group key (see ``CHANGE_GROUPS``) to changes, in input order
    """
    grouped: Dict[str, List[PackageChange]] = {key: [] for key, _ in CHANGE_GROUPS}

    for change in changes:
        if change.type == PackageChangeType.UPGRADED and change.version_change is not None:
            grouped[change.version_change.value].append(change)
        elif change.type == PackageChangeType.DOWNGRADED:
            grouped["downgraded"].append(change)
        elif change.type == PackageChangeType.ADDED:
            grouped["added"].append(change)
        elif change.type == PackageChangeType.REMOVED:
            grouped["removed"].append(change)

    return grouped


class BaseFormatter(ABC):
    """Renders a resolution diff as a report string."""

    #: Name used to select the formatter from the command line
    name: str = ""

    @abstractmethod
    def format(self, diff: ResolutionDiff) -> str:
        """Render the diff.

        Args:
            diff: Diff to render

        Returns:
            Report text
        """


class TextFormatter(BaseFormatter):
    """Plain text report."""

    name = "text"

    def format(self, diff: ResolutionDiff) -> str:
        if diff.is_empty():
            return NO_CHANGES_MESSAGE

        parts = []
        if diff.dependencies:
            parts.append("DEPENDENCIES")
            parts.append(self._format_changes(diff.dependencies))
        if diff.dev_dependencies:
            parts.append("DEV DEPENDENCIES")
            parts.append(self._format_changes(diff.dev_dependencies))
        return "\n\n".join(parts)

    def _format_changes(self, changes: List[PackageChange]) -> str:
        grouped = group_changes(changes)
        blocks = []
        for key, title in CHANGE_GROUPS:
            if grouped[key]:
                lines = [f"{title}:"] + [self._format_change(c) for c in grouped[key]]
                blocks.append("\n".join(lines))
        return "\n\n".join(blocks)

    @staticmethod
    def _format_change(change: PackageChange) -> str:
        if change.type == PackageChangeType.ADDED:
            return f"  + {change.name}@{change.to_version}"
        if change.type == PackageChangeType.REMOVED:
            return f"  - {change.name}@{change.from_version}"
        if change.type == PackageChangeType.DOWNGRADED:
            return f"  ↓ {change.name}: {change.from_version} → {change.to_version} (downgraded)"
        return f"  ~ {change.name}: {change.from_version} → {change.to_version}"


class MarkdownFormatter(BaseFormatter):
    """Markdown report, suitable for pull request comments."""

    name = "markdown"

    def format(self, diff: ResolutionDiff) -> str:
        if diff.is_empty():
            return f"_{NO_CHANGES_MESSAGE}_"

        parts = []
        if diff.dependencies:
            parts.append("## Dependencies")
            parts.append(self._format_changes(diff.dependencies))
        if diff.dev_dependencies:
            parts.append("## Dev Dependencies")
            parts.append(self._format_changes(diff.dev_dependencies))
        return "\n\n".join(parts)

    def _format_changes(self, changes: List[PackageChange]) -> str:
        grouped = group_changes(changes)
        blocks = []
        for key, title in CHANGE_GROUPS:
            if grouped[key]:
                lines = [f"### {title}", ""] + [f"- {self._format_change(c)}" for c in grouped[key]]
                blocks.append("\n".join(lines))
        return "\n\n".join(blocks)

    @staticmethod
    def _format_change(change: PackageChange) -> str:
        if change.type == PackageChangeType.ADDED:
            return f"**{change.name}**@`{change.to_version}` (added)"
        if change.type == PackageChangeType.REMOVED:
            return f"**{change.name}**@`{change.from_version}` (removed)"
        suffix = " (downgraded)" if change.type == PackageChangeType.DOWNGRADED else ""
        return f"**{change.name}**: `{change.from_version}` → `{change.to_version}`{suffix}"


class HtmlFormatter(BaseFormatter):
    """Standalone HTML page report."""

    name = "html"

    STYLES = """
      body {
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
        max-width: 800px;
        margin: 0 auto;
        padding: 20px;
        line-height: 1.6;
      }
      h1 { color: #333; border-bottom: 2px solid #333; padding-bottom: 10px; }
      h2.major { color: #d32f2f; }
      h2.minor { color: #f57c00; }
      h2.patch { color: #388e3c; }
      ul { list-style-type: none; padding-left: 0; }
      li { margin: 5px 0; padding: 5px; background: #f5f5f5; border-radius: 3px; }
      code { background: #e0e0e0; padding: 2px 6px; border-radius: 3px; }
      .added { color: #388e3c; font-weight: bold; }
      .removed { color: #d32f2f; font-weight: bold; }
      .upgraded, .downgraded { font-weight: bold; }
    """

    def format(self, diff: ResolutionDiff) -> str:
        parts = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            "<meta charset='utf-8'>",
            "<title>Package Changes</title>",
            "<style>",
            self.STYLES,
            "</style>",
            "</head>",
            "<body>",
        ]

        if diff.is_empty():
            parts.append(f"<p>{NO_CHANGES_MESSAGE}</p>")
        if diff.dependencies:
            parts.append("<h1>Dependencies</h1>")
            parts.append(self._format_changes(diff.dependencies))
        if diff.dev_dependencies:
            parts.append("<h1>Dev Dependencies</h1>")
            parts.append(self._format_changes(diff.dev_dependencies))

        parts.extend(["</body>", "</html>"])
        return "\n".join(parts)

    def _format_changes(self, changes: List[PackageChange]) -> str:
        grouped = group_changes(changes)
        lines = []
        for key, title in CHANGE_GROUPS:
            if not grouped[key]:
                continue
            lines.append(f"<h2 class='{key}'>{title}</h2>")
            lines.append("<ul>")
            lines.extend(f"<li>{self._format_change(c)}</li>" for c in grouped[key])
            lines.append("</ul>")
        return "\n".join(lines)

    @staticmethod
    def _format_change(change: PackageChange) -> str:
        name = escape(change.name)
        from_version = escape(change.from_version or "")
        to_version = escape(change.to_version or "")

        if change.type == PackageChangeType.ADDED:
            return f"<span class='added'>+ {name}@{to_version}</span> (added)"
        if change.type == PackageChangeType.REMOVED:
            return f"<span class='removed'>- {name}@{from_version}</span> (removed)"
        if change.type == PackageChangeType.DOWNGRADED:
            return (
                f"<span class='downgraded'>{name}</span>: <code>{from_version}</code> → "
                f"<code>{to_version}</code> (downgraded)"
            )
        return (
            f"<span class='upgraded'>{name}</span>: <code>{from_version}</code> → "
            f"<code>{to_version}</code>"
        )


class JSONFormatter(BaseFormatter):
    """JSON report mirroring the ``ResolutionDiff`` structure."""

    name = "json"

    def __init__(self, indent: int = 2) -> None:
        """Initialize the JSON formatter.

        Args:
            indent: Indentation passed to ``json.dumps``
        """
        self.indent = indent

    def format(self, diff: ResolutionDiff) -> str:
        return json.dumps(self.to_dict(diff), indent=self.indent, ensure_ascii=False)

    def to_dict(self, diff: ResolutionDiff) -> Dict[str, Any]:
        """Convert the diff to plain data.

        Enum members become their string values and unset fields are
        omitted.

        Args:
            diff: Diff to convert

        Returns:
            Dictionary with ``dependencies`` and ``devDependencies`` lists
        """
        return {
            "dependencies": [self._change_to_dict(c) for c in diff.dependencies],
            "devDependencies": [self._change_to_dict(c) for c in diff.dev_dependencies],
        }

    @staticmethod
    def _change_to_dict(change: PackageChange) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": change.name, "type": change.type.value}
        if change.version_change is not None:
            result["versionChange"] = change.version_change.value
        if change.from_version is not None:
            result["fromVersion"] = change.from_version
        if change.to_version is not None:
            result["toVersion"] = change.to_version
        return result


FORMATTERS: Dict[str, Callable[[], BaseFormatter]] = {
    TextFormatter.name: TextFormatter,
    MarkdownFormatter.name: MarkdownFormatter,
    HtmlFormatter.name: HtmlFormatter,
    JSONFormatter.name: JSONFormatter,
}


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter by name.

    Args:
        name: One of ``text``, ``markdown``, ``html`` or ``json`` (any case)

    Returns:
        New formatter instance

    Raises:
        ValueError: If the name is unknown
    """
    factory = FORMATTERS.get(name.lower())
    if factory is None:
        raise ValueError(f"Unknown output format: {name}. Available: {', '.join(FORMATTERS)}")
    return factory()
